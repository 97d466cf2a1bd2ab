"""
Project persistence: named workspace snapshots in durable keyed storage.

Failures never raise out of ``save``/``load``; they come back as result
objects so the caller can report them.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import ValidationError

from clprompt.application.ports import KeyValueStoragePort
from clprompt.domain.entities.slide import Slide, make_slide_id
from clprompt.domain.exceptions import StorageError
from clprompt.domain.value_objects.project_snapshot import ProjectSnapshot, SlideRecord
from clprompt.infra.config.logging_config import bind_context, get_logger

PROJECT_NAMES_KEY = "cl-prompt-project-names"
PROJECT_PREFIX = "cl-prompt-project:"


@dataclass
class SaveResult:
    ok: bool
    name: Optional[str] = None
    error: Optional[str] = None


class LoadStatus(str, Enum):
    LOADED = "loaded"
    NOT_FOUND = "not_found"
    CORRUPT = "corrupt"
    INVALID_NAME = "invalid_name"


@dataclass
class LoadResult:
    status: LoadStatus
    name: Optional[str] = None
    snapshot: Optional[ProjectSnapshot] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is LoadStatus.LOADED


def snapshot_from_state(slides: List[Slide], code_output: str, prompt: str) -> ProjectSnapshot:
    return ProjectSnapshot(
        slides=[
            SlideRecord(id=s.id, code=s.code or "", summary=s.summary or "")
            for s in slides
        ],
        code_output=code_output,
        prompt=prompt,
    )


def slides_from_snapshot(snapshot: ProjectSnapshot) -> List[Slide]:
    """Rebuild slides in snapshot order; ids are kept, missing ids get ``slide-<i>``."""
    slides = []
    for i, record in enumerate(snapshot.slides):
        slide = Slide(id=record.id or make_slide_id(i), index=i)
        if record.code:
            slide.code = record.code
        if record.summary:
            slide.summary = record.summary
        slides.append(slide)
    return slides


class ProjectPersistence:
    def __init__(self, storage: KeyValueStoragePort) -> None:
        self.storage = storage
        self._log = get_logger("workspace.projects")

    @staticmethod
    def _key(name: str) -> str:
        return f"{PROJECT_PREFIX}{name}"

    async def list_projects(self) -> List[str]:
        try:
            raw = await self.storage.get(PROJECT_NAMES_KEY)
            names = json.loads(raw) if raw else []
        except (StorageError, ValueError) as e:
            self._log.warning("projects.directory_unreadable", error=str(e))
            return []
        return [n for n in names if isinstance(n, str)] if isinstance(names, list) else []

    async def save(self, name: Optional[str], snapshot: ProjectSnapshot) -> SaveResult:
        name = (name or "").strip()
        if not name:
            return SaveResult(ok=False, error="Project name is required")
        bind_context(project=name)

        snapshot = snapshot.model_copy(update={"saved_at": datetime.now(timezone.utc)})
        try:
            await self.storage.set(self._key(name), snapshot.to_json())
            names = await self.list_projects()
            if name not in names:
                names.append(name)
            await self.storage.set(PROJECT_NAMES_KEY, json.dumps(names))
        except (StorageError, TypeError, ValueError) as e:
            self._log.warning("projects.save_failed", error=str(e))
            return SaveResult(ok=False, name=name, error=str(e))

        self._log.info("projects.saved", slide_count=len(snapshot.slides))
        return SaveResult(ok=True, name=name)

    async def load(self, name: Optional[str]) -> LoadResult:
        name = (name or "").strip()
        if not name:
            return LoadResult(status=LoadStatus.INVALID_NAME, error="Project name is required")
        bind_context(project=name)

        try:
            raw = await self.storage.get(self._key(name))
        except (StorageError, ValueError) as e:
            self._log.warning("projects.load_failed", error=str(e))
            return LoadResult(status=LoadStatus.CORRUPT, name=name, error=str(e))
        if not raw:
            self._log.info("projects.not_found")
            return LoadResult(status=LoadStatus.NOT_FOUND, name=name)

        try:
            snapshot = ProjectSnapshot.from_json(raw)
        except (ValidationError, ValueError) as e:
            self._log.warning("projects.corrupt_snapshot", error=str(e))
            return LoadResult(status=LoadStatus.CORRUPT, name=name, error="Snapshot could not be parsed")

        self._log.info("projects.loaded", slide_count=len(snapshot.slides))
        return LoadResult(status=LoadStatus.LOADED, name=name, snapshot=snapshot)
