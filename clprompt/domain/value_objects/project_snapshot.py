"""
Project snapshot value object - the serialized form of a saved workspace.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

SNAPSHOT_VERSION = 1


class SlideRecord(BaseModel):
    """One slide inside a snapshot, in deck order."""

    id: Optional[str] = None
    code: Optional[str] = ""
    summary: Optional[str] = ""


class ProjectSnapshot(BaseModel):
    """Self-contained copy of the workspace at save time."""

    model_config = ConfigDict(populate_by_name=True)

    version: int = SNAPSHOT_VERSION
    slides: List[SlideRecord] = Field(default_factory=list)
    code_output: Optional[str] = Field("", alias="codeOutput")
    prompt: Optional[str] = ""
    saved_at: Optional[datetime] = Field(None, alias="savedAt")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, raw: str) -> "ProjectSnapshot":
        return cls.model_validate_json(raw)
