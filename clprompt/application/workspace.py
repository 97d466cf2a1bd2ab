"""
Workspace controller.

One explicit state object owns the deck, the slide store, the code panel,
the prompt surface and its typing queue. User actions and service replies
all go through it on the event loop thread; ``render`` projects the state
into an immutable view.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Coroutine, List, Optional, Sequence, Set

from clprompt.application.code_renderer import NO_CODE_PLACEHOLDER, CodeOutputRenderer
from clprompt.application.persistence import (
    LoadResult,
    LoadStatus,
    ProjectPersistence,
    SaveResult,
    slides_from_snapshot,
    snapshot_from_state,
)
from clprompt.application.ports import (
    AssistantPort,
    CodeGenerationPort,
    KeyValueStoragePort,
    SchedulerPort,
    SummarizationPort,
)
from clprompt.application.typing_queue import PromptSurface, SuggestionTypingQueue
from clprompt.domain.services.deck_ordering import CardBox, DeckOrderingEngine
from clprompt.domain.services.slide_store import SlideStore
from clprompt.domain.exceptions import ExternalServiceError
from clprompt.infra.config.logging_config import bind_context, get_logger

ENTER_PROMPT_MESSAGE = "# Enter a prompt describing the Computation Layer behavior you want."
GENERATING_MESSAGE = "# Generating..."
NO_CODE_RETURNED = "# No code returned."
DEFAULT_DEZZY_MESSAGE = "Hello! What can you help me with?"


@dataclass(frozen=True)
class CodeSelection:
    """Text the user selected, and whether the selection lies in the code panel."""

    text: str
    in_code_panel: bool = True


@dataclass(frozen=True)
class DeckLayout:
    """Rendered card geometry, in deck order."""

    boxes: Sequence[CardBox] = ()
    track_left: float = 0


@dataclass(frozen=True)
class StatusMessage:
    level: str  # info | error
    text: str


@dataclass(frozen=True)
class SlideView:
    id: str
    index: int
    label: str
    has_code: bool
    summary_pending: bool


@dataclass(frozen=True)
class WorkspaceView:
    slides: List[SlideView]
    code_text: str
    code_html: str
    code_animating: bool
    code_cursor: bool
    prompt_text: str
    prompt_html: str
    prompt_format: str
    typing: bool
    queued_suggestions: int
    send_code_mode: bool
    generating: bool
    dezzy_thinking: bool
    drag_state: str
    drop_marker_x: Optional[float]
    status: Optional[StatusMessage] = None


class WorkspaceController:
    def __init__(
        self,
        scheduler: SchedulerPort,
        code_service: CodeGenerationPort,
        summary_service: SummarizationPort,
        assistant: AssistantPort,
        storage: KeyValueStoragePort,
        initial_slides: int = 1,
    ) -> None:
        self.scheduler = scheduler
        self.code_service = code_service
        self.summary_service = summary_service
        self.assistant = assistant
        self.initial_slides = initial_slides

        self.store = SlideStore()
        self.deck = DeckOrderingEngine(self.store)
        self.code_output = CodeOutputRenderer(scheduler)
        self.prompt = PromptSurface()
        self.typing_queue = SuggestionTypingQueue(scheduler, self.prompt)
        self.projects = ProjectPersistence(storage)

        self.send_code_mode = False
        self.generating = False
        self.dezzy_thinking = False
        self.dezzy_busy = False
        self.status: Optional[StatusMessage] = None
        self.layout = DeckLayout()

        self._generation = 0
        self._tasks: Set[asyncio.Task] = set()
        self._log = get_logger("workspace")

        for _ in range(initial_slides):
            self.deck.create_slide()

    # ---------- bookkeeping ----------
    def _spawn(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait for every in-flight service request to settle."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def _report(self, level: str, text: str) -> None:
        self.status = StatusMessage(level=level, text=text)

    # ---------- slides ----------
    def add_slide(self) -> str:
        slide = self.deck.create_slide()
        self._log.info("workspace.slide.added", slide_id=slide.id, index=slide.index)
        return slide.id

    def toggle_send_code_mode(self) -> bool:
        self.send_code_mode = not self.send_code_mode
        return self.send_code_mode

    def code_to_send(self, selection: Optional[CodeSelection] = None) -> str:
        """Non-blank selection inside the code panel, else the whole panel."""
        if selection is not None and selection.in_code_panel and selection.text.strip():
            return selection.text.strip()
        text = self.code_output.text.strip()
        return "" if text == NO_CODE_PLACEHOLDER else text

    def click_slide(self, slide_id: str, selection: Optional[CodeSelection] = None) -> None:
        if self.deck.is_click_suppressed(self.scheduler.now()):
            self._log.debug("workspace.slide.click_suppressed", slide_id=slide_id)
            return
        slide = self.store.get(slide_id)

        if not self.send_code_mode:
            if slide.has_code():
                self.code_output.display(slide.code, animate=True)
            return

        self.send_code_mode = False
        code = self.code_to_send(selection)
        if not code:
            self._report("error", "There is no code to send. Generate or select some code first.")
            return
        self.store_code(slide_id, code)

    def store_code(self, slide_id: str, code: str) -> None:
        """Store code on a slide, then ask for its summary and for next-step ideas."""
        bind_context(slide_id=slide_id)
        self.store.set_code(slide_id, code)
        token = self.store.begin_summary(slide_id)
        self._log.info("workspace.slide.code_stored", length=len(code))
        self._spawn(self._summarize(slide_id, token, code))
        self._spawn(self._suggest_next_steps(code))

    def clear_slide_code(self, slide_id: str) -> None:
        self.store.set_code(slide_id, None)
        self._log.info("workspace.slide.code_cleared", slide_id=slide_id)

    async def _summarize(self, slide_id: str, token: int, code: str) -> None:
        try:
            summary = await self.summary_service.summarize_code(code)
        except ExternalServiceError as e:
            self._log.warning("workspace.summary.failed", slide_id=slide_id, error=e.message)
            summary = ""
        except Exception as e:
            self._log.exception("workspace.summary.error", slide_id=slide_id, error=str(e))
            summary = ""
        if not self.store.apply_summary(slide_id, token, summary):
            self._log.info("workspace.summary.stale", slide_id=slide_id)

    async def _suggest_next_steps(self, code: str) -> None:
        try:
            reply = await self.assistant.ask("", self.store.code_map(), code_just_stored=code)
        except ExternalServiceError as e:
            self._log.warning("workspace.suggestion.failed", error=e.message)
            return
        except Exception as e:
            self._log.exception("workspace.suggestion.error", error=str(e))
            return
        self.typing_queue.push(reply)

    # ---------- drag and drop ----------
    def start_drag(self, slide_id: str) -> None:
        self.deck.start_drag(slide_id)

    def drag_over(
        self, hovered_id: Optional[str], pointer_x: float, layout: Optional[DeckLayout] = None
    ) -> Optional[int]:
        if layout is not None:
            self.layout = layout
        box = None
        if hovered_id is not None:
            index = self.deck.index_of(hovered_id)
            if index < len(self.layout.boxes):
                box = self.layout.boxes[index]
        return self.deck.drag_over(hovered_id, pointer_x, box)

    def drop(self) -> bool:
        moved = self.deck.drop()
        if moved:
            self._log.info("workspace.slide.reordered", order=self.deck.ids())
        return moved

    def end_drag(self) -> None:
        self.deck.end_drag(self.scheduler.now())

    def move_slide(self, slide_id: str, target_index: int) -> None:
        self.deck.reorder(slide_id, target_index)
        self._log.info("workspace.slide.reordered", order=self.deck.ids())

    # ---------- prompt and code panel ----------
    def set_prompt(self, text: str) -> None:
        self.prompt.set_text(text)

    def focus_prompt(self) -> None:
        self.prompt.focus()

    def paste_code(self, text: str) -> None:
        self.code_output.paste(text)

    async def generate(self, prompt: Optional[str] = None) -> None:
        if prompt is not None:
            self.prompt.set_text(prompt)
        text = self.prompt.text.strip()
        if not text:
            self.code_output.display(ENTER_PROMPT_MESSAGE)
            return

        self._generation += 1
        ticket = self._generation
        self.generating = True
        self.code_output.display(GENERATING_MESSAGE)
        animate = False
        try:
            code = await self.code_service.generate_code(text)
            result, animate = (code or NO_CODE_RETURNED), bool(code)
        except ExternalServiceError as e:
            result = f"# Error: {e.message}"
        except Exception as e:
            self._log.exception("workspace.generate.error", error=str(e))
            result = f"# Request failed: {e}"
        finally:
            if ticket == self._generation:
                self.generating = False

        if ticket != self._generation:
            self._log.info("workspace.generate.stale", ticket=ticket)
            return
        self.code_output.display(result, animate=animate)

    async def ask_dezzy(self) -> None:
        if self.dezzy_busy:
            return
        message = self.prompt.text.strip() or DEFAULT_DEZZY_MESSAGE
        self.dezzy_busy = True
        self.dezzy_thinking = True
        try:
            text = (await self.assistant.ask(message, self.store.code_map())).strip()
        except ExternalServiceError as e:
            text = f"Dezzy ran into an issue: {e.message}"
        except Exception as e:
            self._log.exception("workspace.dezzy.error", error=str(e))
            text = f"Request failed: {e or 'network error'}."
        finally:
            self.dezzy_thinking = False

        self.typing_queue.push(text, replace=True, on_done=self._release_dezzy)

    def _release_dezzy(self) -> None:
        self.dezzy_busy = False

    # ---------- projects ----------
    async def list_projects(self) -> List[str]:
        return await self.projects.list_projects()

    async def save_project(self, name: Optional[str]) -> SaveResult:
        snapshot = snapshot_from_state(
            self.deck.slides, self.code_output.text, self.prompt.text
        )
        result = await self.projects.save(name, snapshot)
        if result.ok:
            self._report("info", "Saved!")
        else:
            self._report("error", "Could not save (e.g. storage full or name invalid).")
        return result

    async def load_project(self, name: Optional[str]) -> LoadResult:
        result = await self.projects.load(name)
        if result.status is LoadStatus.NOT_FOUND:
            self._report("error", f"No saved project named {result.name!r}.")
        elif result.status is LoadStatus.CORRUPT:
            self._report("error", f"Project {result.name!r} could not be read.")
        elif result.status is LoadStatus.INVALID_NAME:
            self._report("error", "Choose a project to open.")
        if not result.ok:
            return result

        snapshot = result.snapshot
        self.send_code_mode = False
        self.deck.replace(slides_from_snapshot(snapshot))
        self.code_output.display(snapshot.code_output or "", animate=False)
        self.prompt.set_text(snapshot.prompt or "")
        self._report("info", f"Opened {result.name}.")
        return result

    def reset(self) -> None:
        """Back to a fresh workspace (empty code panel, prompt, initial slides)."""
        self.deck.replace([])
        for _ in range(self.initial_slides):
            self.deck.create_slide()
        self.code_output.display(None)
        self.prompt.set_text("")
        self.send_code_mode = False
        self.status = None

    # ---------- projection ----------
    def render(self) -> WorkspaceView:
        return WorkspaceView(
            slides=[
                SlideView(
                    id=s.id,
                    index=s.index,
                    label=s.label(),
                    has_code=s.has_code(),
                    summary_pending=s.summary_pending,
                )
                for s in self.deck.slides
            ],
            code_text=self.code_output.visible,
            code_html=str(self.code_output.render()),
            code_animating=self.code_output.animating,
            code_cursor=self.code_output.cursor_visible,
            prompt_text=self.prompt.text,
            prompt_html=str(self.prompt.render()),
            prompt_format=self.prompt.format.value,
            typing=self.typing_queue.busy,
            queued_suggestions=len(self.typing_queue.pending),
            send_code_mode=self.send_code_mode,
            generating=self.generating,
            dezzy_thinking=self.dezzy_thinking,
            drag_state=self.deck.drag_state.value,
            drop_marker_x=self.deck.marker_position(
                self.layout.boxes, self.layout.track_left
            ),
            status=self.status,
        )
