"""
Unit tests for the workspace controller with mocked services.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest

from clprompt.application.code_renderer import NO_CODE_PLACEHOLDER
from clprompt.application.persistence import PROJECT_PREFIX, LoadStatus
from clprompt.application.workspace import (
    DEFAULT_DEZZY_MESSAGE,
    ENTER_PROMPT_MESSAGE,
    GENERATING_MESSAGE,
    NO_CODE_RETURNED,
    CodeSelection,
    DeckLayout,
)
from clprompt.domain.exceptions import ExternalServiceError, SlideNotFoundError
from clprompt.domain.services.deck_ordering import CardBox

CODE = "note1.content: \"hi\""


def _gated(*futures):
    """Async side effect that waits on each future in turn."""
    pending = list(futures)

    async def effect(*args, **kwargs):
        return await pending.pop(0)

    return effect


async def _send(workspace, slide_id, selection=None):
    workspace.toggle_send_code_mode()
    workspace.click_slide(slide_id, selection)


class TestSlides:
    def test_starts_with_one_empty_slide(self, workspace):
        view = workspace.render()

        assert [s.id for s in view.slides] == ["slide-1"]
        assert view.slides[0].label == "Slide 1"
        assert view.code_text == NO_CODE_PLACEHOLDER

    def test_add_slide(self, workspace):
        assert workspace.add_slide() == "slide-2"
        assert [s.label for s in workspace.render().slides] == ["Slide 1", "Slide 2"]

    def test_toggle_send_mode(self, workspace):
        assert workspace.toggle_send_code_mode() is True
        assert workspace.toggle_send_code_mode() is False

    def test_click_unknown_slide(self, workspace):
        with pytest.raises(SlideNotFoundError):
            workspace.click_slide("slide-99")

    def test_click_without_send_mode_shows_slide_code(self, workspace, scheduler):
        workspace.store.set_code("slide-1", "abc")

        workspace.click_slide("slide-1")

        assert workspace.code_output.animating is True
        scheduler.run_until_idle()
        assert workspace.code_output.visible == "abc"

    def test_click_empty_slide_without_send_mode_does_nothing(self, workspace):
        workspace.paste_code("keep me")

        workspace.click_slide("slide-1")

        assert workspace.code_output.text == "keep me"

    def test_clear_slide_code(self, workspace):
        workspace.store.set_code("slide-1", "abc")

        workspace.clear_slide_code("slide-1")

        assert workspace.render().slides[0].has_code is False


class TestSendCode:
    @pytest.mark.asyncio
    async def test_send_whole_panel(self, workspace, summary_service, assistant):
        workspace.paste_code(CODE)

        await _send(workspace, "slide-1")

        view = workspace.render()
        assert view.send_code_mode is False
        assert view.slides[0].has_code is True
        assert view.slides[0].label == "…"

        await workspace.wait_idle()

        summary_service.summarize_code.assert_awaited_once_with(CODE)
        assistant.ask.assert_awaited_once_with("", {"slide-1": CODE}, code_just_stored=CODE)
        assert workspace.render().slides[0].label == "Shows a greeting"

    @pytest.mark.asyncio
    async def test_selection_inside_code_panel_wins(self, workspace):
        workspace.paste_code(CODE + "\nnote2.hidden: true")

        await _send(workspace, "slide-1", CodeSelection(text="  note2.hidden: true ", in_code_panel=True))

        assert workspace.store.get("slide-1").code == "note2.hidden: true"

    @pytest.mark.asyncio
    async def test_selection_outside_code_panel_is_ignored(self, workspace):
        workspace.paste_code(CODE)

        await _send(workspace, "slide-1", CodeSelection(text="prompt words", in_code_panel=False))

        assert workspace.store.get("slide-1").code == CODE

    @pytest.mark.asyncio
    async def test_empty_code_is_a_user_error(self, workspace, summary_service):
        await _send(workspace, "slide-1")

        view = workspace.render()
        assert view.slides[0].has_code is False
        assert view.send_code_mode is False
        assert view.status.level == "error"
        summary_service.summarize_code.assert_not_called()

    @pytest.mark.asyncio
    async def test_suggestion_is_typed_into_prompt(self, workspace, scheduler):
        workspace.set_prompt("hide the note")
        workspace.paste_code(CODE)

        await _send(workspace, "slide-1")
        await workspace.wait_idle()
        scheduler.run_until_idle()

        assert workspace.prompt.text == "hide the note\n\n(Dezzy) Try a slider next."

    @pytest.mark.asyncio
    async def test_suggestions_type_in_completion_order(self, workspace, assistant, scheduler):
        loop = asyncio.get_running_loop()
        first, second = loop.create_future(), loop.create_future()
        assistant.ask = AsyncMock(side_effect=_gated(first, second))
        workspace.add_slide()
        workspace.paste_code(CODE)

        await _send(workspace, "slide-1")
        await _send(workspace, "slide-2")
        second.set_result("Second idea")
        await asyncio.sleep(0)
        first.set_result("First idea")
        await workspace.wait_idle()
        scheduler.run_until_idle()

        assert workspace.prompt.text == "(Dezzy) Second idea\n\n(Dezzy) First idea"

    @pytest.mark.asyncio
    async def test_summary_failure_falls_back_to_position(self, workspace, summary_service):
        summary_service.summarize_code.side_effect = ExternalServiceError("OPENAI_API_KEY not set")
        workspace.paste_code(CODE)

        await _send(workspace, "slide-1")
        await workspace.wait_idle()

        assert workspace.render().slides[0].label == "Slide 1"


class TestSummaryTargeting:
    @pytest.mark.asyncio
    async def test_summary_follows_slide_through_reorder(self, workspace, summary_service):
        gate = asyncio.get_running_loop().create_future()
        summary_service.summarize_code = AsyncMock(side_effect=_gated(gate))
        workspace.add_slide()
        workspace.paste_code(CODE)

        await _send(workspace, "slide-2")
        workspace.move_slide("slide-2", 0)
        gate.set_result("Greeting note")
        await workspace.wait_idle()

        slides = workspace.render().slides
        assert [s.id for s in slides] == ["slide-2", "slide-1"]
        assert slides[0].label == "Greeting note"
        assert slides[1].label == "Slide 2"

    @pytest.mark.asyncio
    async def test_late_summary_for_replaced_code_is_discarded(self, workspace, summary_service):
        loop = asyncio.get_running_loop()
        old, new = loop.create_future(), loop.create_future()
        summary_service.summarize_code = AsyncMock(side_effect=_gated(old, new))

        workspace.paste_code("old code")
        await _send(workspace, "slide-1")
        workspace.paste_code("new code")
        await _send(workspace, "slide-1")

        new.set_result("New label")
        await asyncio.sleep(0)
        old.set_result("Old label")
        await workspace.wait_idle()

        assert workspace.store.get("slide-1").code == "new code"
        assert workspace.render().slides[0].label == "New label"


class TestDrag:
    def test_drag_reorders_and_suppresses_click(self, workspace, scheduler):
        workspace.add_slide()
        workspace.add_slide()
        workspace.store.set_code("slide-3", "abc")
        layout = DeckLayout(boxes=[CardBox(0, 100), CardBox(110, 100), CardBox(220, 100)])

        workspace.start_drag("slide-3")
        assert workspace.drag_over("slide-1", 20, layout) == 0
        assert workspace.render().drop_marker_x == 0
        assert workspace.drop() is True
        workspace.end_drag()

        assert workspace.deck.ids() == ["slide-3", "slide-1", "slide-2"]
        workspace.click_slide("slide-3")
        assert workspace.code_output.animating is False

        scheduler.advance(100)
        workspace.click_slide("slide-3")
        assert workspace.code_output.animating is True


class TestGenerate:
    @pytest.mark.asyncio
    async def test_blank_prompt(self, workspace, code_service):
        await workspace.generate("   ")

        assert workspace.code_output.text == ENTER_PROMPT_MESSAGE
        code_service.generate_code.assert_not_called()

    @pytest.mark.asyncio
    async def test_generated_code_is_animated(self, workspace, code_service, scheduler):
        await workspace.generate("show hi in note1")

        code_service.generate_code.assert_awaited_once_with("show hi in note1")
        assert workspace.generating is False
        assert workspace.code_output.animating is True
        scheduler.run_until_idle()
        assert workspace.code_output.visible == CODE

    @pytest.mark.asyncio
    async def test_generating_placeholder_while_waiting(self, workspace, code_service):
        gate = asyncio.get_running_loop().create_future()
        code_service.generate_code = AsyncMock(side_effect=_gated(gate))

        task = asyncio.create_task(workspace.generate("x"))
        await asyncio.sleep(0)

        assert workspace.generating is True
        assert workspace.code_output.text == GENERATING_MESSAGE
        gate.set_result("done")
        await task

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "outcome,expected",
        [
            (ExternalServiceError("OPENAI_API_KEY not set"), "# Error: OPENAI_API_KEY not set"),
            (RuntimeError("boom"), "# Request failed: boom"),
        ],
    )
    async def test_failures_become_display_text(self, workspace, code_service, outcome, expected):
        code_service.generate_code.side_effect = outcome

        await workspace.generate("x")

        assert workspace.code_output.text == expected
        assert workspace.generating is False

    @pytest.mark.asyncio
    async def test_empty_reply(self, workspace, code_service):
        code_service.generate_code.return_value = ""

        await workspace.generate("x")

        assert workspace.code_output.text == NO_CODE_RETURNED

    @pytest.mark.asyncio
    async def test_superseded_generation_is_discarded(self, workspace, code_service):
        loop = asyncio.get_running_loop()
        slow, fast = loop.create_future(), loop.create_future()
        code_service.generate_code = AsyncMock(side_effect=_gated(slow, fast))

        first = asyncio.create_task(workspace.generate("first"))
        await asyncio.sleep(0)
        second = asyncio.create_task(workspace.generate("second"))
        await asyncio.sleep(0)
        fast.set_result("second code")
        await second
        slow.set_result("first code")
        await first

        assert workspace.code_output.text == "second code"
        assert workspace.generating is False


class TestAskDezzy:
    @pytest.mark.asyncio
    async def test_default_message_and_reply(self, workspace, assistant, scheduler):
        await workspace.ask_dezzy()

        assistant.ask.assert_awaited_once_with(DEFAULT_DEZZY_MESSAGE, {})
        assert workspace.dezzy_busy is True
        scheduler.run_until_idle()
        assert workspace.dezzy_busy is False
        assert workspace.prompt.text == "(Dezzy) Try a slider next."

    @pytest.mark.asyncio
    async def test_prompt_is_replaced_by_reply(self, workspace, assistant, scheduler):
        workspace.set_prompt("how do I hide a note?")

        await workspace.ask_dezzy()
        scheduler.run_until_idle()

        assistant.ask.assert_awaited_once_with("how do I hide a note?", {})
        assert workspace.prompt.text == "(Dezzy) Try a slider next."

    @pytest.mark.asyncio
    async def test_ignored_while_reply_is_typing(self, workspace, assistant):
        await workspace.ask_dezzy()
        await workspace.ask_dezzy()

        assert assistant.ask.await_count == 1

    @pytest.mark.asyncio
    async def test_service_error_is_typed(self, workspace, assistant, scheduler):
        assistant.ask.side_effect = ExternalServiceError("GEMINI_API_KEY not set")

        await workspace.ask_dezzy()
        scheduler.run_until_idle()

        assert workspace.prompt.text == "(Dezzy) Dezzy ran into an issue: GEMINI_API_KEY not set"
        assert workspace.dezzy_thinking is False


class TestProjects:
    @pytest.mark.asyncio
    async def test_save_reset_load(self, workspace):
        workspace.add_slide()
        workspace.store.set_code("slide-2", CODE)
        workspace.store.set_summary("slide-2", "Greeting")
        workspace.paste_code(CODE)
        workspace.set_prompt("say hi")

        saved = await workspace.save_project("Lesson")
        workspace.reset()
        loaded = await workspace.load_project("Lesson")

        assert saved.ok is True
        assert loaded.status is LoadStatus.LOADED
        view = workspace.render()
        assert [s.id for s in view.slides] == ["slide-1", "slide-2"]
        assert view.slides[1].label == "Greeting"
        assert view.code_text == CODE
        assert view.prompt_text == "say hi"
        assert await workspace.list_projects() == ["Lesson"]

    @pytest.mark.asyncio
    async def test_new_ids_continue_after_loaded_ids(self, workspace, storage):
        raw = json.dumps({"slides": [{"id": "slide-7", "code": "a"}], "codeOutput": "a"})
        await storage.set(PROJECT_PREFIX + "Old", raw)

        await workspace.load_project("Old")

        assert workspace.add_slide() == "slide-8"

    @pytest.mark.asyncio
    async def test_repeated_ids_load_as_separate_slides(self, workspace, storage):
        raw = json.dumps(
            {"slides": [{"id": "slide-1", "code": "a"}, {"id": "slide-1", "code": "b"}]}
        )
        await storage.set(PROJECT_PREFIX + "Twins", raw)

        await workspace.load_project("Twins")
        workspace.clear_slide_code("slide-1")

        view = workspace.render()
        assert [s.id for s in view.slides] == ["slide-1", "slide-2"]
        assert [s.has_code for s in view.slides] == [False, True]

    @pytest.mark.asyncio
    async def test_missing_project_keeps_workspace(self, workspace):
        workspace.paste_code(CODE)

        result = await workspace.load_project("Nope")

        assert result.status is LoadStatus.NOT_FOUND
        assert workspace.code_output.text == CODE
        assert workspace.status.level == "error"

    @pytest.mark.asyncio
    async def test_save_failure_reported(self, workspace):
        result = await workspace.save_project("")

        assert result.ok is False
        assert workspace.status.level == "error"
