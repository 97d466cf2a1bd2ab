"""
Unit tests for the suggestion typing queue and the prompt surface.
"""

from unittest.mock import Mock

import pytest

from clprompt.application.typing_queue import (
    QUEUE_SETTLE_MS,
    PromptSurface,
    SuggestionTypingQueue,
    SurfaceFormat,
)


@pytest.fixture
def surface():
    return PromptSurface()


@pytest.fixture
def queue(scheduler, surface):
    return SuggestionTypingQueue(scheduler, surface)


class TestTypingRuns:
    def test_overwrites_empty_surface_with_attribution(self, queue, surface, scheduler):
        started = queue.push("Hello.")

        assert started is True
        assert surface.text == "("
        assert surface.typing is True
        assert surface.format is SurfaceFormat.CHAT

        scheduler.run_until_idle()

        assert surface.text == "(Dezzy) Hello."
        assert surface.typing is False
        assert queue.busy is False

    def test_appends_below_meaningful_text(self, queue, surface, scheduler):
        surface.set_text("my prompt")

        queue.push("Idea")
        scheduler.run_until_idle()

        assert surface.text == "my prompt\n\n(Dezzy) Idea"

    def test_whitespace_only_surface_is_overwritten(self, queue, surface, scheduler):
        surface.set_text("   \n")

        queue.push("Idea")
        scheduler.run_until_idle()

        assert surface.text == "(Dezzy) Idea"

    def test_replace_clears_existing_text(self, queue, surface, scheduler):
        surface.set_text("my prompt")

        queue.push("Reply", replace=True)
        scheduler.run_until_idle()

        assert surface.text == "(Dezzy) Reply"

    def test_attribution_is_not_repeated(self, queue, surface, scheduler):
        queue.push("(Dezzy) hi")
        scheduler.run_until_idle()

        assert surface.text == "(Dezzy) hi"

    def test_empty_text_completes_immediately(self, queue, surface):
        on_done = Mock()

        assert queue.push("   ", on_done=on_done) is False
        on_done.assert_called_once()
        assert surface.text == ""
        assert queue.busy is False

    def test_on_done_runs_when_typing_finishes(self, queue, scheduler):
        on_done = Mock()
        queue.push("ok", on_done=on_done)

        on_done.assert_not_called()
        scheduler.run_until_idle()
        on_done.assert_called_once()

    def test_sentence_end_pauses_one_second(self, queue, surface, scheduler):
        # "(Dezzy) A. B": the period is character 9, revealed at 9 * 18 ms
        queue.push("A. B")

        scheduler.advance(9 * 18)
        assert surface.text == "(Dezzy) A."
        scheduler.advance(999)
        assert surface.text == "(Dezzy) A."
        scheduler.advance(1)
        assert surface.text == "(Dezzy) A. "


class TestQueueOrdering:
    def test_runs_are_serialized_in_arrival_order(self, queue, surface, scheduler):
        queue.push("One")
        queue.push("Two")
        queue.push("Three")

        assert len(queue.pending) == 2
        scheduler.run_until_idle()

        assert surface.text == "(Dezzy) One\n\n(Dezzy) Two\n\n(Dezzy) Three"

    def test_next_run_waits_for_settle_delay(self, queue, surface, scheduler):
        queue.push("One")
        queue.push("Two")
        # "(Dezzy) One" is 11 characters: last at 180 ms, done at 198 ms
        scheduler.advance(198)
        assert queue.busy is False
        assert surface.text == "(Dezzy) One"

        scheduler.advance(QUEUE_SETTLE_MS - 1)
        assert queue.busy is False
        scheduler.advance(1)
        assert queue.busy is True
        assert surface.text == "(Dezzy) One\n"

    def test_push_during_settle_joins_the_back(self, queue, surface, scheduler):
        queue.push("One")
        queue.push("Two")
        scheduler.advance(198)

        started = queue.push("Three")
        scheduler.run_until_idle()

        assert started is False
        assert surface.text.endswith("(Dezzy) Two\n\n(Dezzy) Three")

    def test_runs_are_not_interrupted(self, queue, surface, scheduler):
        queue.push("First reply")
        scheduler.advance(36)
        queue.push("Second", replace=True)
        scheduler.advance(36)

        assert surface.text == "(Dezz"
        scheduler.run_until_idle()
        assert surface.text == "(Dezzy) Second"


class TestPromptSurface:
    def test_focus_returns_to_raw_format(self, surface):
        surface.format = SurfaceFormat.CHAT

        surface.focus()

        assert surface.format is SurfaceFormat.RAW

    def test_raw_render_escapes(self, surface):
        surface.set_text("<i>note1</i>")

        assert surface.render() == "&lt;i&gt;note1&lt;/i&gt;"

    def test_chat_render_holds_back_partial_word_while_typing(self, surface):
        surface.set_text("see note1")
        surface.format = SurfaceFormat.CHAT
        surface.typing = True

        assert surface.render() == "see note1"

        surface.typing = False
        assert surface.render() == 'see <span class="cl-token">note1</span>'
