"""
Unit tests for the service use cases with mocked clients.
"""

import threading
from unittest.mock import AsyncMock, Mock

import pytest

from clprompt.application.prompts.assistant import GREETING_REQUEST, AssistantPrompts
from clprompt.application.prompts.code_generation import CodeGenerationPrompts, SummaryPrompts
from clprompt.application.use_cases.ask_assistant import AskAssistantUseCase
from clprompt.application.use_cases.generate_code import GenerateCodeUseCase
from clprompt.application.use_cases.summarize_code import SummarizeCodeUseCase, clean_summary
from clprompt.domain.exceptions import ExternalServiceError
from clprompt.infra.history.chat_history import ChatHistory


@pytest.fixture
def llm_client():
    client = Mock()
    client.invoke_simple = AsyncMock(return_value="  note1.hidden: true \n")
    return client


class TestGenerateCodeUseCase:
    @pytest.mark.asyncio
    async def test_returns_trimmed_code(self, llm_client):
        use_case = GenerateCodeUseCase(llm_client, max_tokens=1024)

        code = await use_case.generate_code("hide note1")

        assert code == "note1.hidden: true"
        llm_client.invoke_simple.assert_awaited_once_with(
            user_prompt="hide note1",
            system_prompt=CodeGenerationPrompts.get_system_prompt(),
            max_tokens=1024,
        )

    @pytest.mark.asyncio
    async def test_missing_key(self):
        with pytest.raises(ExternalServiceError, match="OPENAI_API_KEY not set"):
            await GenerateCodeUseCase(None).generate_code("x")

    @pytest.mark.asyncio
    async def test_client_failure_becomes_service_error(self, llm_client):
        llm_client.invoke_simple.side_effect = RuntimeError("rate limited")

        with pytest.raises(ExternalServiceError, match="rate limited"):
            await GenerateCodeUseCase(llm_client).generate_code("x")


class TestSummarizeCodeUseCase:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ('"Shows feedback"', "Shows feedback"),
            ("'Hide button until slider is 5'", "Hide button until slider is 5"),
            ("  plain  ", "plain"),
            ("x" * 100, "x" * 80),
        ],
    )
    def test_clean_summary(self, raw, expected):
        assert clean_summary(raw) == expected

    @pytest.mark.asyncio
    async def test_code_is_truncated_and_tokens_limited(self, llm_client):
        llm_client.invoke_simple.return_value = '"Hides the note"'
        use_case = SummarizeCodeUseCase(llm_client, max_tokens=60)

        summary = await use_case.summarize_code("a" * 3000)

        assert summary == "Hides the note"
        llm_client.invoke_simple.assert_awaited_once_with(
            user_prompt="a" * 2000,
            system_prompt=SummaryPrompts.get_system_prompt(),
            max_tokens=60,
        )

    @pytest.mark.asyncio
    async def test_missing_key(self):
        with pytest.raises(ExternalServiceError):
            await SummarizeCodeUseCase(None).summarize_code("x")


class TestAskAssistantUseCase:
    @pytest.fixture
    def gemini(self):
        client = Mock()
        client.generate = AsyncMock(return_value="Hi! Ask me about CL.")
        return client

    @pytest.fixture
    def history(self):
        return ChatHistory(path=None, clock=lambda: 1_000_000)

    @pytest.fixture
    def context(self):
        context = Mock()
        context.cl_docs.return_value = "CL DOCS"
        context.extra_docs.return_value = ""
        context.docs_folder_text.return_value = "--- style.md ---\nBe kind"
        return context

    @pytest.fixture
    def use_case(self, gemini, history, context):
        return AskAssistantUseCase(gemini, history, context, "You are Dezzy.")

    @pytest.mark.asyncio
    async def test_empty_message_asks_for_greeting(self, use_case, gemini, history):
        reply = await use_case.ask("", {})

        assert reply == "Hi! Ask me about CL."
        contents, system_text = gemini.generate.await_args.args
        assert contents == [{"role": "user", "parts": [{"text": GREETING_REQUEST}]}]
        assert system_text.startswith("You are Dezzy.")
        assert [t.role for t in history.turns] == ["user", "model"]

    @pytest.mark.asyncio
    async def test_system_text_includes_context_and_slide_code(self, use_case, gemini):
        await use_case.ask("help", {"slide-1": "note1.hidden: true"})

        system_text = gemini.generate.await_args.args[1]
        assert "CL DOCS" in system_text
        assert "Additional reference" not in system_text
        assert "--- style.md ---" in system_text
        assert '{"slide-1":"note1.hidden: true"}' in system_text

    @pytest.mark.asyncio
    async def test_suggestion_request_replaces_user_text(self, use_case, gemini):
        await use_case.ask("", {}, code_just_stored="note1.content: 1")

        user_text = gemini.generate.await_args.args[0][-1]["parts"][0]["text"]
        assert user_text.startswith("The user just copied this code to a slide:")
        assert "note1.content: 1" in user_text

    @pytest.mark.asyncio
    async def test_history_is_replayed(self, use_case, gemini):
        await use_case.ask("first", {})
        await use_case.ask("second", {})

        contents = gemini.generate.await_args.args[0]
        assert [c["role"] for c in contents] == ["user", "model", "user"]
        assert contents[0]["parts"][0]["text"] == "first"

    @pytest.mark.asyncio
    async def test_failure_is_not_recorded(self, use_case, gemini, history):
        gemini.generate.side_effect = ExternalServiceError("Gemini returned no reply.")

        with pytest.raises(ExternalServiceError):
            await use_case.ask("hello", {})
        assert history.turns == []

    @pytest.mark.asyncio
    async def test_file_work_runs_off_the_event_loop(self, use_case, context, history):
        loop_thread = threading.get_ident()
        threads = []
        context.docs_folder_text.side_effect = lambda: threads.append(threading.get_ident()) or ""
        history.save = Mock(side_effect=lambda: threads.append(threading.get_ident()))

        await use_case.ask("hello", {})

        assert len(threads) == 2
        assert loop_thread not in threads


class TestAssistantPrompts:
    def test_slide_code_is_truncated(self):
        text = AssistantPrompts.build_system_text("x", slide_code_context={"s": "a" * 5000})

        assert len(text) < 4100

    def test_suggestion_prompt_truncates_code(self):
        prompt = AssistantPrompts.get_suggestion_prompt("b" * 3000)

        assert "b" * 2000 in prompt
        assert "b" * 2001 not in prompt
