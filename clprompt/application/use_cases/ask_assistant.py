"""
Use Case: Ask the Dezzy assistant.

Builds the system instruction from reference material and the user's saved
slide code, replays recent chat history, calls Gemini, and records the
exchange when a reply comes back.
"""

import asyncio
from typing import Dict, Optional

from clprompt.application.ports import AssistantPort
from clprompt.application.prompts.assistant import AssistantPrompts
from clprompt.infra.config.logging_config import get_logger
from clprompt.infra.context.reference_docs import ReferenceContext
from clprompt.infra.history.chat_history import ChatHistory
from clprompt.infra.llm.gemini_client import GeminiClient


class AskAssistantUseCase(AssistantPort):
    def __init__(
        self,
        gemini: GeminiClient,
        history: ChatHistory,
        context: ReferenceContext,
        instructions: str,
    ):
        self.gemini = gemini
        self.history = history
        self.context = context
        self.instructions = instructions
        self._log = get_logger("usecase.ask_assistant")

    def build_system_text(self, slide_code_context: Optional[Dict[str, str]]) -> str:
        return AssistantPrompts.build_system_text(
            self.instructions,
            cl_docs=self.context.cl_docs(),
            extra_docs=self.context.extra_docs(),
            docs_folder=self.context.docs_folder_text(),
            slide_code_context=slide_code_context,
        )

    async def ask(
        self,
        message: str,
        slide_code_context: Dict[str, str],
        code_just_stored: Optional[str] = None,
    ) -> str:
        user_text = AssistantPrompts.get_user_text(message, code_just_stored)
        self._log.info(
            "usecase.start",
            action="ask_assistant",
            suggestion=bool(code_just_stored),
            saved_slides=len(slide_code_context or {}),
        )

        # File reads and PDF parsing run in a worker thread.
        system_text = await asyncio.to_thread(self.build_system_text, slide_code_context)
        contents = self.history.build_contents(user_text)
        reply = await self.gemini.generate(contents, system_text)

        await asyncio.to_thread(self.history.record, user_text, reply)
        self._log.info("usecase.complete", action="ask_assistant", reply_length=len(reply))
        return reply
