"""
Use Case: Summarize slide code into a thumbnail label.
"""

import re
from typing import Optional

from clprompt.application.ports import SummarizationPort
from clprompt.application.prompts.code_generation import SummaryPrompts
from clprompt.domain.entities.slide import SUMMARY_MAX_LENGTH
from clprompt.domain.exceptions import ExternalServiceError
from clprompt.infra.config.logging_config import get_logger
from clprompt.infra.llm.langchain_client import LangChainClient

_EDGE_QUOTES = re.compile(r"^[\"']|[\"']$")


def clean_summary(raw: str) -> str:
    """Strip surrounding quotes and clamp to the label length."""
    return _EDGE_QUOTES.sub("", (raw or "").strip())[:SUMMARY_MAX_LENGTH]


class SummarizeCodeUseCase(SummarizationPort):
    def __init__(self, llm_client: Optional[LangChainClient], max_tokens: int = 60):
        self.llm_client = llm_client
        self.max_tokens = max_tokens
        self._log = get_logger("usecase.summarize_code")

    async def summarize_code(self, code: str) -> str:
        if self.llm_client is None:
            raise ExternalServiceError("OPENAI_API_KEY not set")

        try:
            raw = await self.llm_client.invoke_simple(
                user_prompt=SummaryPrompts.get_user_prompt(code),
                system_prompt=SummaryPrompts.get_system_prompt(),
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            self._log.error("usecase.summarize_code.failed", error=str(e))
            raise ExternalServiceError(str(e) or "OpenAI request failed") from e

        summary = clean_summary(raw)
        self._log.info("usecase.complete", action="summarize_code", summary=summary)
        return summary
