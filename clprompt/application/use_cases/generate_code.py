"""
Use Case: Generate CL code from a natural-language request.
"""

from typing import Optional

from clprompt.application.ports import CodeGenerationPort
from clprompt.application.prompts.code_generation import CodeGenerationPrompts
from clprompt.domain.exceptions import ExternalServiceError
from clprompt.infra.config.logging_config import get_logger
from clprompt.infra.llm.langchain_client import LangChainClient


class GenerateCodeUseCase(CodeGenerationPort):
    def __init__(self, llm_client: Optional[LangChainClient], max_tokens: int = 1024):
        self.llm_client = llm_client
        self.max_tokens = max_tokens
        self._log = get_logger("usecase.generate_code")

    async def generate_code(self, prompt: str) -> str:
        if self.llm_client is None:
            raise ExternalServiceError("OPENAI_API_KEY not set")

        self._log.info("usecase.start", action="generate_code", prompt_length=len(prompt))
        try:
            text = await self.llm_client.invoke_simple(
                user_prompt=prompt,
                system_prompt=CodeGenerationPrompts.get_system_prompt(),
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            self._log.error("usecase.generate_code.failed", error=str(e))
            raise ExternalServiceError(str(e) or "OpenAI request failed") from e

        code = (text or "").strip()
        self._log.info("usecase.complete", action="generate_code", code_length=len(code))
        return code
