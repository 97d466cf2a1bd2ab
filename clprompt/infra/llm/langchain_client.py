"""
Pure infrastructure LLM client for LangChain integration.

Used for CL code generation and slide summaries. Prompts live in the
application layer; this client only knows how to invoke the model.
"""

from typing import List, Optional

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_core.output_parsers import StrOutputParser
from langchain_openai import ChatOpenAI

from clprompt.infra.config.logging_config import get_logger


class LangChainClient:
    """Thin async wrapper over ``ChatOpenAI`` returning plain text."""

    def __init__(
        self,
        model_name: str = "gpt-4o-mini",
        temperature: float = 0.3,
        max_tokens: int = 1024,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        **kwargs,
    ):
        llm_kwargs = {
            "model": model_name,
            "temperature": temperature,
            "max_tokens": max_tokens,
            **kwargs,
        }
        # OpenAI-compatible servers
        if base_url:
            llm_kwargs["base_url"] = base_url
        if api_key:
            llm_kwargs["api_key"] = api_key

        self.llm = ChatOpenAI(**llm_kwargs)
        self._text_parser = StrOutputParser()
        self._log = get_logger("infra.llm")

    async def invoke_text(
        self, messages: List[BaseMessage], max_tokens: Optional[int] = None
    ) -> str:
        """Invoke the model and return the reply text."""
        llm = self.llm.bind(max_tokens=max_tokens) if max_tokens else self.llm
        response = await llm.ainvoke(messages)
        self._log.info("llm.invoke.text", max_tokens=max_tokens)
        return self._text_parser.parse(response.content)

    def create_messages(
        self, user_prompt: str, system_prompt: Optional[str] = None
    ) -> List[BaseMessage]:
        messages: List[BaseMessage] = []
        if system_prompt:
            messages.append(SystemMessage(content=system_prompt))
        messages.append(HumanMessage(content=user_prompt))
        return messages

    async def invoke_simple(
        self,
        user_prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Single-turn system + user invocation."""
        messages = self.create_messages(user_prompt, system_prompt)
        return await self.invoke_text(messages, max_tokens=max_tokens)

    def get_model_info(self) -> dict:
        return {
            "model_name": self.llm.model_name,
            "temperature": self.llm.temperature,
            "max_tokens": self.llm.max_tokens,
        }
