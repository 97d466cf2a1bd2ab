"""
Dependency wiring: service adapters, storage and the workspace controller.
"""

from typing import Annotated, Optional

from fastapi import Depends

from clprompt.application.ports import KeyValueStoragePort
from clprompt.application.scheduling import AsyncioScheduler
from clprompt.application.use_cases.ask_assistant import AskAssistantUseCase
from clprompt.application.use_cases.generate_code import GenerateCodeUseCase
from clprompt.application.use_cases.summarize_code import SummarizeCodeUseCase
from clprompt.application.workspace import WorkspaceController
from clprompt.infra.config.logging_config import get_logger
from clprompt.infra.config.settings import Settings, get_settings
from clprompt.infra.context.reference_docs import ReferenceContext
from clprompt.infra.history.chat_history import ChatHistory
from clprompt.infra.llm.gemini_client import GeminiClient
from clprompt.infra.llm.langchain_client import LangChainClient
from clprompt.infra.storage.key_value import FileKeyValueStore, InMemoryKeyValueStore

_workspace: Optional[WorkspaceController] = None


def build_llm_client(settings: Settings, max_tokens: int) -> Optional[LangChainClient]:
    """OpenAI chat client, or None when no key is configured."""
    if not settings.openai_api_key:
        return None
    return LangChainClient(
        model_name=settings.openai_model,
        temperature=0.3,
        max_tokens=max_tokens,
        base_url=settings.openai_base_url,
        api_key=settings.openai_api_key,
        timeout=settings.llm_timeout_seconds,
    )


def build_storage(settings: Settings) -> KeyValueStoragePort:
    backend = settings.project_storage.lower()
    if backend == "memory":
        return InMemoryKeyValueStore(quota_bytes=settings.project_storage_quota_bytes)
    if backend == "redis":
        from clprompt.infra.storage.redis_store import RedisKeyValueStore

        return RedisKeyValueStore(url=settings.redis_url)
    return FileKeyValueStore(root=settings.project_storage_dir)


def build_assistant(settings: Settings) -> AskAssistantUseCase:
    history = ChatHistory(
        path=settings.dezzy_history_file,
        max_age_ms=settings.dezzy_history_max_age_hours * 60 * 60 * 1000,
        max_turns=settings.dezzy_history_max_turns,
    )
    history.load()
    gemini = GeminiClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        fallback_model=settings.gemini_fallback_model,
        base_url=settings.gemini_base_url,
        max_output_tokens=settings.gemini_max_output_tokens,
        timeout=settings.llm_timeout_seconds,
    )
    context = ReferenceContext(
        cl_docs_path=settings.cl_docs_path,
        extra_docs_path=settings.dezzy_docs_path,
        docs_folder=settings.docs_folder,
    )
    return AskAssistantUseCase(gemini, history, context, settings.gemini_instructions)


def build_workspace(settings: Optional[Settings] = None) -> WorkspaceController:
    settings = settings or get_settings()
    get_logger("app").info(
        "workspace.build",
        storage=settings.project_storage,
        openai=bool(settings.openai_api_key),
        gemini=bool(settings.gemini_api_key),
    )
    return WorkspaceController(
        scheduler=AsyncioScheduler(),
        code_service=GenerateCodeUseCase(
            build_llm_client(settings, settings.code_max_tokens), settings.code_max_tokens
        ),
        summary_service=SummarizeCodeUseCase(
            build_llm_client(settings, settings.summary_max_tokens),
            settings.summary_max_tokens,
        ),
        assistant=build_assistant(settings),
        storage=build_storage(settings),
    )


async def get_workspace() -> WorkspaceController:
    """Dependency for the process-wide workspace."""
    global _workspace
    if _workspace is None:
        _workspace = build_workspace()
    return _workspace


WorkspaceDep = Annotated[WorkspaceController, Depends(get_workspace)]
