"""
Application ports - abstract interfaces for external dependencies.

The workspace consumes these; infrastructure and the service use cases
provide them.
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional


class CodeGenerationPort(ABC):
    """Natural-language prompt -> CL code."""

    @abstractmethod
    async def generate_code(self, prompt: str) -> str:
        """Return generated code; raise ExternalServiceError on failure."""
        pass


class SummarizationPort(ABC):
    """CL code -> short thumbnail label."""

    @abstractmethod
    async def summarize_code(self, code: str) -> str:
        """Return a label of at most 80 characters."""
        pass


class AssistantPort(ABC):
    """Open-ended chat assistant grounded on the user's slide code."""

    @abstractmethod
    async def ask(
        self,
        message: str,
        slide_code_context: Dict[str, str],
        code_just_stored: Optional[str] = None,
    ) -> str:
        """Return the assistant reply; raise ExternalServiceError on failure."""
        pass


class KeyValueStoragePort(ABC):
    """String-keyed durable storage for serialized snapshots."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Raise StorageQuotaExceededError / StorageError on failure."""
        pass


class TimerHandle(ABC):
    @abstractmethod
    def cancel(self) -> None:
        pass


class SchedulerPort(ABC):
    """Single-threaded timer scheduler; all animation suspension goes through it."""

    @abstractmethod
    def now(self) -> float:
        """Current time in milliseconds."""
        pass

    @abstractmethod
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        pass
