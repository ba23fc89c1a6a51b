from dataclasses import dataclass
from enum import Enum
from typing import Literal, Protocol


Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


class ProviderErrorKind(str, Enum):
    INVALID_CREDENTIAL = "invalid_credential"
    UPSTREAM = "upstream"
    INVALID_CONFIGURATION = "invalid_configuration"


class ProviderError(RuntimeError):
    def __init__(self, kind: ProviderErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


class AIClient(Protocol):
    provider: str
    model: str

    async def complete(self, system_instruction: str, user_prompt: str) -> str: ...
