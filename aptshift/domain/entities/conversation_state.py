from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ConversationState:
    user_id: str
    last_message: str | None = None
    # Opaque carry-over for the interpreter: last resolved booking or a pending
    # ambiguity/clarification payload.
    last_context: dict[str, Any] = field(default_factory=dict)
    last_updated: float | None = None
    message_count: int = 0
