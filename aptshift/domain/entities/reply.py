from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Reply:
    texts: list[str]
    outcome: str
    meta: dict[str, Any] = field(default_factory=dict)
