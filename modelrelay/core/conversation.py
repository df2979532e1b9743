"""
Conversation turns and their conversion to chat-completion messages.
"""

import math
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Union

USER = "user"
ASSISTANT = "assistant"
SYSTEM = "system"
ROLES = (USER, ASSISTANT, SYSTEM)

# A content part is a typed dict: {"type": "text", "text": ...} or
# {"type": "image", "image": ...} / {"type": "image_url", "image_url": ...}.
ContentPart = Dict[str, Any]
Content = Union[str, List[ContentPart]]

CHARS_PER_TOKEN = 3.5


@dataclass(frozen=True)
class ConversationTurn:
    """
    One turn of a conversation.

    ``model`` / ``provider`` are structured overrides that a non-user turn
    may carry in addition to in-text directives.
    """
    role: str
    content: Content
    model: Optional[str] = None
    provider: Optional[str] = None

    def __post_init__(self):
        if self.role not in ROLES:
            raise ValueError(f"Unknown role '{self.role}', expected one of {ROLES}")

    @property
    def is_user(self) -> bool:
        return self.role == USER

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConversationTurn":
        content = data.get("content") or ""
        if isinstance(content, list):
            content = [dict(part) for part in content]
        return cls(
            role=data["role"],
            content=content,
            model=data.get("model"),
            provider=data.get("provider"),
        )

    def with_content(self, content: Content) -> "ConversationTurn":
        return replace(self, content=content)


def _to_openai_part(part: ContentPart) -> ContentPart:
    kind = part.get("type")
    if kind == "text":
        return {"type": "text", "text": part.get("text") or ""}
    if kind == "image":
        return {"type": "image_url", "image_url": {"url": part.get("image")}}
    # image_url and anything else already in wire format
    return dict(part)


def to_openai_messages(turns: List[ConversationTurn]) -> List[Dict[str, Any]]:
    """
    Convert turns into OpenAI-style dicts for sending to the API.

    Structured override fields are dropped; they never reach the model.
    """
    messages: List[Dict[str, Any]] = []
    for turn in turns:
        if isinstance(turn.content, str):
            content: Any = turn.content
        else:
            content = [_to_openai_part(part) for part in turn.content]
        messages.append({"role": turn.role, "content": content})
    return messages


def estimate_tokens(text: str) -> int:
    """
    Lightweight, provider-neutral token estimate.

    Uses approx_tokens = total_chars / 3.5, rounded up.
    """
    if not text:
        return 0
    return int(math.ceil(len(text) / CHARS_PER_TOKEN))
