"""
In-band model/provider directives.

Assistant and system turns may pin the model or provider for the rest of a
request by embedding markers such as::

    [Model: gpt-4]

    [Provider: OpenAI]

Parsing is pure (``DirectiveParser.parse``); applying the results to the
active selection is a separate pass (``apply_directives``).
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Pattern, Tuple

from modelrelay.core.conversation import ConversationTurn, Content

logger = logging.getLogger(__name__)

MODEL_PATTERN = re.compile(r"\[Model:\s*([^\]\r\n]+?)\s*\](?:\r?\n){0,2}", re.IGNORECASE)
PROVIDER_PATTERN = re.compile(r"\[Provider:\s*([^\]\r\n]+?)\s*\](?:\r?\n){0,2}", re.IGNORECASE)


@dataclass(frozen=True)
class ParsedTurn:
    """A turn with its markers stripped, plus what they asked for."""
    model: Optional[str]
    provider: Optional[str]
    turn: ConversationTurn


@dataclass(frozen=True)
class ActiveSelection:
    """Outcome of applying every turn's directives in order."""
    model: str
    provider: str
    turns: List[ConversationTurn]


class DirectiveParser:
    """Extracts and strips model/provider markers from non-user turns."""

    def __init__(
        self,
        model_pattern: Pattern = MODEL_PATTERN,
        provider_pattern: Pattern = PROVIDER_PATTERN,
    ):
        self.model_pattern = model_pattern
        self.provider_pattern = provider_pattern

    def extract(self, text: str) -> Tuple[Optional[str], Optional[str]]:
        """Return the first (model, provider) marker values found in ``text``."""
        model_match = self.model_pattern.search(text or "")
        provider_match = self.provider_pattern.search(text or "")
        return (
            model_match.group(1) if model_match else None,
            provider_match.group(1) if provider_match else None,
        )

    def strip(self, text: str) -> str:
        """Remove every model and provider marker."""
        text = self.model_pattern.sub("", text or "")
        return self.provider_pattern.sub("", text)

    def parse(self, turn: ConversationTurn) -> ParsedTurn:
        """
        Parse one turn.

        User turns pass through untouched. For multi-part content only text
        parts are scanned and stripped; other parts are kept as-is.
        """
        if turn.is_user:
            return ParsedTurn(model=None, provider=None, turn=turn)

        model: Optional[str] = None
        provider: Optional[str] = None
        cleaned: Content

        if isinstance(turn.content, str):
            model, provider = self.extract(turn.content)
            cleaned = self.strip(turn.content)
        else:
            cleaned = []
            for part in turn.content:
                if part.get("type") != "text":
                    cleaned.append(part)
                    continue
                text = part.get("text") or ""
                found_model, found_provider = self.extract(text)
                model = model or found_model
                provider = provider or found_provider
                cleaned.append({**part, "text": self.strip(text)})

        return ParsedTurn(
            model=model or turn.model,
            provider=provider or turn.provider,
            turn=turn.with_content(cleaned),
        )


def apply_directives(
    turns: List[ConversationTurn],
    parser: DirectiveParser,
    is_known_model: Callable[[str], bool],
    default_model: str,
    default_provider: str,
) -> ActiveSelection:
    """
    Walk the conversation in order and track the active model/provider.

    Later directives win on each axis independently. A model directive is
    adopted only when ``is_known_model`` accepts it; a provider directive is
    adopted unconditionally (it is validated at registry lookup).
    """
    active_model = default_model
    active_provider = default_provider
    cleaned: List[ConversationTurn] = []

    for turn in turns:
        parsed = parser.parse(turn)
        if parsed.model:
            if is_known_model(parsed.model):
                active_model = parsed.model
            else:
                logger.debug(f"Ignoring directive for unknown model '{parsed.model}'")
        if parsed.provider:
            active_provider = parsed.provider
        cleaned.append(parsed.turn)

    return ActiveSelection(model=active_model, provider=active_provider, turns=cleaned)
