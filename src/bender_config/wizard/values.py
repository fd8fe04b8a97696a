from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Optional
from uuid import UUID

from rich.console import Console
from rich.prompt import InvalidResponse, PromptBase
from rich.text import Text


def _parse_text(text: str) -> str:
    return text.strip()


def _parse_unsigned(text: str) -> int:
    try:
        number = int(text.strip())
    except ValueError:
        raise ValueError(f"{text.strip()!r} is not a whole number") from None
    if number < 0:
        raise ValueError(f"{number} is negative, expected a value >= 0")
    return number


def _parse_signed(text: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        raise ValueError(f"{text.strip()!r} is not a whole number") from None


def _parse_identifier(text: str) -> UUID:
    try:
        return UUID(text.strip())
    except ValueError:
        raise ValueError(f"{text.strip()!r} is not a valid UUID") from None


class FieldKind(Enum):
    """
    The closed set of leaf value types a configuration field can hold.
    """

    TEXT = "text"
    UNSIGNED_INT = "unsigned integer"
    SIGNED_INT = "signed integer"
    IDENTIFIER = "identifier"

    def parse(self, text: str, maximum: Optional[int] = None) -> Any:
        """
        Parse operator-entered text; raises ValueError when it does not fit.
        `maximum` bounds integer kinds from above.
        """
        value = _PARSERS[self](text)
        if maximum is not None and self in (FieldKind.UNSIGNED_INT, FieldKind.SIGNED_INT) and value > maximum:
            raise ValueError(f"{value} is too large, expected a value <= {maximum}")
        return value

    def render(self, value: Any) -> str:
        return str(value)

    def equal(self, left: Any, right: Any) -> bool:
        if self is FieldKind.IDENTIFIER:
            return str(left) == str(right)
        return left == right


_PARSERS: Dict[FieldKind, Callable[[str], Any]] = {
    FieldKind.TEXT: _parse_text,
    FieldKind.UNSIGNED_INT: _parse_unsigned,
    FieldKind.SIGNED_INT: _parse_signed,
    FieldKind.IDENTIFIER: _parse_identifier,
}


class ValuePrompt(PromptBase[Any]):
    """
    Free-text prompt that only accepts input the field kind can parse and
    asks again otherwise.
    """

    def __init__(
        self,
        prompt: str,
        kind: FieldKind,
        *,
        maximum: Optional[int] = None,
        console: Optional[Console] = None,
    ) -> None:
        super().__init__(prompt, console=console)
        self.kind = kind
        self.maximum = maximum

    def render_default(self, default: Any) -> Text:
        return Text(f"({self.kind.render(default)})", "prompt.default")

    def make_prompt(self, default: Any) -> Text:
        # Show the default for every kind, not only for str values
        prompt = self.prompt.copy()
        prompt.end = ""
        if default is not ... and self.show_default:
            prompt.append(" ")
            prompt.append(self.render_default(default))
        prompt.append(self.prompt_suffix)
        return prompt

    def process_response(self, value: str) -> Any:
        try:
            return self.kind.parse(value, self.maximum)
        except ValueError as exc:
            raise InvalidResponse(f"[prompt.invalid]{exc}") from exc
