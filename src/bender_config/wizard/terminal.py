from __future__ import annotations

import sys
from typing import Any, List, Optional, Sequence, TextIO

from rich.console import Console
from rich.prompt import Prompt
from rich.text import Text

from ..errors import InteractionError
from .values import FieldKind, ValuePrompt

ELLIPSIS = "..."
FALLBACK_WIDTH = 80


def wrap(text: str, width: int) -> List[str]:
    """
    Split text into chunks of at most `width` characters.
    Chunks end on character boundaries, so joining them gives back `text`.
    """
    if width < 1:
        raise ValueError("width must be at least 1")
    if not text:
        return [""]
    return [text[i : i + width] for i in range(0, len(text), width)]


def _fit(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    if width <= len(ELLIPSIS):
        return text[:width]
    return wrap(text, width - len(ELLIPSIS))[0] + ELLIPSIS


def compare_banner(left: str, right: str, width: int, separator: str = "!=") -> str:
    """
    Render `left separator right` in `width` columns. Each side gets half of
    what the separator leaves and is cut with an ellipsis when too long.
    """
    half = max(0, (width - len(separator)) // 2)
    return _fit(left, half).ljust(half) + separator + _fit(right, half).rjust(half)


class _LineReader:
    """
    Line source for prompts that turns end of input into EOFError, the way
    input() reports it.
    """

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def readline(self) -> str:
        line = self._stream.readline()
        if line == "":
            raise EOFError("input stream closed")
        return line.rstrip("\r\n")


class Terminal:
    """
    Presentation context handed to every wizard component.

    `stream` replaces stdin and `width` the detected terminal width, so the
    wizard can be driven without a real terminal.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        stream: Optional[TextIO] = None,
        width: Optional[int] = None,
        error_console: Optional[Console] = None,
    ) -> None:
        self.console = console if console is not None else Console()
        if error_console is None:
            error_console = console if console is not None else Console(stderr=True)
        self.error_console = error_console
        self._stream = _LineReader(stream) if stream is not None else None
        self._width = width

    def terminal_width(self) -> int:
        if self._width:
            return self._width
        width = self.console.width
        return width if width and width > 0 else FALLBACK_WIDTH

    # Output

    def _print(self, text: Any, console: Optional[Console] = None) -> None:
        target = console if console is not None else self.console
        target.print(text, markup=False, highlight=False, soft_wrap=True)

    def section_label(self, message: str) -> None:
        """Print a label framed by two full-width rules."""
        width = self.terminal_width()
        self._print("-" * width)
        self._print(message.center(width).rstrip())
        self._print("-" * width)

    def block(self, message: str) -> None:
        self._print(Text(message, style="black on bright_white"))

    def comparison(self, left: str, right: str, separator: str = "!=") -> None:
        self._print(compare_banner(left, right, self.terminal_width(), separator))

    def proposal(self, label: str, value: str) -> None:
        self._print(Text.assemble((f" {label} -> ", "black on yellow"), (f" {value} ", "black on green")))

    def ok(self, message: str) -> None:
        self._print(Text.assemble("    ", ("   OK  ", "bold on green"), f" {message}"))

    def error(self, message: str) -> None:
        self._print(Text.assemble("    ", (" Error ", "bold on red"), f" {message}"), self.error_console)

    # Input

    def _require_interactive(self) -> None:
        if self._stream is not None:
            return
        if sys.stdin is None or not sys.stdin.isatty():
            raise InteractionError("Couldn't display dialog: stdin is not an interactive terminal")

    def choose(self, options: Sequence[str], default: int = 0) -> int:
        """
        Show numbered options and return the index of the one picked.
        """
        self._require_interactive()
        for number, option in enumerate(options, start=1):
            self._print(f"  {number}) {option}")
        choices = [str(n) for n in range(1, len(options) + 1)]
        try:
            answer = Prompt.ask(
                "Choice",
                console=self.console,
                choices=choices,
                default=choices[default],
                stream=self._stream,  # type: ignore[arg-type]
            )
        except (EOFError, KeyboardInterrupt) as exc:
            raise InteractionError("Couldn't display dialog: input aborted") from exc
        return int(answer) - 1

    def ask(self, kind: FieldKind, label: str, default: Any, maximum: Optional[int] = None) -> Any:
        """
        Ask for a free-text value of the given kind, re-prompting until it
        parses. Empty input keeps `default`.
        """
        self._require_interactive()
        prompt = ValuePrompt(f"{label} ({kind.value})", kind, maximum=maximum, console=self.console)
        try:
            return prompt(default=default, stream=self._stream)  # type: ignore[arg-type]
        except (EOFError, KeyboardInterrupt) as exc:
            raise InteractionError("Couldn't display dialog: input aborted") from exc
