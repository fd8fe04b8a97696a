from __future__ import annotations

import io
from typing import Tuple
from uuid import uuid4

import pytest
from rich.console import Console

from bender_config.errors import InteractionError
from bender_config.wizard.differ import LeafDiffer
from bender_config.wizard.terminal import Terminal
from bender_config.wizard.values import FieldKind


def _differ(answers: str = "", width: int = 60) -> Tuple[LeafDiffer, io.StringIO]:
    buf = io.StringIO()
    term = Terminal(console=Console(file=buf, width=200), stream=io.StringIO(answers), width=width)
    return LeafDiffer(term), buf


def test_equal_candidate_passes_through_silently():
    differ, buf = _differ()
    assert differ.diff(FieldKind.UNSIGNED_INT, 60, 60, label="timeout") == 60
    assert differ.diff(FieldKind.TEXT, "amqp://a", "amqp://a") == "amqp://a"
    ident = uuid4()
    assert differ.diff(FieldKind.IDENTIFIER, ident, str(ident)) == ident
    assert buf.getvalue() == ""


def test_use_current():
    differ, _ = _differ("1\n")
    assert differ.diff(FieldKind.UNSIGNED_INT, 60, 120, label="timeout") == 60


def test_use_candidate():
    differ, buf = _differ("2\n")
    assert differ.diff(FieldKind.UNSIGNED_INT, 60, 120, label="timeout") == 120
    assert "!=" in buf.getvalue()


def test_manual_override_reprompts_until_integer():
    differ, buf = _differ("3\nabc\n-5\n42\n")
    assert differ.diff(FieldKind.UNSIGNED_INT, 60, 120, label="timeout") == 42
    out = buf.getvalue()
    assert "'abc' is not a whole number" in out
    assert "-5 is negative" in out


def test_manual_override_blank_keeps_current():
    differ, _ = _differ("3\n\n")
    assert differ.diff(FieldKind.SIGNED_INT, -1, 3600, label="delete after") == -1


def test_without_candidate_keep():
    differ, buf = _differ("1\n")
    assert differ.diff(FieldKind.TEXT, "Bender", label="Server name", proposal="Default value") == "Bender"
    assert "Default value" in buf.getvalue()


def test_without_candidate_override():
    differ, _ = _differ("2\nRenderhaus\n")
    assert differ.diff(FieldKind.TEXT, "Bender", label="Server name") == "Renderhaus"


def test_comparison_banner_fits_terminal_width():
    differ, buf = _differ("1\n", width=40)
    differ.diff(FieldKind.TEXT, "x" * 100, "y" * 100, label="url")
    banner = next(line for line in buf.getvalue().splitlines() if "!=" in line)
    assert len(banner) <= 40
    assert "..." in banner


def test_aborted_input_is_fatal():
    differ, _ = _differ("")
    with pytest.raises(InteractionError):
        differ.diff(FieldKind.UNSIGNED_INT, 1, 2)


def test_manual_override_reprompts_above_maximum():
    differ, buf = _differ("2\n70000\n8080\n")
    assert differ.diff(FieldKind.UNSIGNED_INT, 5000, label="Port", maximum=65535) == 8080
    assert "70000 is too large" in buf.getvalue()
