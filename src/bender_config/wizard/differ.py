from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

from .terminal import Terminal
from .values import FieldKind

logger = logging.getLogger(__name__)


class ReconciliationChoice(Enum):
    KEEP_CURRENT = "keep-current"
    TAKE_CANDIDATE = "take-candidate"
    MANUAL_OVERRIDE = "manual-override"


class LeafDiffer:
    """
    Reconcile one leaf value with the operator.

    Without a candidate the current value is proposed and may be kept or
    overridden. With an equal candidate nothing is asked. With a differing
    candidate both are shown side by side and the operator picks one or
    types a new value.
    """

    def __init__(self, terminal: Terminal) -> None:
        self.terminal = terminal

    def diff(
        self,
        kind: FieldKind,
        current: Any,
        candidate: Optional[Any] = None,
        label: str = "value",
        proposal: str = "Existing value",
        maximum: Optional[int] = None,
    ) -> Any:
        if candidate is None:
            return self._keep_or_override(kind, current, label, proposal, maximum)
        if kind.equal(current, candidate):
            return current
        return self._pick(kind, current, candidate, label, maximum)

    def _keep_or_override(
        self, kind: FieldKind, current: Any, label: str, proposal: str, maximum: Optional[int]
    ) -> Any:
        self.terminal.proposal(f"{label}: {proposal}", kind.render(current))
        index = self.terminal.choose(["Keep", "Manual override"])
        if index == 1:
            value = self.terminal.ask(kind, label, current, maximum)
            logger.debug("%s: manual override %r -> %r", label, current, value)
            return value
        logger.debug("%s: kept %r", label, current)
        return current

    def _pick(self, kind: FieldKind, current: Any, candidate: Any, label: str, maximum: Optional[int]) -> Any:
        self.terminal.block(label)
        current_text = kind.render(current)
        candidate_text = kind.render(candidate)
        self.terminal.comparison(current_text, candidate_text, "!=")
        index = self.terminal.choose([current_text, candidate_text, "Manual override"])
        choice = [
            ReconciliationChoice.KEEP_CURRENT,
            ReconciliationChoice.TAKE_CANDIDATE,
            ReconciliationChoice.MANUAL_OVERRIDE,
        ][index]
        logger.debug("%s: %s (current=%r, candidate=%r)", label, choice.value, current, candidate)
        if choice is ReconciliationChoice.TAKE_CANDIDATE:
            return candidate
        if choice is ReconciliationChoice.MANUAL_OVERRIDE:
            return self.terminal.ask(kind, label, current, maximum)
        return current
