from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel

from .differ import LeafDiffer
from .layout import FieldSpec, Policy, SectionSpec
from .terminal import Terminal

logger = logging.getLogger(__name__)

DEFAULT_LABEL = "Default value"
EXISTING_LABEL = "Existing value"


def resolve_field(
    differ: LeafDiffer,
    spec: FieldSpec,
    defaults: BaseModel,
    current: Any,
    candidate: Optional[Any],
    proposal: str,
) -> Any:
    """
    Value of one leaf field after reconciliation. Regenerated and fixed
    fields never reach the differ.
    """
    if spec.policy is Policy.REGENERATE:
        if spec.fresh is None:
            raise ValueError(f"field {spec.name!r} is regenerated but has no generator")
        return spec.fresh()
    if spec.policy is Policy.FIXED:
        return getattr(defaults, spec.name)
    return differ.diff(spec.kind, current, candidate, label=spec.label, proposal=proposal, maximum=spec.maximum)


class SectionDialog:
    """
    Walks the members of one section in declaration order and assembles a
    new section value from the results.
    """

    def __init__(self, spec: SectionSpec, differ: LeafDiffer, terminal: Terminal) -> None:
        self.spec = spec
        self.differ = differ
        self.terminal = terminal

    def ask(self, defaults: Optional[BaseModel] = None) -> BaseModel:
        """
        Build the section from prompts, proposing `defaults` (the section's
        documented defaults unless given).
        """
        defaults = defaults if defaults is not None else self.spec.model()
        return self._walk(defaults, None, DEFAULT_LABEL)

    def reconcile(self, current: BaseModel, candidate: Optional[BaseModel] = None) -> BaseModel:
        return self._walk(current, candidate, EXISTING_LABEL)

    def _walk(self, current: BaseModel, candidate: Optional[BaseModel], proposal: str) -> BaseModel:
        self.terminal.section_label(self.spec.title)
        defaults = self.spec.model()
        values: Dict[str, Any] = {}
        for member in self.spec.members:
            mine = getattr(current, member.name)
            theirs = getattr(candidate, member.name) if candidate is not None else None
            if isinstance(member, SectionSpec):
                child = SectionDialog(member, self.differ, self.terminal)
                values[member.name] = child._walk(mine, theirs, proposal)
            else:
                values[member.name] = resolve_field(self.differ, member, defaults, mine, theirs, proposal)
        logger.debug("Section %s assembled", self.spec.title)
        return self.spec.model(**values)
