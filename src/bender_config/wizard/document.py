from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..models import Config
from .differ import LeafDiffer
from .layout import DOCUMENT, FieldSpec, SectionSpec
from .sections import DEFAULT_LABEL, EXISTING_LABEL, SectionDialog, resolve_field
from .terminal import Terminal

logger = logging.getLogger(__name__)


class DocumentDialog:
    """
    Entry point of the configuration wizard.

    `ask()` builds a document from scratch, `reconcile()` merges an existing
    document with a candidate (or just confirms it when there is none).
    Top-level fields come first, then every section in declaration order.
    """

    def __init__(self, terminal: Optional[Terminal] = None, spec: SectionSpec = DOCUMENT) -> None:
        self.terminal = terminal or Terminal()
        self.spec = spec
        self.differ = LeafDiffer(self.terminal)
        self.sections: List[SectionDialog] = [
            SectionDialog(section, self.differ, self.terminal) for section in spec.sections()
        ]

    def ask(self) -> Config:
        logger.info("Creating a new configuration")
        defaults = self.spec.model()
        values = self._top_level(defaults, None, DEFAULT_LABEL)
        for dialog in self.sections:
            values[dialog.spec.name] = dialog.ask(getattr(defaults, dialog.spec.name))
        return self.spec.model(**values)

    def reconcile(self, current: Config, candidate: Optional[Config] = None) -> Config:
        logger.info("Reconciling configuration (candidate given: %s)", candidate is not None)
        values = self._top_level(current, candidate, EXISTING_LABEL)
        for dialog in self.sections:
            name = dialog.spec.name
            theirs = getattr(candidate, name) if candidate is not None else None
            values[name] = dialog.reconcile(getattr(current, name), theirs)
        return self.spec.model(**values)

    def _top_level(self, current: Config, candidate: Optional[Config], proposal: str) -> Dict[str, Any]:
        fields = [m for m in self.spec.members if isinstance(m, FieldSpec)]
        if not fields:
            return {}
        self.terminal.section_label(self.spec.title)
        defaults = self.spec.model()
        return {
            f.name: resolve_field(
                self.differ,
                f,
                defaults,
                getattr(current, f.name),
                getattr(candidate, f.name) if candidate is not None else None,
                proposal,
            )
            for f in fields
        }
