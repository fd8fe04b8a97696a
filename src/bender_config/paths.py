from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

from .models import Config

logger = logging.getLogger(__name__)


def is_writeable(path: str | Path) -> bool:
    """
    Return True if `path` can be written to and False on a permission failure.
    Every other OSError propagates.

    A path with a suffix is treated as a file: its parent directories are
    created and a zero-byte probe is written and removed again (an existing
    file is left in place). Anything else is treated as a directory and
    created.
    """
    p = Path(path)
    if p.suffix:
        folder = p.parent
        try:
            if not folder.exists():
                logger.info("Trying to create path to %s", folder)
                folder.mkdir(parents=True, exist_ok=True)
            existed = p.exists()
            with p.open("a", encoding="utf-8"):
                pass
            if not existed:
                p.unlink()
        except PermissionError:
            return False
        return True

    try:
        p.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        return False
    return True


def exists(path: str | Path) -> bool:
    return Path(path).exists()


def check_paths(config: Config) -> Dict[str, bool]:
    """
    Writability of every configured path except the configuration file itself.
    """
    paths = config.paths.model_dump()
    paths.pop("config", None)
    return {name: is_writeable(value) for name, value in paths.items()}
