from __future__ import annotations


class BenderConfigError(Exception):
    pass


class ConfigError(BenderConfigError):
    """
    The stored document (or a value destined for it) could not be parsed.
    """


class InteractionError(BenderConfigError):
    """
    The terminal is not available or the operator aborted the input.
    """


class KeyLookupError(BenderConfigError, KeyError):
    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "unknown key"
