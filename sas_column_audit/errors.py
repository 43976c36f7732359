from __future__ import annotations

from typing import Iterable, List, Optional


class AuditError(Exception):
    pass


class ConfigError(AuditError):
    pass


class ProviderError(AuditError):
    """
    Raised by a schema provider. `messages` is the provider's error
    collection; it may hold more than one entry for a single failure.
    """

    def __init__(self, message: str, messages: Optional[Iterable[str]] = None) -> None:
        super().__init__(message)
        self.messages: List[str] = [m for m in (messages or []) if m] or [message]
