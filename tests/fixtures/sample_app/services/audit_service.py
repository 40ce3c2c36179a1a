"""Audit service for testing."""

from typing import final

from ..contracts import IAuditService


class AuditService(IAuditService):
    """Concrete audit service."""

    def __init__(self) -> None:
        self.logs: list[str] = []

    def log(self, message: str) -> None:
        """Log a message."""
        self.logs.append(message)


@final
class SealedAuditService(AuditService):
    pass
