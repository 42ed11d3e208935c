"""Synchronization status tracking for the local entry collection.

Flags are set by the coordinator as remote calls start, succeed or fail
(OSError failures mean offline); the reported status resolves them with
a fixed precedence:
offline > error > syncing > pending > synced.
"""

from fueltrack.logging import get_logger
from fueltrack.models import SyncStatus

logger = get_logger(__name__)


class SyncState:
    """Mutable sync flags with a derived SyncStatus."""

    def __init__(self) -> None:
        self.is_online = True
        self.is_pending = False
        self.is_syncing = False
        self.error_message: str | None = None

    @property
    def status(self) -> SyncStatus:
        """Resolve the current flags to a single status."""
        if not self.is_online:
            return SyncStatus.OFFLINE
        if self.error_message:
            return SyncStatus.ERROR
        if self.is_syncing:
            return SyncStatus.SYNCING
        if self.is_pending:
            return SyncStatus.PENDING
        return SyncStatus.SYNCED

    def set_online(self, value: bool) -> None:
        if value != self.is_online:
            logger.info("connectivity_changed", online=value)
        self.is_online = value

    def set_pending(self, value: bool) -> None:
        self.is_pending = value

    def set_syncing(self, value: bool) -> None:
        self.is_syncing = value

    def set_error(self, message: str | None) -> None:
        self.error_message = message

    def to_dict(self) -> dict:
        """Serializable view for the API."""
        return {
            "status": self.status.value,
            "online": self.is_online,
            "pending": self.is_pending,
            "syncing": self.is_syncing,
            "error": self.error_message,
        }
