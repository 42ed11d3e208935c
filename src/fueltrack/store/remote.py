"""Abstract remote entry store interface.

Defines the contract for document stores the coordinator synchronizes
with. FuelEntryStore depends only on this interface, keeping storage
details isolated in the concrete implementation.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from fueltrack.models import FuelEntry

SnapshotListener = Callable[[list[FuelEntry]], None]
Unsubscribe = Callable[[], None]


class RemoteEntryStore(ABC):
    """Abstract base class for remote fuel entry stores."""

    @abstractmethod
    async def connect(self) -> None:
        """Open the underlying connection."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release resources and drop all listeners."""
        ...

    @abstractmethod
    async def put_entry(self, entry: FuelEntry) -> None:
        """Create or replace the entry stored under entry.id."""
        ...

    @abstractmethod
    async def delete_entry(self, entry_id: str) -> None:
        """Delete the entry with the given id. Unknown ids are a no-op."""
        ...

    @abstractmethod
    async def fetch_entries(self) -> list[FuelEntry]:
        """Return a point-in-time snapshot of every stored entry."""
        ...

    @abstractmethod
    def subscribe(self, listener: SnapshotListener) -> Unsubscribe:
        """Register a listener called with a full snapshot after every committed write.

        Returns:
            Callable that removes the listener.
        """
        ...
