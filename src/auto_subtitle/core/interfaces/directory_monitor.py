"""Directory monitor interface."""

from abc import ABC, abstractmethod

from ..models import MonitorStatus


class IDirectoryMonitor(ABC):
    """Interface for watching a directory tree for new movies."""

    @abstractmethod
    async def start(self) -> None:
        """Start watching.

        Raises:
            MonitorError: If the watch directory is missing.
        """
        pass

    @abstractmethod
    async def stop(self, cancel_pending: bool = True) -> None:
        """Stop watching.

        Args:
            cancel_pending: Cancel deferred directory tasks that have not run yet.
        """
        pass

    @abstractmethod
    def get_status(self) -> MonitorStatus:
        """Get monitor state."""
        pass
