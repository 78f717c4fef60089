"""Storage port - interface for thumbnail files."""

from abc import ABC, abstractmethod
from pathlib import Path


class StoragePort(ABC):
    """Interface for thumbnail storage."""

    @abstractmethod
    def write(self, dest: Path, data: bytes) -> Path:
        """Write a thumbnail to an explicit destination.

        Returns path to written file.
        """
        pass

    @abstractmethod
    def cache_path(self, uri: str, size: int) -> Path:
        """Return the cache location for a document thumbnail of `size`."""
        pass

    @abstractmethod
    def write_failure(self, uri: str, data: bytes) -> Path:
        """Record that thumbnailing the document failed.

        Returns path to the failure marker.
        """
        pass

    @abstractmethod
    def clear_failure(self, uri: str) -> bool:
        """Remove a failure marker left by an earlier run.

        Returns True if a marker was removed.
        """
        pass
