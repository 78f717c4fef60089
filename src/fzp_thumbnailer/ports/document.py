"""Document port - interface for locating the embedded preview."""

from abc import ABC, abstractmethod
from typing import BinaryIO


class DocumentPort(ABC):
    """Interface for reading fzp documents."""

    @abstractmethod
    def open_thumbnail(self, fp: BinaryIO) -> BinaryIO:
        """Locate the preview payload in an open document.

        Returns a seekable stream positioned at the start of the payload.
        """
        pass
