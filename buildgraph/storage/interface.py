from abc import ABC, abstractmethod
from pathlib import Path

from buildgraph.schemas.results import CleanResult


class OutputCleaner(ABC):
    """
    Abstract interface for sweeping a build output tree.
    """

    @abstractmethod
    def clean(self, root: str | Path) -> CleanResult:
        """
        Remove everything under ``root`` and then ``root`` itself.

        Args:
            root: Output root to sweep. A missing root is not an error.

        Returns:
            Aggregate result: removed count, per-path failures and
            skipped links. Individual failures are never raised.
        """
        pass
