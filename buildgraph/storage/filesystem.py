import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, List

from buildgraph.schemas.results import CleanResult, PathFailure, UnsafeLink
from buildgraph.storage.interface import OutputCleaner

logger = logging.getLogger(__name__)


@dataclass
class _PendingDirectory:
    path: Path
    entries: Iterator[os.DirEntry]
    cleared: bool = True


class FilesystemCleaner(OutputCleaner):
    """
    Recursively removes an output tree from the local filesystem.

    Symbolic links are never followed. A link pointing inside the tree is
    removed like a file; one pointing outside is reported and left alone.
    Failures are collected per path and the sweep carries on.

    Callers must not run a sweep concurrently with graph construction
    against the same output root.
    """

    def __init__(self, dry_run: bool = False):
        """
        Args:
            dry_run: Count what would be removed without deleting anything
        """
        self.dry_run = dry_run

    def clean(self, root: str | Path) -> CleanResult:
        root_path = Path(os.path.abspath(root))
        result = CleanResult(root=root_path, dry_run=self.dry_run)

        if not os.path.lexists(root_path):
            logger.info(f"Nothing to clean: {root_path}")
            return result

        if os.path.islink(root_path):
            self._skip_link(root_path, result)
        elif os.path.isdir(root_path):
            boundary = os.path.realpath(root_path)
            if self._sweep(root_path, boundary, result):
                self._remove(root_path, os.rmdir, result)
        else:
            self._remove(root_path, os.unlink, result)

        logger.info(
            f"Cleaned {root_path}: {result.removed} removed, "
            f"{len(result.failures)} failed, {len(result.warnings)} skipped links"
        )
        return result

    def _sweep(self, top: Path, boundary: str, result: CleanResult) -> bool:
        """Empty ``top``; True when nothing is left inside it.

        Walks with an explicit stack so tree depth is not bounded by the
        interpreter's recursion limit. A directory is removed after all of
        its children, and only if every child went.
        """
        entries = self._list(top, result)
        if entries is None:
            return False
        pending = [_PendingDirectory(top, iter(entries))]

        while pending:
            current = pending[-1]
            entry = next(current.entries, None)
            if entry is None:
                pending.pop()
                if not pending:
                    return current.cleared
                parent = pending[-1]
                if current.cleared:
                    parent.cleared = self._remove(current.path, os.rmdir, result) and parent.cleared
                else:
                    parent.cleared = False
                continue

            path = Path(entry.path)
            try:
                is_link = entry.is_symlink()
                is_dir = not is_link and entry.is_dir(follow_symlinks=False)
            except FileNotFoundError:
                continue

            if is_link:
                if _points_inside(path, boundary):
                    current.cleared = self._remove(path, os.unlink, result) and current.cleared
                else:
                    self._skip_link(path, result)
                    current.cleared = False
            elif is_dir:
                children = self._list(path, result)
                if children is None:
                    current.cleared = False
                else:
                    pending.append(_PendingDirectory(path, iter(children)))
            else:
                current.cleared = self._remove(path, os.unlink, result) and current.cleared
        return True

    def _list(self, directory: Path, result: CleanResult) -> List[os.DirEntry] | None:
        """Entries of ``directory``, or None when it cannot be read."""
        try:
            with os.scandir(directory) as iterator:
                return list(iterator)
        except FileNotFoundError:
            return []
        except OSError as e:
            self._record_failure(directory, e, result)
            return None

    def _remove(self, path: Path, operation: Callable[[Path], None], result: CleanResult) -> bool:
        if self.dry_run:
            logger.debug(f"Would remove: {path}")
            result.removed += 1
            return True
        try:
            operation(path)
        except FileNotFoundError:
            # removed concurrently; already absent is success
            return True
        except OSError as e:
            self._record_failure(path, e, result)
            return False
        logger.debug(f"Removed: {path}")
        result.removed += 1
        return True

    @staticmethod
    def _record_failure(path: Path, error: OSError, result: CleanResult) -> None:
        reason = error.strerror or str(error)
        logger.error(f"Failed to remove {path}: {reason}")
        result.failures.append(PathFailure(path=path, reason=reason))

    @staticmethod
    def _skip_link(path: Path, result: CleanResult) -> None:
        target = os.readlink(path)
        logger.warning(f"Skipping link leaving the output tree: {path} -> {target}")
        result.warnings.append(UnsafeLink(path=path, target=target))


def _points_inside(link: Path, boundary: str) -> bool:
    target = os.path.realpath(link)
    try:
        return os.path.commonpath([target, boundary]) == boundary
    except ValueError:
        # different drives
        return False


def clean(root: str | Path, dry_run: bool = False) -> CleanResult:
    """Sweep ``root`` with a :class:`FilesystemCleaner`."""
    return FilesystemCleaner(dry_run=dry_run).clean(root)
