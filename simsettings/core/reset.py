"""Content reset — what the simulator's "Reset Content and Settings" menu does, on disk."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from loguru import Logger


@dataclass
class ResetResult:
    """Outcome of a best-effort reset. Warnings need a human to look at the folder."""

    content_dir: Path
    deleted: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    recreated: bool = False

    @property
    def success(self) -> bool:
        return self.recreated and not self.warnings


def _is_real_dir(path: Path) -> bool:
    """A directory that is not a symlink; symlinks are unlinked, never followed."""
    return path.is_dir() and not path.is_symlink()


def _delete_tree(path: Path, result: ResetResult, log: Logger) -> bool:
    """Delete *path* and everything below it. Returns False if anything stayed behind."""
    try:
        is_dir = _is_real_dir(path)
    except OSError as e:
        result.warnings.append(f"Cannot inspect {path}: {e}")
        log.warning(f"Cannot inspect {path}: {e}")
        return False

    if is_dir:
        try:
            children = list(path.iterdir())
        except OSError as e:
            children = []
            result.warnings.append(f"Cannot list {path}: {e}")
            log.warning(f"Cannot list {path}: {e}")
        for child in children:
            if not _delete_tree(child, result, log):
                log.warning(
                    f"cannot delete {child}. "
                    "Are you trying to start a test while a simulator is still running?"
                )
        remove = path.rmdir
    else:
        remove = path.unlink

    try:
        remove()
    except OSError as e:
        result.warnings.append(f"Cannot delete {path}: {e}")
        return False
    result.deleted.append(str(path))
    return True


def reset_content_directory(content_dir: Path, log: Logger | None = None) -> ResetResult:
    """
    Delete *content_dir* recursively, then recreate it empty.

    Nothing is raised: deletion failures and a failed recreation are logged
    and collected on the returned result.
    """
    log = log or logger
    result = ResetResult(content_dir=content_dir)

    try:
        present = content_dir.exists() or content_dir.is_symlink()
    except OSError as e:
        # Let the walk record it; recreation below still runs
        present = True
        log.debug(f"Cannot stat {content_dir}: {e}")

    if present and not _delete_tree(content_dir, result, log):
        log.warning(f"cannot delete content and settings folder {content_dir}")

    try:
        content_dir.mkdir(parents=True, exist_ok=True)
        result.recreated = True
    except OSError as e:
        result.warnings.append(f"Cannot re-create {content_dir}: {e}")
        log.warning(f"couldn't re-create {content_dir}: {e}")

    log.info(
        f"Reset {content_dir}: {len(result.deleted)} entries deleted, "
        f"{len(result.warnings)} warnings"
    )
    return result
