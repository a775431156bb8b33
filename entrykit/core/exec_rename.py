"""
exec_rename.py - Local rename execution

Applies a confirmed rename plan to files in one directory, playing the part
of the backend's rename endpoint for the desktop and CLI front ends.

Responsibilities:
- Two-phase execution (first rename to temporary name, then to final name)
- Per-file failure reporting without retries
- dry_run support
"""

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple
import logging
import os
import uuid

from .exceptions import EmptySubmissionError
from .models import RenameEntry, RenamePlan
from .text_match import is_valid_filename

logger = logging.getLogger(__name__)

TEMP_PREFIX = ".__tmp_rename__"


@dataclass
class RenameResult:
    """Rename execution result"""
    success: List[RenameEntry] = field(default_factory=list)
    failed: List[Tuple[RenameEntry, str]] = field(default_factory=list)  # (entry, error_msg)

    @property
    def success_count(self) -> int:
        return len(self.success)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    def to_response(self) -> Dict[str, int]:
        """Same `{success, failed}` shape the backend answers with"""
        return {"success": self.success_count, "failed": self.failed_count}

    def summary(self) -> str:
        """Generate summary"""
        total = self.success_count + self.failed_count
        lines = [f"Successfully renamed {self.success_count}/{total} files"]
        if self.failed:
            lines.append("Failure Details:")
            for entry, error in self.failed[:10]:  # Show at most 10
                lines.append(f"  - {entry.original} -> {entry.renamed}: {error}")
            if len(self.failed) > 10:
                lines.append(f"  ... and {len(self.failed) - 10} more failures")
        return "\n".join(lines)


def _generate_temp_name(original: Path) -> Path:
    """Generate temporary filename"""
    unique_id = uuid.uuid4().hex[:8]
    return original.parent / f"{TEMP_PREFIX}{unique_id}__{original.name}"


def execute_rename(
    directory: Path,
    plan: RenamePlan,
    dry_run: bool = False,
    progress_callback: Optional[Callable[[int, int, str], None]] = None
) -> RenameResult:
    """
    Execute rename plan (two-phase)

    Only the plan's changed entries are applied. Targets that already exist
    and are not themselves being renamed away are refused.

    Args:
        directory: Directory holding the files
        plan: Rename plan
        dry_run: Whether to preview only
        progress_callback: Progress callback (current, total, message)

    Returns:
        Execution result

    Raises:
        EmptySubmissionError: the plan changes nothing
    """
    changes = plan.changes
    if not changes:
        raise EmptySubmissionError("No files need renaming")

    directory = Path(directory)
    result = RenameResult()
    total = len(changes)
    targets = Counter(e.renamed for e in changes)

    runnable: List[RenameEntry] = []
    for entry in changes:
        valid, error = is_valid_filename(entry.renamed)
        if not valid:
            result.failed.append((entry, error))
        elif targets[entry.renamed] > 1:
            result.failed.append((entry, "Another file is renamed to the same destination"))
        elif not (directory / entry.original).is_file():
            result.failed.append((entry, "Source file does not exist"))
        else:
            runnable.append(entry)

    # A destination counts as freed only while the file holding it still moves away
    while True:
        leaving = {e.original for e in runnable}
        blocked = [
            e for e in runnable
            if (directory / e.renamed).exists() and e.renamed not in leaving
            and e.renamed.casefold() != e.original.casefold()
        ]
        if not blocked:
            break
        for entry in blocked:
            runnable.remove(entry)
            result.failed.append((entry, "Destination already exists"))

    if dry_run:
        for i, entry in enumerate(runnable):
            if progress_callback:
                progress_callback(i + 1, total, f"[Preview] {entry.original} -> {entry.renamed}")
            result.success.append(entry)
        return result

    # Phase 1: Rename all to temporary names
    temp_mapping: List[Tuple[RenameEntry, Path]] = []
    for i, entry in enumerate(runnable):
        if progress_callback:
            progress_callback(i + 1, total * 2, f"[Phase 1] {entry.original} -> temp name")
        src = directory / entry.original
        temp_path = _generate_temp_name(src)
        try:
            os.rename(src, temp_path)
            temp_mapping.append((entry, temp_path))
        except OSError as e:
            result.failed.append((entry, f"Phase 1 failed: {e}"))

    # Phase 2: Rename from temporary names to final names
    for i, (entry, temp_path) in enumerate(temp_mapping):
        if progress_callback:
            progress_callback(total + i + 1, total * 2, f"[Phase 2] temp name -> {entry.renamed}")
        try:
            if (directory / entry.renamed).exists():
                raise FileExistsError(f"Destination already exists: {entry.renamed}")
            os.rename(temp_path, directory / entry.renamed)
            result.success.append(entry)
        except OSError as e:
            try:
                os.rename(temp_path, directory / entry.original)
                result.failed.append((entry, f"Phase 2 failed (restored): {e}"))
            except OSError as e2:
                result.failed.append((entry, f"Phase 2 failed (restore also failed): {e}, restore error: {e2}"))

    for entry, error in result.failed:
        logger.warning("Rename failed %s -> %s: %s", entry.original, entry.renamed, error)
    logger.info("Renamed %d/%d files in %s", result.success_count, total, directory)
    return result
