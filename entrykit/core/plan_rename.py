"""
plan_rename.py - Rename Preview Generation Module

Responsibilities:
- Apply a compiled rule to one filename (scope, replace, case transform)
- Build the ordered preview for the selected files
- Flag plans that would collide or produce unusable names
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence
import logging

from .models import RenameEntry, RenamePlan, RenameRule, RenameScope
from .text_match import is_valid_filename, split_extension

logger = logging.getLogger(__name__)


def replace_segment(rule: RenameRule, text: str) -> str:
    """
    Apply the rule's substitution to one segment

    An empty pattern leaves the text untouched (no trimming either).
    """
    if rule.is_empty:
        return text
    count = 0 if rule.match_all else 1
    if rule.is_regex:
        replaced = rule.pattern.sub(rule.replacement, text, count=count)
    else:
        replaced = rule.pattern.sub(lambda _m: rule.replacement, text, count=count)
    return replaced.strip()


def transform_segment(rule: RenameRule, text: str) -> str:
    """Replace, then apply the case transform"""
    return rule.case_transform.apply(replace_segment(rule, text))


def rename_filename(rule: RenameRule, filename: str) -> str:
    """
    Compute the new name of one file

    Base/extension scopes split at the last dot and fall back to the whole
    name when there is none. The untouched segment is reattached verbatim.

    Args:
        rule: Compiled rename rule
        filename: Original filename

    Returns:
        Renamed filename (may equal the original)
    """
    if rule.scope is RenameScope.BASE:
        base, ext = split_extension(filename)
        if ext is not None:
            return transform_segment(rule, base) + "." + ext
    elif rule.scope is RenameScope.EXTENSION:
        base, ext = split_extension(filename)
        if ext is not None:
            changed = transform_segment(rule, ext)
            if changed:
                return base + "." + changed
            return base
    return transform_segment(rule, filename)


def preview(rule: RenameRule, filenames: Sequence[str]) -> RenamePlan:
    """
    Generate the rename preview for the selected files

    Every input name appears in the preview, in input order, including the
    ones that do not change. The submission view is RenamePlan.changes.

    Args:
        rule: Compiled rename rule
        filenames: Selected filenames

    Returns:
        Rename plan
    """
    plan = RenamePlan()
    for name in filenames:
        plan.entries.append(RenameEntry(original=name, renamed=rename_filename(rule, name)))
    logger.debug("Previewed %d files, %d changed", len(plan.entries), plan.total_count)
    return plan


def validate_plan(plan: RenamePlan, existing: Optional[Iterable[str]] = None) -> List[str]:
    """
    Validate rename plan, recording each problem as a plan warning

    Args:
        plan: Rename plan
        existing: Every filename currently in the listing

    Returns:
        Warning list
    """
    warnings: List[str] = []

    for entry in plan.changes:
        valid, error = is_valid_filename(entry.renamed)
        if not valid:
            warnings.append(f"{entry.original}: {error}")

    # Names freed by this plan may be reused by it
    occupied = set(existing or ()) - {e.original for e in plan.changes}
    targets: Dict[str, List[str]] = defaultdict(list)
    for entry in plan.entries:
        targets[entry.renamed].append(entry.original)

    for target, sources in targets.items():
        if len(sources) > 1:
            warnings.append(f"Multiple files have the same destination: {', '.join(sources)} -> {target}")

    for entry in plan.changes:
        if entry.renamed in occupied:
            warnings.append(f"{entry.original}: destination already exists: {entry.renamed}")

    for w in warnings:
        plan.add_warning(w)
    return warnings
