"""
rename_rule.py - Rename rule compilation

Turns raw form inputs into an immutable RenameRule. A bad pattern is
reported before any preview is generated.
"""

import logging
import re

from .exceptions import InvalidPatternError
from .models import RenameForm, RenameRule

logger = logging.getLogger(__name__)


def compile_rule(form: RenameForm) -> RenameRule:
    """
    Compile rename form inputs into a rule

    Literal search text is escaped, so it is never interpreted as a pattern.
    In regex mode the replacement may use group references (\\1, \\g<name>);
    in literal mode it is inserted verbatim.

    Args:
        form: Raw form inputs

    Returns:
        Compiled rule

    Raises:
        InvalidPatternError: the regex or its replacement template is invalid
    """
    flags = 0 if form.case_sensitive else re.IGNORECASE
    source = form.search if form.is_regex else re.escape(form.search)

    try:
        pattern = re.compile(source, flags)
    except re.error as e:
        logger.warning("Rejected rename pattern %r: %s", form.search, e)
        raise InvalidPatternError(form.search, str(e)) from e

    if form.is_regex and source:
        # Parses the replacement template against the pattern's groups
        try:
            pattern.sub(form.replacement, "")
        except (re.error, IndexError) as e:
            logger.warning("Rejected replacement %r: %s", form.replacement, e)
            raise InvalidPatternError(form.search, str(e), field="replacement") from e

    return RenameRule(
        pattern=pattern,
        replacement=form.replacement,
        scope=form.scope,
        match_all=form.match_all,
        case_transform=form.case_transform,
        is_regex=form.is_regex,
    )
