"""
L4 Execution — Literal in-place substitution of source files.

Build-configuration fixes are a declarative list of
``(before, after)`` pairs applied to file contents. No regexes and no
line scanning: a pair either matches literally or the build fails.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NamedTuple

from formulakit.core.errors import InreplaceError

logger = logging.getLogger(__name__)


class Substitution(NamedTuple):
    before: str
    after: str


def apply_substitutions(
    text: str,
    substitutions: list[Substitution],
) -> tuple[str, dict[str, int]]:
    """Apply each substitution to ``text`` in order.

    Every occurrence of ``before`` is replaced.

    Returns:
        ``(new_text, {before: occurrences_replaced})``.

    Raises:
        InreplaceError: If any ``before`` does not occur.
    """
    counts: dict[str, int] = {}
    for sub in substitutions:
        count = text.count(sub.before)
        if count == 0:
            raise InreplaceError(f"Expected text not found: {sub.before!r}")
        text = text.replace(sub.before, sub.after)
        counts[sub.before] = counts.get(sub.before, 0) + count
    return text, counts


def inreplace(path: Path, substitutions: list[Substitution]) -> dict[str, int]:
    """Apply ``substitutions`` to the file at ``path`` and write it back.

    Raises:
        InreplaceError: If the file is missing or a pattern does not match.
            The file is left untouched in that case.
    """
    try:
        original = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InreplaceError(f"Cannot read {path}: {e}") from e

    try:
        updated, counts = apply_substitutions(original, substitutions)
    except InreplaceError as e:
        raise InreplaceError(f"{path.name}: {e}") from e

    path.write_text(updated, encoding="utf-8")
    logger.info("Patched %s (%d substitution(s))", path.name, sum(counts.values()))
    return counts
