"""
Formula errors — the failures that abort an install.

Environment probes never raise; these are reserved for conditions the
invoking package manager must surface as a failed install.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from formulakit.core.models.action import Receipt


class FormulaError(Exception):
    """Base class for every formulakit failure."""


class BuildError(FormulaError):
    """An external command exited non-zero (or could not be started)."""

    def __init__(self, receipt: Receipt):
        self.receipt = receipt
        detail = receipt.error or f"exit {receipt.return_code}"
        super().__init__(f"Command failed: {receipt.command_line} ({detail})")


class InreplaceError(FormulaError):
    """A literal substitution found nothing to replace."""


class StagingError(FormulaError):
    """A resource or patch archive is missing, corrupt, or fails its checksum."""


class UnsatisfiedRequirementError(FormulaError):
    """A fatal requirement probe failed."""
