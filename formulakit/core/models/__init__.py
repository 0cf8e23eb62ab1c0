"""
Domain models — Pydantic types for formulas and builds.

All models are re-exported here for convenient access:

    from formulakit.core.models import PackageDescriptor, BuildOptions, Receipt
"""

from formulakit.core.models.action import Receipt
from formulakit.core.models.build import BuildConfig, InstallReport, RuntimeReport
from formulakit.core.models.formula import (
    BuildOptions,
    Dependency,
    PackageDescriptor,
    Resource,
)

__all__ = [
    # build.py
    "BuildConfig",
    # formula.py
    "BuildOptions",
    "Dependency",
    "InstallReport",
    "PackageDescriptor",
    # action.py
    "Receipt",
    "Resource",
    "RuntimeReport",
]
