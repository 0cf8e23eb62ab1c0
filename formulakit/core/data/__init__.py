"""
L0 Data — formula registry.

Every formula formulakit knows about, keyed by name. Pure data.
"""

from formulakit.core.data.matplotlib import MATPLOTLIB
from formulakit.core.models.formula import PackageDescriptor

FORMULAS: dict[str, PackageDescriptor] = {
    MATPLOTLIB.name: MATPLOTLIB,
}

__all__ = ["FORMULAS", "MATPLOTLIB"]
