"""
formulakit — the matplotlib build formula as typed data plus an installer.

Usage:
    python -m formulakit.main --help
"""

__version__ = "0.1.0"
