"""
L0 Data — the matplotlib formula.

Pure data, no logic. Dependency order mirrors the declaration order
the package manager reads; the python3 and default branches are
expressed with ``when`` constraints instead of control flow.
"""

from __future__ import annotations

from formulakit.core.models.formula import Dependency, PackageDescriptor, Resource

_PY3 = {"python3": True}
_PY2 = {"python3": False}


MATPLOTLIB = PackageDescriptor(
    name="matplotlib",
    homepage="http://matplotlib.org",
    url=(
        "https://downloads.sourceforge.net/project/matplotlib/matplotlib/"
        "matplotlib-1.3.1/matplotlib-1.3.1.tar.gz"
    ),
    checksum="sha1:8578afc86424392591c0ee03f7613ffa9b6f68ee",
    head="https://github.com/matplotlib/matplotlib.git",
    dependencies=[
        Dependency(name="pkg-config", tags=["build"]),
        Dependency(name="python", activation="recommended", kind="language"),
        Dependency(name="python3", activation="optional", kind="language"),
        Dependency(name="freetype", kind="system"),
        Dependency(name="libpng", kind="system"),
        Dependency(name="tex", activation="optional", kind="requirement"),
        Dependency(name="no-external-pycxx", kind="requirement"),
        Dependency(name="cairo", activation="optional"),
        Dependency(name="ghostscript", activation="optional"),
        # On Xcode-only Macs, the Tk headers are not found by matplotlib
        Dependency(name="homebrew/dupes/tcl-tk", activation="optional"),

        # ── python3 branch ──
        Dependency(name="numpy", options=["with-python3"], when=_PY3),
        Dependency(name="pyside", activation="optional", options=["with-python3"], when=_PY3),
        Dependency(name="pyqt", activation="optional", options=["with-python3"], when=_PY3),

        # ── default branch ──
        Dependency(name="numpy", when=_PY2),
        Dependency(name="pyside", activation="optional", when=_PY2),
        Dependency(name="pyqt", activation="optional", when=_PY2),
        Dependency(name="pygtk", activation="optional", when=_PY2),
        Dependency(name="pygobject", when={"python3": False, "pygtk": True}),
    ],
    resources=[
        Resource(
            name="pyparsing",
            url="https://pypi.python.org/packages/source/p/pyparsing/pyparsing-2.0.1.tar.gz",
            checksum="sha1:b645857008881d70599e89c66e4bbc596fe22043",
            import_name="pyparsing",
        ),
        Resource(
            name="python-dateutil",
            url=(
                "https://pypi.python.org/packages/source/p/python-dateutil/"
                "python-dateutil-2.2.tar.gz"
            ),
            checksum="sha1:fbafcd19ea0082b3ecb17695b4cb46070181699f",
            import_name="dateutil",
            install_args=[
                "--single-version-externally-managed",
                "--record=installed.txt",
            ],
        ),
    ],
    # Fix for freetype 2.5.1
    patches=["https://github.com/matplotlib/matplotlib/pull/2623.diff"],
    test_command="import matplotlib as m; m.test()",
)
