"""
Shared test fixtures: a fake host, a matplotlib source tree and a
download cache holding real (tiny) resource archives.
"""

import hashlib
import io
import tarfile
import textwrap
from pathlib import Path

import pytest

from formulakit.adapters.mock import MockEnvironment
from formulakit.core.data.matplotlib import MATPLOTLIB
from formulakit.core.models.build import BuildConfig
from formulakit.core.models.formula import PackageDescriptor, Resource

SETUPEXT = textwrap.dedent("""\
    basedir = {
        'win32': ['win32_static', ],
        'darwin': ['/usr/local/', '/usr', '/usr/X11', '/opt/local'],
        'sunos5': [os.getenv('MPLIB_BASE') or '/usr/local', ],
        'gnu0': ['/usr'],
    }

    tcl_tk_cache = None
    framework_dirs = [
        '/System/Library/Frameworks/',
        '/Library/Frameworks',
    ]
""")


def _make_archive(path: Path, top: str) -> str:
    """Write a .tar.gz with a single ``top/setup.py`` and return its sha1 checksum."""
    payload = b"from setuptools import setup\nsetup()\n"
    with tarfile.open(path, "w:gz") as tf:
        info = tarfile.TarInfo(f"{top}/setup.py")
        info.size = len(payload)
        tf.addfile(info, io.BytesIO(payload))
    return "sha1:" + hashlib.sha1(path.read_bytes()).hexdigest()


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """An unpacked matplotlib source tree with the stock setupext.py."""
    src = tmp_path / "matplotlib-1.3.1"
    src.mkdir()
    (src / "setupext.py").write_text(SETUPEXT)
    return src


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Download cache with the freetype patch already fetched."""
    cache = tmp_path / "cache"
    cache.mkdir()
    (cache / "2623.diff").write_text("--- a/src/ft2font.cpp\n+++ b/src/ft2font.cpp\n")
    return cache


@pytest.fixture
def descriptor(cache_dir: Path) -> PackageDescriptor:
    """MATPLOTLIB with resources whose archives exist in ``cache_dir``."""
    resources = []
    for res in MATPLOTLIB.resources:
        top = res.filename.removesuffix(".tar.gz")
        checksum = _make_archive(cache_dir / res.filename, top)
        resources.append(Resource(
            name=res.name,
            url=res.url,
            checksum=checksum,
            import_name=res.import_name,
            install_args=list(res.install_args),
        ))
    return MATPLOTLIB.model_copy(update={"resources": resources})


@pytest.fixture
def config(cache_dir: Path) -> BuildConfig:
    return BuildConfig(
        homebrew_prefix="/custom/prefix",
        prefix="/custom/prefix/Cellar/matplotlib/1.3.1",
        cache_dir=str(cache_dir),
    )


@pytest.fixture
def mock_env() -> MockEnvironment:
    return MockEnvironment()
