"""
L4 Execution — Resource staging and checksum verification.

Downloads are the package manager's job: archives are expected in the
cache directory under their URL basename. Staging verifies the
checksum, unpacks into a fresh temporary directory, and yields the
unpacked source root. The directory is removed on exit.
"""

from __future__ import annotations

import hashlib
import logging
import tarfile
import tempfile
import zipfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from formulakit.core.errors import StagingError

logger = logging.getLogger(__name__)


def verify_checksum(path: Path, expected: str) -> None:
    """Verify a file checksum. Format: ``algo:hex`` (sha1, sha256, md5).

    Raises:
        StagingError: On malformed ``expected`` or a digest mismatch.
    """
    algo, sep, expected_hash = expected.partition(":")
    if not sep or not expected_hash:
        raise StagingError(f"Malformed checksum {expected!r} (expected 'algo:hex')")
    try:
        h = hashlib.new(algo)
    except ValueError as e:
        raise StagingError(f"Unsupported checksum algorithm: {algo}") from e

    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    actual = h.hexdigest()
    if actual != expected_hash.lower():
        raise StagingError(
            f"Checksum mismatch for {path.name}: expected {expected_hash}, got {actual}"
        )
    logger.debug("Checksum OK: %s", path.name)


def cached_file(cache_dir: Path, url: str) -> Path:
    """Location of a pre-fetched download in the cache.

    Raises:
        StagingError: If the file has not been fetched.
    """
    path = cache_dir / url.rstrip("/").rsplit("/", 1)[-1]
    if not path.is_file():
        raise StagingError(f"Not in download cache: {path} (from {url})")
    return path


def _unpack(archive: Path, dest: Path) -> None:
    name = archive.name
    try:
        if name.endswith((".tar.gz", ".tgz", ".tar.bz2", ".tar.xz", ".tar")):
            with tarfile.open(archive) as tf:
                tf.extractall(dest, filter="data")
        elif name.endswith(".zip"):
            with zipfile.ZipFile(archive) as zf:
                zf.extractall(dest)
        else:
            raise StagingError(f"Unsupported archive type: {name}")
    except (tarfile.TarError, zipfile.BadZipFile, OSError) as e:
        raise StagingError(f"Extract failed for {name}: {e}") from e


def _source_root(dest: Path) -> Path:
    # Source archives usually hold a single top-level directory
    entries = list(dest.iterdir())
    if len(entries) == 1 and entries[0].is_dir():
        return entries[0]
    return dest


@contextmanager
def stage(url: str, checksum: str, cache_dir: Path) -> Iterator[Path]:
    """Verify and unpack a cached archive; yield its source root.

    Usage::

        with stage(res.url, res.checksum, cache) as src:
            env.run([python, "setup.py", "install"], cwd=str(src))
    """
    archive = cached_file(cache_dir, url)
    verify_checksum(archive, checksum)

    with tempfile.TemporaryDirectory(prefix="formulakit-stage-") as tmp:
        dest = Path(tmp)
        _unpack(archive, dest)
        root = _source_root(dest)
        logger.info("Staged %s -> %s", archive.name, root)
        yield root
