"""
L0 Data — Formula descriptor validation.

Pydantic already enforces field types; this checks the things a
package manager would reject at load time: checksum format, URL
schemes, option names and impossible dependency combinations.
"""

from __future__ import annotations

import logging
import re

from formulakit.core.models.formula import BuildOptions, PackageDescriptor

logger = logging.getLogger(__name__)

# algo -> hex digest length
CHECKSUM_LENGTHS = {"md5": 32, "sha1": 40, "sha256": 64}

_HEX_RE = re.compile(r"^[0-9a-f]+$")
_URL_SCHEMES = ("https://", "http://")


def _check_checksum(value: str, where: str) -> list[str]:
    algo, sep, digest = value.partition(":")
    if not sep:
        return [f"{where}: checksum must be 'algo:hex', got {value!r}"]
    if algo not in CHECKSUM_LENGTHS:
        return [f"{where}: unsupported checksum algorithm '{algo}'"]
    if len(digest) != CHECKSUM_LENGTHS[algo] or not _HEX_RE.match(digest):
        return [f"{where}: malformed {algo} digest"]
    return []


def _check_url(value: str, where: str) -> list[str]:
    if not value.startswith(_URL_SCHEMES):
        return [f"{where}: URL must be http(s), got {value!r}"]
    return []


def validate_descriptor(descriptor: PackageDescriptor) -> list[str]:
    """Validate a descriptor.

    Returns a list of error strings. Empty list = valid.
    """
    errors: list[str] = []
    known = set(BuildOptions.known_options())

    errors += _check_url(descriptor.url, "url")
    errors += _check_checksum(descriptor.checksum, "checksum")
    if descriptor.head and not descriptor.head.startswith(_URL_SCHEMES + ("git://",)):
        errors.append(f"head: unsupported VCS URL {descriptor.head!r}")
    if descriptor.version == "HEAD":
        errors.append("url: cannot derive a version from the archive name")

    for i, dep in enumerate(descriptor.dependencies):
        where = f"dependencies[{i}] ({dep.name})"
        if dep.activation != "required" and dep.option_name not in known:
            errors.append(f"{where}: no build option '{dep.option_name}' toggles it")
        for opt in dep.when:
            if opt not in known:
                errors.append(f"{where}: 'when' names unknown option '{opt}'")

    # Two declarations of the same name must never both apply
    seen: dict[str, list[dict[str, bool]]] = {}
    for dep in descriptor.dependencies:
        for other in seen.get(dep.name, []):
            if not any(other.get(k, v) != v for k, v in dep.when.items()):
                errors.append(f"dependency '{dep.name}' declared twice without exclusive 'when'")
        seen.setdefault(dep.name, []).append(dep.when)

    names = [r.name for r in descriptor.resources]
    for res in descriptor.resources:
        where = f"resource '{res.name}'"
        errors += _check_url(res.url, where)
        errors += _check_checksum(res.checksum, where)
        if names.count(res.name) > 1:
            errors.append(f"{where}: duplicate resource name")

    for url in descriptor.patches:
        errors += _check_url(url, "patch")

    if errors:
        logger.warning("Descriptor %s has %d schema error(s)", descriptor.name, len(errors))
    return errors
