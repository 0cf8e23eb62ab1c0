"""
L2 Resolver — conditional dependency selection.

Pure function of (descriptor, options): no process invocation, no
host probing. Transitive resolution is the package manager's job;
this only decides which of the formula's own declarations apply.
"""

from __future__ import annotations

import logging

from formulakit.core.models.formula import BuildOptions, Dependency, PackageDescriptor

logger = logging.getLogger(__name__)


def _when_matches(dep: Dependency, options: BuildOptions) -> bool:
    return all(options.with_(opt) == wanted for opt, wanted in dep.when.items())


def _activated(dep: Dependency, options: BuildOptions) -> bool:
    if dep.activation == "required":
        return True
    # recommended and optional both follow their toggle; only the default differs
    return options.with_(dep.option_name)


def resolve_dependencies(
    descriptor: PackageDescriptor,
    options: BuildOptions,
    *,
    include_build: bool = True,
) -> list[Dependency]:
    """Select the dependencies that apply to this build.

    A dependency is selected when every ``when`` constraint matches
    ``options`` and, for recommended/optional ones, its toggle is on.
    Declaration order is preserved.

    Args:
        descriptor: The formula.
        options: Build options for this install.
        include_build: Keep build-only dependencies (e.g. pkg-config).

    Returns:
        Selected dependencies, in declaration order.
    """
    selected = [
        dep for dep in descriptor.dependencies
        if _when_matches(dep, options)
        and _activated(dep, options)
        and (include_build or not dep.build_only)
    ]
    logger.debug(
        "Resolved %d/%d dependencies for %s %s",
        len(selected), len(descriptor.dependencies),
        descriptor.name, options.to_flags(),
    )
    return selected


def dependency_summary(deps: list[Dependency]) -> list[dict]:
    """Format resolved dependencies for display / JSON."""
    results = []
    for dep in deps:
        info: dict = {
            "name": dep.name,
            "activation": dep.activation,
            "kind": dep.kind,
        }
        if dep.tags:
            info["tags"] = list(dep.tags)
        if dep.options:
            info["options"] = list(dep.options)
        results.append(info)
    return results
