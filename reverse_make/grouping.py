"""Dependency grouping — cluster a target's inputs into inferred build rules."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from reverse_make.exceptions import MalformedGroupSeed, UnknownDependency
from reverse_make.index import COMPILED, InvocationIndex
from reverse_make.models.invocation import CompilerInvocation
from reverse_make.models.report import DependencyGroup

logger = logging.getLogger(__name__)


def _sole_input(path: str, invocation: CompilerInvocation) -> str:
    if len(invocation.inputs) != 1:
        raise MalformedGroupSeed(path, len(invocation.inputs))
    return invocation.inputs[0]


def find_dependency_groups(
    inputs: Iterable[str],
    index: InvocationIndex,
) -> list[DependencyGroup]:
    """
    Group the direct inputs of one archive or link target.

    Inputs are visited in lexicographic order, not command-line order. The
    first unused input built by a compile step seeds a group; every other
    unused compiled input with the same fingerprint joins it. Link and
    archive outputs met along the way are marked used without being
    expanded. Compiled inputs with different flags stay unused and seed
    later groups.

    Args:
        inputs: Direct inputs of the target. Duplicates collapse.
        index: Fully built invocation index (read only).

    Returns:
        Groups in seed discovery order.

    Raises:
        UnknownDependency: an input scanned while growing a group has no
            compile, link or archive recipe in the log.
        MalformedGroupSeed: a compiled input was built from other than one
            source file.
    """
    used: dict[str, bool] = {path: False for path in sorted(set(inputs))}
    groups: list[DependencyGroup] = []

    for seed_path in used:
        if used[seed_path]:
            continue
        seed = index.compiled.get(seed_path)
        if seed is None:
            # not a compiled object
            continue

        used[seed_path] = True
        group = DependencyGroup(
            sources=[_sole_input(seed_path, seed)],
            representative=seed,
        )

        for path, is_used in used.items():
            if is_used:
                continue

            resolved = index.resolve(path)
            if resolved is None:
                raise UnknownDependency(path)

            kind, invocation = resolved
            if kind == COMPILED:
                if seed.flags_match(invocation):
                    group.sources.append(_sole_input(path, invocation))
                    used[path] = True
            else:
                logger.debug("Absorbing %s dependency %s", kind, path)
                used[path] = True

        groups.append(group)

    logger.debug("Found %d group(s) across %d input(s)", len(groups), len(used))
    return groups
