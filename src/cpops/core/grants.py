"""Default prefix resolution from access grants.

When a user lists the catalog without naming a prefix or entry, the prefixes
to query are derived from the user's grants. Grants frequently overlap (a
tenant-wide grant plus grants on nested prefixes), so only the minimal set
of prefixes covering every grant is kept.
"""

from __future__ import annotations

from typing import Iterable

from cpops.core.errors import AmbiguousSelectionError
from cpops.core.models import Grant

RESERVED_PREFIXES: tuple[str, ...] = ("ops/dp/",)


def resolve_default_prefixes(
    grants: Iterable[Grant],
    max_prefixes: int,
    *,
    reserved_prefixes: Iterable[str] = RESERVED_PREFIXES,
) -> list[str]:
    """
    Return the minimal covering set of prefixes for the given grants.

    Prefixes under a reserved namespace are dropped, since no live specs
    ever exist there. The rest are sorted so that a parent prefix directly
    precedes its descendants, which lets a single pass drop every prefix
    already covered by the last kept one.

    Args:
        grants: Grants of the current principal. Capability is ignored.
        max_prefixes: Maximum number of prefixes to return.
        reserved_prefixes: Namespaces that are never listed.

    Returns:
        Sorted, pairwise non-nested prefixes.

    Raises:
        AmbiguousSelectionError: If more than `max_prefixes` prefixes remain.
    """
    reserved = tuple(reserved_prefixes)
    candidates = sorted(g.prefix for g in grants if not g.prefix.startswith(reserved))

    prefixes: list[str] = []
    for candidate in candidates:
        if prefixes and candidate.startswith(prefixes[-1]):
            continue
        prefixes.append(candidate)

    if len(prefixes) > max_prefixes:
        raise AmbiguousSelectionError(max_prefixes, prefixes)
    return prefixes
