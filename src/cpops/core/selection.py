"""Selection criteria and their construction.

A listing operation executes one or more independent criteria against the
control plane. A criterion selects live specs either by prefix (optionally
narrowed by catalog type and data plane) or by an explicit list of names.
The order of the criteria list is the order records are emitted in.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Union


class CatalogType(str, Enum):
    """Kinds of catalog entries."""

    CAPTURE = "capture"
    COLLECTION = "collection"
    MATERIALIZATION = "materialization"
    TEST = "test"


@dataclass(frozen=True)
class PrefixAndType:
    """Select every live spec under `prefix`, optionally narrowed."""

    prefix: str
    catalog_type: CatalogType | None = None
    data_plane_name: str | None = None


@dataclass(frozen=True)
class NameList:
    """Select live specs by exact catalog name."""

    names: tuple[str, ...]


SelectionCriterion = Union[PrefixAndType, NameList]


def build_criteria(
    prefixes: Iterable[str],
    names: Iterable[str],
    *,
    catalog_type: CatalogType | None = None,
    data_plane_name: str | None = None,
) -> list[SelectionCriterion]:
    """
    Build the ordered criteria for a resolved selection.

    One PrefixAndType criterion is produced per prefix, in the given order,
    all sharing the type and data plane filters. A single NameList criterion
    follows when any names were given.

    Args:
        prefixes: Resolved prefixes, already in the desired order.
        names: Explicitly requested catalog names.
        catalog_type: Optional catalog type filter for prefix criteria.
        data_plane_name: Optional data plane filter for prefix criteria.

    Returns:
        The criteria to execute, prefixes first and names last.
    """
    prefixes = list(prefixes)
    names = sorted(set(names))
    assert prefixes or names, "build_criteria requires either a name or prefix"

    criteria: list[SelectionCriterion] = [
        PrefixAndType(
            prefix=prefix,
            catalog_type=catalog_type,
            data_plane_name=data_plane_name,
        )
        for prefix in prefixes
    ]
    if names:
        criteria.append(NameList(names=tuple(names)))
    return criteria
