"""Catalog listing: selection resolution and live spec streaming.

This module is the domain-level entry point for listing live specs. It
turns the user's selection into criteria, filling in default prefixes from
the user's grants when nothing was selected explicitly, and returns a lazy
stream over the results. It is free of CLI concerns so it can be reused by
other frontends and tests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Protocol

from cpops.core.errors import EmptyAccessError
from cpops.core.grants import RESERVED_PREFIXES, resolve_default_prefixes
from cpops.core.models import Capability, FeatureFlags, Grant
from cpops.core.pagination import LiveSpecsAdapter, LiveSpecStream
from cpops.core.selection import CatalogType, build_criteria

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListingConfig:
    """
    Fixed settings of a listing operation.

    Attributes:
        reserved_prefixes: Namespaces never used as default prefixes.
        default_prefix_limit: Maximum number of default prefixes.
        page_size: Page size when models are not requested.
        heavy_page_size: Page size when models are requested, since they
                         can be quite large.
    """

    reserved_prefixes: tuple[str, ...] = RESERVED_PREFIXES
    default_prefix_limit: int = 5
    page_size: int = 200
    heavy_page_size: int = 50

    @property
    def grant_lookup_limit(self) -> int:
        """How many grants to request when resolving default prefixes."""
        return self.default_prefix_limit * 2

    def page_size_for(self, flags: FeatureFlags) -> int:
        return self.heavy_page_size if flags.include_models else self.page_size


@dataclass(frozen=True)
class ListSelection:
    """What the user asked to list."""

    names: frozenset[str] = field(default_factory=frozenset)
    prefixes: tuple[str, ...] = ()
    catalog_type: CatalogType | None = None
    data_plane_name: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.names and not self.prefixes


class CatalogAdapter(LiveSpecsAdapter, Protocol):
    """Interface for the control-plane operations used by listing."""

    def list_authorized_prefixes(
        self, min_capability: Capability, limit: int
    ) -> list[Grant]:
        """Return up to `limit` grants with at least `min_capability`."""
        ...


def resolve_selection(
    adapter: CatalogAdapter,
    selection: ListSelection,
    config: ListingConfig | None = None,
) -> ListSelection:
    """
    Fill in default prefixes when the selection names nothing explicitly.

    Explicit prefixes are de-duplicated and sorted but otherwise used as
    given.

    Raises:
        AmbiguousSelectionError: If the user can access too many prefixes.
        EmptyAccessError: If the user cannot access any prefix.
    """
    config = config or ListingConfig()

    if not selection.is_empty:
        return replace(selection, prefixes=tuple(sorted(set(selection.prefixes))))

    grants = adapter.list_authorized_prefixes(
        Capability.READ, config.grant_lookup_limit
    )
    prefixes = resolve_default_prefixes(
        grants,
        config.default_prefix_limit,
        reserved_prefixes=config.reserved_prefixes,
    )
    if not prefixes:
        raise EmptyAccessError()

    logger.debug(
        "no --prefix argument provided, determined prefixes automatically: %s",
        prefixes,
    )
    return replace(selection, prefixes=tuple(prefixes))


def stream_live_specs(
    adapter: LiveSpecsAdapter,
    selection: ListSelection,
    flags: FeatureFlags | None = None,
    config: ListingConfig | None = None,
) -> LiveSpecStream:
    """
    Return a lazy stream over the live specs of a resolved selection.

    No request is made until the first record is pulled.
    """
    flags = flags or FeatureFlags()
    config = config or ListingConfig()

    criteria = build_criteria(
        selection.prefixes,
        selection.names,
        catalog_type=selection.catalog_type,
        data_plane_name=selection.data_plane_name,
    )
    page_size = config.page_size_for(flags)
    logger.debug("listing live specs with page size %d: %r", page_size, criteria)
    return LiveSpecStream(adapter, criteria, page_size, flags)


def fetch_live_specs(
    adapter: CatalogAdapter,
    selection: ListSelection,
    flags: FeatureFlags | None = None,
    config: ListingConfig | None = None,
) -> LiveSpecStream:
    """Resolve the selection and return a lazy stream over its live specs."""
    resolved = resolve_selection(adapter, selection, config)
    return stream_live_specs(adapter, resolved, flags, config)
