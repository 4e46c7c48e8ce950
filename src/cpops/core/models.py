"""Core domain models for control-plane catalog listing.

These models represent grants, live specs and result pages in a simple,
immutable form. They are intentionally free of HTTP and GraphQL details
as well as UI/CLI concerns; the control-plane adapter translates wire
payloads into these types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from cpops.core.selection import SelectionCriterion


class Capability(str, Enum):
    """
    Access level a principal holds over a prefix.

    Values:
        READ: May read specs and collection data under the prefix.
        WRITE: May also publish changes under the prefix.
        ADMIN: May also manage grants for the prefix.
        UNKNOWN: The capability returned by the API is not recognised.
    """

    READ = "read"
    WRITE = "write"
    ADMIN = "admin"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Grant:
    """
    A prefix the current principal has been granted access to.

    Attributes:
        prefix: Catalog namespace prefix, e.g. `acmeCo/prod/`.
        capability: Highest capability held over the prefix.
    """

    prefix: str
    capability: Capability = Capability.READ


@dataclass(frozen=True)
class LastPublication:
    """Who last published a live spec."""

    user_id: str | None = None
    user_email: str | None = None
    user_full_name: str | None = None


@dataclass(frozen=True)
class LiveSpec:
    """
    The currently published state of a catalog entry.

    Attributes:
        live_spec_id: Control-plane identifier of the live spec.
        catalog_type: One of `capture`, `collection`, `materialization`, `test`.
        updated_at: Timestamp of the last change.
        data_plane_id: Identifier of the data plane the entry runs in.
        last_pub_id: Identifier of the publication that produced this spec.
        model: Decoded spec model; only present when models were requested.
        reads_from: Catalog names this entry reads from (flows only).
        writes_to: Catalog names this entry writes to (flows only).
    """

    live_spec_id: str
    catalog_type: str
    updated_at: datetime
    data_plane_id: str
    last_pub_id: str
    model: Any | None = None
    reads_from: tuple[str, ...] | None = None
    writes_to: tuple[str, ...] | None = None


@dataclass(frozen=True)
class LiveSpecRef:
    """
    One record returned by a live specs query.

    A missing `live_spec` means the entry is being deleted concurrently.
    """

    catalog_name: str
    live_spec: LiveSpec | None = None
    last_publication: LastPublication | None = None


@dataclass(frozen=True)
class FeatureFlags:
    """Optional parts of each record to request from the API."""

    include_models: bool = False
    include_flows: bool = False
    include_last_publication: bool = True


@dataclass(frozen=True)
class PageRequest:
    """Parameters for fetching a single page of live specs."""

    criterion: SelectionCriterion
    after: str | None
    first: int
    flags: FeatureFlags


@dataclass(frozen=True)
class Page:
    """
    A single page of results.

    Attributes:
        records: Records in server order.
        has_next: Whether the API reports more pages for the same criterion.
        cursor: Opaque token to request the next page; required when
                `has_next` is true.
    """

    records: tuple[LiveSpecRef, ...]
    has_next: bool = False
    cursor: str | None = None
