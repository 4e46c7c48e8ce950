from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from cpops.core.models import Grant, LiveSpec, LiveSpecRef, Page, PageRequest  # noqa: E402


def live_ref(name: str, *, deleted: bool = False) -> LiveSpecRef:
    """Build a live spec record; `deleted` drops the live spec payload."""
    if deleted:
        return LiveSpecRef(catalog_name=name)
    return LiveSpecRef(
        catalog_name=name,
        live_spec=LiveSpec(
            live_spec_id=f"id-{name}",
            catalog_type="capture",
            updated_at=datetime(2024, 6, 1, tzinfo=timezone.utc),
            data_plane_id="dp-1",
            last_pub_id="pub-1",
        ),
    )


class FakeControlPlane:
    """Control-plane double that serves canned pages and records requests."""

    def __init__(
        self,
        pages: dict | None = None,
        grants: list[Grant] | None = None,
    ):
        # criterion -> list of pages, served in order
        self.pages = {k: list(v) for k, v in (pages or {}).items()}
        self.grants = list(grants or [])
        self.requests: list[PageRequest] = []
        self.grant_lookups: list[tuple] = []

    def list_authorized_prefixes(self, min_capability, limit):
        self.grant_lookups.append((min_capability, limit))
        return self.grants[:limit]

    def fetch_live_specs_page(self, request: PageRequest) -> Page:
        self.requests.append(request)
        return self.pages[request.criterion].pop(0)
