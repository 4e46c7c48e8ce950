from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from cpops.core.errors import TransportError
from cpops.core.models import (
    Capability,
    Grant,
    LastPublication,
    LiveSpec,
    LiveSpecRef,
    Page,
    PageRequest,
)
from cpops.core.selection import NameList, PrefixAndType, SelectionCriterion

logger = logging.getLogger(__name__)

GRAPHQL_PATH = "/graphql"

LIST_AUTHORIZED_PREFIXES_QUERY = """
query ListAuthorizedPrefixes($minCapability: Capability!, $first: Int) {
  prefixes(by: {minCapability: $minCapability}, first: $first) {
    edges {
      node {
        prefix
        userCapability
      }
    }
  }
}
"""

LIST_LIVE_SPECS_QUERY = """
query ListLiveSpecs(
  $by: LiveSpecsBy!
  $after: String
  $first: Int
  $includeModels: Boolean!
  $includeFlows: Boolean!
  $includeLastPublication: Boolean!
) {
  liveSpecs(by: $by, after: $after, first: $first) {
    edges {
      node {
        catalogName
        liveSpec {
          liveSpecId
          catalogType
          updatedAt
          dataPlaneId
          lastPubId
          model @include(if: $includeModels)
          readsFrom @include(if: $includeFlows) {
            edges { node { catalogName } }
          }
          writesTo @include(if: $includeFlows) {
            edges { node { catalogName } }
          }
        }
        lastPublication @include(if: $includeLastPublication) {
          userId
          userEmail
          userFullName
        }
      }
    }
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
"""

_CAPABILITIES = {c.value: c for c in Capability if c is not Capability.UNKNOWN}


def _parse_capability(raw: Any) -> Capability:
    """Map an API capability to Capability, tolerating values we don't know."""
    return _CAPABILITIES.get(str(raw).lower(), Capability.UNKNOWN)


def _parse_datetime(value: str) -> datetime:
    # fromisoformat only accepts a trailing `Z` on Python 3.11+
    if value.endswith("Z"):
        value = f"{value[:-1]}+00:00"
    return datetime.fromisoformat(value)


def _catalog_names(connection: dict | None) -> tuple[str, ...] | None:
    if connection is None:
        return None
    return tuple(edge["node"]["catalogName"] for edge in connection.get("edges") or [])


def _parse_live_spec(raw: dict) -> LiveSpec:
    return LiveSpec(
        live_spec_id=str(raw["liveSpecId"]),
        catalog_type=str(raw["catalogType"]).lower(),
        updated_at=_parse_datetime(raw["updatedAt"]),
        data_plane_id=str(raw["dataPlaneId"]),
        last_pub_id=str(raw["lastPubId"]),
        model=raw.get("model"),
        reads_from=_catalog_names(raw.get("readsFrom")),
        writes_to=_catalog_names(raw.get("writesTo")),
    )


def _parse_live_spec_ref(node: dict) -> LiveSpecRef:
    live_spec = node.get("liveSpec")
    last_pub = node.get("lastPublication")
    return LiveSpecRef(
        catalog_name=node["catalogName"],
        live_spec=_parse_live_spec(live_spec) if live_spec else None,
        last_publication=LastPublication(
            user_id=last_pub.get("userId"),
            user_email=last_pub.get("userEmail"),
            user_full_name=last_pub.get("userFullName"),
        )
        if last_pub
        else None,
    )


def criterion_variables(criterion: SelectionCriterion) -> dict[str, Any]:
    """Return the `LiveSpecsBy` input value for a selection criterion."""
    if isinstance(criterion, PrefixAndType):
        return {
            "prefixAndType": {
                "prefix": criterion.prefix,
                "catalogType": criterion.catalog_type.value
                if criterion.catalog_type
                else None,
                "dataPlaneName": criterion.data_plane_name,
            }
        }
    if isinstance(criterion, NameList):
        return {"names": list(criterion.names)}
    raise TypeError(f"Unsupported selection criterion: {criterion!r}")


class ControlPlaneAdapter:
    """Adapter around the control-plane GraphQL API (grants and live specs)."""

    def __init__(self, client: httpx.Client) -> None:
        self.client = client

    def _post_graphql(self, query: str, variables: dict[str, Any]) -> dict:
        """Execute a GraphQL query and return its `data` object."""
        logger.debug("POST %s variables=%s", GRAPHQL_PATH, variables)
        try:
            response = self.client.post(
                GRAPHQL_PATH, json={"query": query, "variables": variables}
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                f"control-plane API returned HTTP {exc.response.status_code}: "
                f"{exc.response.text}"
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"control-plane API request failed: {exc}") from exc
        except ValueError as exc:
            raise TransportError(f"control-plane API returned invalid JSON: {exc}") from exc

        if not isinstance(payload, dict):
            raise TransportError("control-plane API returned an unexpected response")
        errors = payload.get("errors")
        if errors:
            messages = "; ".join(
                str(e.get("message", e)) if isinstance(e, dict) else str(e)
                for e in errors
            )
            raise TransportError(f"control-plane API returned errors: {messages}")
        data = payload.get("data")
        if not isinstance(data, dict):
            raise TransportError("control-plane API response is missing `data`")
        return data

    def list_authorized_prefixes(
        self, min_capability: Capability, limit: int
    ) -> list[Grant]:
        """Return up to `limit` prefixes the current user holds `min_capability` on."""
        data = self._post_graphql(
            LIST_AUTHORIZED_PREFIXES_QUERY,
            {"minCapability": min_capability.value, "first": limit},
        )
        try:
            return [
                Grant(
                    prefix=edge["node"]["prefix"],
                    capability=_parse_capability(edge["node"].get("userCapability")),
                )
                for edge in data["prefixes"]["edges"]
            ]
        except (KeyError, TypeError) as exc:
            raise TransportError(f"failed to decode prefixes response: {exc!r}") from exc

    def fetch_live_specs_page(self, request: PageRequest) -> Page:
        """Fetch a single page of live specs for one criterion."""
        variables = {
            "by": criterion_variables(request.criterion),
            "after": request.after,
            "first": request.first,
            "includeModels": request.flags.include_models,
            "includeFlows": request.flags.include_flows,
            "includeLastPublication": request.flags.include_last_publication,
        }
        data = self._post_graphql(LIST_LIVE_SPECS_QUERY, variables)
        try:
            live_specs = data["liveSpecs"]
            page_info = live_specs["pageInfo"]
            return Page(
                records=tuple(
                    _parse_live_spec_ref(edge["node"]) for edge in live_specs["edges"]
                ),
                has_next=bool(page_info["hasNextPage"]),
                cursor=page_info.get("endCursor"),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise TransportError(f"failed to decode liveSpecs response: {exc!r}") from exc
