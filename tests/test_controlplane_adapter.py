import json
from datetime import datetime, timezone

import httpx
import pytest

from cpops.core.adapters.controlplane import ControlPlaneAdapter, criterion_variables
from cpops.core.errors import TransportError
from cpops.core.models import Capability, FeatureFlags, PageRequest
from cpops.core.selection import CatalogType, NameList, PrefixAndType

LIVE_SPEC_NODE = {
    "catalogName": "acmeCo/source-hello",
    "liveSpec": {
        "liveSpecId": "0e:8e:17:d0:4f:ac:d4:00",
        "catalogType": "capture",
        "updatedAt": "2024-06-01T12:00:00Z",
        "dataPlaneId": "0e:8e:17:d0:4f:ac:d4:01",
        "lastPubId": "0e:8e:17:d0:4f:ac:d4:02",
        "readsFrom": None,
        "writesTo": {"edges": [{"node": {"catalogName": "acmeCo/hello"}}]},
    },
    "lastPublication": {
        "userId": "u-1",
        "userEmail": "wile@acme.co",
        "userFullName": "Wile E. Coyote",
    },
}


def _adapter(handler) -> tuple[ControlPlaneAdapter, list[dict]]:
    sent: list[dict] = []

    def _record(request: httpx.Request) -> httpx.Response:
        sent.append(json.loads(request.content))
        return handler(request)

    client = httpx.Client(
        base_url="https://cp.example.test/api",
        transport=httpx.MockTransport(_record),
    )
    return ControlPlaneAdapter(client), sent


def _json(payload):
    return lambda request: httpx.Response(200, json=payload)


def _request(criterion, after=None, flags=None) -> PageRequest:
    return PageRequest(criterion=criterion, after=after, first=200, flags=flags or FeatureFlags())


def test_criterion_variables_prefix_and_type():
    crit = PrefixAndType(prefix="acmeCo/", catalog_type=CatalogType.MATERIALIZATION)

    assert criterion_variables(crit) == {
        "prefixAndType": {
            "prefix": "acmeCo/",
            "catalogType": "materialization",
            "dataPlaneName": None,
        }
    }


def test_criterion_variables_names():
    assert criterion_variables(NameList(names=("a/b", "a/c"))) == {"names": ["a/b", "a/c"]}


def test_fetch_live_specs_page_parses_records_and_page_info():
    adapter, sent = _adapter(
        _json(
            {
                "data": {
                    "liveSpecs": {
                        "edges": [
                            {"node": LIVE_SPEC_NODE},
                            {"node": {"catalogName": "acmeCo/gone", "liveSpec": None}},
                        ],
                        "pageInfo": {"hasNextPage": True, "endCursor": "opaque=="},
                    }
                }
            }
        )
    )
    flags = FeatureFlags(include_flows=True)

    page = adapter.fetch_live_specs_page(
        _request(PrefixAndType(prefix="acmeCo/"), after="prev==", flags=flags)
    )

    assert page.has_next is True
    assert page.cursor == "opaque=="
    first, gone = page.records
    assert first.catalog_name == "acmeCo/source-hello"
    assert first.live_spec.catalog_type == "capture"
    assert first.live_spec.updated_at == datetime(2024, 6, 1, 12, tzinfo=timezone.utc)
    assert first.live_spec.reads_from is None
    assert first.live_spec.writes_to == ("acmeCo/hello",)
    assert first.last_publication.user_email == "wile@acme.co"
    assert gone.live_spec is None
    assert gone.last_publication is None

    variables = sent[0]["variables"]
    assert variables["after"] == "prev=="
    assert variables["first"] == 200
    assert variables["includeFlows"] is True
    assert variables["includeModels"] is False
    assert variables["includeLastPublication"] is True
    assert variables["by"] == {
        "prefixAndType": {"prefix": "acmeCo/", "catalogType": None, "dataPlaneName": None}
    }


def test_fetch_live_specs_page_passes_missing_cursor_through():
    adapter, _ = _adapter(
        _json(
            {
                "data": {
                    "liveSpecs": {
                        "edges": [],
                        "pageInfo": {"hasNextPage": True, "endCursor": None},
                    }
                }
            }
        )
    )

    page = adapter.fetch_live_specs_page(_request(NameList(names=("a/b",))))

    assert page.has_next is True
    assert page.cursor is None


def test_list_authorized_prefixes_maps_capabilities():
    adapter, sent = _adapter(
        _json(
            {
                "data": {
                    "prefixes": {
                        "edges": [
                            {"node": {"prefix": "acmeCo/", "userCapability": "admin"}},
                            {"node": {"prefix": "wileyCo/", "userCapability": "superuser"}},
                        ]
                    }
                }
            }
        )
    )

    grants = adapter.list_authorized_prefixes(Capability.READ, 10)

    assert [(g.prefix, g.capability) for g in grants] == [
        ("acmeCo/", Capability.ADMIN),
        ("wileyCo/", Capability.UNKNOWN),
    ]
    assert sent[0]["variables"] == {"minCapability": "read", "first": 10}


@pytest.mark.parametrize(
    "handler",
    [
        lambda request: httpx.Response(500, text="boom"),
        lambda request: httpx.Response(200, text="not json"),
        lambda request: httpx.Response(200, json={"errors": [{"message": "denied"}]}),
        lambda request: httpx.Response(200, json={"data": None}),
        lambda request: httpx.Response(200, json={"data": {"liveSpecs": {"edges": []}}}),
        lambda request: httpx.Response(
            200,
            json={
                "data": {
                    "liveSpecs": {
                        "edges": [{"node": {"catalogName": "a/b", "liveSpec": {"liveSpecId": "x"}}}],
                        "pageInfo": {"hasNextPage": False},
                    }
                }
            },
        ),
    ],
)
def test_fetch_live_specs_page_wraps_failures_in_transport_error(handler):
    adapter, _ = _adapter(handler)

    with pytest.raises(TransportError):
        adapter.fetch_live_specs_page(_request(PrefixAndType(prefix="a/")))


def test_network_errors_become_transport_errors():
    def _raise(request):
        raise httpx.ConnectError("connection refused", request=request)

    adapter, _ = _adapter(_raise)

    with pytest.raises(TransportError, match="connection refused"):
        adapter.list_authorized_prefixes(Capability.READ, 10)


def test_graphql_errors_are_reported():
    adapter, _ = _adapter(_json({"errors": [{"message": "denied"}, {"message": "again"}]}))

    with pytest.raises(TransportError, match="denied; again"):
        adapter.list_authorized_prefixes(Capability.READ, 10)


def test_fetch_live_specs_page_keeps_missing_publisher_id_empty():
    node = {**LIVE_SPEC_NODE, "lastPublication": {"userId": None, "userEmail": None}}
    adapter, _ = _adapter(
        _json(
            {
                "data": {
                    "liveSpecs": {
                        "edges": [{"node": node}],
                        "pageInfo": {"hasNextPage": False, "endCursor": None},
                    }
                }
            }
        )
    )

    page = adapter.fetch_live_specs_page(_request(PrefixAndType(prefix="acmeCo/")))

    assert page.records[0].last_publication.user_id is None
