from dataclasses import replace

from conftest import live_ref
from cpops.cli.common.output import (
    format_user,
    live_spec_document,
    live_spec_headers,
    live_spec_row,
)
from cpops.core.models import LastPublication, LiveSpecRef


def test_format_user_prefers_name_and_email():
    assert format_user("wile@acme.co", "Wile E. Coyote", "u-1") == "Wile E. Coyote <wile@acme.co>"
    assert format_user(None, None, "u-1") == "u-1"
    assert format_user(None, None, None) == "unknown"


def test_live_spec_headers_with_flows():
    assert live_spec_headers(False)[-1] == "Data Plane ID"
    assert live_spec_headers(True)[-2:] == ["Reads From", "Writes To"]


def test_live_spec_row_renders_deleted_spec_with_empty_cells():
    row = live_spec_row(LiveSpecRef(catalog_name="acmeCo/gone"), flows=True)

    assert row == ["", "acmeCo/gone", "", "", "unknown", "", "", ""]


def test_live_spec_row_renders_flows_and_publisher():
    ref = live_ref("acmeCo/a")
    ref = replace(
        ref,
        live_spec=replace(ref.live_spec, reads_from=("x/1", "x/2"), writes_to=None),
        last_publication=LastPublication(user_id="u-1", user_email="wile@acme.co"),
    )

    row = live_spec_row(ref, flows=True)

    assert row[:3] == ["id-acmeCo/a", "acmeCo/a", "capture"]
    assert row[4] == "wile@acme.co"
    assert row[6:] == ["x/1\nx/2", ""]


def test_live_spec_document_includes_only_requested_parts():
    doc = live_spec_document(live_ref("acmeCo/a"))

    assert doc["catalogName"] == "acmeCo/a"
    assert doc["liveSpec"]["catalogType"] == "capture"
    assert "model" not in doc["liveSpec"]
    assert "lastPublication" not in doc
    assert live_spec_document(LiveSpecRef(catalog_name="acmeCo/gone")) == {
        "catalogName": "acmeCo/gone",
        "liveSpec": None,
    }


def test_live_spec_row_publisher_without_any_identity_is_unknown():
    ref = replace(live_ref("acmeCo/a"), last_publication=LastPublication(user_id=None))

    assert live_spec_row(ref, flows=False)[4] == "unknown"
