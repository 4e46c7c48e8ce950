"""Output formatting utilities for the CLI."""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

import questionary
import yaml
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from cpops.cli.common.tui_style import QUESTIONARY_STYLE_SELECT
from cpops.core.models import LastPublication, LiveSpecRef

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

# Documents and tables go to stdout; messages, spinners and logs to stderr.
console = Console(theme=_THEME)
err_console = Console(theme=_THEME, stderr=True)


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


def format_user(
    email: str | None, full_name: str | None, user_id: str | None
) -> str:
    """Render a user as `Full Name <email>`, falling back to what is known."""
    if full_name and email:
        return f"{full_name} <{email}>"
    return email or full_name or user_id or "unknown"


def _publication_user(last_pub: LastPublication | None) -> str:
    if last_pub is None:
        return "unknown"
    return format_user(last_pub.user_email, last_pub.user_full_name, last_pub.user_id)


def live_spec_headers(flows: bool) -> list[str]:
    headers = ["ID", "Name", "Type", "Updated", "Updated By", "Data Plane ID"]
    if flows:
        headers += ["Reads From", "Writes To"]
    return headers


def live_spec_row(ref: LiveSpecRef, flows: bool) -> list[str]:
    """
    Render one live spec as table cells.

    Entries without a live spec (being deleted) only show their name.
    """
    ls = ref.live_spec
    row = [
        ls.live_spec_id if ls else "",
        ref.catalog_name,
        ls.catalog_type if ls else "",
        ls.updated_at.isoformat() if ls else "",
        _publication_user(ref.last_publication),
        ls.data_plane_id if ls else "",
    ]
    if flows:
        row.append("\n".join(ls.reads_from or ()) if ls else "")
        row.append("\n".join(ls.writes_to or ()) if ls else "")
    return row


def live_spec_document(ref: LiveSpecRef) -> dict[str, Any]:
    """Render one live spec as a JSON-serializable mapping."""
    doc: dict[str, Any] = {"catalogName": ref.catalog_name, "liveSpec": None}
    ls = ref.live_spec
    if ls:
        doc["liveSpec"] = {
            "liveSpecId": ls.live_spec_id,
            "catalogType": ls.catalog_type,
            "updatedAt": ls.updated_at.isoformat(),
            "dataPlaneId": ls.data_plane_id,
            "lastPubId": ls.last_pub_id,
        }
        if ls.model is not None:
            doc["liveSpec"]["model"] = ls.model
        if ls.reads_from is not None:
            doc["liveSpec"]["readsFrom"] = list(ls.reads_from)
        if ls.writes_to is not None:
            doc["liveSpec"]["writesTo"] = list(ls.writes_to)
    if ref.last_publication:
        doc["lastPublication"] = {
            "userId": ref.last_publication.user_id,
            "userEmail": ref.last_publication.user_email,
            "userFullName": ref.last_publication.user_full_name,
        }
    return doc


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages, tables and documents."""

    def info(self, msg: str) -> None:
        """Print an info message."""
        err_console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with err_console.status(msg, spinner="dots"):
            yield

    def warn(self, msg: str) -> None:
        err_console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        err_console.print(f"[err]✗[/] {msg}")

    def select_many(self, message: str, choices: list[str]) -> list[str]:
        """
        Prompt the user to select multiple items from a list.

        Returns the selected values, or an empty list if cancelled.
        """
        if not choices:
            return []
        picked = questionary.checkbox(
            f"[cpops] {message}",
            choices=choices,
            style=QUESTIONARY_STYLE_SELECT,
            instruction="Use ↑/↓, space, a (all), i (invert), enter",
        ).ask()
        return list(picked or [])

    def live_specs_table(
        self, refs: Iterable[LiveSpecRef], *, flows: bool, title: str = "Live specs"
    ) -> None:
        t = Table(title=title, show_lines=False)
        for header in live_spec_headers(flows):
            style = "ok" if header == "Name" else None
            t.add_column(header, style=style, no_wrap=header == "ID")

        for ref in refs:
            t.add_row(*live_spec_row(ref, flows))

        console.print(t)

    def live_specs_json(self, refs: Iterable[LiveSpecRef]) -> None:
        console.print_json(json.dumps([live_spec_document(r) for r in refs]))

    def live_specs_yaml(self, refs: Iterable[LiveSpecRef]) -> None:
        docs = [live_spec_document(r) for r in refs]
        console.print(
            yaml.safe_dump(docs, sort_keys=False),
            end="",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )


out = Out()
