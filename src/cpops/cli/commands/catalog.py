"""Commands for working with the control-plane catalog."""

from dataclasses import replace

import typer

from cpops.cli.common.context import CatalogAppContext, build_catalog_context
from cpops.cli.common.exits import EXIT_USAGE, die, exit_from_listing_error, warn_exit
from cpops.cli.common.options import (
    ApiUrlOpt,
    DataPlaneOpt,
    FlowsOpt,
    ModelsOpt,
    NameOpt,
    OutputOpt,
    PickOpt,
    PrefixOpt,
    TokenOpt,
    TypeOpt,
)
from cpops.cli.common.output import OutputFormat, out
from cpops.core.errors import AmbiguousSelectionError, CatalogListError
from cpops.core.listing import ListSelection, resolve_selection, stream_live_specs
from cpops.core.models import FeatureFlags, LiveSpecRef
from cpops.core.selection import CatalogType

catalog_app = typer.Typer(
    help="Work with the control-plane catalog.",
    no_args_is_help=False,
    invoke_without_command=True,
)


@catalog_app.callback()
def _init(
    ctx: typer.Context,
    api_url: str | None = ApiUrlOpt,
    token: str | None = TokenOpt,
):
    """Initialize catalog context."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)
    appctx = build_catalog_context(api_url, token)
    ctx.call_on_close(appctx.client.close)
    ctx.obj = appctx


def _resolve_selection_or_exit(
    appctx: CatalogAppContext, selection: ListSelection, *, pick: bool
) -> ListSelection:
    """Resolve default prefixes, letting the user pick when there are too many."""
    try:
        with out.status("Resolving accessible prefixes..."):
            return resolve_selection(appctx.adapter, selection, appctx.listing)
    except AmbiguousSelectionError as exc:
        if not pick or not exc.prefixes:
            exit_from_listing_error(exc)
        chosen = out.select_many("Select prefixes to list:", exc.prefixes)
        if not chosen:
            warn_exit("No prefixes selected", code=0)
        out.info(f"Listing prefixes: {', '.join(sorted(chosen))}")
        return replace(selection, prefixes=tuple(sorted(chosen)))
    except CatalogListError as exc:
        exit_from_listing_error(exc)


@catalog_app.command("list")
def list_(
    ctx: typer.Context,
    name: list[str] = NameOpt,
    prefix: list[str] = PrefixOpt,
    type_: CatalogType | None = TypeOpt,
    data_plane: str | None = DataPlaneOpt,
    flows: bool = FlowsOpt,
    models: bool = ModelsOpt,
    output: OutputFormat = OutputOpt,
    pick: bool = PickOpt,
):
    """
    List live specs by name, prefix, type or data plane.

    Without --name or --prefix, the prefixes you have read access to are
    listed.
    """
    if models and output == OutputFormat.TABLE:
        die(
            "cannot output models as a table, must pass `--output json` or `--output yaml`",
            code=EXIT_USAGE,
        )
    appctx: CatalogAppContext = ctx.obj

    selection = _resolve_selection_or_exit(
        appctx,
        ListSelection(
            names=frozenset(name),
            prefixes=tuple(prefix),
            catalog_type=type_,
            data_plane_name=data_plane,
        ),
        pick=pick,
    )
    flags = FeatureFlags(include_models=models, include_flows=flows)

    refs: list[LiveSpecRef] = []
    try:
        with out.status("Loading live specs..."), stream_live_specs(
            appctx.adapter, selection, flags, appctx.listing
        ) as stream:
            refs.extend(stream)
    except CatalogListError as exc:
        exit_from_listing_error(exc)

    if output == OutputFormat.JSON:
        out.live_specs_json(refs)
        return
    if output == OutputFormat.YAML:
        out.live_specs_yaml(refs)
        return

    if not refs:
        warn_exit("No live specs found", code=0)

    out.live_specs_table(refs, flows=flows)
