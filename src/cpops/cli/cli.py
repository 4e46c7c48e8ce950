"""CLI application for control-plane catalog tooling."""

import typer

from cpops.cli.commands.catalog import catalog_app
from cpops.cli.common.logs import configure_logging
from cpops.cli.common.options import VerboseOpt

app = typer.Typer(
    help="cpops - control-plane catalog tooling",
    no_args_is_help=True,
)


@app.callback()
def _main(verbose: bool = VerboseOpt):
    """Configure logging for every command."""
    configure_logging(verbose)


app.add_typer(catalog_app, name="catalog", help="List live specs in the catalog.")


if __name__ == "__main__":
    app()
