"""Common CLI options for the CLI."""

import typer

from cpops.cli.common.output import OutputFormat

ApiUrlOpt = typer.Option(
    None,
    "--api-url",
    help="Control-plane API URL (defaults to $CPOPS_API_URL)",
    show_default=False,
)

TokenOpt = typer.Option(
    None,
    "--token",
    help="Control-plane access token (defaults to $CPOPS_ACCESS_TOKEN)",
    show_default=False,
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Log debug output to stderr",
)

NameOpt = typer.Option(
    [],
    "--name",
    help="Select a catalog entry by exact name. This is reusable.",
    show_default=False,
)

PrefixOpt = typer.Option(
    [],
    "--prefix",
    help="Select all catalog entries under a prefix. This is reusable.",
    show_default=False,
)

TypeOpt = typer.Option(
    None,
    "--type",
    case_sensitive=False,
    help="Only list entries of this type",
    show_default=False,
)

DataPlaneOpt = typer.Option(
    None,
    "--data-plane",
    help="Only list entries assigned to this data plane",
    show_default=False,
)

FlowsOpt = typer.Option(
    False,
    "--flows",
    "-f",
    help='Include "Reads From" / "Writes To" columns in the output',
)

ModelsOpt = typer.Option(
    False,
    "--models",
    help="Include the models in the output (requires '--output json|yaml')",
)

OutputOpt = typer.Option(
    OutputFormat.TABLE,
    "--output",
    "-o",
    case_sensitive=False,
    help="Output format",
)

PickOpt = typer.Option(
    False,
    "--pick",
    help="Choose prefixes interactively when too many are accessible",
)
