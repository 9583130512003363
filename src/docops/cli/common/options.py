"""Common CLI options for the CLI."""

import typer

ApiUrlOpt = typer.Option(
    None,
    "--api-url",
    help="Base URL of the database API (default: $DOCOPS_API_URL)",
)

TokenOpt = typer.Option(
    None,
    "--token",
    help="Bearer token for the API (default: $DOCOPS_TOKEN)",
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Log remote calls and state changes to stderr",
)

YesOpt = typer.Option(
    False,
    "--yes",
    help="Skip confirmation prompt",
)

DryRunOpt = typer.Option(
    False,
    "--dry-run",
    help="Show what would change, but do nothing",
)

PagesOpt = typer.Option(
    None,
    "--pages",
    "-n",
    min=1,
    help="Load up to N pages forward without the interactive prompt",
)

WhereOpt = typer.Option(
    [],
    "--where",
    "-w",
    help="Filter criterion (field=value). This is reusable.",
    show_default=False,
)
