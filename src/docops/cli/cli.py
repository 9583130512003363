"""CLI application for document database operations tooling."""

import logging

import typer

from docops.cli.commands.collections import collection_app
from docops.cli.commands.databases import db_app
from docops.cli.common.log import setup_logging
from docops.cli.common.options import VerboseOpt
from docops.core.config import log_level_from_env

app = typer.Typer(
    help="docops - browse and manage a document database through its API",
    no_args_is_help=True,
)

app.add_typer(db_app, name="db", help="List / create / drop databases.")
app.add_typer(collection_app, name="collection")


@app.callback()
def _main(verbose: bool = VerboseOpt):
    """Configure logging for every command."""
    setup_logging(logging.DEBUG if verbose else log_level_from_env())


if __name__ == "__main__":
    app()
