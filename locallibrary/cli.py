"""Command-line interface for locallibrary utilities."""
from __future__ import annotations

import logging
from pathlib import Path

import click

from .importer import import_books

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

DB_URL_OPTION = click.option(
    "--db-url",
    default="sqlite:///locallibrary.db",
    envvar="LOCALLIBRARY_DB_URL",
    show_default=True,
    help="SQLAlchemy DB URL.",
)


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx):
    """Local library catalog.
    If invoked without a sub-command it starts the web server (same as `run`)."""
    if ctx.invoked_subcommand is None:
        ctx.forward(run)


@cli.command("load", help="Load books, genres and copies from a JSON file.")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@DB_URL_OPTION
@click.option("--chunk-size", default=500, help="Insert commit chunk size.")
def load(source: Path, db_url: str, chunk_size: int):
    """Populate the catalog database from SOURCE."""
    click.echo(f"Loading '{source}' into {db_url}…")
    try:
        total = import_books(source, db_url=db_url, chunk_size=chunk_size)
    except ValueError as e:
        raise click.ClickException(str(e))
    click.echo(f"Imported {total} books.")


@cli.command("run", help="Serve the catalog pages (genres, book copies) over HTTP.")
@DB_URL_OPTION
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=5000, type=int, show_default=True)
@click.option("--debug/--no-debug", default=False, help="Flask debugger and reloader.")
def run(db_url: str, host: str, port: int, debug: bool):
    """Start the catalog on HOST:PORT backed by the database at --db-url."""
    from .web import create_app

    app = create_app(db_url)
    click.echo(f"* Catalog at http://{host}:{port}/catalog/ using {db_url}" + (" [debug]" if debug else ""))
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":  # pragma: no cover
    cli()
