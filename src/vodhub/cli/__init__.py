"""CLI commands for vodhub.

Provides command-line interface using Typer:
- vodhub serve: Run the API server
- vodhub cache: Inspect the configured cache store

Usage:
    vodhub --help
    vodhub serve --port 3000
    vodhub cache stats
"""

import typer

from vodhub.cli.cache_cmd import app as cache_app
from vodhub.cli.serve import app as serve_app

app = typer.Typer(
    name="vodhub",
    help="vodhub: cached, concurrent search across content-listing sites",
    no_args_is_help=True,
)

app.add_typer(serve_app, name="serve")
app.add_typer(cache_app, name="cache")


@app.callback()
def callback() -> None:
    """vodhub: cached, concurrent search across content-listing sites."""
    pass


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
