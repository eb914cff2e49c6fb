# file: OSAKEL/main.py
from typing import List, Optional

import click
import typer

from OSAKEL.core.cli import CommandContext
from OSAKEL.core.logger import setup_logging

# ------------------------------
# Command groups
# ------------------------------
from OSAKEL.Drinks.migrate import cli as drinks_cli
from OSAKEL.Shops.migrate import cli as shops_cli
from OSAKEL.Links.links import cli as links_cli
from OSAKEL.Categories.update_field import cli as categories_cli
from OSAKEL.ProxyLocation.debug import cli as debug_cli

# shops sub-commands registered on shops_cli
import OSAKEL.Shops.image_urls  # noqa: F401
import OSAKEL.Shops.seed  # noqa: F401

app = typer.Typer(name="osakel", help="OSAKEL Firestore administration", no_args_is_help=True)


@app.callback()
def root(
    ctx: typer.Context,
    credentials: Optional[str] = typer.Option(
        None, "--credentials", help="Service account JSON file (default: GOOGLE_APPLICATION_CREDENTIALS)"
    ),
    project: Optional[str] = typer.Option(None, "--project", help="Firebase project id"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    if verbose:
        setup_logging("DEBUG")
    else:
        setup_logging()
    ctx.obj = CommandContext(credentials=credentials, project_id=project)


app.add_typer(drinks_cli, name="drinks")
app.add_typer(shops_cli, name="shops")
app.add_typer(links_cli, name="links")
app.add_typer(categories_cli, name="categories")
app.add_typer(debug_cli, name="debug")


def main(args: Optional[List[str]] = None):
    """
    Console entry point. Every failure, parse errors included, exits with 1.
    """
    try:
        rv = app(args=args, prog_name="osakel", standalone_mode=False)
    except click.exceptions.UsageError as e:
        e.show()
        raise SystemExit(1)
    except click.exceptions.Abort:
        typer.echo("❌ Cancelled.", err=True)
        raise SystemExit(1)
    except click.exceptions.ClickException as e:
        e.show()
        raise SystemExit(1)
    except click.exceptions.Exit as e:
        raise SystemExit(e.exit_code)
    raise SystemExit(rv if isinstance(rv, int) else 0)


if __name__ == "__main__":
    main()
