# file: OSAKEL/core/cli.py
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import typer

from OSAKEL.core.batching import BatchCommitError
from OSAKEL.core.firebase import FirebaseInitError, firestore_session
from OSAKEL.core.logger import log_to_cloud

logger = logging.getLogger("core.cli")


class MigrationError(RuntimeError):
    """A bulk operation cannot proceed with the data it found."""


@dataclass
class CommandContext:
    credentials: Optional[str] = None
    project_id: Optional[str] = None


def usage_error(message: str, usage: Optional[str] = None):
    """Reject bad arguments before touching Firestore."""
    typer.echo(f"❌ {message}", err=True)
    if usage:
        typer.echo(usage, err=True)
    raise typer.Exit(1)


def run_command(ctx: typer.Context, name: str, operation: Callable[[Any], Any]):
    """
    Open a Firestore session, run ``operation(db)`` and map failures to exit code 1.
    """
    opts = ctx.find_object(CommandContext) or CommandContext()
    try:
        with firestore_session(opts.credentials, opts.project_id) as db:
            result = operation(db)
    except FirebaseInitError as e:
        log_to_cloud("init", "ERROR", f"{name}: Firebase initialization failed: {e}")
        typer.echo(f"❌ Firebase initialization failed: {e}", err=True)
        typer.echo("💡 Pass --credentials <service-account.json> or set GOOGLE_APPLICATION_CREDENTIALS", err=True)
        raise typer.Exit(1)
    except typer.Abort:
        typer.echo("❌ Cancelled.", err=True)
        raise typer.Exit(1)
    except BatchCommitError as e:
        log_to_cloud("batch", "ERROR", f"{name}: {e}",
                     {"batch": e.batch_number, "committed": e.committed})
        typer.echo(f"❌ {name} aborted: {e}", err=True)
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("%s failed", name)
        log_to_cloud("migration", "ERROR", f"{name} failed: {e}")
        typer.echo(f"❌ {name} failed: {e}", err=True)
        raise typer.Exit(1)

    log_to_cloud("migration", "INFO", f"{name} completed")
    return result
