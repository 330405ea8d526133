"""Vorsorge-Pilot CLI — main entry point."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from ..core.auth import ensure_default_admin, migrate_plaintext_passwords
from ..core.config import get_config
from ..data.database import get_db
from .commands import auth, calc, leads, setup, wizard

app = typer.Typer(
    name="vp",
    help="Förderrechner & lead capture for German private pension provision",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.add_typer(calc.app, name="calc", help="Förderrechner (bAV, Riester, Basisrente)")
app.add_typer(wizard.app, name="wizard", help="Interactive lead-capture flows")
app.add_typer(leads.app, name="leads", help="Submit and manage leads")
app.add_typer(auth.app, name="auth", help="Admin login")
app.add_typer(setup.app, name="setup", help="Interactive configuration")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
    )


@app.callback()
def startup():
    """Initialize database and admin account on first run."""
    configure_logging(get_config().log_level)
    get_db()
    migrate_plaintext_passwords()
    ensure_default_admin()


if __name__ == "__main__":
    app()
