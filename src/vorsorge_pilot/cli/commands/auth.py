"""Admin login commands."""

import typer
from rich.console import Console

from ...core import auth
from ...core.exceptions import AuthenticationError, NotAuthenticatedError, UserNotFoundError
from ...core.models import AdminUser

app = typer.Typer(help="Admin login")
console = Console()


def require_user() -> AdminUser:
    """Return the logged-in admin or exit with an error."""
    try:
        return auth.current_user(auth.load_session_token())
    except NotAuthenticatedError as e:
        console.print(f"[red]{e}[/red]  [dim]Log in with: vp auth login[/dim]")
        raise typer.Exit(1)


@app.command("login")
def login(
    username: str = typer.Option(..., "--username", "-u", prompt=True),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True),
):
    """Log in as admin and keep the session for the leads commands."""
    try:
        session = auth.login(username, password)
    except AuthenticationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    previous = auth.load_session_token()
    if previous:
        auth.logout(previous)
    auth.save_session_token(session.token)
    console.print(f"[green]Logged in as {session.username}[/green] "
                  f"[dim](valid until {session.expires_at:%Y-%m-%d %H:%M})[/dim]")


@app.command("logout")
def logout():
    """End the current session."""
    token = auth.load_session_token()
    if token:
        auth.logout(token)
    auth.clear_session_token()
    console.print("[green]Logged out.[/green]")


@app.command("status")
def status():
    """Show the logged-in admin."""
    try:
        user = auth.current_user(auth.load_session_token())
    except NotAuthenticatedError:
        console.print("[yellow]Not logged in[/yellow]")
        return
    console.print(f"Logged in as [bold]{user.username}[/bold] ({user.role})")


@app.command("passwd")
def passwd(
    password: str = typer.Option(..., "--password", "-p", prompt="New password",
                                 hide_input=True, confirmation_prompt=True),
):
    """Change the password of the logged-in admin."""
    user = require_user()
    try:
        auth.change_password(user.username, password)
    except UserNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print("[green]Password changed.[/green]")
