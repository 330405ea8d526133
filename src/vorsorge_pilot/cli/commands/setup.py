"""Interactive setup wizard — vp setup."""

from decimal import Decimal, InvalidOperation

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from ...core.config import AppConfig, get_config, save_config

app = typer.Typer(help="Interactive setup wizard")
console = Console()

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _say(text: str, style: str = ""):
    """Bot 'speaks'."""
    console.print(f"\n  {text}" if not style else f"\n  [{style}]{text}[/{style}]")


def _ask_decimal(prompt: str, default: Decimal) -> Decimal:
    while True:
        raw = Prompt.ask(f"  [cyan]>[/cyan] {prompt}", default=str(default), console=console)
        try:
            value = Decimal(raw.replace(",", "."))
        except InvalidOperation:
            console.print("    [red]Enter a number[/red]")
            continue
        if not value.is_finite():
            console.print("    [red]Enter a finite number[/red]")
            continue
        if value < 0:
            console.print("    [red]Must not be negative[/red]")
            continue
        return value


def _yesno(prompt: str, default: bool = True) -> bool:
    console.print(f"\n  {prompt}")
    return Confirm.ask("  [cyan]>[/cyan]", default=default, console=console)


@app.command("run")
def run_setup():
    """Run the interactive setup wizard."""
    existing = get_config()

    console.print()
    console.print(Panel.fit(
        "[bold]Vorsorge-Pilot — Setup[/bold]",
        border_style="cyan",
        padding=(0, 4),
    ))
    _say("Current settings are shown as defaults. Press Enter to keep them.")

    # ── Calculation ───────────────────────────────────────────────────────────
    _say("Employee social-security rate used for the bAV saving (fraction, e.g. 0.20):")
    sv_rate = _ask_decimal("SV rate", existing.sv_rate)
    while sv_rate > 1:
        console.print("    [red]Enter a fraction between 0 and 1[/red]")
        sv_rate = _ask_decimal("SV rate", existing.sv_rate)

    _say("Other pension contributions counted against the Basisrente limit (EUR/year):")
    other = _ask_decimal("Other contributions", existing.other_pension_contributions)

    # ── Leads & admin ─────────────────────────────────────────────────────────
    require_consent = _yesno(
        "Require DSGVO consent on every lead?", default=existing.require_consent
    )
    _say("Admin session lifetime (hours):")
    session_hours = IntPrompt.ask("  [cyan]>[/cyan]", default=existing.session_hours, console=console)

    _say("Log level:")
    for i, lvl in enumerate(LOG_LEVELS, 1):
        console.print(f"    [bold]{i}.[/bold] {lvl}")
    lvl_default = next((i for i, lvl in enumerate(LOG_LEVELS) if lvl == existing.log_level), 1)
    lvl_raw = Prompt.ask("  [cyan]>[/cyan]", default=str(lvl_default + 1), console=console)
    try:
        log_level = LOG_LEVELS[int(lvl_raw) - 1]
    except (ValueError, IndexError):
        log_level = "INFO"

    # ── Summary & confirm ─────────────────────────────────────────────────────
    console.print()
    table = Table(box=box.ROUNDED, border_style="cyan", show_header=False, padding=(0, 2))
    table.add_column(style="dim")
    table.add_column(style="bold")
    table.add_row("SV rate", f"{sv_rate * 100:.1f}%")
    table.add_row("Other pension contributions", f"€{other:,.0f}")
    table.add_row("Consent required", "yes" if require_consent else "no")
    table.add_row("Session lifetime", f"{session_hours} h")
    table.add_row("Log level", log_level)
    console.print(table)

    if not _yesno("Save these settings?", default=True):
        _say("Cancelled. Settings unchanged.", "yellow")
        raise typer.Exit()

    save_config(AppConfig(
        sv_rate=sv_rate,
        other_pension_contributions=other,
        session_hours=session_hours,
        default_admin_user=existing.default_admin_user,
        default_admin_password=existing.default_admin_password,
        require_consent=require_consent,
        log_level=log_level,
    ))

    console.print()
    console.print(Panel.fit(
        "[bold green]✓ Settings saved to config.json[/bold green]\n\n"
        "[dim]Run [bold]vp setup run[/bold] again to change.[/dim]",
        border_style="green",
        padding=(0, 2),
    ))
    console.print()
