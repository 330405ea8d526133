"""Lead-capture wizard — vp wizard av / vp wizard bu.

AV (Altersvorsorge), four steps:
  1. Einkommen & Beschäftigung   2. Familie & bestehende Vorsorge
  3. Ergebnis (Förderrechner)    4. Kontakt & Einwilligung
BU (Berufsunfähigkeit), three steps:
  1. Beruf & Alter   2. Gesundheit   3. Kontakt & Einwilligung
"""

from datetime import datetime, timezone
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt

from ...core.exceptions import InvalidLeadError
from ...core.foerderung import calculate_foerderung
from ...core.leads import collect_flow_fields, prefill_status, submit_lead
from ...core.models import LeadFlow
from .calc import render_result

app = typer.Typer(help="Lead-capture wizard")
console = Console()

AV_STATUS = ["Angestellt", "Beamter", "Selbständig", "Freiberufler"]
AV_FAMILY = ["ledig", "ledig, mit Kindern", "verheiratet", "verheiratet, mit Kindern"]
BU_OCCUPATION = ["Angestellt (Büro)", "Angestellt (körperlich)", "Selbständig", "Student/Azubi"]


def _say(text: str, style: str = ""):
    console.print(f"\n  {text}" if not style else f"\n  [{style}]{text}[/{style}]")


def _step(flow: str, index: int, total: int, title: str):
    console.print(f"\n[cyan]Schritt {index}/{total}[/cyan] — [bold]{title}[/bold]  "
                  f"[dim]({flow.upper()})[/dim]")


def _pick(choices: list[str], default: Optional[str] = None) -> str:
    """Pick from numbered list. Returns the chosen label."""
    for i, c in enumerate(choices, 1):
        console.print(f"    [bold]{i}.[/bold] {c}")
    default_idx = str(choices.index(default) + 1) if default in choices else None
    while True:
        raw = Prompt.ask("  [cyan]>[/cyan]", default=default_idx, console=console)
        try:
            idx = int(raw) - 1
            if 0 <= idx < len(choices):
                return choices[idx]
        except (TypeError, ValueError):
            pass
        console.print("    [red]Bitte eine Zahl aus der Liste eingeben[/red]")


def _required(prompt: str) -> str:
    while True:
        value = Prompt.ask(f"  [cyan]>[/cyan] {prompt}", console=console).strip()
        if value:
            return value
        console.print("    [red]Pflichtfeld[/red]")


def _contact(flow: LeadFlow, form: dict) -> None:
    p = flow.value
    form[f"{p}_firstname"] = _required("Vorname")
    form[f"{p}_lastname"] = _required("Nachname")
    form[f"{p}_phone"] = _required("Telefon")
    form[f"{p}_email"] = Prompt.ask("  [cyan]>[/cyan] E-Mail (optional)", default="", console=console)
    _say("Ich willige ein, dass meine Angaben zur Kontaktaufnahme gespeichert werden (DSGVO).")
    form[f"{p}_consent"] = "on" if Confirm.ask("  [cyan]>[/cyan]", default=False, console=console) else ""


def _submit(flow: LeadFlow, form: dict, extra: Optional[dict] = None) -> None:
    payload = collect_flow_fields(flow, form)
    payload["flow"] = flow.value
    payload["timestamp"] = datetime.now(timezone.utc).isoformat()
    if extra:
        payload.update(extra)
    try:
        lead = submit_lead(payload)
    except InvalidLeadError as e:
        console.print(f"\n  [red]{e}[/red]")
        _say("Ohne Einwilligung können wir dich leider nicht kontaktieren.", "yellow")
        raise typer.Exit(1)

    console.print()
    console.print(Panel.fit(
        "[bold green]✓ Danke! Wir melden uns in Kürze bei dir.[/bold green]\n\n"
        f"[dim]Anfrage-Nr. {lead.id}[/dim]",
        border_style="green",
        padding=(0, 2),
    ))
    console.print()


@app.command("av")
def av(
    segment: str = typer.Option("", "--segment", help="Landing-page segment, e.g. 'Angestellte'"),
):
    """Altersvorsorge: calculate the funding and request a callback."""
    console.print()
    console.print(Panel.fit("[bold]Vorsorge-Pilot — Förder-Check[/bold]", border_style="cyan", padding=(0, 4)))
    form: dict = {}

    # ── Step 1: income & employment ──────────────────────────────────────────
    _step("av", 1, 4, "Einkommen & Beschäftigung")
    _say("Wie hoch ist dein Bruttoeinkommen pro Monat (EUR)?")
    form["av_income"] = _required("Brutto/Monat")
    _say("Wie bist du beschäftigt?")
    form["av_status"] = _pick(AV_STATUS, default=prefill_status(segment) or None)

    # ── Step 2: family & existing provision ──────────────────────────────────
    _step("av", 2, 4, "Familie & bestehende Vorsorge")
    _say("Familienstand?")
    form["av_family"] = _pick(AV_FAMILY)
    _say("Hast du bereits eine Altersvorsorge?")
    has_existing = Confirm.ask("  [cyan]>[/cyan]", default=False, console=console)
    form["av_existing"] = "ja" if has_existing else "nein"
    if has_existing:
        form["av_existing_details"] = Prompt.ask(
            "  [cyan]>[/cyan] Welche? (z. B. Riester, bAV)", default="", console=console
        )

    # ── Step 3: result ────────────────────────────────────────────────────────
    _step("av", 3, 4, "Dein Ergebnis")
    result = calculate_foerderung(form)
    console.print()
    render_result(result)
    if not Confirm.ask("  Mehr erfahren und Rückruf anfordern?", default=True, console=console):
        _say("Alles klar — deine Angaben wurden nicht gespeichert.", "dim")
        return

    # ── Step 4: contact & consent ─────────────────────────────────────────────
    _step("av", 4, 4, "Kontakt")
    _contact(LeadFlow.AV, form)
    _submit(LeadFlow.AV, form, extra={"segmentPrefill": segment})


@app.command("bu")
def bu():
    """Berufsunfähigkeit: collect the risk details and request a callback."""
    console.print()
    console.print(Panel.fit("[bold]Vorsorge-Pilot — BU-Check[/bold]", border_style="cyan", padding=(0, 4)))
    form: dict = {}

    _step("bu", 1, 3, "Beruf & Alter")
    _say("Was machst du beruflich?")
    form["bu_occupation"] = _pick(BU_OCCUPATION)
    form["bu_age"] = _required("Alter")

    _step("bu", 2, 3, "Gesundheit")
    _say("Hattest du in den letzten 5 Jahren Vorerkrankungen?")
    has_health = Confirm.ask("  [cyan]>[/cyan]", default=False, console=console)
    form["bu_health"] = "ja" if has_health else "nein"
    if has_health:
        form["bu_health_details"] = Prompt.ask("  [cyan]>[/cyan] Welche?", default="", console=console)

    _step("bu", 3, 3, "Kontakt")
    _contact(LeadFlow.BU, form)
    _submit(LeadFlow.BU, form)
