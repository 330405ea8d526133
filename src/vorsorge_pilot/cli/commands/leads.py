"""Lead commands — submit leads and manage them as admin."""

import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ...core import leads as lead_service
from ...core.exceptions import InvalidLeadError, LeadNotFoundError
from ...core.models import LeadFlow
from .auth import require_user

app = typer.Typer(help="Lead management")
console = Console()

STATUS_COLORS = {
    "new": "cyan",
    "contacted": "yellow",
    "qualified": "green",
    "closed": "bold green",
    "lost": "dim",
}


def _parse_pairs(pairs: list[str]) -> dict:
    """Parse KEY=VALUE arguments into a dict."""
    data = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            console.print(f"[red]Expected KEY=VALUE, got '{pair}'[/red]")
            raise typer.Exit(1)
        data[key.strip()] = value
    return data


@app.command("submit")
def submit(
    fields: list[str] = typer.Argument(..., help="Form fields as KEY=VALUE (must include flow=av|bu)"),
):
    """Store a lead from KEY=VALUE form fields."""
    try:
        lead = lead_service.submit_lead(_parse_pairs(fields))
    except InvalidLeadError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]{lead.flow.value.upper()} lead saved (ID: {lead.id})[/green]")


@app.command("list")
def list_leads(
    flow: Optional[LeadFlow] = typer.Option(None, "--flow", help="Only av or bu leads"),
):
    """List stored leads (admin)."""
    require_user()
    rows = lead_service.list_leads(flow)
    if not rows:
        console.print("[yellow]No leads yet.[/yellow]")
        return

    title = f"Leads ({flow.value.upper()})" if flow else "Leads"
    table = Table(title=title)
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Flow")
    table.add_column("Name", style="bold")
    table.add_column("Phone")
    table.add_column("Status")
    table.add_column("Received")

    for lead in rows:
        color = STATUS_COLORS.get(lead.status.value, "")
        table.add_row(
            str(lead.id),
            lead.flow.value.upper(),
            lead.display_name or "—",
            lead.phone,
            f"[{color}]{lead.status.value}[/{color}]" if color else lead.status.value,
            lead.received_at.strftime("%Y-%m-%d %H:%M") if lead.received_at else "",
        )

    console.print(table)
    per_flow = ", ".join(
        f"{f.value.upper()}: {n}" for f, n in sorted(lead_service.count_by_flow().items())
    )
    console.print(f"  [dim]{len(rows)} lead(s) shown · stored {per_flow}[/dim]\n")


@app.command("show")
def show(lead_id: int = typer.Argument(..., help="Lead ID")):
    """Show all fields of one lead (admin)."""
    require_user()
    try:
        lead = lead_service.get_lead(lead_id)
    except LeadNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold]Lead {lead.id}[/bold]  {lead.flow.value.upper()}  —  {lead.display_name or lead.phone}")
    console.print(f"  Status:    {lead.status.value}")
    console.print(f"  Phone:     {lead.phone}")
    console.print(f"  Consent:   {'yes' if lead.consent else 'no'}")
    if lead.received_at:
        console.print(f"  Received:  {lead.received_at:%Y-%m-%d %H:%M:%S}"
                      + (f"  from {lead.source_ip}" if lead.source_ip else ""))
    if lead.updated_at:
        console.print(f"  Updated:   {lead.updated_at:%Y-%m-%d %H:%M:%S} by {lead.updated_by}")
    if lead.notes:
        console.print(f"  Notes:     {lead.notes}")

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="dim")
    table.add_column()
    for key in sorted(lead.payload):
        table.add_row(key, json.dumps(lead.payload[key], ensure_ascii=False).strip('"'))
    console.print(table)
    console.print()


@app.command("update")
def update(
    lead_id: int = typer.Argument(..., help="Lead ID"),
    fields: list[str] = typer.Argument(..., help="Changes as KEY=VALUE, e.g. status=contacted notes='...'"),
):
    """Update status, notes or form fields of a lead (admin)."""
    user = require_user()
    try:
        lead = lead_service.update_lead(lead_id, _parse_pairs(fields), user.username)
    except (LeadNotFoundError, InvalidLeadError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Lead {lead.id} updated (status: {lead.status.value})[/green]")


@app.command("delete")
def delete(
    lead_id: int = typer.Argument(..., help="Lead ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Delete a lead (admin)."""
    user = require_user()
    try:
        lead = lead_service.get_lead(lead_id)
    except LeadNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if not force:
        confirm = typer.confirm(f"Delete lead {lead.id} ({lead.display_name or lead.phone})?")
        if not confirm:
            console.print("Cancelled.")
            return

    lead_service.delete_lead(lead_id, user.username)
    console.print(f"[green]Lead {lead_id} deleted.[/green]")
