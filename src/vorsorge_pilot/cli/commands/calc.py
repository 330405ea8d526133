"""Förderrechner commands — estimate bAV / Riester / Basisrente funding."""

import json

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from ...core.foerderung import calculate_foerderung
from ...core.models import BenefitResult, FundingResult

app = typer.Typer(help="Förderrechner")
console = Console()

VEHICLE_LABELS = {
    "bav": "Betriebliche Altersvorsorge (bAV)",
    "riester": "Riester-Rente",
    "basisrente": "Basisrente (Rürup)",
}


def _vehicle_row(table: Table, label: str, r: BenefitResult) -> None:
    if not r.applicable:
        table.add_row(label, "[dim]—[/dim]", "[dim]nicht möglich[/dim]")
        return
    table.add_row(label, f"€{r.max_contribution:,.0f}", f"[green]€{r.funding_advantage:,.0f}[/green]")


def render_result(result: FundingResult, out: Console = console) -> None:
    """Print the three vehicles and the Förderquote as a rich table."""
    table = Table(title="Ihr jährlicher Fördervorteil", box=box.ROUNDED)
    table.add_column("Produkt", style="bold")
    table.add_column("Max. Beitrag / Jahr", justify="right")
    table.add_column("Fördervorteil / Jahr", justify="right")

    _vehicle_row(table, VEHICLE_LABELS["bav"], result.bav)
    _vehicle_row(table, VEHICLE_LABELS["riester"], result.riester)
    _vehicle_row(table, VEHICLE_LABELS["basisrente"], result.basisrente)
    out.print(table)

    total = result.total
    out.print(f"\n  Eigener Aufwand gesamt:  €{total.own_cost:,.0f}")
    out.print(f"  Fördervorteil gesamt:    [bold green]€{total.funding_advantage:,.0f}[/bold green]")
    out.print(f"  Förderquote:             [bold]{total.funding_ratio:.1f}%[/bold]")

    if result.profile is not None:
        p = result.profile
        out.print(
            f"\n  [dim]Annahmen: Jahresbrutto €{p.annual_gross_income:,.0f}, "
            f"Grenzsteuersatz {p.marginal_tax_rate * 100:.0f}%, "
            f"{p.occupation.value}, {p.marital_status.value}, "
            f"Kinder {p.children_before_2008 + p.children_from_2008}[/dim]"
        )
    out.print()


@app.command("run")
def run(
    income: str = typer.Option("", "--income", "-i", help="Gross monthly income (EUR)"),
    status: str = typer.Option("Angestellt", "--status", "-s",
                               help="Angestellt | Beamter | Selbständig | Freiberufler"),
    family: str = typer.Option("ledig", "--family", "-f",
                               help="e.g. 'ledig', 'verheiratet, mit Kindern'"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON"),
):
    """Calculate the maximum state funding for one person."""
    result = calculate_foerderung({
        "av_income": income,
        "av_status": status,
        "av_family": family,
    })
    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return
    render_result(result)
