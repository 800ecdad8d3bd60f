from __future__ import annotations

import asyncio
import json
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import DAILY_SLOT_CEILING, MatchConfig
from .eligibility import resolve_required_rank
from .errors import DentmatchError, MalformedDateError
from .matching import select_treatments
from .models import MatchRequest
from .monitor import assessments_to_df, loads_to_df, roster_load
from .roster import DEFAULT_DATA_DIR, load_or_sample, sample_roster, save_roster
from .service import MatchResult, MatchService
from .visualize import plot_load_overview

console = Console()
app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.callback()
def _configure(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _parse_day(text: Optional[str]) -> date:
    if text is None:
        return date.today()
    try:
        return MatchRequest.parse(text, []).day
    except MalformedDateError as exc:
        raise typer.BadParameter(str(exc), param_hint="--date") from exc


@app.command("match")
def match(
    treatment: List[str] = typer.Option(..., "--treatment", "-t", help="Treatment id; repeat for several."),
    day: Optional[str] = typer.Option(None, "--date", help="Appointment date (YYYY-MM-DD); defaults to today."),
    patient: str = typer.Option("", help="Patient name used in the explanation."),
    data_dir: Path = typer.Option(DEFAULT_DATA_DIR, help="Directory containing roster CSV files."),
    timeout: float = typer.Option(5.0, help="Seconds to wait for the explanation."),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
    png_out: Optional[Path] = typer.Option(None, help="Save a load/score overview plot."),
) -> None:
    request = MatchRequest.parse(_parse_day(day), treatment, patient)
    doctors, treatments = load_or_sample(data_dir)
    service = MatchService(doctors, treatments, cfg=MatchConfig(explain_timeout=timeout))
    try:
        result = asyncio.run(service.handle(request))
    except DentmatchError as exc:
        console.print(f"[bold red]{escape(str(exc))}[/]")
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(json.dumps(result.to_dict()))
    else:
        _print_assessments(result)
        _print_verdict(result)

    if png_out:
        loads = loads_to_df(roster_load(doctors, request.day, result.outcome.required_rank))
        plot_load_overview(loads, assessments_to_df(result.outcome.assessments), outfile=png_out)
        console.log(f"Saved overview to {png_out}")


@app.command("monitor")
def monitor(
    day: Optional[str] = typer.Option(None, "--date", help="Date to inspect (YYYY-MM-DD); defaults to today."),
    treatment: Optional[List[str]] = typer.Option(None, "--treatment", "-t", help="Flag doctors below the rank these need."),
    data_dir: Path = typer.Option(DEFAULT_DATA_DIR, help="Directory containing roster CSV files."),
    png_out: Optional[Path] = typer.Option(None, help="Save a load overview plot."),
) -> None:
    target_day = _parse_day(day)
    doctors, treatments = load_or_sample(data_dir)
    required = resolve_required_rank(select_treatments(treatments, treatment or []))
    loads = roster_load(doctors, target_day, required)

    table = Table(title=f"Doctor load on {target_day.isoformat()}", header_style="bold magenta")
    for col in ["Doctor", "Rank", "Dept", "Booked", "Targets", "Status"]:
        table.add_column(col)
    for load in loads:
        progress = ", ".join(
            f"{escape(p.treatment)} {p.current}/{p.target}" + (" ok" if p.met else "") for p in load.progress
        )
        if load.is_full:
            status = "[red]full[/]"
        elif load.is_low_rank:
            status = "[yellow]rank too low[/]"
        else:
            status = "[green]open[/]"
        table.add_row(
            escape(load.doctor.name),
            load.doctor.rank.label,
            escape(load.doctor.dept),
            f"{load.daily_count} / {DAILY_SLOT_CEILING}",
            progress,
            status,
        )
    console.print(table)
    if required is not None:
        console.print(f"Required rank: [bold]{required.name}[/]")

    if png_out:
        plot_load_overview(loads_to_df(loads), outfile=png_out)
        console.log(f"Saved overview to {png_out}")


@app.command("treatments")
def list_treatments(
    data_dir: Path = typer.Option(DEFAULT_DATA_DIR, help="Directory containing roster CSV files."),
) -> None:
    _, treatments = load_or_sample(data_dir)
    table = Table(title="Treatment catalog", header_style="bold magenta")
    for col in ["Id", "Name", "Dept", "Min rank"]:
        table.add_column(col)
    for t in treatments:
        table.add_row(escape(t.treatment_id), escape(t.name), escape(t.dept), t.min_rank.label)
    console.print(table)


@app.command("seed-data")
def seed_data(
    data_dir: Path = typer.Option(DEFAULT_DATA_DIR, help="Directory to write the sample roster CSV files."),
) -> None:
    doctors, treatments = sample_roster()
    save_roster(doctors, treatments, data_dir)
    console.log(f"Wrote {len(doctors)} doctors and {len(treatments)} treatments to {data_dir}")


def _print_assessments(result: MatchResult) -> None:
    outcome = result.outcome
    table = Table(
        title=f"Candidates on {outcome.request.day.isoformat()} (requires {outcome.required_rank.name})",
        show_header=True,
        header_style="bold magenta",
    )
    for col in ["Doctor", "Rank", "Dept", "Booked", "Urgency", "Load", "Total", "Excluded because"]:
        table.add_column(col)
    for a in outcome.assessments:
        table.add_row(
            escape(a.name),
            a.doctor.rank.label,
            escape(a.doctor.dept),
            f"{a.daily_count} / {DAILY_SLOT_CEILING}",
            "" if a.urgency_score is None else f"{a.urgency_score:0.1f}",
            "" if a.load_score is None else f"{a.load_score:0.1f}",
            f"{a.total_score:0.1f}",
            "; ".join(a.eligibility.reasons()),
        )
    console.print(table)


def _print_verdict(result: MatchResult) -> None:
    if result.winner is None:
        console.print(Panel(escape(result.outcome.error.message), title="No match", style="red"))
        return
    winner = result.winner
    body = escape(result.explanation or "")
    if result.explanation_fallback:
        body += "\n[dim](explanation service unavailable)[/]"
    console.print(
        Panel(
            body,
            title=f"Dr. {escape(winner.name)}: {winner.points} points",
            subtitle=result.outcome.request.day.isoformat(),
            style="bold blue",
        )
    )
