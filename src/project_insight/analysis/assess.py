"""Human-readable assessment of an analyzed project."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table

from .interpretation import Interpretation
from .models import Analysis
from .preferences import PREFERENCES_ELEMENT
from .scoring import weighted_composite_score
from .utils import is_usable_as_seed


def _yes_no(value: bool) -> str:
    return "[green]yes[/green]" if value else "[dim]no[/dim]"


def render_assessment(
    analysis: Analysis,
    interpretation: Interpretation,
    console: Console,
    weightings: Optional[dict[str, int]] = None,
) -> None:
    """Print detected technologies, seed usability and delivery knowledge."""
    console.print()
    console.print(f"[bold cyan]PROJECT ASSESSMENT[/bold cyan] -- {analysis.id}")
    console.print()

    elements = [e for name, e in analysis.elements.items() if name != PREFERENCES_ELEMENT]
    if elements:
        table = Table(show_header=True, show_lines=False, pad_edge=True)
        table.add_column("Technology", min_width=16)
        table.add_column("Tags")
        table.add_column("Environment variables")
        for element in elements:
            table.add_row(
                element.name,
                ", ".join(element.tags) or "[dim]--[/dim]",
                ", ".join(element.referenced_environment_variables) or "[dim]--[/dim]",
            )
        console.print(table)
    else:
        console.print("[yellow]No technologies detected.[/yellow]")
    console.print()

    if analysis.seed_analysis is not None:
        console.print(f"  Usable as seed:  {_yes_no(is_usable_as_seed(analysis))}")
    console.print(f"  Knows how to build:   {_yes_no(bool(interpretation.build_goals))}")
    console.print(f"  Knows how to test:    {_yes_no(bool(interpretation.test_goals))}")
    console.print(f"  Knows how to deploy:  {_yes_no(bool(interpretation.deploy_goals))}")

    composite = weighted_composite_score(interpretation, weightings)
    if composite is not None:
        console.print(f"  Composite score:      [bold]{composite:.2f}[/bold] / 5")
        for score in interpretation.scores.values():
            reason = f" [dim]({score.reason})[/dim]" if score.reason else ""
            console.print(f"    {score.name}: {score.score}{reason}")

    for message in interpretation.messages:
        console.print(f"  [yellow]>[/yellow] {message.text}")
    console.print()
