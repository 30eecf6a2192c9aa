"""Assess CLI command -- analyze a local project and report what is known about it."""

import asyncio
import importlib
import json
from pathlib import Path
from typing import Optional

import typer

from ..analysis.analyzer import ProjectAnalyzer, ProjectAnalyzerBuilder
from ..analysis.assess import render_assessment
from ..analysis.models import AnalysisOptions
from ..config import AnalysisConfig
from ..context import AnalysisContext
from ..exceptions import ConfigurationError, ProjectInsightError
from ..logging_config import setup_logging
from ..project import LocalProject
from . import app
from ._common import console, resolve_config


def load_analyzer(target: str, config: AnalysisConfig) -> ProjectAnalyzer:
    """Resolve ``module:attribute`` to a built analyzer.

    The attribute may be a ProjectAnalyzer, a ProjectAnalyzerBuilder, or a
    callable taking the AnalysisConfig and returning either.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(f"Analyzer must be given as module:attribute, got '{target}'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(
            f"Cannot import analyzer module '{module_name}'", details={"error": str(e)}
        )

    found = getattr(module, attr, None)
    if found is None:
        raise ConfigurationError(f"Module '{module_name}' has no attribute '{attr}'")
    if not isinstance(found, (ProjectAnalyzer, ProjectAnalyzerBuilder)) and callable(found):
        found = found(config)
    if isinstance(found, ProjectAnalyzerBuilder):
        found = found.build()
    if not isinstance(found, ProjectAnalyzer):
        raise ConfigurationError(f"'{target}' did not produce a ProjectAnalyzer")
    return found


async def _run(analyzer: ProjectAnalyzer, project: LocalProject, full: bool):
    return await analyzer.analyze_and_interpret(
        project, AnalysisContext(), AnalysisOptions(full=full)
    )


@app.command()
def assess(
    path: Path = typer.Argument(
        Path("."),
        help="Project directory to assess",
        exists=True,
        file_okay=False,
        resolve_path=True,
    ),
    analyzer: str = typer.Option(
        ...,
        "--analyzer",
        "-a",
        help="Analyzer to use, as module:attribute",
    ),
    full: bool = typer.Option(
        False,
        "--full",
        help="Run a full analysis: seed analysis, scores, inspections",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output the analysis in machine-readable JSON format",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML config file",
        exists=True,
        dir_okay=False,
    ),
    sequential: bool = typer.Option(
        False,
        "--sequential",
        help="Run scanners one after another instead of concurrently",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only show errors",
    ),
):
    """
    Analyze a project and report its technologies and delivery readiness.

    [bold cyan]Examples:[/bold cyan]

      project-insight assess . --analyzer my_sdm.analyzers:node_analyzer

      project-insight assess ../service --analyzer my_sdm:build_analyzer --full

      project-insight assess . -a my_sdm:analyzer --json
    """
    try:
        settings = resolve_config(
            config,
            scan_mode="sequential" if sequential else None,
            verbose=verbose,
            quiet=quiet,
        )
        setup_logging(
            verbose=settings.verbosity == "verbose",
            quiet=settings.verbosity == "quiet",
        )
        project_analyzer = load_analyzer(analyzer, settings)
        analysis, interpretation = asyncio.run(
            _run(project_analyzer, LocalProject(path), full)
        )
    except ProjectInsightError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if json_output:
        print(json.dumps(analysis.to_dict(), indent=2, default=str))
        return

    render_assessment(analysis, interpretation, console, settings.score_weightings)
