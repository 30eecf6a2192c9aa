"""
Project Insight - analysis composition and delivery planning for projects

Scanners describe what a project is made of, interpreters decide how it
should be delivered, scorers rate it, and the goal graph turns those
decisions into phase-ordered goals for a scheduler.
"""

__version__ = "0.1.0"

from .analysis import (
    Analysis,
    AnalysisOptions,
    Interpretation,
    ProjectAnalyzer,
    TechnologyElement,
    analyzer_builder,
)
from .context import AnalysisContext
from .goals import Goal, Goals
from .project import InMemoryProject, LocalProject

__all__ = [
    "analyzer_builder",  # Main entry point
    "ProjectAnalyzer",
    "Analysis",
    "AnalysisOptions",
    "Interpretation",
    "TechnologyElement",
    "AnalysisContext",
    "Goal",
    "Goals",
    "InMemoryProject",
    "LocalProject",
]
