"""Exception hierarchy for Project Insight."""

from .analysis import AnalysisError, SeedCompositionError
from .base import ProjectInsightError
from .config import ConfigurationError, InvalidConfigError, RegistrationError

__all__ = [
    "ProjectInsightError",
    "AnalysisError",
    "SeedCompositionError",
    "ConfigurationError",
    "InvalidConfigError",
    "RegistrationError",
]
