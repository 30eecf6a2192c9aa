"""Shared test fixtures for Project Insight."""

import pytest

from project_insight.analysis.engine import InterpretationEngine
from project_insight.analysis.models import Analysis, AnalysisOptions, TechnologyElement
from project_insight.context import AnalysisContext, InMemoryPreferenceStore
from project_insight.project import InMemoryProject


@pytest.fixture
def context():
    """Context with an empty preference store."""
    return AnalysisContext(workspace_id="T123", preferences=InMemoryPreferenceStore())


@pytest.fixture
def project():
    """Small node project held in memory."""
    return InMemoryProject.of(
        ("package.json", '{"name": "thing"}'),
        ("Dockerfile", "FROM node:18"),
        id="thing",
    )


@pytest.fixture
def empty_project():
    return InMemoryProject(id="empty")


@pytest.fixture
def bare_analysis():
    """Analysis with a single element and nothing else."""
    return Analysis(
        id="thing",
        options=AnalysisOptions(),
        elements={"node": TechnologyElement(name="node", tags=("node",))},
        services={},
        dependencies=(),
        referenced_environment_variables=(),
        fingerprints={},
    )


@pytest.fixture
def interpretation(bare_analysis):
    """Fresh Interpretation of ``bare_analysis`` with no interpreters."""
    return InterpretationEngine().new_interpretation(bare_analysis)
