"""Tests for scanner helpers."""

import pytest

from project_insight.analysis.models import AnalysisOptions, TechnologyElement
from project_insight.analysis.scanner import (
    PhasedTechnologyScanner,
    presence_tested_element_scanner,
    to_phased_scanner,
)


async def has_dockerfile(project):
    return await project.has_file("Dockerfile")


class TestPresenceScanner:
    """Test presence-tested element scanners."""

    @pytest.mark.asyncio
    async def test_emits_element_when_present(self, project, context, bare_analysis):
        scan = presence_tested_element_scanner(
            TechnologyElement("docker", tags=("docker",), referenced_environment_variables=("X",)),
            has_dockerfile,
        )
        element = await scan(project, context, bare_analysis, AnalysisOptions())
        assert element.name == "docker"
        assert element.tags == ("docker",)
        assert element.referenced_environment_variables == ()

    @pytest.mark.asyncio
    async def test_absent(self, empty_project, context, bare_analysis):
        scan = presence_tested_element_scanner(TechnologyElement("docker"), has_dockerfile)
        assert await scan(empty_project, context, bare_analysis, AnalysisOptions()) is None

    def test_named_after_element(self):
        scan = presence_tested_element_scanner(TechnologyElement("docker"), has_dockerfile)
        assert scan.__name__ == "presence_scanner[docker]"


class TestPhasedScanner:
    """Test plain scanners become phased scanners that never classify."""

    @pytest.mark.asyncio
    async def test_plain_scanner_never_classifies(self, project, context):
        async def scan(project, context, analysis, options):
            return TechnologyElement("node")

        phased = to_phased_scanner(scan)
        assert phased.scan is scan
        assert await phased.classify(project, context) is None

    def test_phased_passes_through(self):
        async def scan(project, context, analysis, options):
            return None

        phased = PhasedTechnologyScanner(scan=scan)
        assert to_phased_scanner(phased) is phased


class TestTechnologyElement:
    def test_requires_name(self):
        with pytest.raises(ValueError):
            TechnologyElement("")

    def test_sequences_become_tuples(self):
        element = TechnologyElement("node", tags=["a", "b"])
        assert element.tags == ("a", "b")
