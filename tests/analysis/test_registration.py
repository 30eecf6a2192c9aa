"""Tests for conditional registration."""

from project_insight.analysis.models import AnalysisOptions
from project_insight.analysis.registration import (
    Conditional,
    ConditionalRegistry,
    Unconditional,
    as_registration,
    conditional,
    describe,
)


def only_when_full(options, context):
    return options.full


class TestAsRegistration:
    """Test wrapping bare actions."""

    def test_bare_action_is_unconditional(self):
        registration = as_registration("scanner")
        assert registration == Unconditional("scanner")
        assert registration.should_run(AnalysisOptions(), None)

    def test_registration_passes_through(self):
        registration = conditional("scanner", only_when_full)
        assert as_registration(registration) is registration


class TestConditional:
    """Test predicate evaluation."""

    def test_predicate_sees_options(self):
        registration = Conditional("scanner", only_when_full)
        assert not registration.should_run(AnalysisOptions(full=False), None)
        assert registration.should_run(AnalysisOptions(full=True), None)

    def test_predicate_sees_context(self):
        registration = conditional("scanner", lambda options, context: context == "ci")
        assert registration.should_run(AnalysisOptions(), "ci")
        assert not registration.should_run(AnalysisOptions(), "local")

    def test_predicate_evaluated_each_time(self):
        """Predicates are not cached between calls."""
        calls = []

        def counting(options, context):
            calls.append(options)
            return True

        registry = ConditionalRegistry([conditional("a", counting)])
        registry.eligible(AnalysisOptions(), None)
        registry.eligible(AnalysisOptions(), None)
        assert len(calls) == 2


class TestConditionalRegistry:
    """Test ordering and eligibility."""

    def test_eligible_preserves_order(self):
        registry = ConditionalRegistry(["a", conditional("b", only_when_full), "c"])
        assert registry.eligible(AnalysisOptions(), None) == ["a", "c"]
        assert registry.eligible(AnalysisOptions(full=True), None) == ["a", "b", "c"]

    def test_actions_include_ineligible(self):
        registry = ConditionalRegistry(["a", conditional("b", only_when_full)])
        assert registry.actions == ["a", "b"]
        assert len(registry) == 2

    def test_add_returns_registration(self):
        registry = ConditionalRegistry()
        registration = registry.add("a")
        assert registry.registrations == (registration,)


class TestDescribe:
    """Test contributor names for logs."""

    def test_function_name(self):
        assert describe(only_when_full) == "only_when_full"

    def test_name_attribute(self):
        class Named:
            name = "node"

        assert describe(Named()) == "node"

    def test_falls_back_to_type(self):
        class Anonymous:
            pass

        assert describe(Anonymous()) == "Anonymous"
