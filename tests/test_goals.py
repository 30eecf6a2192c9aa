"""Tests for Goal and Goals."""

import pytest

from project_insight.goals import Goal, Goals, goals


@pytest.fixture
def build():
    return Goal("build")


@pytest.fixture
def verify():
    return Goal("verify")


class TestGoal:
    """Test Goal identity."""

    def test_unique_name_defaults_to_display_name(self):
        assert Goal("build").unique_name == "build"

    def test_identity_ignores_parameters(self):
        """Parameters do not take part in equality."""
        assert Goal("queue", parameters={"fetch": 20}) == Goal("queue", parameters={"fetch": 5})

    def test_distinct_unique_names(self):
        assert Goal("deploy", unique_name="deploy-staging") != Goal("deploy", unique_name="deploy-prod")

    def test_empty_display_name(self):
        with pytest.raises(ValueError):
            Goal("")


class TestGoalRegistrations:
    """Test actions attached to a goal behind push tests."""

    def test_with_registration_keeps_first(self):
        goal = Goal("autofix").with_registration("tslint", "first").with_registration("tslint", "second")
        assert [(r.name, r.action) for r in goal.registrations] == [("tslint", "first")]

    def test_registrations_do_not_affect_identity(self):
        assert Goal("autofix").with_registration("tslint", "fix") == Goal("autofix")

    @pytest.mark.asyncio
    async def test_selected_registrations_follow_push_tests(self):
        async def only_node(project, context):
            return project == "node"

        goal = (
            Goal("code inspection")
            .with_registration("eslint", "lint", only_node)
            .with_registration("always", "check")
        )
        assert [r.name for r in await goal.selected_registrations("node", None)] == ["eslint", "always"]
        assert [r.name for r in await goal.selected_registrations("python", None)] == ["always"]


class TestGoalsPlan:
    """Test planning goals into a set."""

    def test_plan_preserves_order(self, build, verify):
        planned = goals("delivery").plan(build, verify)
        assert planned.goals == (build, verify)

    def test_plan_twice_keeps_one(self, build):
        planned = goals("delivery").plan(build).plan(build)
        assert len(planned) == 1

    def test_after_adds_preconditions(self, build, verify):
        planned = goals("delivery").plan(build).plan(verify, after=[build])
        assert planned.preconditions_of(verify) == (build,)
        assert planned.preconditions_of(build) == ()

    def test_after_ignores_none(self, build, verify):
        planned = goals("delivery").plan(verify, after=[None, build])
        assert planned.preconditions_of(verify) == (build,)

    def test_planning_goals_carries_edges(self, build, verify):
        """Edges declared inside a planned Goals survive."""
        inner = goals("inner").plan(build).plan(verify, after=[build])
        outer = goals("outer").plan(inner)
        assert outer.preconditions_of(verify) == (build,)

    def test_empty_goals_is_falsy(self):
        assert not goals("nothing")


class TestGoalsCopies:
    """Test that wiring helpers leave the original untouched."""

    def test_depending_on_returns_copy(self, build, verify):
        original = goals("test").plan(verify)
        wired = original.depending_on(goals("build").plan(build))
        assert wired.preconditions_of(verify) == (build,)
        assert original.preconditions_of(verify) == ()

    def test_depending_on_is_idempotent(self, build, verify):
        original = goals("test").plan(verify)
        once = original.depending_on(build)
        twice = once.depending_on(build)
        assert twice.preconditions_of(verify) == (build,)

    def test_excluding_drops_goal_and_edges(self, build, verify):
        """Vetoed goals disappear, and nothing keeps waiting on them."""
        autofix = Goal("autofix")
        planned = goals("checks").plan(autofix).plan(build, verify, after=[autofix])
        kept = planned.excluding(["autofix"])
        assert autofix not in kept
        assert kept.goals == (build, verify)
        assert kept.preconditions_of(build) == ()
        assert autofix in planned
