"""Tests for scores, the aggregator and the weighted composite."""

import math

import pytest

from project_insight.analysis.models import AnalysisOptions
from project_insight.analysis.registration import conditional
from project_insight.analysis.scoring import Score, ScoreAggregator, weighted_composite_score


def scores_of(**values):
    return {name: Score(name, value) for name, value in values.items()}


def fixed_scorer(name, value):
    async def scorer(interpretation, context):
        return Score(name, value)

    return scorer


class TestWeightedCompositeScore:
    """Test the weighted mean."""

    def test_empty_is_none(self):
        assert weighted_composite_score({}) is None

    def test_single(self):
        assert weighted_composite_score(scores_of(thing=5)) == 5

    def test_unweighted_mean(self):
        assert weighted_composite_score(scores_of(dog=5, cat=3)) == 4

    def test_weighted(self):
        """(2 x 5 + 3) / 3"""
        result = weighted_composite_score(scores_of(dog=5, cat=3), {"dog": 2})
        assert result == pytest.approx(13 / 3)

    def test_holder_with_scores(self, interpretation):
        interpretation.scores.update(scores_of(dog=5, cat=3))
        assert weighted_composite_score(interpretation) == 4

    def test_holder_without_scores(self, bare_analysis):
        """A quick analysis carries no scores."""
        assert weighted_composite_score(bare_analysis) is None

    def test_cancelling_weights_do_not_raise(self):
        """(-5 + 3) / (-1 + 1)"""
        result = weighted_composite_score(scores_of(dog=5, cat=3), {"dog": -1})
        assert math.isinf(result) and result < 0

    def test_cancelling_weights_with_zero_sum(self):
        result = weighted_composite_score(scores_of(dog=3, cat=3), {"dog": -1})
        assert math.isnan(result)


class TestScore:
    """Test score range."""

    @pytest.mark.parametrize("value", [-1, 6])
    def test_out_of_range(self, value):
        with pytest.raises(ValueError):
            Score("bad", value)

    @pytest.mark.parametrize("value", [0, 5])
    def test_bounds_accepted(self, value):
        assert Score("ok", value).score == value


class TestScoreAggregator:
    """Test running scorers."""

    @pytest.mark.asyncio
    async def test_scores_keyed_by_name(self, interpretation, context):
        aggregator = ScoreAggregator([fixed_scorer("readme", 5), fixed_scorer("license", 2)])
        await aggregator.score(interpretation, context, AnalysisOptions())
        assert set(interpretation.scores) == {"readme", "license"}

    @pytest.mark.asyncio
    async def test_later_score_overwrites(self, interpretation, context):
        aggregator = ScoreAggregator([fixed_scorer("readme", 5), fixed_scorer("readme", 1)])
        await aggregator.score(interpretation, context, AnalysisOptions())
        assert interpretation.scores["readme"].score == 1

    @pytest.mark.asyncio
    async def test_conditional_scorer(self, interpretation, context):
        aggregator = ScoreAggregator([
            conditional(fixed_scorer("deep", 3), lambda options, ctx: options.full),
        ])
        await aggregator.score(interpretation, context, AnalysisOptions(full=False))
        assert interpretation.scores == {}

    @pytest.mark.asyncio
    async def test_scorer_error_propagates(self, interpretation, context):
        async def broken(interpretation, context):
            raise RuntimeError("no score")

        with pytest.raises(RuntimeError):
            await ScoreAggregator([broken]).score(interpretation, context, AnalysisOptions())
