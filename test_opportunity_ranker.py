# test_opportunity_ranker.py - Performance index and batch ranking tests

import asyncio
from unittest.mock import MagicMock

import pytest

from models.trend import KeywordTrend, TrendPoint
from services.opportunity_ranker import (
    OpportunityRanker,
    calculate_velocity,
    performance_index,
    rank_trends,
    velocity_score,
)


def timeline(*values):
    return [TrendPoint(date=f"2024-01-{i + 1:02d}", value=v) for i, v in enumerate(values)]


def make_trend(keyword, values, pi=0.0):
    points = timeline(*values)
    avg = sum(values) / len(values) if values else 0.0
    return KeywordTrend(keyword=keyword, timeline=points, average_interest=avg, performance_index=pi)


# --- VELOCITY ---

def test_velocity_compares_last_fifth_with_the_rest():
    # pivot = floor(10 * 0.8) = 8
    assert calculate_velocity(timeline(*([50] * 8 + [100] * 2))) == pytest.approx(1.0)


def test_velocity_of_empty_timeline_is_zero():
    assert calculate_velocity([]) == 0
    assert velocity_score(0) == 50


def test_velocity_with_zero_baseline_divides_by_one():
    assert calculate_velocity(timeline(0, 0, 0, 0, 40)) == pytest.approx(40.0)


@pytest.mark.parametrize("velocity, expected", [(-1.0, 0), (-5.0, 0), (0.5, 75), (1.0, 100), (9.0, 100)])
def test_velocity_score_is_clamped(velocity, expected):
    assert velocity_score(velocity) == pytest.approx(expected)


def test_performance_index_weights_volume_and_velocity():
    trend = make_trend("Cloud computing", [50] * 8 + [100] * 2)
    # 0.6 * 60 + 0.4 * 100
    assert performance_index(trend) == pytest.approx(76.0)


def test_flat_trend_index():
    trend = make_trend("Flat", [40] * 10)
    # 0.6 * 40 + 0.4 * 50
    assert performance_index(trend) == pytest.approx(44.0)


# --- RANKING ---

def test_rank_sorts_descending_and_keeps_ties_in_input_order():
    a = make_trend("A", [10], pi=20)
    b = make_trend("B", [10], pi=50)
    c = make_trend("C", [10], pi=20)

    assert [t.keyword for t in rank_trends([a, b, c])] == ["B", "A", "C"]


def test_rank_keeps_highest_record_per_keyword():
    low = make_trend("Software as a service", [10], pi=30)
    high = make_trend("Software as a service", [90], pi=70)
    other = make_trend("Cloud computing", [50], pi=50)

    ranked = rank_trends([low, other, high])

    assert [(t.keyword, t.performance_index) for t in ranked] == [
        ("Software as a service", 70),
        ("Cloud computing", 50),
    ]


def test_rank_empty():
    assert rank_trends([]) == []


# --- BATCH FETCH ---

@pytest.mark.asyncio
async def test_timed_out_keyword_still_appears_after_successful_one():
    async def fetch(keyword, timeframe=None):
        if keyword == "slow keyword":
            await asyncio.sleep(1)
        return make_trend("Fast topic", [50] * 8 + [100] * 2)

    service = MagicMock()
    service.fetch_industry_trends = fetch
    ranker = OpportunityRanker(service=service, keyword_timeout=0.05)

    ranked = await ranker.rank_keywords(["slow keyword", "fast keyword"], "6m")

    assert [t.keyword for t in ranked] == ["Fast topic", "slow keyword"]
    assert ranked[0].error is False
    assert ranked[0].performance_index == pytest.approx(76.0)
    assert ranked[1].error is True
    assert ranked[1].performance_index == 0


@pytest.mark.asyncio
async def test_failures_and_missing_data_become_error_records():
    async def fetch(keyword, timeframe=None):
        if keyword == "broken":
            raise RuntimeError("upstream 500")
        if keyword == "empty":
            return None
        return make_trend("Real topic", [10, 20, 30, 40, 50])

    service = MagicMock()
    service.fetch_industry_trends = fetch

    ranked = await OpportunityRanker(service=service).rank_keywords(["broken", "empty", "real"])

    assert ranked[0].keyword == "Real topic"
    assert {t.keyword for t in ranked[1:]} == {"broken", "empty"}
    assert all(t.error for t in ranked[1:])


@pytest.mark.asyncio
async def test_keywords_resolving_to_same_topic_are_deduplicated():
    async def fetch(keyword, timeframe=None):
        if keyword == "saas":
            return make_trend("Software as a service", [10] * 10)
        return make_trend("Software as a service", [90] * 10)

    service = MagicMock()
    service.fetch_industry_trends = fetch

    ranked = await OpportunityRanker(service=service).rank_keywords(["saas", "software as a service"])

    assert len(ranked) == 1
    assert ranked[0].average_interest == 90
