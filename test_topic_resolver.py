# test_topic_resolver.py - Keyword to topic resolution tests

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from services.topic_resolver import TopicResolver, build_candidates


def test_candidates_for_long_keyword():
    assert build_candidates("B2B SaaS marketing automation") == [
        "B2B SaaS marketing automation",
        "B2B SaaS marketing",
        "B2B SaaS",
        "B2B",
    ]


def test_candidates_skip_repeats():
    assert build_candidates("cloud computing") == ["cloud computing", "cloud"]
    assert build_candidates("kubernetes") == ["kubernetes"]
    assert build_candidates("data lake house") == ["data lake house", "data lake", "data"]


def test_candidates_for_blank_keyword():
    assert build_candidates("   ") == []


@pytest.mark.asyncio
async def test_resolve_falls_through_to_shorter_prefix():
    lookup = AsyncMock(side_effect=[None, None, "Software as a service"])

    with patch.object(TopicResolver, "_lookup_suggestion", new=lookup):
        topic = await TopicResolver().resolve("B2B SaaS marketing automation")

    assert topic == "Software as a service"
    searched = [call.args[1] for call in lookup.call_args_list]
    assert searched == ["B2B SaaS marketing automation", "B2B SaaS marketing", "B2B SaaS"]


@pytest.mark.asyncio
async def test_failing_lookup_counts_as_a_miss():
    request = httpx.Request("GET", "https://en.wikipedia.org/w/api.php")
    lookup = AsyncMock(side_effect=[
        httpx.ConnectError("unreachable", request=request),
        "Cloud computing",
    ])

    with patch.object(TopicResolver, "_lookup_suggestion", new=lookup):
        assert await TopicResolver().resolve("cloud computing") == "Cloud computing"


@pytest.mark.asyncio
async def test_resolve_returns_none_when_nothing_matches():
    lookup = AsyncMock(return_value=None)

    with patch.object(TopicResolver, "_lookup_suggestion", new=lookup):
        assert await TopicResolver().resolve("zzqx unknownterm") is None

    assert lookup.await_count == 2


@pytest.mark.asyncio
async def test_lookup_reads_first_suggestion():
    response = MagicMock()
    response.json.return_value = ["b2b", ["Business-to-business", "B2B marketing"], ["", ""], ["", ""]]
    client = MagicMock()
    client.get = AsyncMock(return_value=response)

    suggestion = await TopicResolver()._lookup_suggestion(client, "b2b")

    assert suggestion == "Business-to-business"
    _, kwargs = client.get.call_args
    assert kwargs["params"]["action"] == "opensearch"
    assert kwargs["params"]["search"] == "b2b"


@pytest.mark.asyncio
async def test_lookup_without_suggestions():
    response = MagicMock()
    response.json.return_value = ["qqq", [], [], []]
    client = MagicMock()
    client.get = AsyncMock(return_value=response)

    assert await TopicResolver()._lookup_suggestion(client, "qqq") is None
