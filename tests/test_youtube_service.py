"""Tests for retrieval, deduplication and enrichment against a fake Data API."""

from datetime import datetime, timezone

import pytest

from conftest import (
    FakeYouTubeResource,
    channel_item,
    make_youtube_service,
    search_item,
    search_timeout,
    video_item,
)
from travelshorts.models.video import SearchCandidate
from travelshorts.services.youtube_service import (
    chunked,
    dedupe_candidates,
    parse_duration,
    parse_timestamp,
)


class TestParseDuration:
    @pytest.mark.parametrize(
        "token,expected",
        [
            ("PT1H2M10S", 3730),
            ("PT45S", 45),
            ("PT2M", 120),
            ("PT1H", 3600),
            ("", None),
            (None, None),
            ("garbage", None),
        ],
    )
    def test_parse(self, token, expected):
        assert parse_duration(token) == expected


def test_parse_timestamp_handles_zulu():
    assert parse_timestamp("2026-10-01T00:00:00Z") == datetime(2026, 10, 1, tzinfo=timezone.utc)
    assert parse_timestamp("not a date") is None
    assert parse_timestamp(None) is None


def test_chunked_splits_at_size():
    ids = [str(i) for i in range(120)]
    chunks = list(chunked(ids, 50))
    assert [len(c) for c in chunks] == [50, 50, 20]


def _candidate(video_id: str, title: str) -> SearchCandidate:
    return SearchCandidate(video_id, title, "", "UC1", "Channel", "thumb")


class TestDedupe:
    def test_later_occurrence_wins_in_first_seen_position(self):
        raw = [_candidate("a", "first a"), _candidate("b", "b"), _candidate("a", "second a")]
        unique = dedupe_candidates(raw)
        assert [c.video_id for c in unique] == ["a", "b"]
        assert unique[0].title == "second a"

    def test_count_drops_by_number_of_repeats(self):
        raw = [_candidate(v, v) for v in ["a", "b", "c", "a", "b", "d"]]
        assert len(dedupe_candidates(raw)) == len(raw) - 2

    def test_empty(self):
        assert dedupe_candidates([]) == []


class TestRetrieveCandidates:
    def test_search_request_shape(self):
        resource = FakeYouTubeResource({"goa beaches": [search_item("v1", "Goa beaches")]})
        service = make_youtube_service(resource)

        results = service.search_shorts("goa beaches")

        assert [c.video_id for c in results] == ["v1"]
        call = resource.search_calls[0]
        assert call["q"] == "goa beaches #shorts"
        assert call["type"] == "video"
        assert call["videoDuration"] == "short"
        assert call["maxResults"] == 5

    def test_parses_snippet(self):
        resource = FakeYouTubeResource({"goa": [search_item("v1", "Goa trip", channel_id="UC9", description="beach")]})
        candidate = make_youtube_service(resource).search_shorts("goa")[0]

        assert candidate.title == "Goa trip"
        assert candidate.description == "beach"
        assert candidate.channel_id == "UC9"
        assert candidate.channel_title == "Channel UC9"
        assert candidate.thumbnail_url.endswith("hqdefault.jpg")
        assert candidate.published_at == datetime(2026, 10, 1, tzinfo=timezone.utc)

    def test_failed_query_is_skipped(self):
        resource = FakeYouTubeResource(
            {
                "q1": [search_item("a", "A")],
                "q2": search_timeout(),
                "q3": [search_item("b", "B"), search_item("a", "A again")],
            }
        )
        results = make_youtube_service(resource).retrieve_candidates(["q1", "q2", "q3"])

        assert [c.video_id for c in results] == ["a", "b", "a"]
        assert len(resource.search_calls) == 3

    def test_items_without_video_id_are_dropped(self):
        resource = FakeYouTubeResource({"q": [{"id": {"kind": "youtube#channel"}, "snippet": {}}]})
        assert make_youtube_service(resource).search_shorts("q") == []


class TestEnrich:
    def test_attaches_stats_and_avatars(self):
        resource = FakeYouTubeResource(
            searches={},
            videos={
                "a": video_item("a", views="1500", duration="PT1M5S", channel_id="UC1"),
                "b": video_item("b", views="20", duration="PT30S", channel_id="UC2"),
            },
            channels={
                "UC1": channel_item("UC1", high="https://avatar/high1", medium="https://avatar/med1"),
                "UC2": channel_item("UC2", medium="https://avatar/med2"),
            },
        )
        service = make_youtube_service(resource)

        enriched = service.enrich([_candidate("a", "A"), _candidate("b", "B")])

        assert [e.view_count for e in enriched] == [1500, 20]
        assert [e.duration_seconds for e in enriched] == [65, 30]
        assert enriched[0].channel_avatar_url == "https://avatar/high1"
        assert enriched[1].channel_avatar_url == "https://avatar/med2"
        assert resource.video_calls[0]["id"] == "a,b"

    def test_failed_stats_request_defaults_everything(self):
        resource = FakeYouTubeResource(searches={}, videos_error=search_timeout())
        service = make_youtube_service(resource)

        enriched = service.enrich([_candidate("a", "A")])

        assert enriched[0].view_count == 0
        assert enriched[0].duration_seconds is None
        assert enriched[0].channel_avatar_url is None
        assert resource.channel_calls == []

    def test_failed_avatar_chunk_is_swallowed(self):
        resource = FakeYouTubeResource(
            searches={},
            videos={"a": video_item("a", views="10")},
            channels_error=search_timeout(),
        )
        enriched = make_youtube_service(resource).enrich([_candidate("a", "A")])

        assert enriched[0].view_count == 10
        assert enriched[0].channel_avatar_url is None

    def test_channels_are_chunked_by_fifty(self):
        video_ids = [f"v{i}" for i in range(60)]
        resource = FakeYouTubeResource(
            searches={},
            videos={v: video_item(v, channel_id=f"UC{v}") for v in video_ids},
        )
        service = make_youtube_service(resource)

        service.enrich([_candidate(v, v) for v in video_ids])

        assert [len(call["id"].split(",")) for call in resource.channel_calls] == [50, 10]
        assert [len(call["id"].split(",")) for call in resource.video_calls] == [50, 10]

    def test_bad_view_count_defaults_to_zero(self):
        resource = FakeYouTubeResource(searches={}, videos={"a": video_item("a", views="n/a")})
        enriched = make_youtube_service(resource).enrich([_candidate("a", "A")])
        assert enriched[0].view_count == 0
