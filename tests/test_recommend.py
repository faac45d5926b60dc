import pytest

from conftest import FailingTrendStore, make_snapshot
from trendtags.errors import InvalidTextError, TrendStoreError
from trendtags.models import GenerateRequest, RecommendSettings
from trendtags.pipeline import recommend as recommend_module
from trendtags.pipeline.recommend import recommend, validate_text


@pytest.mark.parametrize("text", [None, "", "  ", "ab", "  ab  "])
def test_short_text_rejected_before_extraction(text, store, monkeypatch):
    calls = []
    monkeypatch.setattr(recommend_module, "extract_keywords", lambda *args: calls.append(args) or [])
    with pytest.raises(InvalidTextError):
        recommend(GenerateRequest(text=text), store)
    assert calls == []
    assert store.reads == []


def test_validate_text_accepts_three_characters():
    assert validate_text(" abc ") == " abc "


def test_scenario_music_and_dance(store):
    result = recommend(GenerateRequest(text="I love dancing and music", country="global", limit=5), store)

    assert result.keywords == ["love", "dancing", "and", "music"]
    assert result.generated == ["#music", "#love", "#lovetok", "#lovetiktok", "#dancing"]
    assert "#dance" not in result.generated
    assert result.source_updated_at is not None


def test_scenario_music_and_dance_full_order(store):
    result = recommend(GenerateRequest(text="I love dancing and music", limit=20), store)
    assert result.generated == [
        "#music",
        "#love",
        "#lovetok",
        "#lovetiktok",
        "#dancing",
        "#dancingtok",
        "#dancingtiktok",
        "#and",
        "#andtok",
        "#andtiktok",
        "#musictok",
        "#musictiktok",
        "#dance",
    ]


def test_empty_snapshot_uses_variations_only(store):
    result = recommend(GenerateRequest(text="dance dance party", country="br"), store)
    assert result.generated == ["#dance", "#dancetok", "#dancetiktok", "#party", "#partytok", "#partytiktok"]
    assert result.source_updated_at is None
    assert store.reads == ["br"]


def test_zero_limit_returns_nothing(store):
    result = recommend(GenerateRequest(text="I love dancing and music", limit=0), store)
    assert result.generated == []
    assert result.keywords


def test_defaults_come_from_settings(store):
    store.put("us", make_snapshot(*[(f"#tag{i}", 100 - i) for i in range(30)], country="us"))
    settings = RecommendSettings(default_country="us", default_limit=4)
    result = recommend(GenerateRequest(text="weekend plans"), store, settings)
    assert store.reads == ["us"]
    assert result.generated == ["#weekend", "#weekendtok", "#weekendtiktok", "#plans"]


def test_default_limit_is_twelve(store):
    store.put("global", make_snapshot(*[(f"#tag{i}", 100 - i) for i in range(30)]))
    result = recommend(GenerateRequest(text="weekend"), store)
    assert len(result.generated) == 12
    assert result.generated[:3] == ["#weekend", "#weekendtok", "#weekendtiktok"]
    assert result.generated[3:] == [f"#tag{i}" for i in range(9)]


def test_trend_tags_are_lowercased(store):
    store.put("global", make_snapshot(("#MusicVideo", 5)))
    result = recommend(GenerateRequest(text="music"), store)
    assert result.generated[0] == "#musicvideo"


def test_store_errors_propagate():
    with pytest.raises(TrendStoreError):
        recommend(GenerateRequest(text="I love music"), FailingTrendStore())


def test_null_limit_and_country_take_defaults(store):
    result = recommend(GenerateRequest(text="dance tonight", country=None, limit=None), store)
    assert store.reads == ["global"]
    assert result.generated == ["#dance", "#dancetok", "#dancetiktok", "#tonight", "#tonighttok", "#tonighttiktok", "#music"]
