from trendtags.pipeline.scoring import rank_hashtags


def test_dom_tags_outweigh_text_mentions():
    text_counts = {"#fyp": 3, "#dance": 1}
    ranked = rank_hashtags(text_counts, ["#Dance"], dom_weight=5)
    assert [(entry.tag, entry.score) for entry in ranked] == [("#dance", 6), ("#fyp", 3)]


def test_repeated_dom_hits_accumulate():
    ranked = rank_hashtags({}, ["#viral", "#viral", "#news"], dom_weight=5)
    assert [(entry.tag, entry.score) for entry in ranked] == [("#viral", 10), ("#news", 5)]


def test_ties_keep_first_seen_order_and_cap():
    text_counts = {f"#tag{i}": 1 for i in range(200)}
    ranked = rank_hashtags(text_counts, [], cap=150)
    assert len(ranked) == 150
    assert ranked[0].tag == "#tag0"
    assert ranked[-1].tag == "#tag149"
