from conftest import make_profile
from services.feed_builder import build_feed, matches_preferences


def _ids(feed):
    return [entry.profile.user_id for entry in feed]


def test_feed_excludes_seen_and_self():
    me = make_profile("me", attachment_style="secure")
    pool = [
        make_profile("me", attachment_style="secure"),
        make_profile("a", attachment_style="secure"),
        make_profile("b", attachment_style="anxious"),
        make_profile("c", attachment_style="avoidant"),
    ]

    feed = build_feed(me, pool, seen_ids={"b"})

    assert "me" not in _ids(feed)
    assert "b" not in _ids(feed)
    assert set(_ids(feed)) == {"a", "c"}


def test_feed_orders_by_score_then_id():
    me = make_profile("me", attachment_style="secure")
    pool = [
        make_profile("z", attachment_style="anxious"),        # 80
        make_profile("y", attachment_style="secure"),         # 95
        make_profile("x", attachment_style="anxious"),        # 80
        make_profile("w", attachment_style="disorganized"),   # 65
    ]

    feed = build_feed(me, pool, seen_ids=[])

    assert _ids(feed) == ["y", "x", "z", "w"]
    assert [entry.compatibility.total for entry in feed] == [95, 80, 80, 65]


def test_unscored_candidates_follow_in_pool_order():
    me = make_profile("me", attachment_style="secure")
    pool = [
        make_profile("n2"),
        make_profile("s1", attachment_style="avoidant"),
        make_profile("n1"),
    ]

    feed = build_feed(me, pool, seen_ids=set())

    assert _ids(feed) == ["s1", "n2", "n1"]
    assert feed[1].compatibility.total is None


def test_gender_preference_is_a_hard_filter():
    me = make_profile("me", looking_for="women")
    pool = [
        make_profile("w", gender="woman"),
        make_profile("m", gender="man"),
        make_profile("nb", gender="nonbinary"),
        make_profile("unknown"),
    ]

    feed = build_feed(me, pool, seen_ids=set())

    assert set(_ids(feed)) == {"w", "unknown"}


def test_everyone_preference_keeps_all_genders():
    me = make_profile("me", looking_for="everyone")
    candidate = make_profile("m", gender="man")
    assert matches_preferences(me, candidate)


def test_age_range_filter():
    me = make_profile("me", age_min=25, age_max=35)
    pool = [make_profile("young", age=22), make_profile("fit", age=30), make_profile("old", age=40)]

    assert _ids(build_feed(me, pool, seen_ids=set())) == ["fit"]


def test_empty_pool_gives_empty_feed():
    me = make_profile("me")
    assert build_feed(me, [], seen_ids=set()) == []
    assert build_feed(me, [make_profile("a")], seen_ids={"a"}) == []


def test_duplicate_pool_entries_appear_once():
    me = make_profile("me", attachment_style="secure")
    pool = [make_profile("a", attachment_style="secure"), make_profile("a", attachment_style="secure")]

    assert _ids(build_feed(me, pool, seen_ids=set())) == ["a"]
