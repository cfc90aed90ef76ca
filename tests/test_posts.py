import sqlite3

import pytest

from cyfcloud.posts import (
    CUSTOM_STYLE_TITLE,
    CountOf,
    Post,
    PostInfo,
    PostInfoMono,
    PostStore,
    map_to_count_of,
)


@pytest.fixture
def store():
    conn = sqlite3.connect(":memory:")
    s = PostStore(conn)
    s.create_tables()
    yield s
    conn.close()


def _set_create_date(store, post_id, value):
    with store._conn:
        store._conn.execute(
            "UPDATE post SET create_date = ? WHERE id = ?", (value, post_id)
        )


def test_map_to_count_of():
    assert map_to_count_of({"a": 1, "b": 3}) == [CountOf("a", 1), CountOf("b", 3)]


def test_new_post_round_trip(store):
    pid = store.new_post("hello", "body", 7, ["go", "py"], False, "/p")
    post = store.post_by_id(pid)
    assert post.title == "hello"
    assert post.text == "body"
    assert post.owner_id == 7
    assert post.path == "/p"
    assert post.is_private is False
    assert store.tag_names(post.tag_ids) == ["go", "py"]
    assert post.date == post.create_date


def test_tag_ids_stored_in_like_friendly_form(store):
    pid = store.new_post("t", "x", 1, ["a", "b"], False, "")
    raw = store._conn.execute("SELECT tag_ids FROM post WHERE id = ?", (pid,)).fetchone()[0]
    ids = store.tag_ids(["a", "b"])
    assert raw == "[" + ",".join(str(i) for i in ids) + "]"


def test_tag_ids_reused(store):
    first = store.tag_ids(["x", "y"])
    second = store.tag_ids(["y", "x"])
    assert second == list(reversed(first))
    assert len(store.all_tags()) == 2


def test_tag_names_unknown_is_none(store):
    store.tag_ids(["x"])
    assert store.tag_names([999]) is None


def test_missing_post_is_empty(store):
    assert store.post_by_id(42) == Post()
    assert store.info_by_id(42) == PostInfo()


def test_public_filters(store):
    pub = store.new_post("pub", "x", 1, [], False, "")
    priv = store.new_post("priv", "x", 1, [], True, "")
    store.new_post("other", "x", 2, [], False, "")
    assert [i.id for i in store.infos_by_owner_public(1)] == [pub]
    assert {i.id for i in store.infos_by_owner_all(1)} == {pub, priv}
    assert [p.title for p in store.posts_by_owner_public(1)] == ["pub"]
    assert all(not p.is_private for p in store.posts_public_all())
    assert priv not in [i.id for i in store.infos_all()]


def test_public_infos_limited(store):
    ids = [store.new_post(f"p{n}", "x", 1, [], False, "") for n in range(5)]
    got = store.public_infos_limited(1, 2)
    assert [i.id for i in got] == ids[1:3]


def test_infos_by_ids_keeps_order(store):
    a = store.new_post("a", "x", 1, [], False, "")
    b = store.new_post("b", "x", 1, [], False, "")
    assert [i.title for i in store.infos_by_ids([b, a])] == ["b", "a"]


def test_infos_by_tags_intersection(store):
    both = store.new_post("both", "x", 1, ["go", "py"], False, "")
    store.new_post("go only", "x", 1, ["go"], False, "")
    store.new_post("hidden", "x", 1, ["go", "py"], True, "")
    assert [i.id for i in store.infos_by_tags(["go", "py"])] == [both]


def test_infos_by_tags_single(store):
    only = store.new_post("go only", "x", 1, ["go"], False, "")
    store.new_post("py only", "x", 1, ["py"], False, "")
    assert [i.id for i in store.infos_by_tags(["go"])] == [only]


def test_infos_by_tags_empty_raises(store):
    with pytest.raises(ValueError):
        store.infos_by_tags([])


def test_modify_post(store):
    pid = store.new_post("old", "old text", 1, ["a"], False, "/a")
    store.modify_post(pid, "new", "new text", 1, True, ["b"], "/b")
    post = store.post_by_id(pid)
    assert (post.title, post.text, post.path, post.is_private) == ("new", "new text", "/b", True)
    assert store.tag_names(post.tag_ids) == ["b"]


def test_modify_post_no_text_keeps_text(store):
    pid = store.new_post("old", "keep me", 1, ["a"], False, "")
    store.modify_post_no_text(pid, "renamed", 1, ["c"])
    post = store.post_by_id(pid)
    assert post.title == "renamed"
    assert post.text == "keep me"
    assert store.tag_names(post.tag_ids) == ["c"]


def test_modify_post_path(store):
    pid = store.new_post("t", "x", 1, [], False, "/a")
    store.modify_post_path(pid, "/moved")
    assert store.post_by_id(pid).path == "/moved"
    assert store.post_by_id(pid).title == "t"


def test_month_counts(store):
    a = store.new_post("a", "x", 3, [], False, "")
    b = store.new_post("b", "x", 3, [], True, "")
    _set_create_date(store, a, "2000-01-02 10:00:00")
    _set_create_date(store, b, "2000-01-20 10:00:00")
    assert store.month_counts(3) == [CountOf("2000-01", 2)]


def test_tag_counts(store):
    store.new_post("a", "x", 4, ["go", "py"], False, "")
    store.new_post("b", "x", 4, ["go"], False, "")
    counts = {c.text: c.count for c in store.tag_counts(4)}
    assert counts == {"go": 2, "py": 1}


def test_recent_titles(store):
    for n in range(12):
        store.new_post(f"p{n}", "x", 1 if n % 2 == 0 else 2, [], False, "")
    titles = store.recent_titles(1)
    assert all(isinstance(t, PostInfoMono) for t in titles)
    assert [t.title for t in titles] == ["p2", "p4", "p6", "p8", "p10"]


def test_infos_by_create_date(store):
    a = store.new_post("a", "x", 5, [], False, "")
    b = store.new_post("b", "x", 5, [], False, "")
    _set_create_date(store, a, "2000-01-02 10:00:00")
    _set_create_date(store, b, "2001-03-02 10:00:00")
    assert [i.id for i in store.infos_by_create_date(5, "2000-01")] == [a]


def test_custom_style(store):
    assert store.custom_style(1) == ""
    store.new_post(CUSTOM_STYLE_TITLE, "<style>a{}</style>", 1, [], False, "")
    store.new_post(CUSTOM_STYLE_TITLE, "second", 1, [], False, "")
    assert store.custom_style(1) == "<style>a{}</style>"
    assert store.custom_style(2) == ""


def test_info_component_posts(store):
    store.new_post("MyInfo", "about", 1, [], False, "")
    store.new_post("MyInfo", "about other", 2, [], False, "")
    posts = store.info_component_posts(1, "MyInfo")
    assert [p.text for p in posts] == ["about"]


def test_vague_search(store):
    store.new_post("gardening tips", "x", 1, ["gardening"], False, "")
    store.new_post("cooking", "x", 1, ["cooking"], False, "")
    infos, tags = store.vague_search("garden")
    assert [i.title for i in infos] == ["gardening tips"]
    assert [t.text for t in tags] == ["gardening"]


def test_all_tags_round_trip(store):
    ids = store.tag_ids(["one", "two"])
    tags = store.all_tags()
    assert [(t.id, t.text, t.is_catalog) for t in tags] == [
        (ids[0], "one", False),
        (ids[1], "two", False),
    ]