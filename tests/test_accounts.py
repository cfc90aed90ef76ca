import sqlite3

import pytest

from cyfcloud.accounts import (
    AccountLevel,
    AccountNotFound,
    AccountStore,
    UserSearchResult,
    WrongPassword,
)
from cyfcloud.posts import PostStore
from cyfcloud.security import crypto_passwd

PASSWORD = "password"


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    yield connection
    connection.close()


@pytest.fixture
def store(conn):
    s = AccountStore(conn)
    s.create_tables()
    return s


@pytest.fixture
def alice(store):
    return store.new_account("alice", "alice@example.com", "phone-a", crypto_passwd(PASSWORD))


def test_new_account_round_trip(store, alice):
    found = store.get_by_name("alice")
    assert found == alice
    assert found.email == "alice@example.com"
    assert found.phone == "phone-a"
    assert found.passwd == crypto_passwd(PASSWORD)
    assert store.get(alice.id) == alice


def test_new_account_profile_defaults(store, alice):
    ex = store.get_ex(alice.id)
    assert ex.account_id == alice.id
    assert ex.level == AccountLevel.NORMAL
    assert ex.level == "n"
    assert ex.private_info_mask == "Phone"
    assert ex.fav_posts == []
    assert ex.exp == 0


def test_duplicate_name_rejected(store, alice):
    with pytest.raises(sqlite3.IntegrityError):
        store.new_account("alice", "other@example.com", "phone-b", "x")


def test_missing_accounts_raise(store):
    with pytest.raises(AccountNotFound):
        store.get(42)
    with pytest.raises(AccountNotFound):
        store.get_ex(42)
    with pytest.raises(AccountNotFound):
        store.get_by_name("nobody")


@pytest.mark.parametrize("login_type,login", [
    ("name", "alice"),
    ("email", "alice@example.com"),
    ("phone", "phone-a"),
])
def test_login_by_each_type(store, alice, login_type, login):
    assert store.get_by_login(login, crypto_passwd(PASSWORD), login_type) == alice


def test_login_errors(store, alice):
    with pytest.raises(WrongPassword):
        store.get_by_login("alice", crypto_passwd("secret"), "name")
    with pytest.raises(AccountNotFound):
        store.get_by_login("bob", crypto_passwd(PASSWORD), "name")
    with pytest.raises(AccountNotFound):
        store.get_by_login("alice", crypto_passwd(PASSWORD), "passwd")


def test_set_phone_and_empty_is_ignored(store, alice):
    store.set_phone("phone-z", alice.id)
    assert store.get(alice.id).phone == "phone-z"
    store.set_phone("", alice.id)
    assert store.get(alice.id).phone == "phone-z"


def test_set_info_and_avatar(store, alice):
    store.set_info("# hello", alice.id)
    store.set_avatar("data:image/png;base64,AAAA", alice.id)
    ex = store.get_ex(alice.id)
    assert ex.info == "# hello"
    assert ex.avatar == "data:image/png;base64,AAAA"


def test_vague_search_name(store, alice):
    bob = store.new_account("bobby", "bob@example.com", "phone-b", "x")
    store.set_avatar("pic", bob.id)
    assert store.vague_search_name("obb") == [
        UserSearchResult(id=bob.id, avatar="pic", name="bobby")
    ]
    assert [r.name for r in store.vague_search_name("")] == ["alice", "bobby"]
    assert store.vague_search_name("zzz") == []


def test_fav_add_check_remove(store, alice):
    store.add_fav(alice.id, 7)
    ex = store.add_fav(alice.id, 9)
    assert ex.fav_posts == [7, 9]
    assert store.is_post_fav(alice.id, 7) is True
    assert store.is_post_fav(alice.id, 8) is False
    store.remove_fav(alice.id, 7)
    assert store.get_ex(alice.id).fav_posts == [9]
    store.remove_fav(alice.id, 100)
    assert store.get_ex(alice.id).fav_posts == [9]


def test_update_fav_replaces_list(store, alice):
    store.add_fav(alice.id, 1)
    store.update_fav(alice.id, [5, 3])
    assert store.get_ex(alice.id).fav_posts == [5, 3]


def test_fav_on_missing_account_raises(store):
    with pytest.raises(AccountNotFound):
        store.add_fav(5, 1)
    with pytest.raises(AccountNotFound):
        store.is_post_fav(5, 1)


def test_fav_post_infos(conn, store, alice):
    posts = PostStore(conn)
    posts.create_tables()
    first = posts.new_post("first", "a", alice.id, [], False, "")
    second = posts.new_post("second", "b", alice.id, [], False, "")
    assert store.fav_post_infos(alice.id, posts) == []
    store.update_fav(alice.id, [second, first, 999])
    infos = store.fav_post_infos(alice.id, posts)
    assert [i.id for i in infos] == [first, second]
    assert [i.title for i in infos] == ["first", "second"]