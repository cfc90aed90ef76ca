import sqlite3

import pytest

from cyfcloud.accounts import AccountNotFound, AccountStore
from cyfcloud.posts import Post, PostStore
from cyfcloud.user_home import (
    HomeInfoModel,
    InfoComponent,
    get_user_home_info,
    info_component_from_posts,
)


@pytest.fixture
def stores():
    conn = sqlite3.connect(":memory:")
    accounts = AccountStore(conn)
    accounts.create_tables()
    posts = PostStore(conn)
    posts.create_tables()
    yield accounts, posts
    conn.close()


def test_component_from_no_posts():
    assert info_component_from_posts([]) == InfoComponent(markdown="", last_update="")


def test_component_uses_first_post():
    component = info_component_from_posts([
        Post(id=1, text="hello", date="2020-12-02 10:00:00"),
        Post(id=2, text="other", date="2021-01-01 00:00:00"),
    ])
    assert component == InfoComponent(markdown="hello", last_update="2020-12-02 10:00:00")


def test_component_masks_private_post():
    component = info_component_from_posts([
        Post(id=1, text="hidden", date="2020-12-02 10:00:00", is_private=True)
    ])
    assert component.markdown == "PRIVATE"
    assert component.last_update == "2020-12-02 10:00:00"


def test_home_info_gathers_sections(stores):
    accounts, posts = stores
    account = accounts.new_account("carol", "carol@example.com", "phone-c", "x")
    accounts.set_avatar("pic", account.id)
    posts.new_post("MyInfo", "about me", account.id, [], False, "")
    posts.new_post("MyGears", "my desk", account.id, [], True, "")

    home = get_user_home_info(accounts, posts, account.id)

    assert isinstance(home, HomeInfoModel)
    assert home.name == "carol"
    assert home.avatar == "pic"
    assert home.id == account.id
    assert home.level == "n"
    assert home.exp == 0
    assert home.post_count == 0
    assert home.info.markdown == "about me"
    assert home.info.last_update == posts.info_component_posts(account.id, "MyInfo")[0].date
    assert home.gears.markdown == "PRIVATE"
    assert home.projects == InfoComponent()


def test_home_info_ignores_other_owners(stores):
    accounts, posts = stores
    carol = accounts.new_account("carol", "carol@example.com", "phone-c", "x")
    dave = accounts.new_account("dave", "dave@example.com", "phone-d", "x")
    posts.new_post("MyInfo", "dave's page", dave.id, [], False, "")
    assert get_user_home_info(accounts, posts, carol.id).info == InfoComponent()
    assert get_user_home_info(accounts, posts, dave.id).info.markdown == "dave's page"


def test_home_info_missing_account(stores):
    accounts, posts = stores
    with pytest.raises(AccountNotFound):
        get_user_home_info(accounts, posts, 99)