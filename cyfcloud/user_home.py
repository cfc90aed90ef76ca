"""The data shown on a user's home page."""

from dataclasses import dataclass, field

INFO_TITLE = "MyInfo"
GEARS_TITLE = "MyGears"
PROJECTS_TITLE = "MyProjects"
PRIVATE_MARKDOWN = "PRIVATE"


@dataclass
class InfoComponent:
    """A home-page section taken from a specially titled post."""

    markdown: str = ""
    last_update: str = ""


@dataclass
class HomeInfoModel:
    """Everything a user's home page shows."""

    name: str = ""
    avatar: str = ""
    post_count: int = 0
    info: InfoComponent = field(default_factory=InfoComponent)
    projects: InfoComponent = field(default_factory=InfoComponent)
    gears: InfoComponent = field(default_factory=InfoComponent)
    id: int = 0
    level: str = ""
    exp: int = 0


def info_component_from_posts(posts):
    """Build a section from the first post; private posts are masked."""
    if not posts:
        return InfoComponent()
    first = posts[0]
    markdown = PRIVATE_MARKDOWN if first.is_private else first.text
    return InfoComponent(markdown=markdown, last_update=first.date)


def get_user_home_info(accounts, posts, account_id):
    """Gather an account's home page from the account and post stores."""
    account = accounts.get(account_id)
    ex = accounts.get_ex(account_id)
    info = posts.info_component_posts(account_id, INFO_TITLE)
    gears = posts.info_component_posts(account_id, GEARS_TITLE)
    projects = posts.info_component_posts(account_id, PROJECTS_TITLE)
    return HomeInfoModel(
        name=account.name,
        avatar=ex.avatar,
        post_count=0,
        info=info_component_from_posts(info),
        projects=info_component_from_posts(projects),
        gears=info_component_from_posts(gears),
        id=account.id,
        level=ex.level,
        exp=ex.exp,
    )