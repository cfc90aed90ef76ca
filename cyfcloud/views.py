"""Post summaries and account information as they are handed to clients."""

import json
from dataclasses import asdict, dataclass, field, fields, is_dataclass

SECRET_MASK = "___cyfcloud_secret___"


@dataclass
class PostInfoModel:
    """A post summary with its author's name, view count and tag names."""

    id: int = 0
    title: str = ""
    text: str = ""
    tag_ids: list = field(default_factory=list)
    owner_id: int = 0
    is_private: bool = False
    date: str = ""
    create_date: str = ""
    path: str = ""
    author: str = ""
    viewed_count: int = 0
    tags: list = field(default_factory=list)


@dataclass
class InfoModel:
    """The public and private information of an account."""

    id: int = 0
    name: str = ""
    email: str = ""
    phone: str = ""
    avatar: str = ""
    info: str = ""
    level: str = ""
    bg_url: str = ""
    fav_post: list = field(default_factory=list)


_INFO_KEYS = {
    "id": "Id",
    "name": "Name",
    "email": "Email",
    "phone": "Phone",
    "avatar": "Avatar",
    "info": "Info",
    "level": "Level",
    "bg_url": "BgUrl",
    "fav_post": "FavPost",
}


def parse_range(text):
    """Split ``"head:end"`` into two integers.

    Raises ValueError when there are not exactly two integer parts.
    """
    parts = text.split(":")
    if len(parts) != 2:
        raise ValueError("invalid range argument")
    return int(parts[0]), int(parts[1])


def extend_post_info(infos, accounts, posts, interactions):
    """Add author names, view counts and tag names to post summaries."""
    authors = {}
    models = []
    model_fields = {f.name for f in fields(PostInfoModel)}
    for info in infos:
        copied = {k: v for k, v in asdict(info).items() if k in model_fields}
        model = PostInfoModel(**copied)
        model.viewed_count = interactions.view_count(str(info.id))
        if model.owner_id not in authors:
            account = accounts.get(model.owner_id)
            authors[account.id] = account
            authors[model.owner_id] = account
        model.author = authors[model.owner_id].name
        model.tags = posts.tag_names(model.tag_ids)
        models.append(model)
    return models


def build_info(account, ex, posts):
    """Combine an account, its profile and its favourite post summaries."""
    return InfoModel(
        id=account.id,
        name=account.name,
        email=account.email,
        phone=account.phone,
        avatar=ex.avatar,
        info=ex.info,
        level=ex.level,
        bg_url=ex.bg_url,
        fav_post=posts.infos_by_ids(ex.fav_posts),
    )


def _info_to_dict(info):
    result = {}
    for f in fields(InfoModel):
        value = getattr(info, f.name)
        if f.name == "fav_post":
            value = [asdict(p) if is_dataclass(p) else p for p in value or []]
        result[_INFO_KEYS[f.name]] = value
    return result


def create_info_mask(data, mask):
    """Replace the fields named in the comma-separated ``mask`` by a secret marker.

    ``data`` is an InfoModel, a mapping, or a JSON object as text or bytes.
    Returns the masked object as JSON text. Raises ValueError when ``data``
    is not a JSON object.
    """
    if isinstance(data, InfoModel):
        info = _info_to_dict(data)
    elif isinstance(data, dict):
        info = dict(data)
    else:
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        info = json.loads(data)
        if not isinstance(info, dict):
            raise ValueError("info is not a JSON object")
    for key in mask.split(","):
        if key in info:
            info[key] = SECRET_MASK
    return json.dumps(info, sort_keys=True, separators=(",", ":"))