"""Posts and tags stored in the post database."""

from dataclasses import dataclass, field
from datetime import datetime

from cyfcloud.db import decode_ids, encode_ids

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CUSTOM_STYLE_TITLE = "MyMarkdownStyle"

_POST_COLUMNS = (
    "id, title, text, tag_ids, owner_id, is_private, date, create_date, path"
)
_INFO_COLUMNS = "id, title, create_date, date, is_private, owner_id, path, tag_ids"
_TAG_COLUMNS = "id, text, is_catalog, percentage"


@dataclass
class Post:
    """A stored post with its full text."""

    id: int = 0
    title: str = ""
    text: str = ""
    tag_ids: list = field(default_factory=list)
    owner_id: int = 0
    is_private: bool = False
    date: str = ""
    create_date: str = ""
    path: str = ""


@dataclass
class PostInfo:
    """A post's summary, without its text."""

    id: int = 0
    title: str = ""
    create_date: str = ""
    date: str = ""
    is_private: bool = False
    owner_id: int = 0
    path: str = ""
    tag_ids: list = field(default_factory=list)


@dataclass
class CountOf:
    """A label with the number of times it occurs."""

    text: str
    count: int


@dataclass
class PostInfoMono:
    """Only the id and title of a post."""

    id: int
    title: str


@dataclass
class Tag:
    """A tag attached to posts."""

    id: int = 0
    text: str = ""
    is_catalog: bool = False
    percentage: float = 0.0


def map_to_count_of(mapping):
    """Turn a ``{text: count}`` mapping into a list of CountOf."""
    return [CountOf(text=text, count=count) for text, count in mapping.items()]


def _post_from_row(row):
    pid, title, text, tag_ids, owner_id, is_private, date, create_date, path = row
    return Post(
        id=pid,
        title=title or "",
        text=text or "",
        tag_ids=decode_ids(tag_ids),
        owner_id=owner_id or 0,
        is_private=bool(is_private),
        date=date or "",
        create_date=create_date or "",
        path=path or "",
    )


def _info_from_row(row):
    pid, title, create_date, date, is_private, owner_id, path, tag_ids = row
    return PostInfo(
        id=pid,
        title=title or "",
        create_date=create_date or "",
        date=date or "",
        is_private=bool(is_private),
        owner_id=owner_id or 0,
        path=path or "",
        tag_ids=decode_ids(tag_ids),
    )


def _tag_from_row(row):
    tid, text, is_catalog, percentage = row
    return Tag(
        id=tid,
        text=text or "",
        is_catalog=bool(is_catalog),
        percentage=percentage or 0.0,
    )


def _now():
    return datetime.now().strftime(DATE_FORMAT)


class PostStore:
    """Queries and updates on the ``post`` and ``tag`` tables."""

    def __init__(self, conn):
        self._conn = conn

    def create_tables(self):
        """Create the post and tag tables if they are missing."""
        with self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS post ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, "
                "title TEXT, text TEXT, tag_ids TEXT, owner_id INTEGER, "
                "is_private INTEGER, date TEXT, create_date TEXT, path TEXT)"
            )
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS tag ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, "
                "text TEXT, is_catalog INTEGER, percentage REAL)"
            )

    def _infos(self, where="1", params=(), suffix=""):
        sql = f"SELECT {_INFO_COLUMNS} FROM post WHERE {where} {suffix}"
        return [_info_from_row(r) for r in self._conn.execute(sql, params)]

    def _posts(self, where="1", params=()):
        sql = f"SELECT {_POST_COLUMNS} FROM post WHERE {where}"
        return [_post_from_row(r) for r in self._conn.execute(sql, params)]

    def infos_by_owner_all(self, owner_id):
        """Every post summary of an owner, private ones included."""
        return self._infos("owner_id = ?", (owner_id,))

    def public_infos_limited(self, start, count):
        """At most ``count`` public post summaries, skipping the first ``start``."""
        return self._infos(
            "is_private = 0", (count, start), "ORDER BY id LIMIT ? OFFSET ?"
        )

    def infos_by_owner_public(self, owner_id):
        """The public post summaries of an owner."""
        return self._infos("owner_id = ? AND is_private = 0", (owner_id,))

    def posts_by_owner_public(self, owner_id):
        """The public posts of an owner, with text."""
        return self._posts("owner_id = ? AND is_private = 0", (owner_id,))

    def posts_public_all(self):
        """Every public post, with text."""
        return self._posts("is_private = 0")

    def infos_all(self):
        """Every public post summary."""
        return self._infos("is_private = 0")

    def info_by_id(self, post_id):
        """The summary of a post; an empty PostInfo when there is none."""
        found = self._infos("id = ?", (post_id,))
        return found[0] if found else PostInfo()

    def post_by_id(self, post_id):
        """A post by id; an empty Post when there is none."""
        found = self._posts("id = ?", (post_id,))
        return found[0] if found else Post()

    def infos_by_ids(self, ids):
        """Summaries for each id, in the given order."""
        return [self.info_by_id(i) for i in ids]

    def new_post(self, title, text, owner, tags, private, path):
        """Insert a post, creating its tags as needed, and return its id."""
        tag_ids = self.tag_ids(tags)
        now = _now()
        with self._conn:
            cur = self._conn.execute(
                "INSERT INTO post (title, text, tag_ids, owner_id, is_private, "
                "date, create_date, path) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (title, text, encode_ids(tag_ids), owner, int(bool(private)),
                 now, now, path),
            )
        return cur.lastrowid

    def _update_nonzero(self, post_id, fields):
        # Empty and zero values leave the stored column untouched.
        changes = {k: v for k, v in fields.items() if v}
        if not changes:
            return
        assignments = ", ".join(f"{column} = ?" for column in changes)
        with self._conn:
            self._conn.execute(
                f"UPDATE post SET {assignments} WHERE id = ?",
                (*changes.values(), post_id),
            )

    def modify_post(self, post_id, title, text, owner, is_private, tags, path):
        """Update a post's non-empty fields and refresh its date."""
        tag_ids = self.tag_ids(tags)
        self._update_nonzero(post_id, {
            "title": title,
            "text": text,
            "tag_ids": encode_ids(tag_ids) if tag_ids else None,
            "owner_id": owner,
            "is_private": int(bool(is_private)),
            "date": _now(),
            "path": path,
        })

    def modify_post_path(self, post_id, path):
        """Change the path of a post."""
        self._update_nonzero(post_id, {"path": path})

    def modify_post_no_text(self, post_id, title, owner, tags):
        """Update title, owner and tags of a post without touching its text."""
        tag_ids = self.tag_ids(tags)
        self._update_nonzero(post_id, {
            "title": title,
            "tag_ids": encode_ids(tag_ids) if tag_ids else None,
            "owner_id": owner,
        })

    def tag_ids(self, tags):
        """Ids of the named tags, creating any that do not exist yet."""
        ids = []
        for text in tags or ():
            row = self._conn.execute(
                "SELECT id FROM tag WHERE text = ?", (text,)
            ).fetchone()
            if row is None:
                with self._conn:
                    cur = self._conn.execute(
                        "INSERT INTO tag (text, is_catalog, percentage) "
                        "VALUES (?, 0, 0)",
                        (text,),
                    )
                ids.append(cur.lastrowid)
            else:
                ids.append(row[0])
        return ids

    def tag_names(self, tag_ids):
        """Names of the given tag ids; ``None`` if any of them is unknown."""
        names = []
        for tid in tag_ids:
            row = self._conn.execute(
                "SELECT text FROM tag WHERE id = ?", (tid,)
            ).fetchone()
            if row is None:
                return None
            names.append(row[0])
        return names

    def infos_by_tags(self, tags):
        """Public post summaries carrying every one of the named tags."""
        tag_ids = self.tag_ids(tags)
        if not tag_ids:
            raise ValueError("no tags given")
        clauses = []
        params = []
        for tid in tag_ids:
            sid = str(tid)
            clause = "(tag_ids LIKE ? OR tag_ids LIKE ? OR tag_ids LIKE ?)"
            params += [f"[{sid},%", f"%,{sid},%", f"%,{sid}]"]
            if len(tag_ids) == 1:
                clause += " OR (tag_ids LIKE ?)"
                params.append(f"[{sid}]")
            clauses.append(clause)
        where = " AND ".join(clauses) + " AND is_private = 0"
        return self._infos(where, params)

    def all_tags(self):
        """Every tag."""
        rows = self._conn.execute(f"SELECT {_TAG_COLUMNS} FROM tag")
        return [_tag_from_row(r) for r in rows]

    def month_counts(self, owner_id):
        """How many posts an owner created in each ``YYYY-MM`` month."""
        counts = {}
        for info in self.infos_by_owner_all(owner_id):
            month = info.create_date[0:7]
            counts[month] = counts.get(month, 0) + 1
        return map_to_count_of(counts)

    def tag_counts(self, owner_id):
        """How many of an owner's posts carry each tag name."""
        by_id = {}
        for info in self.infos_by_owner_all(owner_id):
            for tid in info.tag_ids:
                by_id[tid] = by_id.get(tid, 0) + 1
        by_name = {}
        for tid, count in by_id.items():
            row = self._conn.execute(
                "SELECT text FROM tag WHERE id = ?", (tid,)
            ).fetchone()
            if row is not None:
                by_name[row[0]] = count
        return map_to_count_of(by_name)

    def recent_titles(self, owner_id):
        """Titles of an owner's posts among the ten newest post ids."""
        infos = self._infos(
            "id > (SELECT MAX(id) FROM post) - 10 AND owner_id = ?", (owner_id,)
        )
        return [PostInfoMono(id=i.id, title=i.title) for i in infos]

    def infos_by_create_date(self, owner_id, date):
        """An owner's post summaries whose creation date starts with ``date``."""
        return self._infos(
            "create_date LIKE ? AND owner_id = ?", (f"{date}%", owner_id)
        )

    def info_component_posts(self, owner_id, name):
        """An owner's posts titled ``name``."""
        return self._posts("owner_id = ? AND title = ?", (owner_id, name))

    def custom_style(self, owner_id):
        """Text of the owner's first custom style post, or an empty string."""
        posts = self.info_component_posts(owner_id, CUSTOM_STYLE_TITLE)
        return posts[0].text if posts else ""

    def vague_search(self, text):
        """Post summaries whose title, and tags whose name, contain ``text``."""
        pattern = f"%{text}%"
        infos = self._infos("title LIKE ?", (pattern,))
        rows = self._conn.execute(
            f"SELECT {_TAG_COLUMNS} FROM tag WHERE text LIKE ?", (pattern,)
        )
        return infos, [_tag_from_row(r) for r in rows]