"""Indexed disk resources, their extra data, backups, tags and access lists."""

import enum
from dataclasses import dataclass, field

from cyfcloud.db import decode_ids, encode_ids

GENRE_BACKUP = "backup"
GENRE_BINARY = "binary"
GENRE_MUSIC = "music"
MD5_NOT_COMPUTED = "md5notcomputed"

_TARGET_COLUMNS = (
    "id, description, m_d5, path, tag_ids, backup_id_list, child_genre, "
    "rating, dead, size"
)
_EX_COLUMNS = "id, parent_id, compatibility_description, commentary, data"
_BACKUP_COLUMNS = "id, parent_id, description, m_d5, path, backup_target_ids"
_TAG_COLUMNS = "id, name"


class Permission(enum.IntEnum):
    """Levels of the resource manager's white lists."""

    ALL = 0
    GUEST = 1


@dataclass
class DMTargetResource:
    """A file or directory recorded in the resource index."""

    id: int = 0
    description: str = ""
    md5: str = ""
    path: str = ""
    tag_ids: list = field(default_factory=list)
    backup_id_list: list = field(default_factory=list)
    child_genre: str = ""
    rating: int = 0
    dead: bool = False
    size: int = 0


@dataclass
class DMTargetResourceEx:
    """Extra data of a non-backup resource."""

    id: int = 0
    parent_id: int = 0
    compatibility_description: str = ""
    commentary: str = ""
    data: str = ""


@dataclass
class DMBackupResource:
    """Backup data of a resource whose genre is ``backup``."""

    id: int = 0
    parent_id: int = 0
    description: str = ""
    md5: str = ""
    path: str = ""
    backup_target_ids: list = field(default_factory=list)


@dataclass
class DMTag:
    """A tag that resources can carry."""

    id: int = 0
    name: str = ""


@dataclass
class DMWhiteList:
    """The accounts allowed at one permission level."""

    id: int = 0
    level: int = 0
    account_ids: list = field(default_factory=list)


class DMError(Exception):
    """Raised when a resource operation cannot be carried out."""


def tags_to_strings(tags):
    """The names of the given tags, in order."""
    return [t.name for t in tags]


def _target_from_row(row):
    (rid, description, md5, path, tag_ids, backup_ids, genre, rating, dead,
     size) = row
    return DMTargetResource(
        id=rid,
        description=description or "",
        md5=md5 or "",
        path=path or "",
        tag_ids=decode_ids(tag_ids),
        backup_id_list=decode_ids(backup_ids),
        child_genre=genre or "",
        rating=rating or 0,
        dead=bool(dead),
        size=size or 0,
    )


def _ex_from_row(row):
    eid, parent_id, compat, commentary, data = row
    return DMTargetResourceEx(
        id=eid,
        parent_id=parent_id or 0,
        compatibility_description=compat or "",
        commentary=commentary or "",
        data=data or "",
    )


def _backup_from_row(row):
    bid, parent_id, description, md5, path, targets = row
    return DMBackupResource(
        id=bid,
        parent_id=parent_id or 0,
        description=description or "",
        md5=md5 or "",
        path=path or "",
        backup_target_ids=decode_ids(targets),
    )


def _tag_from_row(row):
    tid, name = row
    return DMTag(id=tid, name=name or "")


def _ids_or_none(ids):
    return encode_ids(ids) if ids else None


class DMStore:
    """Queries and updates on the resource manager's database."""

    def __init__(self, conn):
        self._conn = conn

    def create_tables(self):
        """Create the resource, extra, backup, tag and white-list tables."""
        with self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS d_m_target_resource ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, description TEXT, "
                "m_d5 TEXT, path TEXT UNIQUE, tag_ids TEXT, backup_id_list TEXT, "
                "child_genre TEXT, rating INTEGER, dead INTEGER, size INTEGER)"
            )
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS d_m_target_resource_ex ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, parent_id INTEGER UNIQUE, "
                "compatibility_description TEXT, commentary TEXT, data TEXT)"
            )
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS d_m_backup_resource ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, parent_id INTEGER, "
                "description TEXT, m_d5 TEXT, path TEXT UNIQUE, "
                "backup_target_ids TEXT)"
            )
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS d_m_tag ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT UNIQUE)"
            )
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS d_m_white_list ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, level INTEGER UNIQUE, "
                "account_ids TEXT)"
            )

    def _targets(self, where="1", params=()):
        sql = f"SELECT {_TARGET_COLUMNS} FROM d_m_target_resource WHERE {where}"
        return [_target_from_row(r) for r in self._conn.execute(sql, params)]

    def _one(self, table, columns, where, params, convert):
        row = self._conn.execute(
            f"SELECT {columns} FROM {table} WHERE {where}", params
        ).fetchone()
        return None if row is None else convert(row)

    def _update_nonzero(self, table, row_id, values):
        # Empty and zero values leave the stored column untouched.
        changes = {k: v for k, v in values.items() if v}
        if not changes:
            return
        assignments = ", ".join(f"{column} = ?" for column in changes)
        with self._conn:
            self._conn.execute(
                f"UPDATE {table} SET {assignments} WHERE id = ?",
                (*changes.values(), row_id),
            )

    # --- permissions ---

    def white_list(self, level):
        """The white list of a level; an empty one when the level has none."""
        row = self._conn.execute(
            "SELECT id, level, account_ids FROM d_m_white_list WHERE level = ?",
            (int(level),),
        ).fetchone()
        if row is None:
            return DMWhiteList()
        wid, lvl, ids = row
        return DMWhiteList(id=wid, level=lvl, account_ids=decode_ids(ids))

    def check_permission(self, account_id, god_id):
        """Whether an account may use the resource manager."""
        if account_id == god_id:
            return True
        return account_id in self.white_list(Permission.ALL).account_ids

    # --- queries ---

    def target_by_id(self, resource_id):
        """A resource by id, or ``None``."""
        found = self._targets("id = ?", (resource_id,))
        return found[0] if found else None

    def target_by_path(self, path):
        """A resource by path, or ``None``."""
        found = self._targets("path = ?", (path,))
        return found[0] if found else None

    def targets_by_tags(self, tag_ids):
        """Resources carrying every one of the given tag ids."""
        if not tag_ids:
            return self._targets()
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
        return self._targets(" AND ".join(clauses), params)

    def backup_by_id(self, backup_id):
        """A backup record by its own id, or ``None``."""
        return self._one("d_m_backup_resource", _BACKUP_COLUMNS, "id = ?",
                         (backup_id,), _backup_from_row)

    def ex_by_id(self, ex_id):
        """An extra-data record by its own id, or ``None``."""
        return self._one("d_m_target_resource_ex", _EX_COLUMNS, "id = ?",
                         (ex_id,), _ex_from_row)

    def target_exists(self, path):
        """Whether a resource with this path is recorded."""
        return self.target_by_path(path) is not None

    def all_music(self):
        """Every resource of the music genre."""
        return self._targets("child_genre = ?", (GENRE_MUSIC,))

    def md5_not_computed(self):
        """Resources whose checksum is still to be computed."""
        return self._targets("m_d5 = ?", (MD5_NOT_COMPUTED,))

    def child_backup(self, resource):
        """The backup record of a backup resource, or ``None`` if it has none."""
        if resource.child_genre != GENRE_BACKUP:
            raise DMError(
                "resource is not a backup resource, "
                "but try to get a backup description"
            )
        return self._one("d_m_backup_resource", _BACKUP_COLUMNS,
                         "parent_id = ?", (resource.id,), _backup_from_row)

    def child_ex(self, resource):
        """The extra data of a non-backup resource, or ``None`` if it has none."""
        if resource.child_genre == GENRE_BACKUP:
            raise DMError(
                "resource is a backup resource, but try to get a ex description"
            )
        return self._one("d_m_target_resource_ex", _EX_COLUMNS,
                         "parent_id = ?", (resource.id,), _ex_from_row)

    def parent_of(self, ex):
        """The resource an extra-data record belongs to, or ``None``."""
        return self.target_by_id(ex.parent_id)

    def clones(self, resource):
        """Resources with the same checksum, the resource itself included."""
        return self._targets("m_d5 = ?", (resource.md5,))

    # --- updates ---

    def update_target(self, resource):
        """Store the non-empty fields of a resource."""
        self._update_nonzero("d_m_target_resource", resource.id, {
            "description": resource.description,
            "m_d5": resource.md5,
            "path": resource.path,
            "tag_ids": _ids_or_none(resource.tag_ids),
            "backup_id_list": _ids_or_none(resource.backup_id_list),
            "child_genre": resource.child_genre,
            "rating": resource.rating,
            "dead": int(bool(resource.dead)),
            "size": resource.size,
        })

    def update_ex(self, ex):
        """Store the non-empty fields of an extra-data record."""
        self._update_nonzero("d_m_target_resource_ex", ex.id, {
            "parent_id": ex.parent_id,
            "compatibility_description": ex.compatibility_description,
            "commentary": ex.commentary,
            "data": ex.data,
        })

    def update_backup(self, backup):
        """Store the non-empty fields of a backup record."""
        self._update_nonzero("d_m_backup_resource", backup.id, {
            "parent_id": backup.parent_id,
            "description": backup.description,
            "m_d5": backup.md5,
            "path": backup.path,
            "backup_target_ids": _ids_or_none(backup.backup_target_ids),
        })

    def add_resource(self, path, md5, genre, size):
        """Record a resource with its extra or backup record.

        Returns the new resource, or ``None`` when the path is already recorded.
        """
        if self.target_exists(path):
            return None
        with self._conn:
            cur = self._conn.execute(
                "INSERT INTO d_m_target_resource (description, m_d5, path, "
                "tag_ids, backup_id_list, child_genre, rating, dead, size) "
                "VALUES ('', ?, ?, 'null', 'null', ?, 0, 0, ?)",
                (md5, path, genre, size),
            )
            resource_id = cur.lastrowid
            if genre != GENRE_BACKUP:
                self._conn.execute(
                    "INSERT INTO d_m_target_resource_ex (parent_id, "
                    "compatibility_description, commentary, data) "
                    "VALUES (?, '', '', '')",
                    (resource_id,),
                )
            else:
                self._conn.execute(
                    "INSERT INTO d_m_backup_resource (parent_id, description, "
                    "m_d5, path, backup_target_ids) VALUES (?, '', '', NULL, 'null')",
                    (resource_id,),
                )
        return self.target_by_id(resource_id)

    # --- tags ---

    def all_tags(self):
        """Every tag."""
        rows = self._conn.execute(f"SELECT {_TAG_COLUMNS} FROM d_m_tag")
        return [_tag_from_row(r) for r in rows]

    def tag_exists(self, name):
        """Whether a tag with this name exists."""
        return self.tag_id_by_name(name) != 0

    def tag_id_by_name(self, name):
        """The id of a tag; 0 when there is none."""
        tag = self._one("d_m_tag", _TAG_COLUMNS, "name = ?", (name,),
                        _tag_from_row)
        return 0 if tag is None else tag.id

    def insert_tag(self, tag):
        """Add a tag and return its id; an existing name is refused."""
        if self.tag_exists(tag.name):
            raise DMError("tag exists")
        with self._conn:
            cur = self._conn.execute(
                "INSERT INTO d_m_tag (name) VALUES (?)", (tag.name,)
            )
        return cur.lastrowid

    # --- classification ---

    def indicate_binary(self, resource_id):
        """Mark a resource as binary."""
        resource = self.target_by_id(resource_id)
        if resource is None:
            raise DMError("no such resource")
        resource.child_genre = GENRE_BINARY
        self.update_target(resource)

    def indicate_backup_of(self, resource_id, backup_id):
        """Record the resource ``backup_id`` as a backup of ``resource_id``."""
        resource = self.target_by_id(resource_id)
        if resource is None:
            raise DMError("no such resource")
        backup_target = self.target_by_id(backup_id)
        if backup_target is None:
            raise DMError("no such backup resource")
        backup = self.child_backup(backup_target)
        if backup is None:
            raise DMError("backup resource has no backup record")
        resource.backup_id_list.append(backup_id)
        self.update_target(resource)
        backup.backup_target_ids.append(resource_id)
        self.update_backup(backup)