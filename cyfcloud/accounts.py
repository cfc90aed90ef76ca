"""Accounts, their extra profile data and favourite posts."""

import enum
from dataclasses import dataclass, field, fields

from cyfcloud.db import decode_ids, encode_ids

TIME_EXPIRE_ONE_MONTH = 2626560
TIME_EXPIRE_ONE_DAY = 87552

_LOGIN_COLUMNS = frozenset({"name", "email", "phone"})
_ACCOUNT_COLUMNS = "id, name, email, phone, passwd"
_EX_COLUMNS = (
    "id, account_id, avatar, info, level, bg_url, exp, private_info_mask, "
    "fav_posts, steam_id, steam_api"
)


class AccountLevel(str, enum.Enum):
    """Membership levels of an account."""

    ADMIN = "admin"
    VIP = "vip"
    NORMAL = "n"
    UNREGISTERED = "unrgstr"
    TEST = "t"


@dataclass
class Account:
    """The basic, unique identity of a user."""

    id: int = 0
    name: str = ""
    email: str = ""
    phone: str = ""
    passwd: str = ""


@dataclass
class AccountEx:
    """Profile data attached to an account."""

    id: int = 0
    account_id: int = 0
    avatar: str = ""
    info: str = ""
    level: str = ""
    bg_url: str = ""
    exp: int = 0
    private_info_mask: str = ""
    fav_posts: list = field(default_factory=list)
    steam_id: str = ""
    steam_api: str = ""


@dataclass
class UserSearchResult:
    """One hit of a user name search."""

    id: int
    avatar: str
    name: str


class AccountNotFound(LookupError):
    """Raised when an account or its profile does not exist."""


class WrongPassword(ValueError):
    """Raised when a login's password hash does not match."""


def _account_from_row(row):
    aid, name, email, phone, passwd = row
    return Account(
        id=aid,
        name=name or "",
        email=email or "",
        phone=phone or "",
        passwd=passwd or "",
    )


def _ex_from_row(row):
    (eid, account_id, avatar, info, level, bg_url, exp, mask, favs,
     steam_id, steam_api) = row
    return AccountEx(
        id=eid,
        account_id=account_id or 0,
        avatar=avatar or "",
        info=info or "",
        level=level or "",
        bg_url=bg_url or "",
        exp=exp or 0,
        private_info_mask=mask or "",
        fav_posts=decode_ids(favs),
        steam_id=steam_id or "",
        steam_api=steam_api or "",
    )


class AccountStore:
    """Queries and updates on the ``account`` and ``account_ex`` tables."""

    def __init__(self, conn):
        self._conn = conn

    def create_tables(self):
        """Create the account tables if they are missing."""
        with self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS account ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, "
                "name TEXT UNIQUE, email TEXT UNIQUE, phone TEXT UNIQUE, "
                "passwd TEXT)"
            )
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS account_ex ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, "
                "account_id INTEGER UNIQUE, avatar TEXT, info TEXT, level TEXT, "
                "bg_url TEXT, exp INTEGER, private_info_mask TEXT, "
                "fav_posts TEXT, steam_id TEXT, steam_api TEXT)"
            )

    def new_account(self, name, email, phone, passwd):
        """Create an account with a normal-level profile; return the account."""
        with self._conn:
            self._conn.execute(
                "INSERT INTO account (name, email, phone, passwd) "
                "VALUES (?, ?, ?, ?)",
                (name, email, phone, passwd),
            )
        account = self.get_by_name(name)
        with self._conn:
            self._conn.execute(
                "INSERT INTO account_ex (account_id, avatar, info, level, bg_url, "
                "exp, private_info_mask, fav_posts, steam_id, steam_api) "
                "VALUES (?, '', '', ?, '', 0, ?, ?, '', '')",
                (account.id, AccountLevel.NORMAL.value, "Phone", encode_ids([])),
            )
        return account

    def _set_column(self, table, column, key_column, value, key):
        # An empty value leaves the stored column untouched.
        if not value:
            return
        with self._conn:
            self._conn.execute(
                f"UPDATE {table} SET {column} = ? WHERE {key_column} = ?",
                (value, key),
            )

    def set_phone(self, phone, account_id):
        """Change the phone number of an account."""
        self._set_column("account", "phone", "id", phone, account_id)

    def set_info(self, info, account_id):
        """Change the self-description of an account."""
        self._set_column("account_ex", "info", "account_id", info, account_id)

    def set_avatar(self, avatar, account_id):
        """Change the avatar of an account."""
        self._set_column("account_ex", "avatar", "account_id", avatar, account_id)

    def get_ex(self, account_id):
        """The profile of an account."""
        row = self._conn.execute(
            f"SELECT {_EX_COLUMNS} FROM account_ex WHERE account_id = ?",
            (account_id,),
        ).fetchone()
        if row is None:
            raise AccountNotFound("account ex not found")
        return _ex_from_row(row)

    def get(self, account_id):
        """An account by id."""
        row = self._conn.execute(
            f"SELECT {_ACCOUNT_COLUMNS} FROM account WHERE id = ?", (account_id,)
        ).fetchone()
        if row is None:
            raise AccountNotFound("account not found")
        return _account_from_row(row)

    def get_by_name(self, name):
        """An account by its user name."""
        row = self._conn.execute(
            f"SELECT {_ACCOUNT_COLUMNS} FROM account WHERE name = ?", (name,)
        ).fetchone()
        if row is None:
            raise AccountNotFound("no such account")
        return _account_from_row(row)

    def get_by_login(self, login, cry_pswd, login_type):
        """Look an account up by name, email or phone and check its password hash."""
        if login_type not in _LOGIN_COLUMNS:
            raise AccountNotFound("no such account")
        row = self._conn.execute(
            f"SELECT {_ACCOUNT_COLUMNS} FROM account WHERE {login_type} = ?",
            (login,),
        ).fetchone()
        if row is None:
            raise AccountNotFound("no such account")
        account = _account_from_row(row)
        if account.passwd != cry_pswd:
            raise WrongPassword("wrong password")
        return account

    def vague_search_name(self, text):
        """Accounts whose name contains ``text``, with their avatars."""
        rows = self._conn.execute(
            f"SELECT {_ACCOUNT_COLUMNS} FROM account WHERE name LIKE ?",
            (f"%{text}%",),
        ).fetchall()
        results = []
        for account in map(_account_from_row, rows):
            ex = self.get_ex(account.id)
            results.append(
                UserSearchResult(id=account.id, avatar=ex.avatar, name=account.name)
            )
        return results

    def _save_ex(self, ex):
        columns = [f.name for f in fields(AccountEx) if f.name != "id"]
        values = [
            encode_ids(ex.fav_posts) if name == "fav_posts" else getattr(ex, name)
            for name in columns
        ]
        assignments = ", ".join(f"{c} = ?" for c in columns)
        with self._conn:
            self._conn.execute(
                f"UPDATE account_ex SET {assignments} WHERE account_id = ?",
                (*values, ex.account_id),
            )

    def add_fav(self, account_id, post_id):
        """Append a post to an account's favourites; return the profile."""
        ex = self.get_ex(account_id)
        ex.fav_posts.append(post_id)
        self._save_ex(ex)
        return ex

    def remove_fav(self, account_id, post_id):
        """Drop the first occurrence of a post from the favourites."""
        ex = self.get_ex(account_id)
        if post_id in ex.fav_posts:
            ex.fav_posts.remove(post_id)
        self._save_ex(ex)
        return ex

    def is_post_fav(self, account_id, post_id):
        """Whether a post is among an account's favourites."""
        return post_id in self.get_ex(account_id).fav_posts

    def update_fav(self, account_id, fav_list):
        """Replace the favourites of an account."""
        ex = self.get_ex(account_id)
        ex.fav_posts = list(fav_list or [])
        self._save_ex(ex)
        return ex

    def fav_post_infos(self, account_id, posts):
        """Summaries of the existing favourite posts, ordered by id."""
        ex = self.get_ex(account_id)
        infos = (posts.info_by_id(pid) for pid in sorted(set(ex.fav_posts)))
        return [info for info in infos if info.id != 0]