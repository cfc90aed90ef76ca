# cyfcloud

The storage layer of a small personal blog server. It keeps accounts, posts,
tags, favourites, an index of disk resources and progress-chart projects in
SQLite databases, and counts post views and likes in Redis.

## Installation

```
pip install .
```

To run the tests, install the test extra and run pytest:

```
pip install .[test]
pytest
```

## Modules

- `cyfcloud.security`: SHA-512 hex digests (`to_sha512`) and password
  hashing (`crypto_passwd`), UUID4 access and session tokens
  (`generate_atk`, `generate_atk_session`), and `get_random`, the SHA-512
  digest of a cryptographically random integer.
- `cyfcloud.cache`: `Cache` wraps a Redis client with `set`, `set_exp`,
  `get` (returns text, raises `KeyError` for a missing key) and `delete`.
  `Cache.connect("host:port")` builds a connection pool and pings the
  server, retrying (five times by default, one second apart) before it
  raises `CacheUnavailable`.
- `cyfcloud.rawfile`: `read_raw_file(relative, home=None)` returns the text
  of `<home>/.raw/<relative>`; a path containing `..` raises
  `UnsafePathError`.
- `cyfcloud.db`: `Database(db_path)` opens `account.db`, `post.db`,
  `chat.db`, `dm_1.db` and `vp.db` in a directory (or all in memory when
  the path is `":memory:"`) as the attributes `account`, `post`, `chat`,
  `dm` and `vp`, and creates the chat table. It is a context manager and
  `close()` closes every connection. `init_engine` is a shorthand for it.
  `encode_ids` and `decode_ids` store id lists as compact JSON.
- `cyfcloud.posts`: `PostStore` for the `post` and `tag` tables: creating
  and modifying posts (tags are created on demand), listing public or
  per-owner summaries, paging, searching by tag intersection, by creation
  date prefix or by title, per-month and per-tag counts, recent titles and
  the owner's `MyMarkdownStyle` custom style.
- `cyfcloud.accounts`: `AccountStore` for accounts and their profiles:
  registration, lookup by id, name or login (name, email or phone, with
  password-hash check raising `WrongPassword`), name search, phone, avatar
  and description updates, and favourite posts. Missing records raise
  `AccountNotFound`. `AccountLevel` lists the membership levels.
- `cyfcloud.user_home`: `get_user_home_info(accounts, posts, account_id)`
  builds a `HomeInfoModel` from the posts titled `MyInfo`, `MyProjects`
  and `MyGears`; a private one shows as `PRIVATE`.
- `cyfcloud.dm`: `DMStore`, the disk-resource index: resources with extra
  data or backup records, lookup by id, path or tags, clones by MD5,
  music and not-yet-hashed resources, tags, marking resources as binary or
  as backups of one another, and a permission white list
  (`check_permission`). Failures raise `DMError`.
- `cyfcloud.vp_store`: `VPStore` for progress-chart projects: list by owner,
  find, insert (titles are unique) and update.
- `cyfcloud.interactions`: `PostInteractions` keeps view counters and like
  lists of posts in a `Cache`: `view_count`, `record_view`, `likes`,
  `toggle_like`, `is_liked` and `like_info`.
- `cyfcloud.views`: shapes sent to clients: `extend_post_info` adds author
  names, view counts and tag names to post summaries, `build_info` builds
  an `InfoModel`, `create_info_mask` replaces masked fields by a secret
  marker in JSON output, and `parse_range` splits `"head:end"`.

Every store takes an open SQLite connection; call its `create_tables()`
once before use.

## Example

```python
from cyfcloud.accounts import AccountStore
from cyfcloud.db import init_engine
from cyfcloud.posts import PostStore
from cyfcloud.security import crypto_passwd

with init_engine(":memory:") as db:
    accounts = AccountStore(db.account)
    posts = PostStore(db.post)
    accounts.create_tables()
    posts.create_tables()

    password = "password"
    alice = accounts.new_account(
        "alice", "alice@example.com", "", crypto_passwd(password)
    )

    post_id = posts.new_post("Hello", "First post", alice.id, ["intro"], False, "/")
    print(posts.tag_names(posts.post_by_id(post_id).tag_ids))  # ['intro']
```

## What this package does not do

It is a library only. It has no HTTP server, routes or request handling, no
command-line program, no captcha generation, and no spreadsheet export of
progress projects. It does not walk directories, compute file checksums or
read audio tags for the resource index: `DMStore.add_resource` records
whatever path, checksum, genre and size it is given.