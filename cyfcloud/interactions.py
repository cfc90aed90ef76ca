"""View counters and likes of posts, kept in the cache."""

import json
from dataclasses import dataclass

POST_VIEW_PREFIX = "$post_view$"
POST_LIKE_IT_PREFIX = "$post_like_it$"


@dataclass
class LikeInfo:
    """How many users like a post and whether the asking user is one of them."""

    count: int = 0
    liked: bool = False


class PostInteractions:
    """Counts views and toggles likes of posts, keyed by post id."""

    def __init__(self, cache):
        self._cache = cache

    def view_count(self, pid):
        """Views of a post; a missing counter is created at zero."""
        key = POST_VIEW_PREFIX + str(pid)
        try:
            stored = self._cache.get(key)
        except KeyError:
            self._cache.set(key, "0")
            return 0
        try:
            return int(stored)
        except ValueError:
            return 0

    def record_view(self, pid):
        """Add one view to a post and return the new count."""
        count = self.view_count(pid) + 1
        self._cache.set(POST_VIEW_PREFIX + str(pid), str(count))
        return count

    def likes(self, pid):
        """Ids of the users who like a post; a missing list is created empty.

        Raises ValueError when the stored list is not valid JSON.
        """
        key = POST_LIKE_IT_PREFIX + str(pid)
        try:
            stored = self._cache.get(key)
        except KeyError:
            self._cache.set(key, json.dumps([]))
            return []
        value = json.loads(stored)
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError(f"stored likes of post {pid} are not a list")
        return [str(uid) for uid in value]

    def toggle_like(self, pid, uid):
        """Like the post for ``uid``, or take the like back if it is there.

        Returns whether the post is liked by ``uid`` afterwards.
        """
        uid = str(uid)
        likes = self.likes(pid)
        if uid in likes:
            likes.remove(uid)
            liked = False
        else:
            likes.append(uid)
            liked = True
        self._cache.set(POST_LIKE_IT_PREFIX + str(pid), json.dumps(likes))
        return liked

    def is_liked(self, pid, uid):
        """Whether ``uid`` likes the post."""
        return str(uid) in self.likes(pid)

    def like_info(self, pid, uid):
        """The like count of a post and whether ``uid`` is among the likers."""
        likes = self.likes(pid)
        return LikeInfo(count=len(likes), liked=str(uid) in likes)