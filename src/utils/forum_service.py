"""Content operations on behalf of an authenticated identity.

Every edit and delete fetches the record, passes it through the ownership
gate, and only then reaches the ContentManager.
"""

import logging
from typing import List

from core.exceptions import PostNotFoundError, ReplyNotFoundError
from schemas.content import Post, PostThread, Reply
from schemas.user import Identity
from utils.content_manager import ContentManager
from utils.ownership import ensure_can_mutate

logger = logging.getLogger(__name__)


class ForumService:
    """Applies the ownership gate in front of ContentManager mutations."""

    def __init__(self, content_manager: ContentManager):
        self.content = content_manager

    def get_post(self, post_id: int) -> Post:
        post = self.content.get_post(post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return post

    def get_reply(self, reply_id: int) -> Reply:
        reply = self.content.get_reply(reply_id)
        if reply is None:
            raise ReplyNotFoundError(reply_id)
        return reply

    def get_thread(self, post_id: int) -> PostThread:
        post = self.get_post(post_id)
        return PostThread(post=post, replies=self.content.list_replies_for_post(post_id))

    def list_posts(self) -> List[Post]:
        return self.content.list_posts()

    def list_replies(self, post_id: int) -> List[Reply]:
        self.get_post(post_id)
        return self.content.list_replies_for_post(post_id)

    def create_post(self, actor: Identity, content: str) -> Post:
        """Create a post authored by ``actor`` under its active role."""
        post_id = self.content.create_post(actor.username, content, actor.active_role)
        return self.get_post(post_id)

    def create_reply(self, actor: Identity, post_id: int, content: str) -> Reply:
        """Reply to a post as ``actor``.

        Raises:
            ParentNotFoundError: If the post does not exist.
        """
        reply_id = self.content.create_reply(post_id, actor.username, content, actor.active_role)
        return self.get_reply(reply_id)

    def edit_post(self, actor: Identity, post_id: int, content: str) -> Post:
        """Replace a post's content.

        Raises:
            PostNotFoundError: If the post does not exist.
            PermissionDeniedError: If ``actor`` is neither author nor admin.
        """
        ensure_can_mutate(actor, self.get_post(post_id))
        if not self.content.update_post_content(post_id, content):
            raise PostNotFoundError(post_id)
        return self.get_post(post_id)

    def delete_post(self, actor: Identity, post_id: int) -> None:
        """Delete a post together with its replies."""
        ensure_can_mutate(actor, self.get_post(post_id))
        if not self.content.delete_post(post_id):
            raise PostNotFoundError(post_id)
        logger.info("Post %s deleted by %s", post_id, actor.username)

    def edit_reply(self, actor: Identity, reply_id: int, content: str) -> Reply:
        ensure_can_mutate(actor, self.get_reply(reply_id))
        if not self.content.update_reply_content(reply_id, content):
            raise ReplyNotFoundError(reply_id)
        return self.get_reply(reply_id)

    def delete_reply(self, actor: Identity, reply_id: int) -> None:
        ensure_can_mutate(actor, self.get_reply(reply_id))
        if not self.content.delete_reply(reply_id):
            raise ReplyNotFoundError(reply_id)
        logger.info("Reply %s deleted by %s", reply_id, actor.username)
