"""Post and reply persistence.

This module provides CRUD operations over posts and threaded replies. It
enforces referential integrity between them but no ownership rules; callers
go through ForumService for those.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Union

import pytz
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from config import MAX_CONTENT_LENGTH
from core.exceptions import (
    ContentValidationError,
    ParentNotFoundError,
    StoreUnavailableError,
)
from models.post import PostModel
from models.reply import ReplyModel
from schemas.content import Post, Reply
from schemas.user import Role
from utils.converters import model_to_post, model_to_reply

logger = logging.getLogger(__name__)


def validate_content(content: str, max_length: int = MAX_CONTENT_LENGTH) -> str:
    """Strip and bound-check a post or reply body.

    Raises:
        ContentValidationError: If the content is empty or too long.
    """
    content = (content or "").strip()
    if not content:
        raise ContentValidationError("Content cannot be empty.")
    if len(content) > max_length:
        raise ContentValidationError(
            f"Content is {len(content)} characters, the limit is {max_length}."
        )
    return content


def _role_value(role: Optional[Union[Role, str]]) -> Optional[str]:
    if role is None:
        return None
    return role.value if isinstance(role, Role) else str(role)


class ContentManager:
    """Manages post and reply operations using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize ContentManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to %s: %s", action, e)
            raise StoreUnavailableError(str(e)) from e

    def _mutate(self, action: str, statement: Callable[[], int]) -> int:
        """Run a bulk update/delete and commit it, returning the row count."""
        try:
            count = statement()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to %s: %s", action, e)
            raise StoreUnavailableError(str(e)) from e
        return count

    # --- Posts ---

    def create_post(self, author: str, content: str, role: Optional[Union[Role, str]]) -> int:
        """Create a post.

        Args:
            author: Username of the author.
            content: Post body.
            role: The author's role at the time of posting.

        Returns:
            The new post ID.
        """
        now = datetime.now(pytz.utc).isoformat()
        model = PostModel(
            author=author,
            content=validate_content(content),
            author_role=_role_value(role),
            create_at=now,
            update_at=now,
        )
        self.db.add(model)
        self._commit("create post")
        logger.info("Created post %s by %s", model.id, author)
        return model.id

    def _get_post_model(self, post_id: int) -> Optional[PostModel]:
        return self.db.query(PostModel).filter(PostModel.id == post_id).first()

    def get_post(self, post_id: int) -> Optional[Post]:
        model = self._get_post_model(post_id)
        return model_to_post(model) if model else None

    def list_posts(self) -> List[Post]:
        """List all posts. Order is by ID but callers should not rely on it."""
        models = self.db.query(PostModel).order_by(PostModel.id).all()
        return [model_to_post(m) for m in models]

    def list_posts_by_author(self, author: str) -> List[Post]:
        models = (
            self.db.query(PostModel)
            .filter(PostModel.author == author)
            .order_by(PostModel.id)
            .all()
        )
        return [model_to_post(m) for m in models]

    def update_post_content(self, post_id: int, content: str) -> bool:
        """Replace a post's content. Author and role are left untouched.

        Returns:
            True if the post existed and was updated.
        """
        content = validate_content(content)
        updated = self._mutate(
            "update post",
            lambda: self.db.query(PostModel)
            .filter(PostModel.id == post_id)
            .update(
                {"content": content, "update_at": datetime.now(pytz.utc).isoformat()},
                synchronize_session=False,
            ),
        )
        if updated:
            logger.info("Updated post %s", post_id)
        return bool(updated)

    def delete_post(self, post_id: int) -> bool:
        """Delete a post and all of its replies.

        Both deletions happen in one transaction, replies first, so a reply
        never outlives its post even if the transaction is cut short.

        Returns:
            True if the post existed and was deleted.
        """
        try:
            replies_deleted = (
                self.db.query(ReplyModel)
                .filter(ReplyModel.post_id == post_id)
                .delete(synchronize_session=False)
            )
            deleted = (
                self.db.query(PostModel)
                .filter(PostModel.id == post_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to delete post %s: %s", post_id, e)
            raise StoreUnavailableError(str(e)) from e
        if deleted:
            logger.info("Deleted post %s with %d replies", post_id, replies_deleted)
        return bool(deleted)

    # --- Replies ---

    def create_reply(
        self, post_id: int, author: str, content: str, role: Optional[Union[Role, str]]
    ) -> int:
        """Create a reply under an existing post.

        Returns:
            The new reply ID.

        Raises:
            ParentNotFoundError: If ``post_id`` does not reference a post.
        """
        content = validate_content(content)
        if self._get_post_model(post_id) is None:
            raise ParentNotFoundError(post_id)
        now = datetime.now(pytz.utc).isoformat()
        model = ReplyModel(
            post_id=post_id,
            author=author,
            content=content,
            author_role=_role_value(role),
            create_at=now,
            update_at=now,
        )
        self.db.add(model)
        try:
            self.db.commit()
        except IntegrityError as e:
            # Post deleted between the check and the insert
            self.db.rollback()
            raise ParentNotFoundError(post_id) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to create reply: %s", e)
            raise StoreUnavailableError(str(e)) from e
        logger.info("Created reply %s on post %s by %s", model.id, post_id, author)
        return model.id

    def _get_reply_model(self, reply_id: int) -> Optional[ReplyModel]:
        return self.db.query(ReplyModel).filter(ReplyModel.id == reply_id).first()

    def get_reply(self, reply_id: int) -> Optional[Reply]:
        model = self._get_reply_model(reply_id)
        return model_to_reply(model) if model else None

    def list_replies_for_post(self, post_id: int) -> List[Reply]:
        models = (
            self.db.query(ReplyModel)
            .filter(ReplyModel.post_id == post_id)
            .order_by(ReplyModel.id)
            .all()
        )
        return [model_to_reply(m) for m in models]

    def list_replies(self) -> List[Reply]:
        models = self.db.query(ReplyModel).order_by(ReplyModel.id).all()
        return [model_to_reply(m) for m in models]

    def update_reply_content(self, reply_id: int, content: str) -> bool:
        content = validate_content(content)
        updated = self._mutate(
            "update reply",
            lambda: self.db.query(ReplyModel)
            .filter(ReplyModel.id == reply_id)
            .update(
                {"content": content, "update_at": datetime.now(pytz.utc).isoformat()},
                synchronize_session=False,
            ),
        )
        if updated:
            logger.info("Updated reply %s", reply_id)
        return bool(updated)

    def delete_reply(self, reply_id: int) -> bool:
        deleted = self._mutate(
            "delete reply",
            lambda: self.db.query(ReplyModel)
            .filter(ReplyModel.id == reply_id)
            .delete(synchronize_session=False),
        )
        if deleted:
            logger.info("Deleted reply %s", reply_id)
        return bool(deleted)
