"""Ownership authorization gate for posts and replies."""

from typing import Union

from core.exceptions import PermissionDeniedError
from schemas.content import Post, Reply
from schemas.user import Identity


def can_mutate(actor: Identity, record: Union[Post, Reply]) -> bool:
    """Return True if ``actor`` may edit or delete ``record``.

    Admins may change any record; everyone else only what they authored.
    """
    return actor.is_admin or actor.username == record.author


def ensure_can_mutate(actor: Identity, record: Union[Post, Reply]) -> None:
    """Raise PermissionDeniedError unless ``actor`` may change ``record``."""
    if not can_mutate(actor, record):
        kind = "reply" if isinstance(record, Reply) else "post"
        raise PermissionDeniedError(actor.username, kind, record.id)
