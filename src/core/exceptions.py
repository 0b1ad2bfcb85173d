"""Custom exception classes for the forum access core.

This module defines application-specific exceptions following Google Python
Style Guide.
"""


class ForumError(Exception):
    """Base exception for all forum access core errors."""

    pass


class DuplicateUsernameError(ForumError):
    """Raised when registering a username that already exists."""

    def __init__(self, username: str):
        """Initialize the exception.

        Args:
            username: The username that is already taken.
        """
        self.username = username
        super().__init__(f"User '{username}' already exists")


class CodeGenerationExhaustedError(ForumError):
    """Raised when no unused invitation code could be generated."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Could not generate a unique invitation code after {attempts} attempts"
        )


class InvalidInvitationCodeError(ForumError):
    """Raised when an invitation code is unknown or already consumed."""

    pass


class RegistrationClosedError(ForumError):
    """Raised when first-admin setup is attempted on a non-empty store."""

    pass


class ParentNotFoundError(ForumError):
    """Raised when a reply references a post that does not exist."""

    def __init__(self, post_id: int):
        """Initialize the exception.

        Args:
            post_id: The ID of the missing parent post.
        """
        self.post_id = post_id
        super().__init__(f"Post '{post_id}' not found")


class PostNotFoundError(ForumError):
    """Raised when a requested post cannot be found."""

    def __init__(self, post_id: int):
        self.post_id = post_id
        super().__init__(f"Post '{post_id}' not found")


class ReplyNotFoundError(ForumError):
    """Raised when a requested reply cannot be found."""

    def __init__(self, reply_id: int):
        self.reply_id = reply_id
        super().__init__(f"Reply '{reply_id}' not found")


class PermissionDeniedError(ForumError):
    """Raised when an identity may not mutate a content record."""

    def __init__(self, username: str, record_kind: str, record_id: int):
        """Initialize the exception.

        Args:
            username: The acting username.
            record_kind: 'post' or 'reply'.
            record_id: The ID of the protected record.
        """
        self.username = username
        self.record_kind = record_kind
        self.record_id = record_id
        super().__init__(
            f"User '{username}' may not modify {record_kind} '{record_id}'"
        )


class ContentValidationError(ForumError):
    """Raised when post or reply content is empty or too long."""

    pass


class StoreUnavailableError(ForumError):
    """Raised when the persistence store fails during a mutation."""

    pass


class ConfigurationError(ForumError):
    """Raised when there is a configuration error."""

    pass
