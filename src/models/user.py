"""Account database model.

This module defines the Account database model using SQLAlchemy.
"""

from sqlalchemy import Boolean, Column, String
from .base import Base


class AccountModel(Base):
    """Account database model.

    Role membership is held in three independent flags, an account may hold
    any subset of them.
    """

    __tablename__ = "accounts"

    username = Column(String(255), primary_key=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    first_name = Column(String(255), nullable=True)
    middle_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    preferred_first_name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    has_role1 = Column(Boolean, nullable=False, default=False)
    has_role2 = Column(Boolean, nullable=False, default=False)
    create_at = Column(String, nullable=False)  # ISO format string
