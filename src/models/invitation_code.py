"""Invitation code database model.

This module defines the InvitationCode database model using SQLAlchemy.
"""

from sqlalchemy import Column, String
from .base import Base


class InvitationCodeModel(Base):
    """Invitation code database model. Rows are deleted once redeemed."""

    __tablename__ = "invitation_codes"

    code = Column(String(16), primary_key=True, index=True, nullable=False)
    email = Column(String(255), nullable=False, index=True)
    role = Column(String(10), nullable=False)  # 'Admin', 'Role1' or 'Role2'
    created_by = Column(String, nullable=True)  # username
    created_at = Column(String, nullable=False)  # ISO format string
