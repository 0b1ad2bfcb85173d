from sqlalchemy import Column, ForeignKey, Integer, String
from .base import Base


class ReplyModel(Base):
    __tablename__ = "replies"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    # No ON DELETE clause: replies are removed explicitly before their post
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False, index=True)
    author = Column(String(255), nullable=False, index=True)
    content = Column(String(500), nullable=False)
    author_role = Column(String(10), nullable=True)
    create_at = Column(String, nullable=False)
    update_at = Column(String, nullable=False)
