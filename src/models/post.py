from sqlalchemy import Column, Integer, String
from .base import Base


class PostModel(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    author = Column(String(255), nullable=False, index=True)
    content = Column(String(500), nullable=False)
    author_role = Column(String(10), nullable=True)
    create_at = Column(String, nullable=False)
    update_at = Column(String, nullable=False)
