"""Post and reply schema definitions."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Post(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    author: str
    content: str
    author_role: Optional[str] = Field(
        default=None, description="The author's role at the time of posting."
    )
    create_at: str
    update_at: str


class Reply(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    post_id: int
    author: str
    content: str
    author_role: Optional[str] = None
    create_at: str
    update_at: str


class PostThread(BaseModel):
    """A post together with its replies, used for detail views."""

    post: Post
    replies: List[Reply]


class ContentRequest(BaseModel):
    content: str = Field(min_length=1)


class CreatedResponse(BaseModel):
    id: int
