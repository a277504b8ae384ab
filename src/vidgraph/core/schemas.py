from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field as PydanticField
from sqlmodel import SQLModel

T = TypeVar("T")


class OwnerProjection(SQLModel, table=False):
    """Public slice of a user. Credentials and contact fields never leave the store."""
    id: int
    username: str
    full_name: str = ""
    avatar_url: Optional[str] = None


class VideoProjection(SQLModel, table=False):
    id: int
    title: str
    description: str = ""
    video_file_url: str
    thumbnail_url: str
    duration: float
    views: int
    created_at: datetime


class PlaylistRecord(SQLModel, table=False):
    """A playlist as stored: the owner id and the ordered member video ids."""
    id: int
    name: str
    description: str
    owner: int
    videos: List[int] = []
    created_at: datetime
    updated_at: datetime


class PlaylistView(SQLModel, table=False):
    id: int
    name: str
    description: str
    created_at: datetime
    updated_at: datetime
    total_videos: int
    total_views: int
    videos: List[VideoProjection] = []
    owner: Optional[OwnerProjection] = None


class PlaylistSummary(SQLModel, table=False):
    id: int
    name: str
    description: str
    total_videos: int
    total_views: int
    updated_at: datetime
    first_video_thumbnail: Optional[str] = None


class CommentRecord(SQLModel, table=False):
    id: int
    video_id: int
    owner_id: int
    content: str
    created_at: datetime
    updated_at: datetime


class CommentView(SQLModel, table=False):
    id: int
    content: str
    created_at: datetime
    updated_at: datetime
    likes_count: int = 0
    is_liked: bool = False
    owner: Optional[OwnerProjection] = None


class Page(BaseModel, Generic[T]):
    items: List[T] = PydanticField(default_factory=list)
    page: int
    limit: int
    total_items: int
    total_pages: int
    has_next: bool
    has_prev: bool
    next_page: Optional[int] = None
    prev_page: Optional[int] = None
