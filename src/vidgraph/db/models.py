from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from datetime import datetime, timezone
from typing import Optional


def get_utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True)
    email: str = Field(index=True, unique=True)
    full_name: str = Field(default="", max_length=100)
    avatar_url: Optional[str] = Field(default=None, max_length=500)


class Video(SQLModel, table=True):
    """Uploaded video. Written by the upload pipeline, read-joined here."""
    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: int = Field(foreign_key="user.id", index=True)
    title: str = Field(max_length=255)
    description: str = Field(default="")
    video_file_url: str = Field(max_length=500)
    thumbnail_url: str = Field(max_length=500)
    duration: float = Field(default=0, ge=0)
    views: int = Field(default=0, ge=0)
    is_published: bool = Field(default=True)
    created_at: datetime = Field(default_factory=get_utc_now)
    updated_at: datetime = Field(default_factory=get_utc_now)


class Playlist(SQLModel, table=True):
    """User-created playlists for organizing videos."""
    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: int = Field(foreign_key="user.id", index=True)
    name: str = Field(max_length=100)
    description: str = Field(default="", max_length=500)
    created_at: datetime = Field(default_factory=get_utc_now)
    updated_at: datetime = Field(default_factory=get_utc_now)


class PlaylistVideo(SQLModel, table=True):
    """Membership of a video in a playlist. Ascending id is insertion order."""
    id: Optional[int] = Field(default=None, primary_key=True)
    playlist_id: int = Field(foreign_key="playlist.id", index=True)
    video_id: int = Field(index=True)
    added_at: datetime = Field(default_factory=get_utc_now)

    __table_args__ = (
        UniqueConstraint("playlist_id", "video_id", name="uq_playlist_video"),
    )


class Comment(SQLModel, table=True):
    """Stores comments on videos."""
    id: Optional[int] = Field(default=None, primary_key=True)
    video_id: int = Field(foreign_key="video.id", index=True)
    owner_id: int = Field(foreign_key="user.id", index=True)
    content: str = Field(max_length=1000)
    created_at: datetime = Field(default_factory=get_utc_now, index=True)
    updated_at: datetime = Field(default_factory=get_utc_now)

    # Ids are never reused, so leftover likes cannot attach to a newer comment.
    __table_args__ = {"sqlite_autoincrement": True}


class CommentLike(SQLModel, table=True):
    """Tracks user likes for comments."""
    id: Optional[int] = Field(default=None, primary_key=True)
    # No foreign key: likes may briefly outlive a deleted comment.
    comment_id: int = Field(index=True)
    liked_by: int = Field(foreign_key="user.id", index=True)
    created_at: datetime = Field(default_factory=get_utc_now)

    __table_args__ = (
        UniqueConstraint("comment_id", "liked_by", name="uq_comment_like"),
    )
