import logging
from collections import defaultdict
from contextlib import contextmanager
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import func, insert, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col, delete, select

from vidgraph.core.errors import Internal
from vidgraph.db.models import (
    Comment,
    CommentLike,
    Playlist,
    PlaylistVideo,
    User,
    Video,
    get_utc_now,
)

logger = logging.getLogger("store")

# Dialects with a native INSERT ... ON CONFLICT DO NOTHING.
_INSERT_IGNORE = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class EntityStore:
    """Collection-style access to the entity tables over one request-scoped session.

    Reads return rows or None and let database errors propagate. Writes commit
    on their own and surface any database failure as ``Internal``. Set-style
    membership writes are single statements so concurrent requests cannot
    lose each other's updates.
    """

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def _write(self, operation: str):
        try:
            yield
            self.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Database error in {operation}: {e}")
            self.session.rollback()
            raise Internal(f"Failed to {operation.replace('_', ' ')}") from e

    # Point lookups
    def get_user(self, user_id: int) -> Optional[User]:
        return self.session.get(User, user_id)

    def get_video(self, video_id: int) -> Optional[Video]:
        return self.session.get(Video, video_id)

    def get_playlist(self, playlist_id: int) -> Optional[Playlist]:
        return self.session.get(Playlist, playlist_id)

    def get_comment(self, comment_id: int) -> Optional[Comment]:
        return self.session.get(Comment, comment_id)

    # Multi-id lookups
    def get_users(self, user_ids: Iterable[int]) -> Dict[int, User]:
        ids = set(user_ids)
        if not ids:
            return {}
        users = self.session.exec(select(User).where(col(User.id).in_(ids))).all()
        return {user.id: user for user in users}

    def get_videos(self, video_ids: Iterable[int]) -> Dict[int, Video]:
        ids = set(video_ids)
        if not ids:
            return {}
        videos = self.session.exec(select(Video).where(col(Video.id).in_(ids))).all()
        return {video.id: video for video in videos}

    def playlist_video_ids(self, playlist_id: int) -> List[int]:
        return self.playlist_video_ids_for([playlist_id]).get(playlist_id, [])

    def playlist_video_ids_for(self, playlist_ids: Sequence[int]) -> Dict[int, List[int]]:
        """Member video ids per playlist, each list in insertion order."""
        if not playlist_ids:
            return {}
        rows = self.session.exec(
            select(PlaylistVideo)
            .where(col(PlaylistVideo.playlist_id).in_(playlist_ids))
            .order_by(PlaylistVideo.id)
        ).all()
        members: Dict[int, List[int]] = defaultdict(list)
        for row in rows:
            members[row.playlist_id].append(row.video_id)
        return dict(members)

    def playlists_owned_by(self, user_id: int) -> List[Playlist]:
        return list(
            self.session.exec(
                select(Playlist)
                .where(Playlist.owner_id == user_id)
                .order_by(col(Playlist.updated_at).desc(), col(Playlist.id).desc())
            ).all()
        )

    def likes_for_comments(self, comment_ids: Sequence[int]) -> List[CommentLike]:
        if not comment_ids:
            return []
        return list(
            self.session.exec(
                select(CommentLike)
                .where(col(CommentLike.comment_id).in_(comment_ids))
                .order_by(CommentLike.id)
            ).all()
        )

    # Ordered scan
    def count_comments(self, video_id: int) -> int:
        return self.session.exec(
            select(func.count()).select_from(Comment).where(Comment.video_id == video_id)
        ).one()

    def scan_comments(self, video_id: int, offset: int, limit: int) -> List[Comment]:
        """Comments on a video, newest first, ties broken by id, sliced by offset/limit."""
        return list(
            self.session.exec(
                select(Comment)
                .where(Comment.video_id == video_id)
                .order_by(col(Comment.created_at).desc(), col(Comment.id).desc())
                .offset(offset)
                .limit(limit)
            ).all()
        )

    # Writes
    def insert(self, obj):
        with self._write(f"create_{type(obj).__name__.lower()}"):
            self.session.add(obj)
        self.session.refresh(obj)
        return obj

    def update_fields(self, model, entity_id: int, **values):
        """Set the given fields on one row and return the fresh row, or None if it vanished."""
        with self._write(f"update_{model.__name__.lower()}"):
            result = self.session.exec(
                update(model).where(model.id == entity_id).values(**values)
            )
        if not result.rowcount:
            return None
        return self.session.get(model, entity_id, populate_existing=True)

    def touch_playlist(self, playlist_id: int) -> None:
        with self._write("touch_playlist"):
            self.session.exec(
                update(Playlist)
                .where(Playlist.id == playlist_id)
                .values(updated_at=get_utc_now())
            )

    def delete_playlist(self, playlist_id: int) -> bool:
        with self._write("delete_playlist"):
            # Membership rows first, the videos themselves are untouched.
            self.session.exec(delete(PlaylistVideo).where(PlaylistVideo.playlist_id == playlist_id))
            result = self.session.exec(delete(Playlist).where(Playlist.id == playlist_id))
        return bool(result.rowcount)

    def delete_comment(self, comment_id: int) -> bool:
        with self._write("delete_comment"):
            result = self.session.exec(delete(Comment).where(Comment.id == comment_id))
        return bool(result.rowcount)

    def delete_likes_for_comment(self, comment_id: int) -> int:
        with self._write("delete_comment_likes"):
            result = self.session.exec(delete(CommentLike).where(CommentLike.comment_id == comment_id))
        return result.rowcount

    def add_video_to_playlist(self, playlist_id: int, video_id: int) -> bool:
        """Add-to-set. Returns False when the video was already a member."""
        return self._insert_if_absent(
            PlaylistVideo,
            {"playlist_id": playlist_id, "video_id": video_id, "added_at": get_utc_now()},
            ["playlist_id", "video_id"],
            "add_video_to_playlist",
        )

    def remove_video_from_playlist(self, playlist_id: int, video_id: int) -> bool:
        """Remove-from-set. Returns False when the video was not a member."""
        with self._write("remove_video_from_playlist"):
            result = self.session.exec(
                delete(PlaylistVideo).where(
                    PlaylistVideo.playlist_id == playlist_id,
                    PlaylistVideo.video_id == video_id,
                )
            )
        return bool(result.rowcount)

    def add_comment_like(self, comment_id: int, user_id: int) -> bool:
        return self._insert_if_absent(
            CommentLike,
            {"comment_id": comment_id, "liked_by": user_id, "created_at": get_utc_now()},
            ["comment_id", "liked_by"],
            "like_comment",
        )

    def remove_comment_like(self, comment_id: int, user_id: int) -> bool:
        with self._write("unlike_comment"):
            result = self.session.exec(
                delete(CommentLike).where(
                    CommentLike.comment_id == comment_id,
                    CommentLike.liked_by == user_id,
                )
            )
        return bool(result.rowcount)

    def _insert_if_absent(self, model, values: dict, conflict_columns: List[str], operation: str) -> bool:
        dialect = self.session.get_bind().dialect.name
        insert_factory = _INSERT_IGNORE.get(dialect)
        if insert_factory is not None:
            statement = (
                insert_factory(model.__table__)
                .values(**values)
                .on_conflict_do_nothing(index_elements=conflict_columns)
            )
            with self._write(operation):
                result = self.session.exec(statement)
            return bool(result.rowcount)

        # Other backends: let the unique constraint reject the duplicate.
        with self._write(operation):
            try:
                with self.session.begin_nested():
                    self.session.exec(insert(model.__table__).values(**values))
            except IntegrityError:
                return False
        return True
