import logging
from typing import Optional

from vidgraph.core.errors import Forbidden, Internal, InvalidArgument, NotFound, parse_id
from vidgraph.core.schemas import CommentRecord, PlaylistRecord
from vidgraph.core.store import EntityStore
from vidgraph.db.models import Comment, Playlist, get_utc_now

logger = logging.getLogger("mutations")

MAX_PLAYLIST_NAME = 100
MAX_PLAYLIST_DESCRIPTION = 500
MAX_COMMENT_CONTENT = 1000


def _clean(value: Optional[str]) -> str:
    return value.strip() if isinstance(value, str) else ""


def _check_length(value: str, limit: int, label: str) -> None:
    if len(value) > limit:
        raise InvalidArgument(f"{label} too long (max {limit} characters)")


def _playlist_record(store: EntityStore, playlist: Playlist) -> PlaylistRecord:
    return PlaylistRecord(
        id=playlist.id,
        name=playlist.name,
        description=playlist.description,
        owner=playlist.owner_id,
        videos=store.playlist_video_ids(playlist.id),
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
    )


def _reloaded_record(store: EntityStore, playlist_id: int) -> PlaylistRecord:
    playlist = store.get_playlist(playlist_id)
    if playlist is None:
        raise NotFound("Playlist not found")
    return _playlist_record(store, playlist)


def _comment_record(comment: Comment) -> CommentRecord:
    return CommentRecord.model_validate(comment, from_attributes=True)


def _owned_playlist(store: EntityStore, playlist_id: int, acting_id: int, action: str) -> Playlist:
    playlist = store.get_playlist(playlist_id)
    if playlist is None:
        raise NotFound("Playlist not found")
    if playlist.owner_id != acting_id:
        logger.warning(f"User {acting_id} denied {action} on playlist {playlist_id}")
        raise Forbidden(f"You do not have permission to {action} this playlist")
    return playlist


def _owned_comment(store: EntityStore, comment_id: int, acting_id: int, action: str) -> Comment:
    comment = store.get_comment(comment_id)
    if comment is None:
        raise NotFound("Comment not found")
    if comment.owner_id != acting_id:
        logger.warning(f"User {acting_id} denied {action} on comment {comment_id}")
        raise Forbidden(f"You can only {action} your own comment")
    return comment


# Playlists
def create_playlist(
    store: EntityStore, acting_id: int, name: Optional[str], description: Optional[str]
) -> PlaylistRecord:
    name, description = _clean(name), _clean(description)
    if not name or not description:
        raise InvalidArgument("Name and description are both required")
    _check_length(name, MAX_PLAYLIST_NAME, "Playlist name")
    _check_length(description, MAX_PLAYLIST_DESCRIPTION, "Description")

    playlist = store.insert(Playlist(owner_id=acting_id, name=name, description=description))
    logger.info(f"User {acting_id} created playlist {playlist.id} '{name}'")
    return _playlist_record(store, playlist)


def update_playlist(
    store: EntityStore,
    playlist_id,
    acting_id: int,
    name: Optional[str] = None,
    description: Optional[str] = None,
) -> PlaylistRecord:
    playlist_id = parse_id(playlist_id, "Playlist")
    name, description = _clean(name), _clean(description)
    if not name and not description:
        raise InvalidArgument("Name or description is required for update")
    _check_length(name, MAX_PLAYLIST_NAME, "Playlist name")
    _check_length(description, MAX_PLAYLIST_DESCRIPTION, "Description")

    playlist = _owned_playlist(store, playlist_id, acting_id, "edit")

    updated = store.update_fields(
        Playlist,
        playlist_id,
        name=name or playlist.name,
        description=description or playlist.description,
        updated_at=get_utc_now(),
    )
    if updated is None:
        raise Internal("Failed to update playlist")

    logger.info(f"User {acting_id} updated playlist {playlist_id}")
    return _playlist_record(store, updated)


def delete_playlist(store: EntityStore, playlist_id, acting_id: int) -> int:
    playlist_id = parse_id(playlist_id, "Playlist")
    _owned_playlist(store, playlist_id, acting_id, "delete")

    if not store.delete_playlist(playlist_id):
        raise Internal("Failed to delete playlist")

    logger.info(f"User {acting_id} deleted playlist {playlist_id}")
    return playlist_id


def add_video(store: EntityStore, playlist_id, video_id, acting_id: int) -> PlaylistRecord:
    """Add a video to a playlist the acting user owns. Re-adding is a no-op."""
    playlist_id = parse_id(playlist_id, "Playlist")
    video_id = parse_id(video_id, "Video")

    playlist = store.get_playlist(playlist_id)
    if playlist is None:
        raise NotFound("Playlist not found")
    if store.get_video(video_id) is None:
        raise NotFound("Video not found")
    if playlist.owner_id != acting_id:
        logger.warning(f"User {acting_id} denied adding video {video_id} to playlist {playlist_id}")
        raise Forbidden("Only the playlist owner can add videos")

    if store.add_video_to_playlist(playlist_id, video_id):
        store.touch_playlist(playlist_id)
        logger.info(f"User {acting_id} added video {video_id} to playlist {playlist_id}")
    else:
        logger.info(f"Video {video_id} already in playlist {playlist_id}")

    return _reloaded_record(store, playlist_id)


def remove_video(store: EntityStore, playlist_id, video_id, acting_id: int) -> PlaylistRecord:
    """Remove a video from a playlist the acting user owns. Removing a non-member is a no-op."""
    playlist_id = parse_id(playlist_id, "Playlist")
    video_id = parse_id(video_id, "Video")

    playlist = store.get_playlist(playlist_id)
    if playlist is None:
        raise NotFound("Playlist not found")
    if playlist.owner_id != acting_id:
        logger.warning(f"User {acting_id} denied removing video {video_id} from playlist {playlist_id}")
        raise Forbidden("Only the playlist owner can remove videos")

    if store.remove_video_from_playlist(playlist_id, video_id):
        store.touch_playlist(playlist_id)
        logger.info(f"User {acting_id} removed video {video_id} from playlist {playlist_id}")

    return _reloaded_record(store, playlist_id)


# Comments
def add_comment(store: EntityStore, video_id, acting_id: int, content: Optional[str]) -> CommentRecord:
    content = _clean(content)
    if not content:
        raise InvalidArgument("Comment content is required")
    _check_length(content, MAX_COMMENT_CONTENT, "Comment content")
    video_id = parse_id(video_id, "Video")

    if store.get_video(video_id) is None:
        raise NotFound("Video not found")

    comment = store.insert(Comment(video_id=video_id, owner_id=acting_id, content=content))
    logger.info(f"User {acting_id} commented on video {video_id}")
    return _comment_record(comment)


def update_comment(store: EntityStore, comment_id, acting_id: int, content: Optional[str]) -> CommentRecord:
    content = _clean(content)
    if not content:
        raise InvalidArgument("Comment content is required for update")
    _check_length(content, MAX_COMMENT_CONTENT, "Comment content")
    comment_id = parse_id(comment_id, "Comment")

    _owned_comment(store, comment_id, acting_id, "edit")

    updated = store.update_fields(Comment, comment_id, content=content, updated_at=get_utc_now())
    if updated is None:
        raise Internal("Failed to update comment, please try again")

    logger.info(f"User {acting_id} updated comment {comment_id}")
    return _comment_record(updated)


def delete_comment(store: EntityStore, comment_id, acting_id: int) -> int:
    """Delete a comment and every like on it, whoever left the like.

    The like sweep is a second statement after the comment delete. If it
    never runs the leftover likes point at a missing comment and no view
    joins them.
    """
    comment_id = parse_id(comment_id, "Comment")
    _owned_comment(store, comment_id, acting_id, "delete")

    if not store.delete_comment(comment_id):
        raise Internal("Failed to delete comment")
    removed = store.delete_likes_for_comment(comment_id)

    logger.info(f"User {acting_id} deleted comment {comment_id} and {removed} likes")
    return comment_id


def like_comment(store: EntityStore, comment_id, acting_id: int) -> bool:
    comment_id = parse_id(comment_id, "Comment")
    if store.get_comment(comment_id) is None:
        raise NotFound("Comment not found")

    if store.add_comment_like(comment_id, acting_id):
        logger.info(f"User {acting_id} liked comment {comment_id}")
    return True


def unlike_comment(store: EntityStore, comment_id, acting_id: int) -> bool:
    comment_id = parse_id(comment_id, "Comment")
    if store.remove_comment_like(comment_id, acting_id):
        logger.info(f"User {acting_id} unliked comment {comment_id}")
    return False
