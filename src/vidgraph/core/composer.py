"""
Read-side view composition.

Each view is built in the same stages: look the rows up in the store, join
the related rows by id, compute the derived fields, filter for the viewer and
paginate. The store calls live in the ``compose_*`` functions; every other
function here is pure and works on rows already in memory.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

from vidgraph.config import settings
from vidgraph.core.errors import NotFound, parse_id
from vidgraph.core.pagination import build_page, coerce_page_params
from vidgraph.core.schemas import (
    CommentView,
    OwnerProjection,
    Page,
    PlaylistSummary,
    PlaylistView,
    VideoProjection,
)
from vidgraph.core.store import EntityStore
from vidgraph.core.visibility import filter_visible_videos, is_collapsed
from vidgraph.db.models import Comment, CommentLike, User, Video

logger = logging.getLogger("views")


def project_owner(user: Optional[User]) -> Optional[OwnerProjection]:
    if user is None:
        return None
    return OwnerProjection(
        id=user.id,
        username=user.username,
        full_name=user.full_name,
        avatar_url=user.avatar_url,
    )


def project_video(video: Video) -> VideoProjection:
    return VideoProjection(
        id=video.id,
        title=video.title,
        description=video.description,
        video_file_url=video.video_file_url,
        thumbnail_url=video.thumbnail_url,
        duration=video.duration,
        views=video.views,
        created_at=video.created_at,
    )


def join_videos(video_ids: Sequence[int], videos_by_id: Mapping[int, Video]) -> List[Video]:
    """Resolve member ids in order. Ids with no stored video are dropped."""
    return [videos_by_id[video_id] for video_id in video_ids if video_id in videos_by_id]


def compute_totals(videos: Sequence[Video]) -> Tuple[int, int]:
    return len(videos), sum(video.views for video in videos)


def group_likes(likes: Sequence[CommentLike]) -> Dict[int, Set[int]]:
    """Map comment id to the set of user ids that liked it."""
    likers: Dict[int, Set[int]] = defaultdict(set)
    for like in likes:
        likers[like.comment_id].add(like.liked_by)
    return likers


def build_comment_view(
    comment: Comment,
    likers: Set[int],
    owner: Optional[User],
    viewer_id: Optional[int],
) -> CommentView:
    return CommentView(
        id=comment.id,
        content=comment.content,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        likes_count=len(likers),
        is_liked=viewer_id is not None and viewer_id in likers,
        owner=project_owner(owner),
    )


def compose_playlist_view(
    store: EntityStore,
    playlist_id,
    viewer_id: Optional[int],
    totals_include_hidden: Optional[bool] = None,
) -> PlaylistView:
    """Playlist with its joined videos, owner and totals as seen by ``viewer_id``.

    Unpublished videos are only shown to the playlist owner. A non-owner who
    would see no videos at all gets NotFound, the same answer as for a
    playlist that does not exist.
    """
    playlist_id = parse_id(playlist_id, "Playlist")
    if totals_include_hidden is None:
        totals_include_hidden = settings.PLAYLIST_TOTALS_INCLUDE_HIDDEN

    playlist = store.get_playlist(playlist_id)
    if playlist is None:
        raise NotFound("Playlist not found or is empty/private")

    member_ids = store.playlist_video_ids(playlist.id)
    joined = join_videos(member_ids, store.get_videos(member_ids))
    visible = filter_visible_videos(joined, viewer_id, playlist.owner_id)

    if is_collapsed(visible, viewer_id, playlist.owner_id):
        logger.warning(f"Playlist {playlist_id} collapsed to not found for viewer {viewer_id}")
        raise NotFound("Playlist not found or is empty/private")

    total_videos, total_views = compute_totals(joined if totals_include_hidden else visible)

    return PlaylistView(
        id=playlist.id,
        name=playlist.name,
        description=playlist.description,
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
        total_videos=total_videos,
        total_views=total_views,
        videos=[project_video(video) for video in visible],
        owner=project_owner(store.get_user(playlist.owner_id)),
    )


def compose_comment_page(
    store: EntityStore,
    video_id,
    viewer_id: Optional[int],
    page=None,
    limit=None,
) -> Page[CommentView]:
    """One page of a video's comments, newest first, with owners and like stats."""
    video_id = parse_id(video_id, "Video")
    request = coerce_page_params(page, limit)

    if store.get_video(video_id) is None:
        raise NotFound("Video not found")

    total = store.count_comments(video_id)
    if request.offset >= total:
        comments = []
    else:
        comments = store.scan_comments(video_id, request.offset, request.limit)

    # Likes are only fetched for comments that resolved, orphans never join.
    likers = group_likes(store.likes_for_comments([comment.id for comment in comments]))
    owners = store.get_users(comment.owner_id for comment in comments)

    items = [
        build_comment_view(comment, likers.get(comment.id, set()), owners.get(comment.owner_id), viewer_id)
        for comment in comments
    ]
    return build_page(items, total, request)


def compose_user_playlists(store: EntityStore, user_id) -> List[PlaylistSummary]:
    user_id = parse_id(user_id, "User")
    playlists = store.playlists_owned_by(user_id)
    if not playlists:
        return []

    members = store.playlist_video_ids_for([playlist.id for playlist in playlists])
    videos_by_id = store.get_videos(
        video_id for video_ids in members.values() for video_id in video_ids
    )

    summaries = []
    for playlist in playlists:
        joined = join_videos(members.get(playlist.id, []), videos_by_id)
        total_videos, total_views = compute_totals(joined)
        summaries.append(
            PlaylistSummary(
                id=playlist.id,
                name=playlist.name,
                description=playlist.description,
                total_videos=total_videos,
                total_views=total_views,
                updated_at=playlist.updated_at,
                first_video_thumbnail=joined[0].thumbnail_url if joined else None,
            )
        )
    return summaries
