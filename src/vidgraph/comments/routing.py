import logging
from typing import Optional

from fastapi import APIRouter, Depends

from vidgraph.auth.utils import get_current_user_id, get_optional_user_id
from vidgraph.core import composer, mutations
from vidgraph.core.store import EntityStore
from vidgraph.deps import get_store

from .models import CommentContent

# Set up logging
logger = logging.getLogger("comments")

router = APIRouter(tags=["comments"])


@router.get("/{video_id}", response_model=dict)
def get_video_comments(
    video_id: str,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    store: EntityStore = Depends(get_store),
    viewer_id: Optional[int] = Depends(get_optional_user_id),
):
    """
    Get one page of comments for a video, newest first.
    - Query params: page (default=1), limit (default=10)
    """
    comments = composer.compose_comment_page(store, video_id, viewer_id, page=page, limit=limit)
    logger.info(f"Retrieved {len(comments.items)} comments for video {video_id}")
    return {"message": "Comments fetched successfully", "comments": comments}


@router.post("/{video_id}", status_code=201, response_model=dict)
def add_comment(
    video_id: str,
    payload: CommentContent,
    store: EntityStore = Depends(get_store),
    current_user_id: int = Depends(get_current_user_id),
):
    """
    Add a comment to a video.
    """
    comment = mutations.add_comment(store, video_id, current_user_id, payload.content)
    return {"message": "Comment added successfully", "comment": comment}


@router.patch("/c/{comment_id}", response_model=dict)
def update_comment(
    comment_id: str,
    payload: CommentContent,
    store: EntityStore = Depends(get_store),
    current_user_id: int = Depends(get_current_user_id),
):
    """
    Update a comment (only by the comment author).
    """
    comment = mutations.update_comment(store, comment_id, current_user_id, payload.content)
    return {"message": "Comment updated successfully", "comment": comment}


@router.delete("/c/{comment_id}", response_model=dict)
def delete_comment(
    comment_id: str,
    store: EntityStore = Depends(get_store),
    current_user_id: int = Depends(get_current_user_id),
):
    """
    Delete a comment (only by the comment author) together with all its likes.
    """
    deleted_id = mutations.delete_comment(store, comment_id, current_user_id)
    return {"message": "Comment deleted successfully", "deleted_comment_id": deleted_id}


# Comment likes
@router.post("/c/{comment_id}/like", response_model=dict)
def like_comment(
    comment_id: str,
    store: EntityStore = Depends(get_store),
    current_user_id: int = Depends(get_current_user_id),
):
    """
    Like a comment. If already liked, this is a no-op.
    """
    liked = mutations.like_comment(store, comment_id, current_user_id)
    return {"message": "Comment liked successfully", "liked": liked}


@router.delete("/c/{comment_id}/like", response_model=dict)
def unlike_comment(
    comment_id: str,
    store: EntityStore = Depends(get_store),
    current_user_id: int = Depends(get_current_user_id),
):
    """
    Remove the current user's like from a comment.
    """
    liked = mutations.unlike_comment(store, comment_id, current_user_id)
    return {"message": "Comment unliked successfully", "liked": liked}
