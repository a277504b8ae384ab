import logging
from typing import Optional

from fastapi import APIRouter, Depends

from vidgraph.auth.utils import get_current_user_id, get_optional_user_id
from vidgraph.core import composer, mutations
from vidgraph.core.store import EntityStore
from vidgraph.deps import get_store

from .models import PlaylistCreate, PlaylistUpdate

# Set up logging
logger = logging.getLogger("playlists")

router = APIRouter(tags=["playlists"])


# Playlist CRUD Endpoints
@router.post("/", status_code=201, response_model=dict)
def create_playlist(
    payload: PlaylistCreate,
    store: EntityStore = Depends(get_store),
    current_user_id: int = Depends(get_current_user_id),
):
    """
    Create a new playlist owned by the current user.
    """
    playlist = mutations.create_playlist(store, current_user_id, payload.name, payload.description)
    return {"message": "Playlist created successfully", "playlist": playlist}


@router.get("/user/{user_id}", response_model=dict)
def get_user_playlists(
    user_id: str,
    store: EntityStore = Depends(get_store),
):
    """
    Get all playlists owned by a user with their video totals.
    """
    playlists = composer.compose_user_playlists(store, user_id)
    logger.info(f"Retrieved {len(playlists)} playlists for user {user_id}")
    return {
        "message": "User playlists fetched successfully",
        "playlists": playlists,
        "total": len(playlists),
    }


@router.get("/{playlist_id}", response_model=dict)
def get_playlist_by_id(
    playlist_id: str,
    store: EntityStore = Depends(get_store),
    viewer_id: Optional[int] = Depends(get_optional_user_id),
):
    """
    Get a playlist with its videos and owner. Unpublished videos are only
    listed for the owner.
    """
    playlist = composer.compose_playlist_view(store, playlist_id, viewer_id)
    logger.info(f"Retrieved playlist {playlist_id} with {len(playlist.videos)} visible videos")
    return {"message": "Playlist fetched successfully", "playlist": playlist}


@router.patch("/{playlist_id}", response_model=dict)
def update_playlist(
    playlist_id: str,
    payload: PlaylistUpdate,
    store: EntityStore = Depends(get_store),
    current_user_id: int = Depends(get_current_user_id),
):
    """
    Update the name and/or description of a playlist.
    """
    playlist = mutations.update_playlist(
        store, playlist_id, current_user_id, name=payload.name, description=payload.description
    )
    return {"message": "Playlist updated successfully", "playlist": playlist}


@router.delete("/{playlist_id}", response_model=dict)
def delete_playlist(
    playlist_id: str,
    store: EntityStore = Depends(get_store),
    current_user_id: int = Depends(get_current_user_id),
):
    """
    Delete a playlist. Its videos are left in place.
    """
    deleted_id = mutations.delete_playlist(store, playlist_id, current_user_id)
    return {"message": "Playlist deleted successfully", "playlist_id": deleted_id}


# Playlist membership
@router.patch("/add/{video_id}/{playlist_id}", response_model=dict)
def add_video_to_playlist(
    video_id: str,
    playlist_id: str,
    store: EntityStore = Depends(get_store),
    current_user_id: int = Depends(get_current_user_id),
):
    """
    Add a video to a playlist. Adding a video that is already there is a no-op.
    """
    playlist = mutations.add_video(store, playlist_id, video_id, current_user_id)
    return {"message": "Video added to playlist successfully", "playlist": playlist}


@router.patch("/remove/{video_id}/{playlist_id}", response_model=dict)
def remove_video_from_playlist(
    video_id: str,
    playlist_id: str,
    store: EntityStore = Depends(get_store),
    current_user_id: int = Depends(get_current_user_id),
):
    """
    Remove a video from a playlist.
    """
    playlist = mutations.remove_video(store, playlist_id, video_id, current_user_id)
    return {"message": "Video removed from playlist successfully", "playlist": playlist}
