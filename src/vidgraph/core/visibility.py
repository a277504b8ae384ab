from typing import List, Optional, Sequence

from vidgraph.db.models import Video


def is_video_visible(video: Video, viewer_id: Optional[int], context_owner_id: int) -> bool:
    """A video shows up if it is published or the viewer owns the containing playlist."""
    if video.is_published:
        return True
    return viewer_id is not None and viewer_id == context_owner_id


def filter_visible_videos(
    videos: Sequence[Video], viewer_id: Optional[int], context_owner_id: int
) -> List[Video]:
    return [video for video in videos if is_video_visible(video, viewer_id, context_owner_id)]


def is_collapsed(visible: Sequence[Video], viewer_id: Optional[int], context_owner_id: int) -> bool:
    """True when a non-owner would see nothing.

    An empty private view and a missing playlist must be indistinguishable
    from the outside, so callers answer NotFound in this case.
    """
    if viewer_id is not None and viewer_id == context_owner_id:
        return False
    return not visible
