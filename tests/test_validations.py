from datetime import datetime, timezone

import pytest

from vidgraph.core import mutations
from vidgraph.core.errors import InvalidArgument, parse_id
from vidgraph.db.models import Comment, Playlist, get_utc_now


@pytest.mark.parametrize(
    "name, description",
    [("", "x"), ("Favorites", ""), ("   ", "x"), ("Favorites", "  \t"), (None, "x")],
)
def test_create_playlist_requires_name_and_description(store, make_user, name, description):
    user = make_user("u1")
    with pytest.raises(InvalidArgument):
        mutations.create_playlist(store, user.id, name, description)


def test_create_playlist_rejects_overlong_name(store, make_user):
    user = make_user("u1")
    with pytest.raises(InvalidArgument):
        mutations.create_playlist(store, user.id, "n" * 101, "x")


def test_create_playlist_trims_and_starts_empty(store, make_user):
    user = make_user("u1")
    record = mutations.create_playlist(store, user.id, "  Favorites ", " x ")
    assert record.name == "Favorites"
    assert record.description == "x"
    assert record.owner == user.id
    assert record.videos == []


def test_update_playlist_requires_some_field(store, make_user):
    user = make_user("u1")
    playlist = mutations.create_playlist(store, user.id, "Favorites", "x")
    with pytest.raises(InvalidArgument):
        mutations.update_playlist(store, playlist.id, user.id, name=" ", description=None)


def test_comment_content_is_required(store, make_user, make_video, make_comment):
    user = make_user("u2")
    video = make_video(user)
    comment = make_comment(video, user, "first", datetime(2024, 1, 1, tzinfo=timezone.utc))

    with pytest.raises(InvalidArgument):
        mutations.add_comment(store, video.id, user.id, "   ")
    with pytest.raises(InvalidArgument):
        mutations.add_comment(store, video.id, user.id, "x" * 1001)
    with pytest.raises(InvalidArgument):
        mutations.update_comment(store, comment.id, user.id, "")


def test_add_comment_stores_trimmed_content(store, make_user, make_video):
    user = make_user("u2")
    video = make_video(user)
    record = mutations.add_comment(store, video.id, user.id, "  nice one  ")
    assert record.content == "nice one"
    assert record.owner_id == user.id
    assert record.video_id == video.id


@pytest.mark.parametrize("value", ["abc", "0", "-3", "", "1.5", "\u00b2", "\u2460", True, None, 0])
def test_parse_id_rejects_non_ids(value):
    with pytest.raises(InvalidArgument):
        parse_id(value, "Playlist")


def test_parse_id_accepts_positive_ints():
    assert parse_id("42", "Video") == 42
    assert parse_id(7, "Video") == 7


def test_default_timestamps_are_timezone_aware(store, make_user):
    assert get_utc_now().tzinfo is timezone.utc
    user = make_user("u1")
    playlist = Playlist(owner_id=user.id, name="Favorites", description="x")
    assert playlist.created_at.tzinfo is timezone.utc
    assert playlist.updated_at.tzinfo is timezone.utc
    assert Comment(video_id=1, owner_id=user.id, content="hi").created_at.tzinfo is timezone.utc

    record = mutations.create_playlist(store, user.id, "Favorites", "x")
    updated = mutations.update_playlist(store, record.id, user.id, name="Renamed")
    assert updated.name == "Renamed"
