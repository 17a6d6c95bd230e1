# agora/core/test_messages.py
from agora.core.messages import render_notification, format_actor


def test_render_in_recipient_language():
    title, body = render_notification('tr', 'NEW_FOLLOWER', "Jane Doe (@jane)")
    assert title == "Yeni Bir Takipçi!"
    assert body == "Jane Doe (@jane) seni takip etmeye başladı"


def test_unknown_language_falls_back_to_english():
    assert render_notification('xx', 'POST_UPVOTE', "A (@a)") == ("An Upvote!", "A (@a) upvoted your post")
    assert render_notification(None, 'POST_COMMENT', "A (@a)")[0] == "A Comment!"


def test_format_actor():
    assert format_actor({"fullname": "Jane Doe", "username": "jane"}) == "Jane Doe (@jane)"
