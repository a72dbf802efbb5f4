"""
Tests for the messaging and media collaborators (HTTP calls mocked).
"""
from unittest.mock import MagicMock

import pytest
import requests

from integrations.media import MediaUploader
from integrations.notifier import MessageNotifier
from models.errors import CollaboratorError, ValidationError


def _response(json_data=None, status_error=None, json_error=None):
    response = MagicMock()
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response


# ---------------------------------------------------------------------------
# MessageNotifier
# ---------------------------------------------------------------------------

@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def live_notifier(session):
    return MessageNotifier(
        api_url="https://graph.example/v1/messages",
        api_key="token-123",
        country_code="91",
        session=session,
    )


class TestMessageNotifier:
    def test_stub_mode_without_credentials(self, session):
        notifier = MessageNotifier(api_url="", api_key="", session=session)
        assert notifier.stub_mode is True
        assert notifier.notify("9876543210", "hello") is None
        session.post.assert_not_called()

    @pytest.mark.parametrize("destination, expected", [
        ("98765 43210", "919876543210"),
        ("+91-98765-43210", "919876543210"),
        ("+44 7700 900123", "447700900123"),
    ])
    def test_normalize_destination(self, live_notifier, destination, expected):
        assert live_notifier.normalize_destination(destination) == expected

    def test_empty_destination_raises(self, live_notifier):
        with pytest.raises(ValidationError):
            live_notifier.normalize_destination("n/a")

    def test_notify_posts_text_message(self, live_notifier, session):
        session.post.return_value = _response({"messages": [{"id": "wamid.1"}]})

        assert live_notifier.notify("9876543210", "Welcome") == "wamid.1"

        args, kwargs = session.post.call_args
        assert args[0] == "https://graph.example/v1/messages"
        assert kwargs['json']['to'] == "919876543210"
        assert kwargs['json']['text'] == {"body": "Welcome"}
        assert kwargs['headers']['Authorization'] == "Bearer token-123"

    def test_http_error_raises_collaborator_error(self, live_notifier, session):
        session.post.return_value = _response(status_error=requests.exceptions.HTTPError("401"))
        with pytest.raises(CollaboratorError) as exc_info:
            live_notifier.notify("9876543210", "Welcome")
        assert exc_info.value.collaborator == "notifier"

    def test_connection_error_raises_collaborator_error(self, live_notifier, session):
        session.post.side_effect = requests.exceptions.ConnectionError("down")
        with pytest.raises(CollaboratorError):
            live_notifier.notify("9876543210", "Welcome")

    def test_bad_json_raises_collaborator_error(self, live_notifier, session):
        session.post.return_value = _response(json_error=ValueError("not json"))
        with pytest.raises(CollaboratorError):
            live_notifier.notify("9876543210", "Welcome")


# ---------------------------------------------------------------------------
# MediaUploader
# ---------------------------------------------------------------------------

IMAGE = "data:image/png;base64,iVBORw0KGgo="


class TestMediaUploader:
    def test_upload_returns_hosted_url(self, session):
        session.post.return_value = _response({"secure_url": "https://cdn.example/a.png"})
        uploader = MediaUploader(upload_url="https://upload.example", upload_preset="p", session=session)

        assert uploader.upload(IMAGE) == "https://cdn.example/a.png"
        _, kwargs = session.post.call_args
        assert kwargs['data']['file'] == IMAGE
        assert kwargs['data']['upload_preset'] == "p"

    def test_rejected_upload_keeps_inline_image(self, session):
        session.post.return_value = _response({"error": {"message": "Invalid preset"}})
        uploader = MediaUploader(upload_url="https://upload.example", session=session)
        assert uploader.upload(IMAGE) == IMAGE

    def test_network_failure_keeps_inline_image(self, session):
        session.post.side_effect = requests.exceptions.Timeout("slow")
        uploader = MediaUploader(upload_url="https://upload.example", session=session)
        assert uploader.upload(IMAGE) == IMAGE

    def test_empty_image_is_not_uploaded(self, session):
        uploader = MediaUploader(upload_url="https://upload.example", session=session)
        assert uploader.upload("") == ""
        session.post.assert_not_called()
