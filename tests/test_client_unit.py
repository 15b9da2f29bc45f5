"""Unit tests for TimelineClient."""

from unittest.mock import Mock, patch

import pytest
import requests

from timeline_walker.client import TimelineClient
from timeline_walker.config import ClientConfig
from timeline_walker.exceptions import MalformedResponse, TransportError

from .fakes import make_status


def json_response(payload):
    response = Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    return response


class TestTimelineClientUnit:
    """Unit tests for URL construction and error mapping."""

    def test_url_without_parameters(self):
        client = TimelineClient("mastodon.example.com")

        assert (
            client.build_url()
            == "https://mastodon.example.com/api/v1/timelines/public"
        )

    def test_url_drops_none_parameters(self):
        client = TimelineClient("mastodon.example.com")

        assert (
            client.build_url({"local": None, "max_id": 7})
            == "https://mastodon.example.com/api/v1/timelines/public?max_id=7"
        )

    def test_local_page_request(self):
        client = TimelineClient("mastodon.example.com", ClientConfig(timeout=5))
        payload = [make_status(3), make_status(2)]

        with patch.object(client.session, "get", return_value=json_response(payload)) as get:
            result = client.fetch_page(True, 4)

        assert result == payload
        get.assert_called_once_with(
            "https://mastodon.example.com/api/v1/timelines/public?local=1&max_id=4",
            timeout=5,
        )

    def test_federated_page_request_without_max_id(self):
        client = TimelineClient("mastodon.example.com")

        with patch.object(client.session, "get", return_value=json_response([])) as get:
            assert client.fetch_page(False) == []

        assert get.call_args.args[0] == "https://mastodon.example.com/api/v1/timelines/public"

    def test_user_agent_header(self):
        client = TimelineClient("mastodon.example.com", ClientConfig(user_agent="probe/2"))

        assert client.session.headers["User-Agent"] == "probe/2"

    def test_connection_error_becomes_transport_error(self):
        client = TimelineClient("mastodon.example.com")
        cause = requests.ConnectionError("refused")

        with patch.object(client.session, "get", side_effect=cause):
            with pytest.raises(TransportError) as exc_info:
                client.fetch_page(True)

        assert exc_info.value.inner_error is cause
        assert exc_info.value.__cause__ is cause

    def test_http_error_becomes_transport_error(self):
        client = TimelineClient("mastodon.example.com")
        response = Mock()
        response.raise_for_status.side_effect = requests.HTTPError("503 Server Error")

        with patch.object(client.session, "get", return_value=response):
            with pytest.raises(TransportError):
                client.fetch_page(False, 10)

    def test_invalid_json_is_malformed(self):
        client = TimelineClient("mastodon.example.com")
        response = Mock()
        response.raise_for_status.return_value = None
        response.json.side_effect = ValueError("Expecting value")

        with patch.object(client.session, "get", return_value=response):
            with pytest.raises(MalformedResponse):
                client.fetch_page(True)

    @pytest.mark.parametrize(
        "payload", [{"error": "not found"}, [1, 2], [make_status(1), "x"], None]
    )
    def test_non_list_payload_is_malformed(self, payload):
        client = TimelineClient("mastodon.example.com")

        with patch.object(client.session, "get", return_value=json_response(payload)):
            with pytest.raises(MalformedResponse):
                client.fetch_page(True)
