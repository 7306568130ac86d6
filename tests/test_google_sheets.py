"""Unit tests for GoogleSheetsClient."""
import logging

import pytest
import requests
import responses
from processor.models import EventType
from sheets.google_sheets import (
    DEFAULT_SHEET_NAME,
    GoogleSheetsClient,
    SheetsFetchError,
)


SHEET_URL = "https://sheets.googleapis.com/v4/spreadsheets/sheet-123/values/Eventos"

HEADER = ["Título", "Data", "Hora", "Local", "Tipo", "Link", "Imagem"]


@pytest.fixture
def client():
    return GoogleSheetsClient(sheet_id="sheet-123", sheet_name="Eventos", api_key="test-key")


class TestGoogleSheetsClient:
    """Test cases for GoogleSheetsClient class."""

    def test_values_url_quotes_sheet_name(self):
        client = GoogleSheetsClient(sheet_id="abc", sheet_name=DEFAULT_SHEET_NAME, api_key="k")

        assert client.values_url == (
            "https://sheets.googleapis.com/v4/spreadsheets/abc/values/P%C3%A1gina2"
        )

    @responses.activate
    def test_fetch_events_success(self, client):
        """Test successful fetch and mapping."""
        responses.add(
            responses.GET,
            SHEET_URL,
            json={
                "range": "Eventos!A1:G3",
                "majorDimension": "ROWS",
                "values": [
                    HEADER,
                    ["Show A", "2030-01-01", "20:00", "Hall 1", "música", "u1", "i1"],
                    ["Show B", "2020-01-01", "19:00", "Hall 2", "teatro"],
                ]
            },
            status=200
        )

        events = client.fetch_events()

        assert len(events) == 2
        assert events[0].id == "event-1"
        assert events[0].title == "Show A"
        assert events[0].type is EventType.MUSIC
        assert events[1].type is EventType.THEATER
        assert events[1].url == ""

        assert len(responses.calls) == 1
        assert "key=test-key" in responses.calls[0].request.url

    @responses.activate
    def test_header_only(self, client):
        responses.add(responses.GET, SHEET_URL, json={"values": [HEADER]}, status=200)

        assert client.fetch_events() == []

    @responses.activate
    def test_missing_values_key(self, client):
        """Test that an empty sheet (no values key) yields no events."""
        responses.add(responses.GET, SHEET_URL, json={"range": "Eventos!A1:Z1000"}, status=200)

        assert client.fetch_events() == []

    @responses.activate
    def test_error_message_from_body(self, client):
        responses.add(
            responses.GET,
            SHEET_URL,
            json={"error": {"code": 403, "message": "API key not valid.", "status": "PERMISSION_DENIED"}},
            status=403
        )

        with pytest.raises(SheetsFetchError) as exc_info:
            client.fetch_events()

        assert "API key not valid." in str(exc_info.value)
        assert exc_info.value.status_code == 403

    @responses.activate
    def test_error_falls_back_to_status_text(self, client):
        responses.add(responses.GET, SHEET_URL, body="oops", status=500)

        with pytest.raises(SheetsFetchError) as exc_info:
            client.fetch_events()

        assert "Internal Server Error" in str(exc_info.value)
        assert exc_info.value.status_code == 500

    @responses.activate
    def test_no_retry_on_failure(self, client):
        responses.add(responses.GET, SHEET_URL, body="Server Error", status=503)
        responses.add(responses.GET, SHEET_URL, json={"values": [HEADER]}, status=200)

        with pytest.raises(SheetsFetchError):
            client.fetch_events()

        assert len(responses.calls) == 1

    @responses.activate
    def test_network_error_wrapped(self, client):
        responses.add(
            responses.GET,
            SHEET_URL,
            body=requests.exceptions.ConnectionError("Connection refused")
        )

        with pytest.raises(SheetsFetchError) as exc_info:
            client.fetch_events()

        assert "Connection refused" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, requests.exceptions.ConnectionError)

    @responses.activate
    def test_invalid_json_payload(self, client):
        responses.add(responses.GET, SHEET_URL, body="<html>not json</html>", status=200)

        with pytest.raises(SheetsFetchError):
            client.fetch_events()

    @responses.activate
    def test_non_object_payload(self, client):
        responses.add(responses.GET, SHEET_URL, json=["a", "b"], status=200)

        with pytest.raises(SheetsFetchError):
            client.fetch_values()

    @responses.activate
    def test_values_not_a_list(self, client):
        responses.add(responses.GET, SHEET_URL, json={"values": "nope"}, status=200)

        with pytest.raises(SheetsFetchError):
            client.fetch_values()

    @responses.activate
    def test_missing_api_key_still_requests(self, caplog):
        """Test that a missing key is logged but the request is still attempted."""
        responses.add(
            responses.GET,
            SHEET_URL,
            json={"error": {"code": 403, "message": "The request is missing a valid API key."}},
            status=403
        )

        with caplog.at_level(logging.ERROR):
            client = GoogleSheetsClient(sheet_id="sheet-123", sheet_name="Eventos", api_key=None)

        assert "API key is missing" in caplog.text

        with pytest.raises(SheetsFetchError):
            client.fetch_events()

        assert len(responses.calls) == 1
        assert "key=" not in responses.calls[0].request.url
