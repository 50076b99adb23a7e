"""Unit tests for the Google Docs API client."""

import json

import httpx
import pytest

from gdoc2md.exceptions import AuthenticationError, DocumentNotFoundError, FetchError
from gdoc2md.fetch import GoogleDocsClient, ServiceAccountTokenProvider, load_service_email

BASE_URL = "https://docs.test/v1/documents"


def make_client(handler, token="test-token"):
    """Build a client whose HTTP traffic goes to ``handler``."""
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return GoogleDocsClient(lambda: token, http_client=http_client, base_url=BASE_URL)


def status_handler(status_code, **kwargs):
    def handler(request):
        return httpx.Response(status_code, **kwargs)

    return handler


@pytest.mark.unit
class TestFetchDocumentJson:
    """Tests for GoogleDocsClient.fetch_document_json."""

    def test_successful_fetch(self, sample_payload):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=sample_payload)

        payload = make_client(handler).fetch_document_json("sample-doc")

        assert payload["title"] == "Release Notes"
        assert str(seen[0].url) == f"{BASE_URL}/sample-doc"
        assert seen[0].headers["Authorization"] == "Bearer test-token"

    def test_fetch_document_parses(self, sample_payload):
        document = make_client(status_handler(200, json=sample_payload)).fetch_document("sample-doc")
        assert document.title == "Release Notes"
        assert document.blocks

    def test_not_found(self):
        with pytest.raises(DocumentNotFoundError) as exc_info:
            make_client(status_handler(404)).fetch_document_json("missing")
        assert exc_info.value.document_id == "missing"
        assert exc_info.value.status_code == 404

    @pytest.mark.parametrize("status_code", [401, 403])
    def test_access_denied(self, status_code):
        with pytest.raises(AuthenticationError) as exc_info:
            make_client(status_handler(status_code)).fetch_document_json("private")
        assert exc_info.value.status_code == status_code
        assert isinstance(exc_info.value.original_error, httpx.HTTPStatusError)

    def test_server_error(self):
        with pytest.raises(FetchError) as exc_info:
            make_client(status_handler(500)).fetch_document_json("doc")
        assert not isinstance(exc_info.value, (AuthenticationError, DocumentNotFoundError))
        assert exc_info.value.status_code == 500

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(FetchError) as exc_info:
            make_client(handler).fetch_document_json("doc")
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.original_error, httpx.ConnectError)

    def test_invalid_json(self):
        with pytest.raises(FetchError, match="invalid JSON"):
            make_client(status_handler(200, content=b"<html>")).fetch_document_json("doc")

    def test_empty_document_id(self):
        client = make_client(status_handler(200, json={}))
        with pytest.raises(FetchError, match="document id is required"):
            client.fetch_document_json("")

    def test_token_errors_propagate(self):
        def failing_token():
            raise AuthenticationError("no credentials")

        client = GoogleDocsClient(failing_token, http_client=httpx.Client(transport=httpx.MockTransport(lambda r: None)))
        with pytest.raises(AuthenticationError, match="no credentials"):
            client.fetch_document_json("doc")


@pytest.mark.unit
class TestClientLifecycle:
    """Tests for client ownership."""

    def test_borrowed_client_is_not_closed(self):
        http_client = httpx.Client(transport=httpx.MockTransport(status_handler(200, json={})))
        with GoogleDocsClient(lambda: "t", http_client=http_client):
            pass
        assert not http_client.is_closed
        http_client.close()

    def test_owned_client_is_closed(self):
        client = GoogleDocsClient(lambda: "t")
        client.close()
        assert client._client.is_closed

    def test_base_url_trailing_slash(self):
        client = GoogleDocsClient(lambda: "t", base_url=BASE_URL + "/")
        assert client.base_url == BASE_URL
        client.close()


@pytest.mark.unit
class TestCredentials:
    """Tests for service account helpers."""

    def test_load_service_email(self, tmp_path):
        path = tmp_path / "credentials.json"
        path.write_text(json.dumps({"type": "service_account", "client_email": "reader@project.iam.test"}))
        assert load_service_email(path) == "reader@project.iam.test"

    def test_load_service_email_missing_file(self, tmp_path, caplog):
        assert load_service_email(tmp_path / "absent.json") is None
        assert "Error loading credentials file" in caplog.text

    def test_load_service_email_invalid_json(self, tmp_path):
        path = tmp_path / "credentials.json"
        path.write_text("not json")
        assert load_service_email(path) is None

    def test_load_service_email_without_email(self, tmp_path):
        path = tmp_path / "credentials.json"
        path.write_text(json.dumps({"type": "service_account"}))
        assert load_service_email(path) is None

    def test_token_provider_missing_file(self, tmp_path):
        provider = ServiceAccountTokenProvider(tmp_path / "absent.json")
        with pytest.raises(AuthenticationError, match="Could not load service account credentials"):
            provider()

    def test_token_provider_malformed_key(self, tmp_path):
        path = tmp_path / "credentials.json"
        path.write_text(json.dumps({"type": "service_account", "client_email": "x@test"}))
        with pytest.raises(AuthenticationError):
            ServiceAccountTokenProvider(path)()
