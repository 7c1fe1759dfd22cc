"""
Tests for DocumentScanClient against a mocked requests session.
"""
from unittest.mock import MagicMock

import pytest
import requests

from docscanner.client import DocumentScanClient
from docscanner.errors import NetworkError, ServerRejectedError
from docscanner.models import SaveOcrRequest
from docscanner.paths import LocalResourceResolver


def make_client(payload=None, status=200, timeout=None, resolver=None):
    session = MagicMock(spec=requests.Session)
    response = MagicMock()
    response.status_code = status
    response.json.return_value = payload
    session.post.return_value = response
    client = DocumentScanClient("https://ocr.example.com/", timeout=timeout,
                                session=session, resolver=resolver)
    return client, session


class TestScan:
    """Test /ocr/scan uploads."""

    def test_success(self, sample_image, registry):
        client, session = make_client({"resCd": "0000", "resMsg": "OK", "ocrName": "HONG GILDONG"})
        result = client.scan(sample_image, registry.get("01"), "u-1")
        assert result.is_success
        assert result.ocr_name == "HONG GILDONG"

    def test_request_shape(self, sample_image, registry):
        client, session = make_client({"resCd": "0000", "resMsg": "OK"})
        client.scan(sample_image, registry.get("02"), "u-1", "KR")

        args, kwargs = session.post.call_args
        assert args[0] == "https://ocr.example.com/ocr/scan"
        assert kwargs["data"] == {"mbUid": "u-1", "ocrType": "02", "countryCode": "KR"}
        name, _, content_type = kwargs["files"]["document"]
        assert name == "document_02.jpg"
        assert content_type == "image/jpeg"
        assert kwargs["timeout"] is None

    def test_configured_timeout_is_passed(self, sample_image, registry):
        client, session = make_client({"resCd": "0000", "resMsg": "OK"}, timeout=12.5)
        client.scan(sample_image, registry.default, "u-1")
        assert session.post.call_args.kwargs["timeout"] == 12.5

    def test_server_rejected(self, sample_image, registry):
        client, _ = make_client({"resCd": "9999", "resMsg": "invalid image"})
        with pytest.raises(ServerRejectedError) as exc:
            client.scan(sample_image, registry.default, "u-1")
        assert exc.value.code == "9999"
        assert exc.value.message == "invalid image"

    def test_missing_code_is_rejected(self, sample_image, registry):
        client, _ = make_client({"resMsg": "garbled"})
        with pytest.raises(ServerRejectedError) as exc:
            client.scan(sample_image, registry.default, "u-1")
        assert exc.value.code is None

    def test_http_error_status_still_classified_by_code(self, sample_image, registry):
        client, _ = make_client({"resCd": "9999", "resMsg": "server busy"}, status=500)
        with pytest.raises(ServerRejectedError):
            client.scan(sample_image, registry.default, "u-1")

    def test_connection_refused(self, sample_image, registry):
        client, session = make_client()
        session.post.side_effect = requests.ConnectionError("Connection refused")
        with pytest.raises(NetworkError) as exc:
            client.scan(sample_image, registry.default, "u-1")
        assert exc.value.error_code == "NETWORK_ERROR"

    def test_timeout(self, sample_image, registry):
        client, session = make_client()
        session.post.side_effect = requests.Timeout("read timed out")
        with pytest.raises(NetworkError):
            client.scan(sample_image, registry.default, "u-1")

    def test_non_json_body(self, sample_image, registry):
        client, session = make_client()
        session.post.return_value.json.side_effect = ValueError("Expecting value")
        with pytest.raises(NetworkError):
            client.scan(sample_image, registry.default, "u-1")

    def test_json_array_body(self, sample_image, registry):
        client, _ = make_client(["0000"])
        with pytest.raises(NetworkError):
            client.scan(sample_image, registry.default, "u-1")

    def test_file_uri_locator(self, sample_image, registry):
        client, session = make_client({"resCd": "0000", "resMsg": "OK"},
                                      resolver=LocalResourceResolver("ios"))
        client.scan(f"file://{sample_image}", registry.default, "u-1")
        session.post.assert_called_once()

    def test_missing_file_propagates(self, tmp_path, registry):
        client, session = make_client({"resCd": "0000", "resMsg": "OK"})
        with pytest.raises(FileNotFoundError):
            client.scan(tmp_path / "nope.jpg", registry.default, "u-1")
        session.post.assert_not_called()


class TestSaveOcr:
    """Test /ocr/save uploads."""

    def test_save_sends_present_fields(self, sample_image):
        client, session = make_client({"resCd": "0000", "resMsg": "saved"})
        request = SaveOcrRequest("u-1", "03", ocr_name="HONG GILDONG", ocr_birth_day="19800101")
        result = client.save_ocr(request, sample_image)

        assert result.response_message == "saved"
        args, kwargs = session.post.call_args
        assert args[0] == "https://ocr.example.com/ocr/save"
        assert kwargs["data"] == {
            "mbUid": "u-1",
            "ocrType": "03",
            "ocrName": "HONG GILDONG",
            "ocrBirthDay": "19800101",
        }
        assert kwargs["files"]["document"][0] == "document_03.jpg"

    def test_save_rejected(self, sample_image):
        client, _ = make_client({"resCd": "9999", "resMsg": "duplicate"})
        with pytest.raises(ServerRejectedError):
            client.save_ocr(SaveOcrRequest("u-1", "01"), sample_image)


class TestClientSetup:
    def test_requires_server_url(self):
        with pytest.raises(ValueError):
            DocumentScanClient("")

    def test_context_manager_closes_session(self):
        client, session = make_client()
        with client:
            pass
        session.close.assert_called_once()
