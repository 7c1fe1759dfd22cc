"""
Tests for the terminal client.
"""
from unittest.mock import patch

from docscanner import cli
from docscanner.errors import NetworkError
from docscanner.models import ScanDocumentResponse


class TestCli:

    def test_types(self, capsys):
        assert cli.main(["types"]) == 0
        out = capsys.readouterr().out
        assert "01" in out and "04" in out

    def test_frame(self, capsys):
        assert cli.main(["frame", "--width", "1000", "--height", "2000", "--type", "02", "--masks"]) == 0
        out = capsys.readouterr().out
        assert "width=850.0 height=531.2" in out
        assert "mask top" in out

    def test_frame_unknown_type(self, capsys):
        assert cli.main(["frame", "--width", "100", "--height", "100", "--type", "99"]) == 1
        assert "Unknown document type" in capsys.readouterr().out

    def test_scan(self, sample_image, capsys, monkeypatch):
        monkeypatch.setenv("DOCSCANNER_SERVER_URL", "https://ocr.example.com")
        response = ScanDocumentResponse("0000", "OK", ocr_name="HONG GILDONG")
        with patch("docscanner.cli.DocumentScanClient.scan", return_value=response) as scan:
            code = cli.main(["scan", str(sample_image), "--type", "01", "--user", "u-1"])
        assert code == 0
        assert scan.call_args.args[2] == "u-1"
        assert "HONG GILDONG" in capsys.readouterr().out

    def test_scan_network_error(self, sample_image, monkeypatch):
        monkeypatch.setenv("DOCSCANNER_SERVER_URL", "https://ocr.example.com")
        with patch("docscanner.cli.DocumentScanClient.scan", side_effect=NetworkError("refused")):
            assert cli.main(["scan", str(sample_image), "--type", "01", "--user", "u-1"]) == 1

    def test_scan_requires_user(self, sample_image, monkeypatch):
        monkeypatch.setenv("DOCSCANNER_SERVER_URL", "https://ocr.example.com")
        monkeypatch.delenv("DOCSCANNER_USER_ID", raising=False)
        assert cli.main(["scan", str(sample_image), "--type", "01"]) == 1

    def test_capture_closes_client_when_setup_fails(self, monkeypatch):
        monkeypatch.setenv("DOCSCANNER_SERVER_URL", "https://ocr.example.com")
        with patch("docscanner.cli.CaptureCoordinator", side_effect=OSError("disk full")), \
                patch("docscanner.cli.DocumentScanClient.close") as close:
            assert cli.main(["capture", "--user", "u-1"]) == 1
        close.assert_called_once_with()
