import io
from unittest.mock import MagicMock

from appspider.enterprise.report import ReportDownloader, safe_write


def make_client(has_report=True, xml="<VulnSummary/>", zip_bytes=b"PK\x03\x04zip"):
    client = MagicMock()
    client.has_report.return_value = has_report
    client.get_vulnerabilities_summary_xml.return_value = xml
    client.get_report_zip.return_value = io.BytesIO(zip_bytes) if zip_bytes is not None else None
    return client


def test_download_all_writes_both_files(tmp_path):
    client = make_client()
    out = tmp_path / "reports" / "nested"

    paths = ReportDownloader(client, out).download_all("tok", "scan-1")

    assert paths == [out / "scan-1_VulnerabilitiesSummary.xml", out / "scan-1_Report.zip"]
    assert paths[0].read_text(encoding="utf-8") == "<VulnSummary/>"
    assert paths[1].read_bytes() == b"PK\x03\x04zip"


def test_zip_stream_is_closed(tmp_path):
    stream = io.BytesIO(b"data")
    client = make_client()
    client.get_report_zip.return_value = stream

    ReportDownloader(client, tmp_path).save_report_zip("tok", "scan-1")

    assert stream.closed


def test_no_report_downloads_nothing(tmp_path):
    client = make_client(has_report=False)

    assert ReportDownloader(client, tmp_path).download_all("tok", "scan-1") == []
    client.get_report_zip.assert_not_called()
    assert list(tmp_path.iterdir()) == []


def test_partial_download(tmp_path):
    client = make_client(xml=None)

    paths = ReportDownloader(client, tmp_path).download_all("tok", "scan-1")

    assert paths == [tmp_path / "scan-1_Report.zip"]


def test_safe_write_text_and_bytes(tmp_path):
    safe_write(tmp_path / "a" / "x.txt", "héllo")
    safe_write(tmp_path / "b" / "y.bin", b"\x00\x01")

    assert (tmp_path / "a" / "x.txt").read_text(encoding="utf-8") == "héllo"
    assert (tmp_path / "b" / "y.bin").read_bytes() == b"\x00\x01"
