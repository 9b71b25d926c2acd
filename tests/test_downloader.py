import base64

from screening.config import DOWNLOAD_PATH
from screening.downloader import build_copy_request, download_reports
from screening.errors import RequestFailed


PDF_BYTES = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n1 0 obj\n<<>>\nendobj\n%%EOF\n"


def pdf_response(data: bytes = PDF_BYTES) -> tuple:
    encoded = base64.b64encode(data).decode("ascii")
    # wrap like the vendor does
    wrapped = "\n".join(encoded[i:i + 16] for i in range(0, len(encoded), 16))
    return (200, "text/xml", f"<ReportCopyResponse><ReportPDF>{wrapped}</ReportPDF></ReportCopyResponse>")


def test_copy_request_is_escaped(credential) -> None:
    assert build_copy_request(credential, "10<01") == (
        "<ReportCopyRequest><PartnerInfo>"
        "<UserName>partner&amp;co</UserName>"
        "<Password>p&lt;ss&gt;&apos;word</Password>"
        "</PartnerInfo>"
        "<FileNumber>10&lt;01</FileNumber>"
        "</ReportCopyRequest>"
    )


def test_transport_error_on_one_file_does_not_stop_the_rest(client, credential, tmp_path) -> None:
    client.post_xml.side_effect = [
        pdf_response(),
        RequestFailed("Network error calling /ReportPDFFetch.cfm: ConnectionError"),
        pdf_response(b"%PDF-third"),
    ]

    results = download_reports(client, credential, tmp_path, ["1001", "1002", "1003"])

    assert client.post_xml.call_count == 3
    assert all(call.args[0] == DOWNLOAD_PATH for call in client.post_xml.call_args_list)
    assert [r.file_number for r in results] == ["1001", "1002", "1003"]
    assert [r.ok for r in results] == [True, False, True]
    assert "ConnectionError" in results[1].error
    assert results[1].path is None

    written = sorted(p.name for p in tmp_path.iterdir())
    assert written == ["1001.pdf", "1003.pdf"]
    assert (tmp_path / "1001.pdf").read_bytes() == PDF_BYTES
    assert (tmp_path / "1003.pdf").read_bytes() == b"%PDF-third"


def test_vendor_error_is_reported_per_file(client, credential, tmp_path) -> None:
    client.post_xml.side_effect = [
        (200, "text/xml", "<ReportCopyResponse><ErrorText>Report not complete</ErrorText></ReportCopyResponse>"),
        pdf_response(),
    ]
    results = download_reports(client, credential, tmp_path, ["1001", "1002"])
    assert results[0].error == "Report not complete"
    assert results[1].ok
    assert not (tmp_path / "1001.pdf").exists()


def test_http_error_and_bad_payloads_are_per_file(client, credential, tmp_path) -> None:
    client.post_xml.side_effect = [
        (500, "text/plain", "server exploded"),
        (200, "text/xml", "<<not xml"),
        (200, "text/xml", "<ReportCopyResponse><ReportPDF>!!!not base64!!!</ReportPDF></ReportCopyResponse>"),
        (200, "text/xml", "<ReportCopyResponse/>"),
    ]
    results = download_reports(client, credential, tmp_path, ["1", "2", "3", "4"])
    assert [r.ok for r in results] == [False, False, False, False]
    assert "500" in results[0].error
    assert "not valid XML" in results[1].error
    assert "Invalid PDF payload" in results[2].error
    assert "no report PDF" in results[3].error
    assert list(tmp_path.iterdir()) == []


def test_output_directory_is_created_and_files_overwritten(client, credential, tmp_path) -> None:
    out_dir = tmp_path / "nested" / "reports"
    out_dir.mkdir(parents=True)
    (out_dir / "1001.pdf").write_bytes(b"old")

    client.post_xml.side_effect = [pdf_response()]
    (result,) = download_reports(client, credential, out_dir, ["1001"])

    assert result.path == out_dir / "1001.pdf"
    assert result.path.read_bytes() == PDF_BYTES


def test_missing_directory_is_created(client, credential, tmp_path) -> None:
    out_dir = tmp_path / "fresh"
    client.post_xml.side_effect = [pdf_response()]
    download_reports(client, credential, str(out_dir), ["7"])
    assert (out_dir / "7.pdf").exists()


def test_file_number_cannot_escape_output_directory(client, credential, tmp_path) -> None:
    out_dir = tmp_path / "reports"
    client.post_xml.side_effect = [pdf_response()]

    results = download_reports(client, credential, out_dir, ["../escaped", "a/b", "..", "1001"])

    assert [r.ok for r in results] == [False, False, False, True]
    assert all("not a valid file name" in r.error for r in results[:3])
    assert client.post_xml.call_count == 1
    assert not (tmp_path / "escaped.pdf").exists()
    assert sorted(p.name for p in out_dir.iterdir()) == ["1001.pdf"]


def test_none_file_number_is_empty(client, credential, tmp_path) -> None:
    (result,) = download_reports(client, credential, tmp_path, [None])
    assert result.error == "Empty file number"
    assert result.file_number == ""
    client.post_xml.assert_not_called()
