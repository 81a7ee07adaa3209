import base64
import json

import pytest

from careerclarified.services.ai_prompts import RESUME_PARSE_FALLBACK_SYSTEM, RESUME_PARSE_SYSTEM
from careerclarified.services.resume_parser import (
    PDFParseError,
    build_parse_messages,
    build_storage_path,
    decode_file_data,
    extract_pdf_text,
    is_pdf,
    normalize_parsed_resume,
    strip_data_url,
)


def test_strip_data_url():
    assert strip_data_url("data:application/pdf;base64,QUJD") == "QUJD"
    assert strip_data_url("QUJD") == "QUJD"


def test_decode_file_data():
    assert decode_file_data(base64.b64encode(b"%PDF-1.4").decode()) == b"%PDF-1.4"


def test_decode_rejects_invalid_base64():
    with pytest.raises(ValueError, match="not valid base64"):
        decode_file_data("not base64!!")


def test_decode_accepts_line_wrapped_base64():
    encoded = base64.encodebytes(b"%PDF-1.4\n" + b"x" * 120).decode()
    assert "\n" in encoded.strip()
    assert decode_file_data(encoded) == b"%PDF-1.4\n" + b"x" * 120


@pytest.mark.parametrize("mime_type,file_name,expected", [
    ("application/pdf", None, True),
    (None, "CV.PDF", True),
    ("application/msword", "cv.docx", False),
    (None, None, False),
])
def test_is_pdf(mime_type, file_name, expected):
    assert is_pdf(mime_type, file_name) is expected


def test_storage_path_is_user_scoped():
    path = build_storage_path("user-1", "my resume (final).pdf", now_ms=1700000000000)
    assert path == "user-1/1700000000000-my_resume__final_.pdf"


def test_storage_path_default_name():
    assert build_storage_path("user-1", None, now_ms=5) == "user-1/5-resume.pdf"


def test_extract_pdf_text_rejects_garbage():
    with pytest.raises(PDFParseError):
        extract_pdf_text(b"this is not a pdf")


def _one_page_pdf(text):
    stream = b"BT /F1 24 Tf 72 700 Td (%s) Tj ET" % text.encode()
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Resources << /Font << /F1 4 0 R >> >> /Contents 5 0 R >>",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
    ]
    pdf = b"%PDF-1.4\n"
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(pdf))
        pdf += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_at = len(pdf)
    pdf += b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1)
    for offset in offsets:
        pdf += b"%010d 00000 n \n" % offset
    pdf += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%EOF\n" % (len(objects) + 1, xref_at)
    return pdf


def test_extract_pdf_text_reads_page_text():
    assert "Hello Resume" in extract_pdf_text(_one_page_pdf("Hello Resume"))


class TestBuildParseMessages:
    def test_uses_extracted_text(self):
        messages = build_parse_messages("Jane Doe\nEngineer", "QUJD")
        assert messages[0] == {"role": "system", "content": RESUME_PARSE_SYSTEM}
        assert messages[1]["content"].endswith("Jane Doe\nEngineer")

    def test_falls_back_to_base64_snippet(self):
        raw = "A" * 9000
        messages = build_parse_messages("   ", raw)
        assert messages[0]["content"] == RESUME_PARSE_FALLBACK_SYSTEM
        assert "A" * 8000 in messages[1]["content"]
        assert "A" * 8001 not in messages[1]["content"]


class TestNormalizeParsedResume:
    def test_fills_missing_sections(self):
        data = json.loads(normalize_parsed_resume('{"personalInfo": {"fullName": "Jane Doe"}}'))
        assert data["personalInfo"] == {
            "fullName": "Jane Doe",
            "email": "",
            "phone": "",
            "location": "",
            "jobTitle": "Professional",
        }
        assert data["experience"] == []
        assert data["skills"] == {"technical": [], "soft": []}
        assert data["education"] == []
        assert data["summary"] == ""

    def test_job_title_from_first_position(self):
        content = json.dumps({
            "personalInfo": {"fullName": "Jane"},
            "experience": [{"company": "Acme", "position": "Data Analyst"}],
        })
        data = json.loads(normalize_parsed_resume(content))
        assert data["personalInfo"]["jobTitle"] == "Data Analyst"
        assert data["experience"][0]["location"] == ""
        assert data["experience"][0]["duration"] == ""

    def test_job_title_from_top_skill(self):
        content = json.dumps({"skills": {"technical": ["Python", "SQL"]}})
        data = json.loads(normalize_parsed_resume(content))
        assert data["personalInfo"]["jobTitle"] == "Python Professional"

    def test_duration_built_from_dates(self):
        content = json.dumps({
            "experience": [{"company": "Acme", "position": "Dev", "startDate": "2020", "endDate": "2023"}],
        })
        data = json.loads(normalize_parsed_resume(content))
        assert data["experience"][0]["duration"] == "2020 - 2023"

    def test_numeric_fields_become_strings(self):
        content = json.dumps({
            "experience": [{"company": "Acme", "position": 42, "startDate": 2019, "endDate": 2021}],
        })
        data = json.loads(normalize_parsed_resume(content))
        assert data["experience"][0]["duration"] == "2019 - 2021"
        assert data["experience"][0]["position"] == "42"
        assert data["personalInfo"]["jobTitle"] == "42"

    def test_json_inside_code_fence(self):
        content = '```json\n{"summary": "Builder of things", "skills": "Python, Go"}\n```'
        data = json.loads(normalize_parsed_resume(content))
        assert data["summary"] == "Builder of things"
        assert data["skills"]["technical"] == ["Python", "Go"]

    def test_non_json_returned_unchanged(self):
        assert normalize_parsed_resume("Sorry, I cannot read this file.") == "Sorry, I cannot read this file."
