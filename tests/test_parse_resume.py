import base64
import json
import uuid

import pytest

from careerclarified.config import settings
from careerclarified.models import AIUsageLog, Profile
from careerclarified.routers import resume as resume_router
from careerclarified.services.resume_parser import PDFParseError

PDF_B64 = base64.b64encode(b"%PDF-1.4 fake resume bytes").decode()

PARSED = {
    "personalInfo": {"fullName": "Jane Doe", "email": "jane@example.com"},
    "experience": [{"company": "Acme", "position": "Backend Engineer", "duration": "2021 - 2024"}],
    "skills": {"technical": ["Python"], "soft": ["Mentoring"]},
}


@pytest.fixture(autouse=True)
def pdf_text(monkeypatch):
    """Stub text extraction; tests replace the return value as needed."""
    state = {"text": "Jane Doe\nBackend Engineer at Acme", "error": None}

    def fake_extract(data):
        if state["error"]:
            raise PDFParseError(state["error"])
        return state["text"]

    monkeypatch.setattr(resume_router, "extract_pdf_text", fake_extract)
    return state


def _body(user_id, **overrides):
    body = {
        "userId": user_id,
        "fileData": f"data:application/pdf;base64,{PDF_B64}",
        "fileName": "jane.pdf",
        "mimeType": "application/pdf",
    }
    body.update(overrides)
    return body


def test_parses_and_stores(client, fake_ai, fake_storage, db_session, make_profile):
    fake_ai.reply = json.dumps(PARSED)
    profile = make_profile()

    response = client.post("/api/parse-resume", json=_body(profile.id))

    assert response.status_code == 200
    content = json.loads(response.json()["content"])
    assert content["personalInfo"]["fullName"] == "Jane Doe"
    assert content["personalInfo"]["jobTitle"] == "Backend Engineer"
    assert content["education"] == []

    upload = fake_storage.uploads[0]
    assert upload["bucket"] == settings.supabase.resume_bucket
    assert upload["path"].startswith(f"{profile.id}/")
    assert upload["path"].endswith("-jane.pdf")

    assert fake_ai.calls[0]["model"] == settings.ai.resume_parse_model
    assert "Backend Engineer at Acme" in fake_ai.calls[0]["messages"][1]["content"]
    logged = db_session.query(AIUsageLog).filter(AIUsageLog.user_id == profile.id).one()
    assert logged.feature_name == "job_finder"


def test_missing_user_id(client, fake_ai, fake_storage):
    body = _body("x")
    del body["userId"]
    response = client.post("/api/parse-resume", json=body)
    assert response.status_code == 400
    assert response.json() == {"error": "User ID is required"}
    assert fake_storage.uploads == []
    assert fake_ai.calls == []


def test_missing_file_data(client):
    body = _body(str(uuid.uuid4()))
    del body["fileData"]
    response = client.post("/api/parse-resume", json=body)
    assert response.status_code == 400
    assert response.json() == {"error": "File data (base64) is required"}


def test_missing_profile_is_created_without_quota_check(client, fake_ai, db_session):
    user_id = str(uuid.uuid4())
    fake_ai.reply = json.dumps(PARSED)

    response = client.post("/api/parse-resume", json=_body(user_id))

    assert response.status_code == 200
    assert db_session.query(Profile).filter(Profile.id == user_id).count() == 1


def test_daily_limit(client, fake_ai, fake_storage, make_profile, add_usage):
    profile = make_profile(tier="free")
    add_usage(profile.id, 5)
    response = client.post("/api/parse-resume", json=_body(profile.id))
    assert response.status_code == 429
    assert fake_storage.uploads == []
    assert fake_ai.calls == []


def test_non_pdf_rejected(client, fake_storage, make_profile):
    profile = make_profile()
    response = client.post(
        "/api/parse-resume",
        json=_body(profile.id, fileName="cv.docx", mimeType="application/msword"),
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Resume file must be a PDF for AI parsing. Please upload a PDF."}
    assert fake_storage.uploads == []


def test_missing_bucket(client, fake_ai, fake_storage, make_profile):
    fake_storage.bucket_exists = False
    profile = make_profile()
    response = client.post("/api/parse-resume", json=_body(profile.id))
    assert response.status_code == 400
    assert "Storage bucket 'resumes' not found" in response.json()["error"]
    assert fake_ai.calls == []


def test_upload_error_message_passed_through(client, fake_storage, make_profile):
    fake_storage.upload_error = "new row violates row-level security policy"
    profile = make_profile()
    response = client.post("/api/parse-resume", json=_body(profile.id))
    assert response.status_code == 500
    assert response.json() == {"error": "new row violates row-level security policy"}


def test_storage_not_configured_still_parses(client, fake_ai, fake_storage, make_profile):
    fake_storage.configured = False
    fake_ai.reply = json.dumps(PARSED)
    profile = make_profile()
    response = client.post("/api/parse-resume", json=_body(profile.id))
    assert response.status_code == 200
    assert fake_storage.uploads == []


def test_ai_not_configured(client, fake_ai, make_profile):
    fake_ai.configured = False
    profile = make_profile()
    response = client.post("/api/parse-resume", json=_body(profile.id))
    assert response.status_code == 500
    assert response.json() == {"error": "API Key missing. Set the OpenAI API key on the server."}


def test_unreadable_pdf(client, fake_ai, pdf_text, make_profile):
    pdf_text["error"] = "No /Root object"
    profile = make_profile()
    response = client.post("/api/parse-resume", json=_body(profile.id))
    assert response.status_code == 500
    assert response.json()["error"].startswith("PDF parse error: No /Root object")
    assert fake_ai.calls == []


def test_image_only_pdf_uses_base64_fallback(client, fake_ai, pdf_text, make_profile):
    pdf_text["text"] = ""
    fake_ai.reply = json.dumps(PARSED)
    profile = make_profile()
    response = client.post("/api/parse-resume", json=_body(profile.id))
    assert response.status_code == 200
    assert PDF_B64 in fake_ai.calls[0]["messages"][1]["content"]


def test_provider_key_error_is_described(client, fake_ai, make_profile):
    fake_ai.error = "Incorrect API key provided: sk-***"
    profile = make_profile()
    response = client.post("/api/parse-resume", json=_body(profile.id))
    assert response.status_code == 500
    assert response.json() == {"error": "API Key missing or invalid. Set the OpenAI API key on the server."}


def test_invalid_base64(client, make_profile):
    profile = make_profile()
    response = client.post(
        "/api/parse-resume",
        json=_body(profile.id, fileData="data:application/pdf;base64,@@@@"),
    )
    assert response.status_code == 400
    assert "not valid base64" in response.json()["error"]
