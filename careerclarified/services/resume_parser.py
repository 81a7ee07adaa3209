"""
Career Clarified - Resume parsing pipeline helpers.

Steps used by POST /api/parse-resume:
    1. strip the data-URL prefix and base64-decode the upload
    2. check it is a PDF and build the storage path
    3. extract text with pdfplumber
    4. build the chat messages (text prompt, or base64 fallback for image-only PDFs)
    5. validate the model's JSON and fill in missing required fields
"""
from typing import List, Dict, Optional, Any
import base64
import binascii
import io
import json
import logging
import re
import time

import pdfplumber

from .ai_prompts import (
    RESUME_PARSE_PROMPT,
    RESUME_PARSE_SYSTEM,
    RESUME_PARSE_FALLBACK_SYSTEM,
    RESUME_PARSE_FALLBACK_PROMPT,
)

logger = logging.getLogger("clarified.resume")

DEFAULT_FILE_NAME = "resume.pdf"
BASE64_SNIPPET_LENGTH = 8000
FALLBACK_JOB_TITLE = "Professional"

PERSONAL_INFO_KEYS = ("fullName", "email", "phone", "location", "jobTitle")
EXPERIENCE_KEYS = ("company", "position", "location", "duration")


class PDFParseError(Exception):
    """Raised when a PDF cannot be opened or read."""
    pass


def strip_data_url(file_data: str) -> str:
    """Drop a `data:...;base64,` prefix if present."""
    return file_data.split(",", 1)[1] if "," in file_data else file_data


def decode_file_data(raw_base64: str) -> bytes:
    """
    Decode a base64 payload.

    Raises:
        ValueError: if the payload is not valid base64
    """
    try:
        return base64.b64decode(re.sub(r"\s+", "", raw_base64), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"File data is not valid base64: {e}")


def is_pdf(mime_type: Optional[str], file_name: Optional[str]) -> bool:
    if mime_type and "pdf" in mime_type.lower():
        return True
    return bool(file_name and file_name.lower().endswith(".pdf"))


def safe_file_name(file_name: Optional[str]) -> str:
    if not file_name:
        return DEFAULT_FILE_NAME
    return re.sub(r"[^a-zA-Z0-9._-]", "_", file_name)


def build_storage_path(user_id: str, file_name: Optional[str], now_ms: Optional[int] = None) -> str:
    """Object key inside the resume bucket: {userId}/{timestamp_ms}-{filename}."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{user_id}/{now_ms}-{safe_file_name(file_name)}"


def extract_pdf_text(data: bytes) -> str:
    """
    Extract plain text from PDF bytes.

    Returns "" for PDFs without a text layer.

    Raises:
        PDFParseError: if the bytes are not a readable PDF
    """
    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            pages_text = []
            for page in pdf.pages:
                page_text = page.extract_text()
                if page_text:
                    pages_text.append(page_text)
            return "\n".join(pages_text)
    except Exception as e:
        raise PDFParseError(str(e) or e.__class__.__name__) from e


def build_parse_messages(extracted_text: str, raw_base64: str) -> List[Dict[str, str]]:
    """Chat messages for the parsing call."""
    if extracted_text and extracted_text.strip():
        return [
            {"role": "system", "content": RESUME_PARSE_SYSTEM},
            {"role": "user", "content": f"{RESUME_PARSE_PROMPT}\n\n---\n\n{extracted_text}"},
        ]

    logger.warning("No text extracted from PDF; sending base64 snippet instead")
    return [
        {"role": "system", "content": RESUME_PARSE_FALLBACK_SYSTEM},
        {
            "role": "user",
            "content": RESUME_PARSE_FALLBACK_PROMPT.format(
                base64_snippet=raw_base64[:BASE64_SNIPPET_LENGTH]
            ),
        },
    ]


def _extract_json_object(content: str) -> Optional[Dict[str, Any]]:
    """Find and load the outermost JSON object in model output."""
    json_match = re.search(r"\{[\s\S]*\}", content)
    if not json_match:
        return None
    try:
        data = json.loads(json_match.group())
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse resume JSON: {e}")
        return None
    return data if isinstance(data, dict) else None


def _text(value: Any) -> str:
    """Scalar as a stripped string; missing values and nested objects become ""."""
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value).strip()
    return ""


def _string_list(value: Any) -> List[str]:
    if isinstance(value, list):
        return [str(v) for v in value if v is not None and str(v).strip()]
    if isinstance(value, str) and value.strip():
        return [s.strip() for s in value.split(",") if s.strip()]
    return []


def _infer_job_title(data: Dict[str, Any]) -> str:
    for entry in data["experience"]:
        if entry.get("position"):
            return _text(entry["position"])
    technical = data["skills"].get("technical") or []
    if technical:
        return f"{technical[0]} {FALLBACK_JOB_TITLE}"
    return FALLBACK_JOB_TITLE


def normalize_parsed_resume(content: str) -> str:
    """
    Validate the parsed resume shape and fill required fields.

    Guarantees personalInfo with all keys and a non-empty jobTitle,
    experience entries with company/position/location/duration,
    skills.technical/soft lists and an education list. Content without a
    JSON object is returned unchanged for the caller to handle.
    """
    data = _extract_json_object(content)
    if data is None:
        return content

    personal = data.get("personalInfo")
    if not isinstance(personal, dict):
        personal = {}
    for key in PERSONAL_INFO_KEYS:
        personal[key] = _text(personal.get(key))
    data["personalInfo"] = personal

    experience = data.get("experience")
    if isinstance(experience, dict):
        experience = [experience]
    if not isinstance(experience, list):
        experience = []
    entries = []
    for entry in experience:
        if not isinstance(entry, dict):
            continue
        for key in EXPERIENCE_KEYS:
            entry[key] = _text(entry.get(key))
        if not entry["duration"]:
            dates = (_text(entry.get("startDate")), _text(entry.get("endDate")))
            entry["duration"] = " - ".join(part for part in dates if part)
        entries.append(entry)
    data["experience"] = entries

    skills = data.get("skills")
    if isinstance(skills, (list, str)):
        skills = {"technical": skills}
    if not isinstance(skills, dict):
        skills = {}
    skills["technical"] = _string_list(skills.get("technical"))
    skills["soft"] = _string_list(skills.get("soft"))
    if "languages" in skills:
        skills["languages"] = _string_list(skills.get("languages"))
    data["skills"] = skills

    if not isinstance(data.get("education"), list):
        data["education"] = []
    if not isinstance(data.get("summary"), str):
        data["summary"] = ""

    if not personal["jobTitle"]:
        personal["jobTitle"] = _infer_job_title(data)

    return json.dumps(data)
