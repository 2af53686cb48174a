"""
Resume Parsing Service - resume text → structured profile using Gemini.

FLOW:
1. Build the extraction prompt (text capped at 15000 chars)
2. Ask Gemini for a JSON profile
3. Validate and fill defaults (validate_profile_data)
4. Attach rawText for later LLM context

If the reply has no parseable JSON, a regex-based extraction is returned
instead, together with a warning. LLM transport errors propagate.
"""

import re
from typing import Optional, List, Tuple

from apply_assist.core.logging_config import get_logger
from apply_assist.services.gemini_client import (
    GeminiClient,
    LLMResponseError,
    extract_json_object,
    get_gemini_client,
)
from apply_assist.services.profile_service import estimate_total_experience, generate_raw_resume_text
from apply_assist.services.prompts import build_resume_parsing_prompt
from apply_assist.utils.file_upload import decode_base64_content

logger = get_logger(__name__)


FALLBACK_WARNING = "Failed to parse LLM response, using fallback extraction"

FALLBACK_SKILLS = [
    "java", "python", "javascript", "typescript", "react", "angular", "node",
    "html", "css", "sql", "aws", "azure", "gcp", "docker", "kubernetes",
    "git", "agile", "scrum", "project management", "leadership", "communication",
]

EMAIL_RE = re.compile(r"[a-zA-Z0-9._-]+@[a-zA-Z0-9._-]+\.[a-zA-Z0-9._-]+")
PHONE_RE = re.compile(r"(\+?\d{1,3}[-.\s]?\(?\d{1,4}\)?[-.\s]?\d{1,4}[-.\s]?\d{1,9})")
NOTICE_RE = re.compile(r"notice\s*period[:\s]*(\d+\s*(?:days|months|weeks))", re.IGNORECASE)
CTC_RE = re.compile(
    r"(?:current|present)\s*ctc[:\s]*(?:Rs\.?|INR)?\s*([\d,.]+)\s*(?:lpa|lakhs|lacs|L)",
    re.IGNORECASE
)


# ============================================================
# JSON VALIDATION HELPERS
# ============================================================

def ensure_array(value) -> list:
    if not value:
        return []
    return value if isinstance(value, list) else [value]


def _ensure_skills(value) -> List[str]:
    if isinstance(value, str):
        return [s.strip() for s in value.split(",") if s.strip()]
    return [str(s).strip() for s in ensure_array(value) if s]


def validate_profile_data(data: dict) -> dict:
    """
    Validate and sanitize a parsed profile.
    Ensures all fields exist with the types the extension expects.
    """
    validated = {
        "name": data.get("name") or data.get("fullName") or "Unknown",
        "email": data.get("email") or "",
        "phone": data.get("phone") or data.get("phoneNumber") or "",
        "summary": data.get("summary") or data.get("professionalSummary") or "",
        "skills": _ensure_skills(data.get("skills")),
        "experience": [],
        "education": [],
        "totalYearsOfExperience": data.get("totalYearsOfExperience") or None,
        "currentCompany": data.get("currentCompany") or "",
        "noticePeriod": data.get("noticePeriod") or "",
        "currentCtc": data.get("currentCtc") or "",
        "expectedCtc": data.get("expectedCtc") or "",
        "immediateJoiner": bool(data.get("immediateJoiner") or False)
    }

    for exp in ensure_array(data.get("experience")):
        if not isinstance(exp, dict):
            continue
        end_date = exp.get("endDate")
        validated["experience"].append({
            "company": exp.get("company") or "Unknown Company",
            "title": exp.get("title") or exp.get("position") or "Unknown Position",
            "startDate": exp.get("startDate") or "",
            "endDate": end_date or "Present",
            "description": exp.get("description") or "",
            "isCurrent": bool(exp.get("isCurrent") or exp.get("current") or not end_date or end_date == "Present")
        })

    for edu in ensure_array(data.get("education")):
        if not isinstance(edu, dict):
            continue
        validated["education"].append({
            "institution": edu.get("institution") or edu.get("school") or "Unknown Institution",
            "degree": edu.get("degree") or "",
            "field": edu.get("field") or edu.get("fieldOfStudy") or "",
            "startDate": edu.get("startDate") or "",
            "endDate": edu.get("endDate") or ""
        })

    if not validated["totalYearsOfExperience"] and validated["experience"]:
        validated["totalYearsOfExperience"] = estimate_total_experience(validated["experience"])

    if not validated["currentCompany"]:
        current = next((e for e in validated["experience"] if e["isCurrent"]), None)
        if current:
            validated["currentCompany"] = current["company"]

    return validated


def extract_basic_info_fallback(resume_text: str) -> dict:
    """Regex extraction used when the LLM reply is not valid JSON."""
    profile = {
        "name": "",
        "email": "",
        "phone": "",
        "summary": resume_text[:200] + "...",
        "skills": [],
        "experience": [],
        "education": []
    }

    email = EMAIL_RE.search(resume_text)
    if email:
        profile["email"] = email.group(0)

    phone = PHONE_RE.search(resume_text)
    if phone:
        profile["phone"] = phone.group(0)

    lower = resume_text.lower()
    profile["skills"] = [skill for skill in FALLBACK_SKILLS if skill in lower]

    notice = NOTICE_RE.search(resume_text)
    if notice:
        profile["noticePeriod"] = notice.group(1)

    ctc = CTC_RE.search(resume_text)
    if ctc:
        profile["currentCtc"] = ctc.group(1)

    return profile


# ============================================================
# RESUME PARSING SERVICE
# ============================================================

class ResumeParsingService:
    """
    Resume parsing workflow:
    1. Decode the uploaded payload (if any)
    2. Parse with Gemini
    3. Validate JSON output, or fall back to regex extraction
    """

    MAX_TOKENS = 2048
    TEMPERATURE = 0.1

    def __init__(self, client: Optional[GeminiClient] = None):
        self.client = client or get_gemini_client()

    def parse_resume_text(self, resume_text: str) -> Tuple[dict, Optional[str]]:
        """
        Parse resume text into a profile.

        Returns:
            (profile, warning) - warning is set when fallback extraction was used

        Raises:
            LLMServiceError: Gemini call failed or timed out
        """
        logger.info("Sending resume text for parsing (%d chars)", len(resume_text))
        prompt = build_resume_parsing_prompt(resume_text)
        reply = self.client.generate(prompt, temperature=self.TEMPERATURE, max_tokens=self.MAX_TOKENS)

        try:
            data = extract_json_object(reply)
        except LLMResponseError as e:
            logger.warning("Error parsing LLM JSON response: %s", e)
            profile = extract_basic_info_fallback(resume_text)
            profile["rawText"] = resume_text
            return profile, FALLBACK_WARNING

        profile = validate_profile_data(data)
        profile["rawText"] = generate_raw_resume_text(profile)
        return profile, None

    def parse_resume_file(self, file_name: Optional[str], file_type: str, content: str) -> Tuple[dict, Optional[str]]:
        """Decode a base64 upload from the extension, then parse it."""
        resume_text = decode_base64_content(content, file_name=file_name, file_type=file_type)
        return self.parse_resume_text(resume_text)
