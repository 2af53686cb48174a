"""
Profile Service - merging and flattening candidate profiles.

A profile is a loose dict (see schemas.Profile). Two sources feed it:
- the profile the extension stores for the user
- the profile parsed from the uploaded resume

Helpers here merge them and turn them into text for prompts and keyword
searches.
"""

import json
import re
from datetime import datetime
from typing import Optional, List, Dict, Any


def merge_profiles(profile: Optional[dict], resume_profile: Optional[dict]) -> dict:
    """
    Merge a parsed resume into the direct profile.

    - Scalar fields: direct profile wins, resume fills the gaps
    - skills: union, resume first, duplicates dropped
    - experience / education: direct profile when non-empty, else resume
    """
    profile = dict(profile or {})
    if not resume_profile:
        return profile

    merged = {k: v for k, v in resume_profile.items() if v not in (None, "", [])}
    merged.update({k: v for k, v in profile.items() if v not in (None, "")})

    skills: List[str] = []
    for skill in list(resume_profile.get("skills") or []) + list(profile.get("skills") or []):
        if skill and skill not in skills:
            skills.append(skill)
    merged["skills"] = skills

    for key in ("experience", "education"):
        own = profile.get(key)
        merged[key] = own if isinstance(own, list) and own else list(resume_profile.get(key) or [])

    return merged


def _year_of(date_str: str) -> Optional[int]:
    """Last 4-digit year in a date string ("Jan 2020", "2020-01-01")."""
    years = re.findall(r"(?:19|20)\d{2}", date_str or "")
    return int(years[-1]) if years else None


def estimate_total_experience(experience: List[dict]) -> Optional[float]:
    """
    Sum (end year - start year) over experience entries.
    "Present" / missing end date counts as the current year.
    Returns years rounded to one decimal, or None if nothing parses.
    """
    total_months = 0
    current_year = datetime.now().year
    for exp in experience or []:
        start_year = _year_of(exp.get("startDate") or "")
        if start_year is None:
            continue
        end_date = exp.get("endDate") or "Present"
        end_year = current_year if end_date == "Present" else _year_of(end_date)
        if end_year is None:
            continue
        total_months += (end_year - start_year) * 12

    if total_months > 0:
        return round(total_months / 12, 1)
    return None


def total_experience_years(profile: dict) -> float:
    """Best-effort experience in years (explicit value, durations, then dates)."""
    if not profile:
        return 0.0
    for key in ("totalExperienceYears", "totalYearsOfExperience"):
        value = profile.get(key)
        try:
            if value not in (None, ""):
                return float(value)
        except (TypeError, ValueError):
            pass

    experience = profile.get("experience") or []
    durations = [exp.get("durationYears") for exp in experience if exp.get("durationYears")]
    if durations:
        return float(sum(durations))
    return estimate_total_experience(experience) or 0.0


def build_profile_context(profile: Optional[dict], job_details: Optional[dict]) -> Dict[str, Any]:
    """Normalized candidate/job view used when building prompts."""
    profile = profile or {}
    job_details = job_details or {}

    return {
        "candidateProfile": {
            "name": profile.get("name") or "Candidate",
            "skills": profile.get("skills") or [],
            "summary": profile.get("summary") or "",
            "experience": profile.get("experience") or [],
            "education": profile.get("education") or [],
            "location": profile.get("location") or None,
            "currentCtc": profile.get("currentCtc") or None,
            "expectedCtc": profile.get("expectedCtc") or None,
            "noticePeriod": profile.get("noticePeriod") or None,
            "totalExperienceYears": total_experience_years(profile),
        },
        "jobContext": {
            "title": job_details.get("title") or None,
            "company": job_details.get("company") or None,
            "description": job_details.get("description") or "",
            "skills": job_details.get("skills") or [],
        },
    }


def profile_search_text(profile: Optional[dict]) -> str:
    """Lower-cased JSON dump of the profile for keyword searches."""
    return json.dumps(profile or {}, default=str).lower()


def generate_raw_resume_text(profile: dict) -> str:
    """Formatted text representation of a profile for LLM context."""
    lines = [
        f"NAME: {profile.get('name') or ''}",
        f"EMAIL: {profile.get('email') or ''}",
        f"PHONE: {profile.get('phone') or ''}",
        "",
    ]

    if profile.get("summary"):
        lines += ["SUMMARY:", profile["summary"], ""]

    total_years = profile.get("totalYearsOfExperience") or profile.get("totalExperienceYears")
    if total_years:
        lines += [f"EXPERIENCE: {total_years} years", ""]

    for key, label in (
        ("currentCompany", "CURRENT COMPANY"),
        ("noticePeriod", "NOTICE PERIOD"),
        ("currentCtc", "CURRENT CTC"),
        ("expectedCtc", "EXPECTED CTC"),
    ):
        if profile.get(key):
            lines += [f"{label}: {profile[key]}", ""]

    if profile.get("skills"):
        lines += ["SKILLS:", ", ".join(profile["skills"]), ""]

    if profile.get("experience"):
        lines.append("EXPERIENCE:")
        for exp in profile["experience"]:
            current = "(Current)" if exp.get("isCurrent") else ""
            lines.append(f"- {exp.get('title') or ''} at {exp.get('company') or ''} {current}".rstrip())
            lines.append(f"  {exp.get('startDate') or ''} to {exp.get('endDate') or 'Present'}")
            if exp.get("description"):
                lines.append(f"  {exp['description']}")
            lines.append("")

    if profile.get("education"):
        lines.append("EDUCATION:")
        for edu in profile["education"]:
            lines.append(
                f"- {edu.get('degree') or ''} in {edu.get('field') or ''} from {edu.get('institution') or ''}"
            )
            lines.append(f"  {edu.get('startDate') or ''} to {edu.get('endDate') or ''}")
            if edu.get("description"):
                lines.append(f"  {edu['description']}")
            lines.append("")

    return "\n".join(lines) + "\n"
