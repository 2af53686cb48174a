"""
Job Context - what the job description implies about the role.

Derives experience level, expected experience range, salary range (LPA)
and required skills from the job details, then scores how well the
candidate profile fits. The result feeds salary handlers and prompts.
"""

import re
from typing import Optional, List, Dict, Any

from apply_assist.core.logging_config import get_logger
from apply_assist.services.profile_service import total_experience_years

logger = get_logger(__name__)


# CTC benchmarks in LPA (lakhs per annum)
INDUSTRY_BENCHMARKS = {
    "fresher": {"minCTC": "3 LPA", "maxCTC": "8 LPA", "typical": "5 LPA"},
    "midLevel": {"minCTC": "8 LPA", "maxCTC": "20 LPA", "typical": "12 LPA"},
    "senior": {"minCTC": "18 LPA", "maxCTC": "45 LPA", "typical": "30 LPA"},
}

FRESHER_MARKERS = [
    "fresher", "entry level", "0-1 year", "0-2 year", "no experience", "recent graduate",
]
SENIOR_MARKERS = [
    "senior", "lead", "architect", "5+ years", "7+ years", "10+ years",
]

COMMON_SKILLS = [
    "javascript", "react", "angular", "vue", "node", "python", "java",
    "c++", "c#", ".net", "php", "ruby", "go", "rust", "typescript",
    "sql", "nosql", "mongodb", "mysql", "postgresql", "oracle",
    "aws", "azure", "gcp", "devops", "ci/cd", "docker", "kubernetes",
    "html", "css", "spring boot", "django", "flask", "swift", "kotlin",
]

_SALARY_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:lpa|lakhs?|lacs?|l)\b", re.IGNORECASE)
_SENIOR_YEARS_RE = re.compile(r"(\d+)\+\s*years")
_SALARY_RANGE_RE = re.compile(
    r"(\d+(?:\.\d+)?)\s*(?:-|to)\s*(\d+(?:\.\d+)?)\s*(?:lpa|lakhs?|lacs?|l)\b", re.IGNORECASE
)


def default_job_context() -> Dict[str, Any]:
    return {
        "experienceLevel": "mid-level",
        "isFresherRole": False,
        "isSeniorRole": False,
        "salaryRange": None,
        "skills": [],
        "experience": {"min": 2, "max": 5, "unit": "years"},
        "industryBenchmarks": INDUSTRY_BENCHMARKS,
        "profileJobAlignment": "medium",
    }


def benchmark_for(job_context: Dict[str, Any]) -> Dict[str, str]:
    """Benchmark row matching the detected seniority."""
    if job_context.get("isFresherRole"):
        return INDUSTRY_BENCHMARKS["fresher"]
    if job_context.get("isSeniorRole"):
        return INDUSTRY_BENCHMARKS["senior"]
    return INDUSTRY_BENCHMARKS["midLevel"]


def lpa_value(ctc: str) -> float:
    """"8 LPA" -> 8.0"""
    match = re.search(r"\d+(?:\.\d+)?", ctc or "")
    return float(match.group(0)) if match else 0.0


def _skill_pattern(skill: str) -> re.Pattern:
    # \b does not work around symbols like "c++" or ".net"
    return re.compile(r"(?<![\w])" + re.escape(skill) + r"(?![\w])", re.IGNORECASE)


def detect_skills(description: str) -> List[str]:
    return [skill for skill in COMMON_SKILLS if _skill_pattern(skill).search(description)]


def _salary_range(figures: List[float], job_context: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not figures:
        return None
    figures = sorted(figures)
    if len(figures) >= 2:
        return {"min": figures[0], "max": figures[-1], "unit": "LPA"}

    figure = figures[0]
    # A single figure is a ceiling for juniors and a floor for seniors
    if job_context["isFresherRole"]:
        return {"min": max(1, figure * 0.7), "max": figure, "unit": "LPA"}
    if job_context["isSeniorRole"]:
        return {"min": figure, "max": figure * 1.5, "unit": "LPA"}
    if figure < 10:
        return {"min": figure, "max": figure * 1.8, "unit": "LPA"}
    return {"min": figure * 0.6, "max": figure, "unit": "LPA"}


def analyze_job_context(job_details: Optional[dict], profile: Optional[dict]) -> Dict[str, Any]:
    """
    Build the job context for a question.

    Never raises: on unexpected input the default mid-level context is returned.
    """
    job_context = default_job_context()
    try:
        job_details = job_details or {}
        description = (job_details.get("description") or "").lower()

        if description:
            if any(marker in description for marker in FRESHER_MARKERS):
                job_context["experienceLevel"] = "entry-level"
                job_context["isFresherRole"] = True
                job_context["experience"] = {"min": 0, "max": 1, "unit": "years"}
            elif any(marker in description for marker in SENIOR_MARKERS):
                job_context["experienceLevel"] = "senior"
                job_context["isSeniorRole"] = True
                job_context["experience"] = {"min": 5, "max": 10, "unit": "years"}
                years_match = _SENIOR_YEARS_RE.search(description)
                if years_match and int(years_match.group(1)) >= 5:
                    years = int(years_match.group(1))
                    job_context["experience"] = {"min": years, "max": years + 5, "unit": "years"}

            figures = [float(m) for m in _SALARY_RE.findall(description)]
            # "30-40 LPA" only tags the upper figure with the unit
            for low, high in _SALARY_RANGE_RE.findall(description):
                figures += [float(low), float(high)]
            job_context["salaryRange"] = _salary_range(figures, job_context)

            if job_details.get("skills"):
                job_context["skills"] = list(job_details["skills"])
            else:
                job_context["skills"] = detect_skills(description)
        elif job_details.get("skills"):
            job_context["skills"] = list(job_details["skills"])

        job_context["profileJobAlignment"] = (
            evaluate_profile_job_alignment(profile, job_context) if profile else "unknown"
        )
    except (AttributeError, TypeError, ValueError) as e:
        logger.error("Error analyzing job context: %s", e)
        return default_job_context()

    return job_context


def evaluate_profile_job_alignment(profile: dict, job_context: Dict[str, Any]) -> str:
    """
    Score profile/job fit (experience 30, skills 30, education 20, summary 20).
    >= 70 high, >= 40 medium, else low.
    """
    if not profile:
        return "unknown"

    score = 0
    years = total_experience_years(profile)
    exp_range = job_context["experience"]

    if job_context["isFresherRole"] and years <= exp_range["max"]:
        score += 30
    elif job_context["isSeniorRole"] and years >= exp_range["min"]:
        score += 30
    elif (
        not job_context["isFresherRole"]
        and not job_context["isSeniorRole"]
        and exp_range["min"] <= years <= exp_range["max"]
    ):
        score += 30
    elif years > 0 and exp_range["min"] == 0 and exp_range["max"] == 0:
        score += 15
    else:
        score += 5

    job_skills = job_context.get("skills") or []
    profile_skills = profile.get("skills") or []
    if job_skills and profile_skills:
        matching = [
            js for js in job_skills
            if any(ps.lower() in js.lower() or js.lower() in ps.lower() for ps in profile_skills)
        ]
        score += min(30, int(len(matching) / len(job_skills) * 30))
    elif job_skills:
        score += 5
    else:
        score += 15

    score += 20 if profile.get("education") else 5

    summary = profile.get("summary") or ""
    score += 20 if len(summary) > 50 else 10

    if score >= 70:
        return "high"
    if score >= 40:
        return "medium"
    return "low"
