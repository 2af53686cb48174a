"""
Answer Handlers - shortcuts that answer known question categories
without calling the LLM.

Each handler returns an answer (option text or free text) or None when it
cannot decide, in which case the caller falls through to the LLM.

Categories handled:
- B.E/B.Tech + CSE/IT degree questions
- Notice period
- Location / relocation
- Salary / CTC (multiple choice and free text)
- Disability and other personal questions
- Canned fallbacks used when the LLM fails
"""

import re
from typing import Optional, List, Dict, Any

from apply_assist.core.logging_config import get_logger
from apply_assist.services.job_context import benchmark_for, lpa_value
from apply_assist.services.profile_service import profile_search_text
from apply_assist.services.question_classifier import (
    find_option_by_pattern,
    has_yes_no_options,
    is_disability_question,
    is_disability_percentage_question,
)

logger = get_logger(__name__)


PROJECT_ANSWER = (
    "I have worked on several impactful projects utilizing modern technologies. "
    "My most recent project involved developing a scalable web application using React.js "
    "and Node.js, implementing RESTful APIs, and integrating with MongoDB for data persistence. "
    "The application featured real-time updates, responsive design, and followed best practices "
    "for security and performance. I also implemented automated testing using Jest and maintained "
    "CI/CD pipelines using GitHub Actions."
)
NO_DISABILITY_ANSWER = (
    "I do not have any disabilities that would affect my ability to perform the job duties."
)
GENERIC_QUALIFIED_ANSWER = (
    "I am a qualified candidate with relevant skills and experience for this role, "
    "and I would be glad to discuss the details further."
)
NEGOTIABLE_SALARY_ANSWER = (
    "My salary expectations are negotiable and align with industry standards for a role of this "
    "nature and my experience level. I'm happy to discuss this further."
)

# Keyword -> canned answer, checked in order when the LLM fails
FALLBACK_RESPONSES = {
    "project": {
        "answer": PROJECT_ANSWER,
        "actionType": "type",
    },
    "notice": {
        "answer": "15 days",
        "actionType": "type",
    },
    "salary": {
        "answer": "As per market standards",
        "actionType": "type",
    },
    "relocation": {
        "answer": "Yes",
        "actionType": "select",
    },
    "education": {
        "answer": "B.Tech in Computer Science",
        "actionType": "type",
    },
}


def get_fallback_response(question: str) -> Optional[Dict[str, Any]]:
    """Canned {answer, actionType} for the first keyword found, else None."""
    question_lower = (question or "").lower()
    for key, response in FALLBACK_RESPONSES.items():
        if key in question_lower:
            return dict(response)
    return None


def get_fallback_text_response(question: str, profile: Optional[dict] = None) -> str:
    """Free-text answer used when an action has no usable value."""
    if is_disability_percentage_question(question):
        return "0%"
    fallback = get_fallback_response(question)
    if fallback and isinstance(fallback["answer"], str):
        return fallback["answer"]
    return GENERIC_QUALIFIED_ANSWER


# ============================================================
# EDUCATION
# ============================================================

_TECH_DEGREE_WORDS = (
    "b.tech", "b tech", "btech", "bachelor of technology", "b.e", "bachelor of engineering",
)
_CSE_FIELD_RE = re.compile(r"computer|\bcse?\b|information tech|\bit\b|software")
_BTECH_RE = re.compile(r"b[.\s-]*tech")
_CSE_TEXT_RE = re.compile(r"computer\s*science(?:\s*&\s*engineering)?|\bcse\b|\bit\b|information\s*technology")
_BTECH_NEAR_CSE_RE = re.compile(
    r"b[.\s-]*tech.{0,50}(?:computer\s*science(?:\s*&\s*engineering)?|\bcse\b|\bit\b|information\s*technology)"
)


def has_tech_cse_degree(profile: Optional[dict]) -> bool:
    """
    Does the profile show a B.E/B.Tech in CSE/IT?

    1. Structured education entries (degree + field)
    2. Any profile line mentioning both B.Tech and CSE/IT
    3. B.Tech followed by CSE/IT within 50 characters
    """
    profile = profile or {}

    for edu in profile.get("education") or []:
        degree = (edu.get("degree") or "").lower()
        field = (edu.get("field") or "").lower()
        if any(word in degree for word in _TECH_DEGREE_WORDS) and (
            _CSE_FIELD_RE.search(field) or _CSE_FIELD_RE.search(degree.replace("b.tech", ""))
        ):
            logger.debug("Found B.Tech in CS/IT in education entries")
            return True

    text = profile_search_text(profile)
    for line in re.split(r"\n|\.\s|\\n", text):
        if _BTECH_RE.search(line) and _CSE_TEXT_RE.search(line):
            return True
    return bool(_BTECH_NEAR_CSE_RE.search(text))


def has_relevant_degree(profile: Optional[dict], question: str) -> bool:
    """Bachelor/master engineering degree in a CS/IT field (or the field the question names)."""
    question_lower = (question or "").lower()
    for edu in (profile or {}).get("education") or []:
        degree = (edu.get("degree") or "").lower()
        field = (edu.get("field") or "").lower()
        is_degree = any(
            d in degree for d in ("b.tech", "b.e", "m.tech", "m.e", "bachelor", "master")
        )
        in_field = bool(_CSE_FIELD_RE.search(field)) or (
            "cse" in question_lower and ("cse" in degree or "cse" in field)
        )
        if is_degree and in_field:
            return True
    return False


def handle_tech_degree_question(question: str, options: Optional[List[str]], profile: Optional[dict]) -> str:
    """Yes/No for "Have you done B.E/B.Tech in CSE/IT?"."""
    answer = "Yes" if has_tech_cse_degree(profile) else "No"
    if options:
        for option in options:
            if option.strip().lower() == answer.lower():
                return option
    return answer


# ============================================================
# NOTICE PERIOD
# ============================================================

NOTICE_BUCKETS = [
    (0, ["immediate", "0 days", "within 7 days", "within 15 days"]),
    (7, ["7 days", "1 week", "within 7 days", "within 15 days", "15 days"]),
    (15, ["15 days", "2 weeks", "within 15 days", "less than 30 days", "1 month", "30 days"]),
    (30, ["30 days", "1 month", "one month", "4 weeks"]),
    (45, ["45 days", "1.5 months", "less than 60 days", "2 months", "60 days"]),
    (60, ["60 days", "2 months", "two months"]),
    (75, ["75 days", "2.5 months", "less than 90 days", "3 months", "90 days"]),
    (90, ["90 days", "3 months", "three months"]),
]
LONG_NOTICE_PATTERNS = ["more than 90 days", "more than 3 months", "90+ days"]


def extract_days_from_notice_period(notice_period) -> Optional[float]:
    """"30 days" -> 30, "2 months" -> 60, "Immediate" -> 0, unknown -> None."""
    if not notice_period:
        return None
    lower = str(notice_period).lower()

    if "immediate" in lower:
        return 0

    match = re.search(r"\d+(?:\.\d+)?", lower)
    if match:
        number = float(match.group(0))
        if "day" in lower:
            return number
        if "week" in lower:
            return number * 7
        if "month" in lower:
            return number * 30
        return number

    for word, days in (("one month", 30), ("two month", 60), ("three month", 90)):
        if word in lower:
            return days
    return None


def handle_notice_period_question(options: List[str], profile: Optional[dict]) -> Optional[str]:
    """Pick the notice-period option matching the profile, or None."""
    days = extract_days_from_notice_period((profile or {}).get("noticePeriod"))
    if days is None or not options:
        return None

    best = None
    for limit, patterns in NOTICE_BUCKETS:
        if days <= limit:
            best = find_option_by_pattern(options, patterns)
            break
    else:
        best = find_option_by_pattern(options, LONG_NOTICE_PATTERNS)

    if not best and days > 60:
        best = find_option_by_pattern(options, ["more than 60 days", "more than 2 months"])
    if not best and days > 30:
        best = find_option_by_pattern(options, ["more than 30 days", "more than 1 month"])
    return best


# ============================================================
# LOCATION
# ============================================================

_CITY_IN_QUESTION_RE = re.compile(
    r"based in (\w+)|current location.* (\w+)|located in (\w+)|stay in (\w+)"
)
_RELOCATION_PHRASES = ("willing to relocate", "open to relocating", "consider relocating")


def _relocation_choice(options: List[str], flexible: Optional[bool], default_yes: bool) -> Optional[str]:
    if flexible is True:
        return find_option_by_pattern(options, ["yes", "willing", "open to relocate"])
    if flexible is False:
        return find_option_by_pattern(options, ["no", "not willing"])
    if default_yes:
        return find_option_by_pattern(options, ["yes", "willing", "open to relocate"])
    return None


def handle_location_question(options: List[str], profile: Optional[dict], question: str) -> Optional[str]:
    """Choose a location option from the profile's location/relocation preference."""
    profile = profile or {}
    question_lower = (question or "").lower()
    asks_relocation = any(p in question_lower for p in _RELOCATION_PHRASES)

    location = (profile.get("location") or "").strip().lower()
    if not location:
        if asks_relocation:
            return _relocation_choice(options, profile.get("relocationFlexible"), default_yes=False)
        return None

    for option in options:
        if location in option.lower():
            return option

    # Naukri style "Within <city>" / "Outside <city>"
    if len(options) == 2:
        city = None
        for option in options:
            if option.lower().startswith("within "):
                city = option.lower()[len("within "):].strip()
                break
        if not city:
            match = _CITY_IN_QUESTION_RE.search(question_lower)
            if match:
                city = next(g for g in match.groups() if g)

        if city:
            if location == city:
                for option in options:
                    o = option.lower()
                    if o.startswith("within ") or (city in o and "outside" not in o):
                        return option
            else:
                for option in options:
                    if "outside" in option.lower():
                        return option
            return None

    if asks_relocation:
        return _relocation_choice(options, profile.get("relocationFlexible"), default_yes=True)
    return None


# ============================================================
# SALARY
# ============================================================

def _expected_range(profile: Optional[dict], job_context: Dict[str, Any]):
    expected = (profile or {}).get("expectedCtc")
    if expected:
        cleaned = re.sub(r"lpa|lakhs|l", "", str(expected).lower()).strip()
        parts = [p.strip() for p in cleaned.split("-")]
        try:
            values = [float(p) for p in parts]
        except ValueError:
            values = []
        if len(values) == 1:
            return values[0], values[0] * 1.2
        if len(values) == 2:
            return values[0], values[1]

    benchmark = benchmark_for(job_context)
    return lpa_value(benchmark["minCTC"]), lpa_value(benchmark["maxCTC"])


def _option_range(option_lower: str):
    numbers = [float(n) for n in re.findall(r"\d+(?:\.\d+)?", option_lower)]
    if not numbers:
        return None
    if "upto" in option_lower or "up to" in option_lower or "below" in option_lower:
        return numbers[0] * 0.7, numbers[0]
    if "above" in option_lower or "+" in option_lower:
        return numbers[0], numbers[0] * 1.5
    return min(numbers), max(numbers)


def handle_multiple_choice_salary_question(
    options: List[str], profile: Optional[dict], job_context: Dict[str, Any]
) -> Optional[str]:
    """
    Pick the salary option containing the expected CTC range, else the
    closest numeric option, else a "negotiable" style option.
    """
    expected_min, expected_max = _expected_range(profile, job_context)

    best_option = None
    closest_diff = float("inf")
    fallback_option = None

    for option in options or []:
        option_lower = option.lower()
        opt_range = _option_range(option_lower)
        if opt_range:
            opt_min, opt_max = opt_range
            if expected_min >= opt_min and expected_max <= opt_max:
                return option
            diff = abs(opt_min - expected_min) + abs(opt_max - expected_max)
            if diff < closest_diff:
                closest_diff = diff
                best_option = option
        elif any(w in option_lower for w in ("negotiable", "company standards", "market rate")):
            fallback_option = fallback_option or option

    return best_option or fallback_option


def handle_salary_text_question(question: str, profile: Optional[dict], job_context: Dict[str, Any]) -> str:
    """Free-text CTC answer from the profile, else from benchmarks."""
    question_lower = (question or "").lower()
    profile = profile or {}
    benchmark = benchmark_for(job_context)

    if any(w in question_lower for w in ("expected", "desired", "looking for")):
        return str(profile.get("expectedCtc") or benchmark["typical"])

    if profile.get("currentCtc"):
        return str(profile["currentCtc"])
    if job_context.get("isFresherRole"):
        return f"Not applicable as a fresher, but my expectation is around {benchmark['typical']}."
    if benchmark.get("minCTC"):
        return benchmark["minCTC"]
    return NEGOTIABLE_SALARY_ANSWER


# ============================================================
# PERSONAL / DISABILITY
# ============================================================

_NO_DISABILITY_OPTION_RE = re.compile(r"no|n|none|nil|0\s*%?|not applicable")


def handle_personal_info_question(
    question: str, options: Optional[List[str]], profile: Optional[dict]
) -> Dict[str, Any]:
    """
    Answer disability and other personal questions.

    - Disability with options: an exact "No" / "None" / "0%" option, else one
      mentioning "none", else the first option
    - Disability percentage text: "0%"
    - Other disability text: a no-disability sentence
    - Anything else: "Prefer not to disclose"
    """
    question_lower = (question or "").lower()
    disability = is_disability_question(question_lower)

    if options and disability:
        # whole-option match only: "10%" also contains "0%"
        for option in options:
            if _NO_DISABILITY_OPTION_RE.fullmatch(option.strip().lower()):
                return {"answer": option, "actionType": "select"}
        none_option = find_option_by_pattern(options, ["none"])
        return {"answer": none_option or options[0], "actionType": "select"}

    if disability:
        if "percentage" in question_lower or "%" in question_lower:
            return {"answer": "0%", "actionType": "type"}
        return {"answer": NO_DISABILITY_ANSWER, "actionType": "type"}

    return {"answer": "Prefer not to disclose", "actionType": "type"}


# ============================================================
# YES/NO TEXT QUESTIONS
# ============================================================

def handle_yes_no_text_question(question: str, profile: Optional[dict]) -> Optional[str]:
    """
    Short Yes/No answer for radio-style questions asked as text.
    Returns None when the question does not read like a yes/no question.
    """
    if not has_yes_no_options(question):
        return None
    question_lower = question.lower()

    if any(d in question_lower for d in ("b.e", "b.tech", "m.e", "m.tech")) and any(
        f in question_lower for f in ("cse", "it", "computer", "information tech")
    ):
        return "Yes" if has_tech_cse_degree(profile) else "No"

    if any(w in question_lower for w in ("education", "degree", "graduate")):
        return "Yes" if has_relevant_degree(profile, question) else "No"

    # Location, work authorisation, relocation and the rest default to yes
    return "Yes"
