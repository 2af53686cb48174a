"""
Question Classifier - cheap keyword heuristics over question text.

These run before any LLM call. Categories are recorded in the interaction
log and drive the shortcut handlers in answer_handlers.
"""

import re
from typing import Optional, List, Dict, Iterable

from apply_assist.schemas.schemas import QuestionFormat


DISABILITY_KEYWORDS = [
    "disability", "disabled", "differently", "disabilities",
    "special needs", "handicap",
]
RELOCATION_KEYWORDS = [
    "relocat", "move to", "shift to", "willing to move", "comfortable relocating",
]
NOTICE_KEYWORDS = ["notice period", "when can you join", "joining time", "how soon can you join"]
SALARY_KEYWORDS = ["ctc", "salary", "compensation", "package"]
EDUCATION_KEYWORDS = ["education", "degree", "graduate", "qualification", "b.e", "b.tech", "m.tech", "bachelor", "master"]
LOCATION_KEYWORDS = ["location", "city", "based", "located in"]
EXPERIENCE_KEYWORDS = ["years of experience", "experience do you have", "total experience", "relevant experience"]
PERSONAL_KEYWORDS = ["gender", "marital", "date of birth", "religion", "caste", "nationality"] + DISABILITY_KEYWORDS

_TECH_DEGREE_RE = re.compile(r"b\.e\b|b\.e/b\.tech|b\.tech|btech|bachelor of (?:technology|engineering)")
_CSE_RE = re.compile(r"cse|computer science|information tech")


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(k in text for k in keywords)


def is_disability_question(question: str) -> bool:
    return _contains_any((question or "").lower(), DISABILITY_KEYWORDS)


def is_disability_percentage_question(question: str) -> bool:
    q = (question or "").lower()
    return is_disability_question(q) and ("percentage" in q or "%" in q)


def is_relocation_question(question: str) -> bool:
    return _contains_any((question or "").lower(), RELOCATION_KEYWORDS)


def is_project_question(question: str) -> bool:
    q = (question or "").lower()
    return "project" in q and _contains_any(q, ["explain", "describe", "about"])


def is_tech_degree_cse_question(question: str) -> bool:
    """B.E/B.Tech question that also asks about the CSE/IT stream."""
    q = (question or "").lower()
    return bool(_TECH_DEGREE_RE.search(q)) and bool(_CSE_RE.search(q))


def is_save_or_apply(question: str) -> bool:
    return (question or "").strip().lower() in ("save", "apply")


def is_radio_question(question: str, options: Optional[List[str]]) -> bool:
    q = (question or "").lower()
    return bool(options) and ("radio" in q or "select one" in q)


def classify_question(question: str, options: Optional[List[str]] = None) -> Dict[str, bool]:
    """Boolean category map recorded with every interaction."""
    q = (question or "").lower()
    return {
        "disability": is_disability_question(q),
        "disabilityPercentage": is_disability_percentage_question(q),
        "relocation": is_relocation_question(q),
        "noticePeriod": _contains_any(q, NOTICE_KEYWORDS),
        "salary": _contains_any(q, SALARY_KEYWORDS),
        "education": _contains_any(q, EDUCATION_KEYWORDS),
        "techDegreeCse": is_tech_degree_cse_question(q),
        "location": _contains_any(q, LOCATION_KEYWORDS),
        "project": is_project_question(q),
        "experience": _contains_any(q, EXPERIENCE_KEYWORDS),
        "personalInfo": _contains_any(q, PERSONAL_KEYWORDS),
        "saveOrApply": is_save_or_apply(q),
        "radio": is_radio_question(q, options),
    }


def detect_question_format(question_text: str) -> QuestionFormat:
    """Guess the form control from the question text alone."""
    lower = question_text.lower()

    # Naukri chatbot: "Kindly answer ... Yes No"
    if "kindly answer" in lower and ("yes" in lower or "no" in lower) and (
        re.search(r"Yes\s*No", question_text)
        or re.search(r"Yes[\s\S]*?No", question_text)
        or "Choose one" in question_text
    ):
        return QuestionFormat.naukri_radio_buttons

    if "select one" in lower or "choose one" in lower or (
        (" yes" in lower or "yes " in lower)
        and (" no" in lower or "no " in lower)
        and "textarea" not in lower
        and "text input" not in lower
        and len(question_text) < 200
    ):
        return QuestionFormat.radio_buttons

    return QuestionFormat.text_input


_YES_NO_PREFIXES = (
    "are you", "do you", "have you", "can you", "will you", "would you", "is it",
)


def has_yes_no_options(question_text: str) -> bool:
    """True when the question text reads like a yes/no question."""
    lower = question_text.lower()
    if re.search(r"Yes\s{1,5}No|No\s{1,5}Yes", question_text):
        return True
    return lower.startswith(_YES_NO_PREFIXES) or " (yes/no)" in lower


def is_yes_no_options(options: Optional[List[str]]) -> bool:
    """Exactly two options, one "yes" and one "no"."""
    if not options or len(options) != 2:
        return False
    lowered = {o.strip().lower() for o in options}
    return lowered == {"yes", "no"}


# ============================================================
# OPTION MATCHING
# ============================================================

def find_option_by_pattern(options: List[str], patterns: List[str]) -> Optional[str]:
    """First option containing any pattern, patterns tried in order."""
    for pattern in patterns:
        for option in options or []:
            if pattern.lower() in option.lower():
                return option
    return None


def closest_option(value, options: List[str]) -> Optional[str]:
    """
    Map a free-text value onto one of the options:
    exact (case-insensitive) first, then substring either way.
    """
    if not options or value is None:
        return None
    v = str(value).strip().lower()
    if not v:
        return None
    for option in options:
        if option.lower() == v:
            return option
    for option in options:
        o = option.lower()
        if o and (o in v or v in o):
            return option
    return None
