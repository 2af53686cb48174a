"""
Question Answering Service - answers one application-form question.

FLOW:
1. Fast path: B.E/B.Tech + CSE/IT question with Yes/No options
2. Analyze the job context (seniority, salary range, skills)
3. Multiple choice / radio: notice, location and salary shortcuts,
   Yes/No degree check, then LLM option selection
4. Text: yes/no radio heuristics, salary handler, then LLM text answer

A question nobody can answer confidently raises AnswerNotFoundError.
"""

from typing import Optional, List

from apply_assist.core.logging_config import get_logger
from apply_assist.schemas.schemas import QuestionFormat, CHOICE_FORMATS
from apply_assist.services.gemini_client import GeminiClient, LLMServiceError, get_gemini_client
from apply_assist.services.job_context import analyze_job_context
from apply_assist.services.answer_handlers import (
    handle_tech_degree_question,
    handle_notice_period_question,
    handle_location_question,
    handle_multiple_choice_salary_question,
    handle_salary_text_question,
    handle_yes_no_text_question,
    has_relevant_degree,
    has_tech_cse_degree,
)
from apply_assist.services.prompts import build_multiple_choice_prompt, build_text_answer_prompt
from apply_assist.services.question_classifier import (
    closest_option,
    detect_question_format,
    is_tech_degree_cse_question,
    is_yes_no_options,
)

logger = get_logger(__name__)


class AnswerNotFoundError(ValueError):
    """No handler and no LLM reply produced a confident answer."""


_DEGREE_WORDS = ("b.e", "b.tech", "m.e", "m.tech", "bachelor", "master")
_STREAM_WORDS = ("cse", "it", "computer")


def _is_degree_question(question_lower: str) -> bool:
    if any(w in question_lower for w in _DEGREE_WORDS):
        return True
    return any(w in question_lower for w in ("education", "degree")) and any(
        w in question_lower for w in _STREAM_WORDS
    )


def _is_salary_text_question(question_lower: str) -> bool:
    return (
        any(w in question_lower for w in ("ctc", "salary", "package"))
        or ("current" in question_lower and "lakh" in question_lower)
    )


class QuestionAnsweringService:
    """
    Answers a question from the profile, job details and the LLM.
    """

    MC_TEMPERATURE = 0.1
    MC_MAX_TOKENS = 80
    TEXT_MAX_TOKENS = 300

    def __init__(self, client: Optional[GeminiClient] = None):
        self.client = client or get_gemini_client()

    def answer(
        self,
        question: str,
        profile: Optional[dict],
        job_details: Optional[dict] = None,
        question_format: Optional[QuestionFormat] = None,
        options: Optional[List[str]] = None
    ) -> str:
        """
        Return the answer text (the exact option text for choice formats).

        Raises:
            AnswerNotFoundError: nothing produced a confident answer
        """
        profile = profile or {}
        question_format = question_format or QuestionFormat.text_input
        logger.info("Answering question (%s): %s", question_format.value, question)

        if is_tech_degree_cse_question(question) and is_yes_no_options(options):
            answer = handle_tech_degree_question(question, options, profile)
            logger.info("B.Tech/CSE fast path answered: %s", answer)
            return answer

        job_context = analyze_job_context(job_details, profile)
        logger.debug("Job context: %s", job_context)

        if question_format in CHOICE_FORMATS:
            answer = self._answer_multiple_choice(question, options or [], profile, job_details, job_context)
            if not answer:
                raise AnswerNotFoundError("Unable to generate a confident answer from the given options")
        else:
            answer = self._answer_text(question, profile, job_details, job_context)
            if not answer:
                raise AnswerNotFoundError("Unable to generate a confident answer")

        logger.info("Generated answer: %s", answer)
        return answer

    # ========================================================
    # MULTIPLE CHOICE
    # ========================================================

    def _answer_multiple_choice(self, question, options, profile, job_details, job_context) -> Optional[str]:
        if not options:
            logger.warning("Choice question without options: %s", question)
            return None
        q = question.lower()

        if "notice period" in q or "when can you join" in q:
            answer = handle_notice_period_question(options, profile)
            if answer:
                return answer

        if any(w in q for w in ("location", "city", "relocate", "based")):
            answer = handle_location_question(options, profile, question)
            if answer:
                return answer

        if any(w in q for w in ("ctc", "salary", "compensation")):
            answer = handle_multiple_choice_salary_question(options, profile, job_context)
            if answer:
                return answer

        if is_yes_no_options(options) and _is_degree_question(q):
            qualified = has_tech_cse_degree(profile) or has_relevant_degree(profile, question)
            return closest_option("Yes" if qualified else "No", options)

        return self._select_option_with_llm(question, options, profile, job_details, job_context)

    def _select_option_with_llm(self, question, options, profile, job_details, job_context) -> Optional[str]:
        prompt = build_multiple_choice_prompt(question, options, profile, job_details, job_context)
        try:
            reply = self.client.generate(
                prompt,
                temperature=self.MC_TEMPERATURE,
                max_tokens=self.MC_MAX_TOKENS
            )
        except LLMServiceError as e:
            logger.error("Error selecting option with LLM: %s", e)
            return None

        reply = reply.strip().strip('"').strip()
        if not reply or reply.upper() == "UNCERTAIN":
            logger.info("LLM could not confidently select an option")
            return None

        match = closest_option(reply, options)
        if match is None:
            logger.info("LLM returned an option that is not offered: %s", reply)
        return match

    # ========================================================
    # TEXT
    # ========================================================

    def _answer_text(self, question, profile, job_details, job_context) -> Optional[str]:
        q = question.lower()

        if detect_question_format(question) in (
            QuestionFormat.radio_buttons,
            QuestionFormat.naukri_radio_buttons,
        ):
            answer = handle_yes_no_text_question(question, profile)
            if answer:
                return answer

        if _is_salary_text_question(q):
            return handle_salary_text_question(question, profile, job_context)

        prompt = build_text_answer_prompt(question, profile, job_details, job_context)
        try:
            reply = self.client.generate(prompt, max_tokens=self.TEXT_MAX_TOKENS)
        except LLMServiceError as e:
            logger.error("Error generating text answer with LLM: %s", e)
            return None

        reply = reply.strip()
        if not reply or reply.upper() == "UNCERTAIN":
            return None
        return reply
