"""
Chatbot Action Service - decides the next UI action for a recruiter chatbot.

FLOW:
1. Merge the parsed resume into the profile
2. Heuristic shortcuts (project, disability, relocation, radio, save/apply)
3. Prompt the LLM for {"actionType", "actionValue"} with a deadline
4. Extract the JSON object and repair it (validate_and_fix_action)
5. On LLM failure: keyword fallback table, else a generic answer
6. Write one interaction log per request

The returned action type is always one of ALLOWED_ACTION_TYPES, never "none".
"""

import time
from typing import Optional, List, Dict, Any

from apply_assist.core.logging_config import get_logger
from apply_assist.schemas.schemas import ActionType, ResponseSource
from apply_assist.services.gemini_client import (
    GeminiClient,
    LLMServiceError,
    extract_json_object,
    get_gemini_client,
)
from apply_assist.services.interaction_log_service import InteractionLogService
from apply_assist.services.answer_handlers import (
    PROJECT_ANSWER,
    GENERIC_QUALIFIED_ANSWER,
    get_fallback_response,
    get_fallback_text_response,
    handle_personal_info_question,
)
from apply_assist.services.profile_service import merge_profiles
from apply_assist.services.prompts import build_chatbot_action_prompt
from apply_assist.services.question_classifier import classify_question, closest_option

logger = get_logger(__name__)


ALLOWED_ACTION_TYPES = {t.value for t in ActionType if t is not ActionType.none}
CHOICE_ACTION_TYPES = {ActionType.select.value, ActionType.dropdown.value}
TEXT_ACTION_TYPES = {ActionType.type_.value, ActionType.textarea.value}


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip()) or value == []


def _match_option(value, options: List[str]) -> Optional[str]:
    if value in options:
        return value
    return closest_option(value, options)


def validate_and_fix_action(
    action: Optional[dict],
    question: str,
    options: Optional[List[str]],
    profile: Optional[dict]
) -> Dict[str, Any]:
    """
    Repair an LLM action so the extension can always execute it.

    - missing action          -> type + fallback text
    - missing / "none" type   -> type ("0%" for disability percentage)
    - unknown type            -> type, value kept when it is text
    - select/dropdown value   -> exact, case-insensitive or closest option, else first option
    - multiSelect values      -> filtered to the offered options
    - empty text              -> fallback text
    """
    options = options or []

    if not isinstance(action, dict):
        logger.warning("LLM action missing, using fallback text")
        return {
            "actionType": ActionType.type_.value,
            "actionValue": get_fallback_text_response(question, profile),
        }

    action_type = action.get("actionType")
    value = action.get("actionValue")

    if not action_type or action_type == ActionType.none.value:
        fallback = get_fallback_text_response(question, profile)
        action_type = ActionType.type_.value
        if fallback == "0%" or _is_blank(value):
            value = fallback
    elif not isinstance(action_type, str) or action_type not in ALLOWED_ACTION_TYPES:
        logger.warning("Invalid actionType '%s' replaced with 'type'", action_type)
        action_type = ActionType.type_.value

    if action_type in CHOICE_ACTION_TYPES and options:
        if isinstance(value, list):
            value = value[0] if value else None
        matched = _match_option(value, options) if value is not None else None
        value = matched or options[0]

    elif action_type == ActionType.multi_select.value and options:
        values = value if isinstance(value, list) else ([value] if value is not None else [])
        fixed = []
        for v in values:
            matched = _match_option(v, options)
            if matched and matched not in fixed:
                fixed.append(matched)
        value = fixed or [options[0]]

    elif action_type in TEXT_ACTION_TYPES:
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value)
        elif value is not None and not isinstance(value, str):
            value = str(value)
        if _is_blank(value):
            value = get_fallback_text_response(question, profile)

    # Response answers are text or a list of text
    if isinstance(value, list):
        value = [v if isinstance(v, str) else str(v) for v in value]
    elif value is not None and not isinstance(value, str):
        value = str(value)

    return {"actionType": action_type, "actionValue": value}


class ChatbotActionService:
    """
    Produces one UI action per chatbot question and logs the interaction.
    """

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        log_service: Optional[InteractionLogService] = None
    ):
        self.client = client or get_gemini_client()
        self.log_service = log_service or InteractionLogService()

    def decide_action(
        self,
        question: str,
        profile: dict,
        options: Optional[List[str]] = None,
        job_details: Optional[dict] = None,
        page_html: Optional[str] = None,
        resume_profile: Optional[dict] = None
    ) -> Dict[str, Any]:
        """
        Returns {"answer": ..., "actionType": ...}.
        Never raises for LLM problems; those end in a fallback answer.
        """
        started = time.monotonic()
        profile = merge_profiles(profile, resume_profile)
        categories = classify_question(question, options)
        log_entry = {
            "question": question,
            "options": options or [],
            "questionCategories": categories,
            "prompt": None,
            "rawResponse": None,
            "error": None,
        }

        result = self._heuristic_action(question, options, profile, categories)
        source = ResponseSource.heuristic

        if result is None:
            prompt = build_chatbot_action_prompt(
                question, options, profile, job_details, page_html, resume_profile
            )
            log_entry["prompt"] = prompt
            try:
                raw = self.client.generate(prompt)
                log_entry["rawResponse"] = raw
                action = validate_and_fix_action(extract_json_object(raw), question, options, profile)
                result = {"answer": action["actionValue"], "actionType": action["actionType"]}
                source = ResponseSource.llm
            except LLMServiceError as e:
                logger.error("LLM chatbot action failed: %s", e)
                log_entry["error"] = str(e)
                result = self._fallback_action(question, profile)
                source = ResponseSource.fallback

        log_entry["response"] = {"type": source.value, **result}
        log_entry["durationMs"] = int((time.monotonic() - started) * 1000)
        self.log_service.write_log(log_entry)

        logger.info("Chatbot action (%s): %s -> %s", source.value, result["actionType"], result["answer"])
        return result

    def _heuristic_action(self, question, options, profile, categories) -> Optional[Dict[str, Any]]:
        if categories["project"]:
            return {"answer": PROJECT_ANSWER, "actionType": ActionType.type_.value}

        if categories["disability"]:
            return handle_personal_info_question(question, options, profile)

        if categories["relocation"]:
            answer = closest_option("Yes", options) if options else None
            return {"answer": answer or "Yes", "actionType": ActionType.select.value}

        if categories["radio"]:
            return {"answer": options[0], "actionType": ActionType.select.value}

        if categories["saveOrApply"]:
            return {"answer": None, "actionType": ActionType.click.value}

        return None

    def _fallback_action(self, question: str, profile: dict) -> Dict[str, Any]:
        fallback = get_fallback_response(question)
        if fallback:
            return fallback
        answer = get_fallback_text_response(question, profile)
        return {"answer": answer or GENERIC_QUALIFIED_ANSWER, "actionType": ActionType.type_.value}
