"""
Chatbot Action Routes

POST /llm-chatbot-action - Next UI action for a recruiter chatbot question
"""

from fastapi import APIRouter, HTTPException, Depends

from apply_assist.services.gemini_client import GeminiClient, get_gemini_client
from apply_assist.services.chatbot_action_service import ChatbotActionService
from apply_assist.services.interaction_log_service import (
    InteractionLogService,
    get_interaction_log_service
)
from apply_assist.schemas.schemas import ChatbotActionRequest, ChatbotActionResponse

router = APIRouter(tags=["Chatbot"])


@router.post("/llm-chatbot-action", response_model=ChatbotActionResponse)
def llm_chatbot_action(
    data: ChatbotActionRequest,
    client: GeminiClient = Depends(get_gemini_client),
    log_service: InteractionLogService = Depends(get_interaction_log_service)
):
    """
    Decide how to answer a chatbot question.

    Returns {success, answer, actionType}. The action type is never "none":
    LLM failures end in a canned or generic answer.
    """
    if not data.question or data.profile is None:
        raise HTTPException(status_code=400, detail="Missing required fields: question and profile")

    service = ChatbotActionService(client, log_service)
    result = service.decide_action(
        question=data.question,
        profile=data.profile.model_dump(exclude_none=True),
        options=data.options,
        job_details=data.jobDetails.model_dump(exclude_none=True) if data.jobDetails else None,
        page_html=data.pageHtml,
        resume_profile=data.resumeProfile.model_dump(exclude_none=True) if data.resumeProfile else None
    )

    return ChatbotActionResponse(success=True, answer=result["answer"], actionType=result["actionType"])
