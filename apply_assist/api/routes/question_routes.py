"""
Question Answering Routes

POST /answer-question - Answer one application-form question
"""

from fastapi import APIRouter, HTTPException, Depends

from apply_assist.services.gemini_client import GeminiClient, get_gemini_client
from apply_assist.services.question_answering_service import (
    QuestionAnsweringService,
    AnswerNotFoundError
)
from apply_assist.schemas.schemas import AnswerQuestionRequest, AnswerQuestionResponse

router = APIRouter(tags=["Question Answering"])


@router.post("/answer-question", response_model=AnswerQuestionResponse)
def answer_question(
    data: AnswerQuestionRequest,
    client: GeminiClient = Depends(get_gemini_client)
):
    """
    Answer a form question from the candidate profile and job details.

    - Choice formats return the exact text of one option
    - Text format returns a short free-text answer
    - 400 when no confident answer can be produced
    """
    if not data.question or not data.question.strip():
        raise HTTPException(status_code=400, detail="Question is required")

    service = QuestionAnsweringService(client)
    try:
        answer = service.answer(
            question=data.question,
            profile=data.profile.model_dump(exclude_none=True),
            job_details=data.jobDetails.model_dump(exclude_none=True) if data.jobDetails else None,
            question_format=data.questionFormat,
            options=data.options
        )
    except AnswerNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return AnswerQuestionResponse(answer=answer)
