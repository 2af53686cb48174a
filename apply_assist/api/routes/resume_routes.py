"""
Resume Routes

POST /parse-resume         - Parse a base64 resume sent by the extension
POST /parse-resume-text    - Parse plain resume text
POST /parse-resume/upload  - Upload and parse a resume (PDF/DOCX/TXT)
GET  /parse-resume/formats - Get supported formats
"""

from fastapi import APIRouter, HTTPException, Depends, UploadFile, File
from fastapi.concurrency import run_in_threadpool

from apply_assist.core.logging_config import get_logger
from apply_assist.services.gemini_client import GeminiClient, LLMServiceError, get_gemini_client
from apply_assist.services.resume_parsing_service import ResumeParsingService
from apply_assist.utils.file_upload import extract_text_from_file, get_supported_formats
from apply_assist.schemas.schemas import (
    ParseResumeRequest, ParseResumeTextRequest, ParseResumeResponse
)

logger = get_logger(__name__)

router = APIRouter(tags=["Resume"])


@router.post("/parse-resume", response_model=ParseResumeResponse)
def parse_resume(data: ParseResumeRequest, client: GeminiClient = Depends(get_gemini_client)):
    """
    Parse a resume file sent as base64 content.

    PDF content that is not base64 is treated as already-extracted text.
    """
    if not data.content:
        raise HTTPException(status_code=400, detail="No file content provided")

    service = ResumeParsingService(client)
    try:
        profile, warning = service.parse_resume_file(data.fileName, data.fileType, data.content)
    except LLMServiceError as e:
        logger.error("Error parsing resume: %s", e)
        raise HTTPException(status_code=500, detail="Failed to parse resume")

    return ParseResumeResponse(profile=profile, warning=warning)


@router.post("/parse-resume-text", response_model=ParseResumeResponse)
def parse_resume_text(data: ParseResumeTextRequest, client: GeminiClient = Depends(get_gemini_client)):
    """Parse plain resume text into a structured profile."""
    if not data.resumeText or not data.resumeText.strip():
        raise HTTPException(status_code=400, detail="Resume text is required")

    service = ResumeParsingService(client)
    try:
        profile, warning = service.parse_resume_text(data.resumeText)
    except LLMServiceError as e:
        logger.error("Error in /parse-resume-text: %s", e)
        raise HTTPException(status_code=500, detail="Failed to parse resume")

    return ParseResumeResponse(profile=profile, warning=warning)


@router.post("/parse-resume/upload", response_model=ParseResumeResponse)
async def upload_resume(
    file: UploadFile = File(..., description="Resume file (PDF, DOCX, or TXT)"),
    client: GeminiClient = Depends(get_gemini_client)
):
    """
    Upload and parse a resume.

    Supported formats: PDF, DOCX, TXT (max 5MB)
    """
    resume_text, filename = await extract_text_from_file(file)
    logger.info("Extracted %d chars from %s", len(resume_text), filename)

    service = ResumeParsingService(client)
    try:
        profile, warning = await run_in_threadpool(service.parse_resume_text, resume_text)
    except LLMServiceError as e:
        logger.error("Error parsing uploaded resume %s: %s", filename, e)
        raise HTTPException(status_code=500, detail="Failed to parse resume")

    return ParseResumeResponse(profile=profile, warning=warning)


@router.get("/parse-resume/formats")
async def supported_formats():
    """Get supported resume file formats."""
    return get_supported_formats()
