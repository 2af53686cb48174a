"""
Interaction Log Routes

GET    /logs                 - List interaction logs (newest first)
GET    /logs/dashboard/stats - Aggregated statistics
GET    /logs/{filename}      - One log
DELETE /logs/{filename}      - Delete one log
POST   /logs/batch           - Up to 20 logs at once
"""

from fastapi import APIRouter, HTTPException, Depends

from apply_assist.services.interaction_log_service import (
    InteractionLogService,
    InvalidLogNameError,
    LogNotFoundError,
    get_interaction_log_service
)
from apply_assist.schemas.schemas import (
    LogListResponse, LogDetailResponse, LogBatchRequest, LogBatchResponse,
    LogStatsResponse, MessageResponse
)

router = APIRouter(prefix="/logs", tags=["Logs"])


def _raise_for(e: Exception):
    if isinstance(e, InvalidLogNameError):
        raise HTTPException(status_code=400, detail=str(e))
    raise HTTPException(status_code=404, detail=str(e))


@router.get("", response_model=LogListResponse)
def list_logs(service: InteractionLogService = Depends(get_interaction_log_service)):
    """All interaction logs with size and modification time."""
    return LogListResponse(logs=service.list_logs())


@router.get("/dashboard/stats", response_model=LogStatsResponse)
def log_stats(service: InteractionLogService = Depends(get_interaction_log_service)):
    """
    Aggregated statistics:
    - question categories and response sources
    - ten most common questions
    - accuracy (share of non-fallback responses)
    """
    return LogStatsResponse(stats=service.compute_stats())


@router.post("/batch", response_model=LogBatchResponse)
def batch_logs(data: LogBatchRequest, service: InteractionLogService = Depends(get_interaction_log_service)):
    """Read several logs; invalid or missing names are skipped."""
    if not data.filenames:
        raise HTTPException(status_code=400, detail="Invalid or empty filenames array")
    return LogBatchResponse(logs=service.read_logs(data.filenames))


@router.get("/{filename}", response_model=LogDetailResponse)
def get_log(filename: str, service: InteractionLogService = Depends(get_interaction_log_service)):
    try:
        return LogDetailResponse(log=service.read_log(filename))
    except (InvalidLogNameError, LogNotFoundError) as e:
        _raise_for(e)


@router.delete("/{filename}", response_model=MessageResponse)
def delete_log(filename: str, service: InteractionLogService = Depends(get_interaction_log_service)):
    try:
        service.delete_log(filename)
    except (InvalidLogNameError, LogNotFoundError) as e:
        _raise_for(e)
    return MessageResponse(message=f"Log file {filename} deleted successfully")
