"""
Job Matching Routes

POST /matching-jobs - Scraped internal jobs ranked by skill overlap
"""

from fastapi import APIRouter, HTTPException, Depends
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from apply_assist.core.logging_config import get_logger
from apply_assist.db.mongodb import get_jobs_collection
from apply_assist.services.matching_service import find_matching_jobs, InvalidProfileError
from apply_assist.schemas.schemas import MatchingJobsRequest, MatchingJobsResponse

logger = get_logger(__name__)

router = APIRouter(tags=["Jobs"])


@router.post("/matching-jobs", response_model=MatchingJobsResponse)
def matching_jobs(data: MatchingJobsRequest, collection: Collection = Depends(get_jobs_collection)):
    """Find jobs matching the profile's skills, best match first."""
    profile = data.profile.model_dump(exclude_none=True) if data.profile else {}
    try:
        jobs = find_matching_jobs(profile, collection)
    except InvalidProfileError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PyMongoError as e:
        logger.error("Error finding matching jobs: %s", e)
        raise HTTPException(status_code=500, detail="Failed to find matching jobs")

    return MatchingJobsResponse(jobs=jobs)
