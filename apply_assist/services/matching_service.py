"""
Job Matching Service

PURPOSE:
Find scraped jobs that fit a candidate profile and rank them.

HOW IT WORKS:
1. Query Mongo for internal (apply-on-Naukri) jobs whose Skills string
   mentions any of the candidate's skills (max 20)
2. Split each job's Skills on commas
3. Score = matched skills / max(#candidate skills, #job skills) * 100
4. Map the scraper's column names to the API shape, best match first
"""

import re
from typing import List, Dict, Any

from pymongo.collection import Collection

from apply_assist.core.logging_config import get_logger

logger = get_logger(__name__)


INTERNAL_APPLICATION = "Internal"
MAX_JOBS = 20


class InvalidProfileError(ValueError):
    """Profile has no skills to match on."""


def build_jobs_query(user_skills: List[str]) -> dict:
    """Internal jobs whose Skills field mentions any user skill."""
    return {
        "$and": [
            {"Application Type": INTERNAL_APPLICATION},
            {"$or": [
                {"Skills": {"$regex": re.escape(skill), "$options": "i"}}
                for skill in user_skills
            ]}
        ]
    }


def split_job_skills(skills_field) -> List[str]:
    if not skills_field:
        return []
    return [s.strip().lower() for s in str(skills_field).split(",") if s.strip()]


def compute_match_score(user_skills: List[str], job_skills: List[str]) -> float:
    """
    Share of overlapping skills, in percent.
    A user skill matches when it contains, or is contained in, a job skill.
    """
    if not job_skills:
        return 0.0
    matches = sum(
        1 for skill in user_skills
        if any(skill in job_skill or job_skill in skill for job_skill in job_skills)
    )
    return matches / max(len(user_skills), len(job_skills)) * 100


def to_matched_job(job: dict, user_skills: List[str]) -> Dict[str, Any]:
    """Scraped job document -> API job."""
    job_skills = split_job_skills(job.get("Skills"))
    job_id = str(job["_id"])
    return {
        "id": job_id,
        "title": job.get("Job Title"),
        "company": job.get("Company Name"),
        "location": job.get("Location"),
        "description": job.get("Job Description"),
        "url": job.get("Job URL"),
        "experience": job.get("Experience Required"),
        "salary": job.get("Salary"),
        "skills": job_skills,
        "applicationStatus": "NOT_APPLIED",
        "naukriJobId": job_id,
        "postedDate": job.get("Scraped Date") or job.get("firstScraped"),
        "jobType": job.get("Application Type"),
        "matchScore": compute_match_score(user_skills, job_skills)
    }


def find_matching_jobs(profile: dict, collection: Collection) -> List[Dict[str, Any]]:
    """
    Ranked jobs for a profile.

    Raises:
        InvalidProfileError: profile has no skills
    """
    user_skills = [s.strip().lower() for s in (profile or {}).get("skills") or [] if s and s.strip()]
    if not user_skills:
        raise InvalidProfileError("Invalid profile data")

    logger.debug("Looking for skills: %s", user_skills)
    docs = collection.find(build_jobs_query(user_skills)).limit(MAX_JOBS)

    jobs = [to_matched_job(doc, user_skills) for doc in docs]
    jobs.sort(key=lambda j: j["matchScore"], reverse=True)

    logger.info("Found %d matching jobs", len(jobs))
    return jobs
