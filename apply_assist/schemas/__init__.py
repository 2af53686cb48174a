"""
Schemas module - Request/Response schemas for API endpoints.

Profiles and job details are loose records (extra keys allowed);
request/response models define the API contract with the extension.
"""

from apply_assist.schemas.schemas import (
    ActionType,
    QuestionFormat,
    ResponseSource,
    Profile,
    JobDetails,
)

__all__ = [
    "ActionType",
    "QuestionFormat",
    "ResponseSource",
    "Profile",
    "JobDetails",
]
