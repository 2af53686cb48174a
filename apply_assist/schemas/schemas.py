"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.

Field names follow the camelCase keys sent by the browser extension
(e.g. currentCtc, jobDetails). Profiles are loose records: every field is
optional and unknown keys are kept.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Any, Dict, Union
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class ActionType(str, Enum):
    select = "select"
    type_ = "type"
    textarea = "textarea"
    multi_select = "multiSelect"
    dropdown = "dropdown"
    upload = "upload"
    click = "click"
    none = "none"


class QuestionFormat(str, Enum):
    text_input = "TEXT_INPUT"
    multiple_choice = "MULTIPLE_CHOICE"
    radio_buttons = "RADIO_BUTTONS"
    naukri_radio_buttons = "NAUKRI_RADIO_BUTTONS"


CHOICE_FORMATS = {
    QuestionFormat.multiple_choice,
    QuestionFormat.radio_buttons,
    QuestionFormat.naukri_radio_buttons,
}


class ResponseSource(str, Enum):
    heuristic = "heuristic"
    llm = "llm"
    fallback = "fallback"


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class ExperienceEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    company: Optional[str] = None
    title: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    description: Optional[str] = None
    isCurrent: Optional[bool] = None
    durationYears: Optional[float] = None


class EducationEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    institution: Optional[str] = None
    degree: Optional[str] = None
    field: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    year: Optional[Union[str, int]] = None


class Profile(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    summary: Optional[str] = None
    skills: List[str] = []
    experience: List[ExperienceEntry] = []
    education: List[EducationEntry] = []
    currentCtc: Optional[str] = None
    expectedCtc: Optional[str] = None
    noticePeriod: Optional[str] = None
    totalExperienceYears: Optional[float] = None
    currentCompany: Optional[str] = None
    relocationFlexible: Optional[bool] = None
    immediateJoiner: Optional[bool] = None
    rawText: Optional[str] = None

    @field_validator("currentCtc", "expectedCtc", "noticePeriod", mode="before")
    @classmethod
    def coerce_free_text(cls, v):
        # Extension sometimes sends numbers for CTC / notice period
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("skills", mode="before")
    @classmethod
    def coerce_skills(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return [str(s) for s in v if s]


class JobDetails(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: Optional[str] = None
    company: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    skills: List[str] = []


# ============================================================
# QUESTION ANSWERING SCHEMAS
# ============================================================

class AnswerQuestionRequest(BaseModel):
    question: Optional[str] = None
    profile: Profile = Field(default_factory=Profile)
    jobDetails: Optional[JobDetails] = None
    questionFormat: Optional[QuestionFormat] = None
    options: Optional[List[str]] = None


class AnswerQuestionResponse(BaseModel):
    answer: str


class ChatbotActionRequest(BaseModel):
    question: Optional[str] = None
    options: Optional[List[str]] = None
    profile: Optional[Profile] = None
    jobDetails: Optional[JobDetails] = None
    pageHtml: Optional[str] = None
    resumeProfile: Optional[Profile] = None


class ChatbotActionResponse(BaseModel):
    success: bool = True
    answer: Optional[Union[str, List[str]]] = None
    actionType: ActionType


# ============================================================
# RESUME SCHEMAS
# ============================================================

class ParseResumeRequest(BaseModel):
    fileName: Optional[str] = None
    fileType: str = "text/plain"
    content: Optional[str] = None


class ParseResumeTextRequest(BaseModel):
    resumeText: Optional[str] = None


class ParseResumeResponse(BaseModel):
    success: bool = True
    profile: Dict[str, Any]
    warning: Optional[str] = None


# ============================================================
# JOB MATCHING SCHEMAS
# ============================================================

class MatchingJobsRequest(BaseModel):
    profile: Optional[Profile] = None


class MatchedJob(BaseModel):
    id: str
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    experience: Optional[str] = None
    salary: Optional[str] = None
    skills: List[str] = []
    applicationStatus: str = "NOT_APPLIED"
    naukriJobId: str
    postedDate: Optional[Any] = None
    jobType: Optional[str] = None
    matchScore: float


class MatchingJobsResponse(BaseModel):
    jobs: List[MatchedJob]


# ============================================================
# INTERACTION LOG SCHEMAS
# ============================================================

class LogFileInfo(BaseModel):
    filename: str
    created: datetime
    size: int


class LogListResponse(BaseModel):
    success: bool = True
    logs: List[LogFileInfo]


class LogDetailResponse(BaseModel):
    success: bool = True
    log: Dict[str, Any]


class LogBatchRequest(BaseModel):
    filenames: Optional[List[str]] = None


class LogBatchResponse(BaseModel):
    success: bool = True
    logs: Dict[str, Any]


class QuestionCount(BaseModel):
    question: str
    count: int


class LogStats(BaseModel):
    totalLogs: int = 0
    questionCategories: Dict[str, int] = {}
    responseTypes: Dict[str, int] = {}
    accuracy: float = 0
    mostCommonQuestions: List[QuestionCount] = []


class LogStatsResponse(BaseModel):
    success: bool = True
    stats: LogStats


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

class ErrorResponse(BaseModel):
    detail: str
