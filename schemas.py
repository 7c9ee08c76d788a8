from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Literal, Optional

from parsers.text_normalize import unique_in_order

ParseSource = Literal["llm", "heuristic"]
CandidateStatus = Literal["new", "reviewed", "shortlisted", "interviewed", "rejected", "hired"]
EmploymentType = Literal["Full-time", "Part-time", "Contract", "Internship"]


# Blank-tolerant base for entries coming back from the LLM
class _Entry(BaseModel):
    @field_validator("*", mode="before")
    @classmethod
    def _none_to_blank(cls, value):
        if value is None:
            return ""
        if isinstance(value, list):
            return "\n".join(str(v) for v in value if v is not None)
        return str(value)


# Education entry (parsed structure)
class EducationEntry(_Entry):
    degree: str = ""
    institution: str = ""
    year: str = ""


# Work history entry
class ExperienceEntry(_Entry):
    job_title: str = ""
    company: str = ""
    duration: str = ""
    description: str = ""


# Structured candidate recovered from resume text (LLM or heuristic)
class ExtractedCandidate(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    skills: List[str] = []
    experience: List[ExperienceEntry] = []
    education: List[EducationEntry] = []

    @field_validator("name", "email", "phone", mode="before")
    @classmethod
    def _none_to_blank(cls, value):
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("skills", mode="before")
    @classmethod
    def _dedupe_skills(cls, value):
        if not value:
            return []
        if isinstance(value, str):
            value = value.split(",")
        return unique_in_order(str(s).strip() for s in value if s is not None)

    def missing_fields(self) -> List[str]:
        return [f for f in ("name", "email", "skills") if not getattr(self, f)]


# Tagged parse outcome: callers can tell LLM data from heuristic data
class ParsedResume(BaseModel):
    source: ParseSource
    candidate: ExtractedCandidate
    fallback_reason: Optional[str] = None
    filled_fields: List[str] = []


class ParseTextIn(BaseModel):
    text: str


# Match score result, one per (candidate, job) pair
class MatchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    explanation: str


class ScoredMatch(MatchResult):
    source: ParseSource


class RoleMatchOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    job_id: int
    score: int
    explanation: str
    source: str


# Output model for stored candidates
class CandidateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: Optional[str] = ""
    skills: List[str] = []
    experience: List[ExperienceEntry] = []
    education: List[EducationEntry] = []
    status: str
    parse_source: str
    resume_path: Optional[str] = None
    created_at: Optional[datetime] = None
    match_scores: List[RoleMatchOut] = []


class CandidatePage(BaseModel):
    data: List[CandidateOut]
    total: int
    page: int
    limit: int
    total_pages: int


class StatusUpdate(BaseModel):
    status: CandidateStatus


# Job posting model
class JobIn(BaseModel):
    title: str = ""
    description: str = ""
    required_skills: List[str] = []
    preferred_skills: List[str] = []
    min_experience: int = 0
    location: Optional[str] = None
    employment_type: EmploymentType = "Full-time"
    is_active: bool = True


class JobUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    required_skills: Optional[List[str]] = None
    preferred_skills: Optional[List[str]] = None
    min_experience: Optional[int] = None
    location: Optional[str] = None
    employment_type: Optional[EmploymentType] = None
    is_active: Optional[bool] = None


class JobOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = ""
    required_skills: List[str] = []
    preferred_skills: List[str] = []
    min_experience: int = 0
    location: Optional[str] = None
    employment_type: str
    is_active: bool
    created_at: Optional[datetime] = None


# Ranked candidate for a single job
class RankedCandidate(BaseModel):
    candidate_id: int
    candidate_name: str
    score: int
    explanation: str


class RecomputeReport(BaseModel):
    job_count: int = 0
    processed: int = 0
    conflicts: int = 0
    last_candidate_id: Optional[int] = None
    cancelled: bool = False
