from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

AnalysisKind = Literal["analyzer", "matcher"]

ANALYZER_RESULT_FIELDS = (
    "overallScore",
    "strengths",
    "improvements",
    "actionItems",
    "proTips",
    "keywords",
    "summary",
    "performanceMetrics",
)
MATCHER_RESULT_FIELDS = (
    "matchPercentage",
    "matchLevel",
    "executiveSummary",
    "overallAssessment",
    "matchingSkills",
    "missingSkills",
    "strengthsForThisJob",
    "weaknessesForThisJob",
    "recommendations",
    "detailedBreakdown",
)


class FileMetadataRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_name: str | None = Field(default=None, alias="fileName", max_length=500)
    file_type: str | None = Field(default=None, alias="fileType", max_length=20)
    file_size: int | None = Field(default=None, alias="fileSize")


class AnalyzeResumeRequest(FileMetadataRequest):
    resume_text: str | None = Field(default=None, alias="resumeText")
    prompt: str | None = None


class MatchJobRequest(FileMetadataRequest):
    resume_text: str | None = Field(default=None, alias="resumeText")
    job_description: str | None = Field(default=None, alias="jobDescription")
    prompt: str | None = None


class HealthResponse(BaseModel):
    status: str
    provider: str
    database: str
    message: str


@dataclass(frozen=True)
class AnalysisRequest:
    kind: AnalysisKind
    document_text: str
    prompt_template: str
    job_description_text: str | None = None
    file_name: str | None = None
    file_type: str | None = None
    file_size: int | None = None


@dataclass(frozen=True)
class RequestContext:
    ip_address: str | None = None
    user_agent: str | None = None
