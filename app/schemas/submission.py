from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

FileType = Literal["pdf", "docx"]
AnalysisType = Literal["analyzer", "matcher"]


class SubmissionRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    file_name: str = Field(alias="fileName", min_length=1)
    file_type: FileType = Field(alias="fileType")
    file_size: int = Field(alias="fileSize", ge=0)
    analysis_type: AnalysisType = Field(alias="analysisType")
    resume_text: str = Field(alias="resumeText")
    resume_text_length: int = Field(default=0, alias="resumeTextLength")
    job_description_text: str | None = Field(default=None, alias="jobDescriptionText")
    analyzer_results: dict[str, Any] | None = Field(default=None, alias="analyzerResults")
    matcher_results: dict[str, Any] | None = Field(default=None, alias="matcherResults")
    ip_address: str = Field(default="unknown", alias="ipAddress")
    user_agent: str = Field(default="unknown", alias="userAgent")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @field_validator("file_type", mode="before")
    @classmethod
    def _normalize_file_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower().lstrip(".")
        return value

    @model_validator(mode="after")
    def _check_consistency(self) -> "SubmissionRecord":
        if self.resume_text_length != len(self.resume_text):
            self.resume_text_length = len(self.resume_text)
        if self.analysis_type == "analyzer":
            if self.analyzer_results is None or self.matcher_results is not None:
                raise ValueError("analyzer submissions carry analyzerResults only")
        elif self.matcher_results is None or self.analyzer_results is not None:
            raise ValueError("matcher submissions carry matcherResults only")
        return self


class SubmissionListResponse(BaseModel):
    total: int
    items: list[SubmissionRecord] = Field(default_factory=list)


class SubmissionStatsResponse(BaseModel):
    total: int
    analyzer: int
    matcher: int
