from pydantic import BaseModel, Field
from typing import Any


class AnalyzeRequest(BaseModel):
    topic: str | None = None
    stream: bool | None = None  # overrides llm.stream for this request


class Analysis(BaseModel):
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)


class AnalysisResult(BaseModel):
    analysis: Analysis


class ErrorResponse(BaseModel):
    error: str
    details: Any = None
