from pydantic import BaseModel, Field
from typing import List

class ErrorResponse(BaseModel):
    error: str = Field(..., description="Generation error kind, e.g. NoValidQuestions")
    detail: str = Field(..., description="Caller-safe description of the failure")

class HealthResponse(BaseModel):
    status: str
    api_key_set: bool

class CategoriesResponse(BaseModel):
    categories: List[str]
