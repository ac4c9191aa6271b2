from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class StrictModel(BaseModel):
    # JSON speaks camelCase; snake_case is accepted too so table rows validate directly.
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)


class InputModel(StrictModel):
    # Unknown keys in request bodies are dropped, not rejected.
    model_config = ConfigDict(extra="ignore")


# Record models carry only the column types: rows the store accepted are read back as-is,
# whoever wrote them. Input rules live on the *Create models.


class Project(StrictModel):
    id: int
    title: str
    description: str
    tech_stack: list[str] = Field(default_factory=list)
    category: str
    link: str | None = None
    featured: bool = False


class ProjectCreate(InputModel):
    title: str = Field(min_length=1)
    description: str
    tech_stack: list[str] = Field(default_factory=list)
    category: str
    link: str | None = None
    featured: bool = False


class Skill(StrictModel):
    id: int
    name: str
    category: str
    proficiency: int


class SkillCreate(InputModel):
    name: str = Field(min_length=1)
    category: str
    proficiency: Annotated[int, Field(ge=0, le=100)]


class Education(StrictModel):
    id: int
    degree: str
    institution: str
    # Free text, e.g. "2024–2028".
    year: str
    grade: str | None = None


class EducationCreate(InputModel):
    degree: str = Field(min_length=1)
    institution: str
    year: str
    grade: str | None = None


class Achievement(StrictModel):
    id: int
    title: str
    description: str


class AchievementCreate(InputModel):
    title: str = Field(min_length=1)
    description: str


class Inquiry(StrictModel):
    id: int
    name: str
    email: str
    subject: str | None = None
    message: str
    created_at: datetime


class InquiryCreate(InputModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    subject: str | None = Field(default=None, max_length=300)
    message: str = Field(min_length=1, max_length=5000)


class InquiryAccepted(StrictModel):
    success: bool = True
    message: str = "Message sent successfully"


class ErrorResponse(StrictModel):
    message: str
    details: list[dict[str, Any]] | None = None
