"""Decoded shapes of the LMS entities the audit reads."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Course(BaseModel):
    """A course as listed in the account catalog."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int = Field(..., description="Course identifier")
    name: str = Field(default="", description="Course display name")
    workflow_state: str = Field(..., description="Publication lifecycle state")
    default_view: Optional[str] = Field(default=None, description="Landing page type")
    sis_course_id: Optional[str] = Field(default=None, description="Term-scoping SIS identifier")
    course_format: Optional[str] = Field(default=None, description="Delivery format")


class Teacher(BaseModel):
    """A user enrolled in a course with the teacher role."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int = Field(..., description="User identifier")
    name: str = Field(default="", description="Display name")
    email: Optional[str] = Field(default=None, description="Primary email, if visible")
    sis_user_id: Optional[str] = Field(default=None, description="SIS user identifier")


class FrontPage(BaseModel):
    """The wiki page a course uses as its landing view."""

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    body: Optional[str] = None

    @property
    def has_content(self) -> bool:
        return bool(self.body)
