"""Report row model for audited courses."""

from enum import Enum
from typing import List
from pydantic import BaseModel, ConfigDict, Field

NO_FACULTY = "No Faculty"
NO_EMAIL = "No Email"
ERROR = "Error"
UNKNOWN_SUBJECT = "Unknown"

REPORT_COLUMNS = [
    "course_id",
    "course_name",
    "subject",
    "with_modules",
    "with_assignments",
    "with_front_page",
    "faculty_name",
    "faculty_email",
]


class ProbeOutcome(str, Enum):
    """Outcome of a single presence probe."""

    YES = "Yes"
    NO = "No"
    ERROR = "Error"

    @classmethod
    def from_presence(cls, present: bool) -> "ProbeOutcome":
        return cls.YES if present else cls.NO


class ReportRow(BaseModel):
    """One unpublished course finding."""

    model_config = ConfigDict(frozen=True)

    course_id: int = Field(..., description="Course identifier")
    course_name: str = Field(..., description="Course display name")
    subject: str = Field(default=UNKNOWN_SUBJECT, description="Subject code from SIS id")
    with_modules: ProbeOutcome = Field(default=ProbeOutcome.NO)
    with_assignments: ProbeOutcome = Field(default=ProbeOutcome.NO)
    with_front_page: ProbeOutcome = Field(default=ProbeOutcome.NO)
    faculty_name: str = Field(default=NO_FACULTY, description="Joined teacher names")
    faculty_email: str = Field(default=NO_EMAIL, description="Joined teacher emails")

    @property
    def has_errors(self) -> bool:
        """Whether any probe of this row failed."""
        outcomes = (self.with_modules, self.with_assignments, self.with_front_page)
        return ProbeOutcome.ERROR in outcomes or self.faculty_name == ERROR

    def to_csv_row(self) -> List[str]:
        """Values in REPORT_COLUMNS order."""
        return [
            str(self.course_id),
            self.course_name,
            self.subject,
            self.with_modules.value,
            self.with_assignments.value,
            self.with_front_page.value,
            self.faculty_name,
            self.faculty_email,
        ]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return self.model_dump(mode="json")
