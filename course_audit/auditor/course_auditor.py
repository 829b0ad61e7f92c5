"""Per-course probing that turns the course catalog into report rows."""

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

from pydantic import ValidationError

from ..config import AuditorConfig
from ..models.course import Course, Teacher, FrontPage
from ..models.report import (
    ERROR,
    NO_EMAIL,
    NO_FACULTY,
    UNKNOWN_SUBJECT,
    ProbeOutcome,
    ReportRow,
)
from ..client.fetcher import HttpFetcher
from ..client.pagination import Paginator
from ..utils.logging_config import get_logger
from ..utils.exceptions import AuditException, DecodeError, FetchError

logger = get_logger()


def extract_subject(sis_course_id: Optional[str]) -> str:
    """
    Subject code from a TERM-SESSION-SUBJECT-NUMBER identifier.

    >>> extract_subject("6253-FA-MATH-101")
    'MATH'
    """
    parts = (sis_course_id or "").split("-")
    if len(parts) == 4:
        return parts[2]
    return UNKNOWN_SUBJECT


def _is_published(item: Any) -> bool:
    return isinstance(item, dict) and bool(item.get("published"))


@dataclass
class AuditResult:
    """Rows produced by one audit run plus counters for the summary."""

    rows: List[ReportRow] = field(default_factory=list)
    courses_seen: int = 0
    courses_selected: int = 0

    @property
    def rows_with_errors(self) -> int:
        return sum(1 for row in self.rows if row.has_errors)


class CourseAuditor:
    """Finds unpublished courses for a term and probes what they contain."""

    def __init__(
        self,
        fetcher: HttpFetcher,
        paginator: Paginator,
        config: AuditorConfig,
    ):
        """
        Initialize course auditor.

        Args:
            fetcher: Fetcher for single-resource probes
            paginator: Paginator for collection probes
            config: Audit configuration
        """
        self.fetcher = fetcher
        self.paginator = paginator
        self.config = config
        self.account_id = config.canvas.account_id

    def list_courses(self) -> List[Course]:
        """
        Fetch every course in the account matching the term prefix.

        Raises:
            AuditException: If the catalog cannot be read completely
        """
        params = {"per_page": self.config.audit.per_page}
        if self.config.audit.term_prefix:
            params["search_term"] = self.config.audit.term_prefix

        logger.info(f"Listing courses in account {self.account_id}")
        return self.paginator.collect_all(
            f"accounts/{self.account_id}/courses", params, model=Course
        )

    def is_candidate(self, course: Course) -> bool:
        """Whether a course belongs to the target term and is still in the target state."""
        sis_id = course.sis_course_id or ""
        return (
            sis_id.startswith(self.config.audit.term_prefix)
            and course.workflow_state == self.config.audit.target_state
        )

    def select_courses(self, courses: List[Course]) -> List[Course]:
        selected = [course for course in courses if self.is_candidate(course)]
        logger.info(f"Selected {len(selected)} of {len(courses)} courses")
        return selected

    def _has_items(
        self,
        path: str,
        predicate: Optional[Callable[[Any], bool]] = None,
    ) -> bool:
        # Stops at the first matching item, so at most one page when non-empty
        for item in self.paginator.iter_items(path):
            if predicate is None or predicate(item):
                return True
        return False

    def probe_modules(self, course: Course) -> ProbeOutcome:
        try:
            return ProbeOutcome.from_presence(
                self._has_items(f"courses/{course.id}/modules")
            )
        except AuditException as e:
            logger.error(f"Error fetching modules for course {course.id}: {e}")
            return ProbeOutcome.ERROR

    def probe_assignments(self, course: Course) -> ProbeOutcome:
        predicate = None
        if self.config.audit.published_assignments_only:
            predicate = _is_published

        try:
            return ProbeOutcome.from_presence(
                self._has_items(f"courses/{course.id}/assignments", predicate)
            )
        except AuditException as e:
            logger.error(f"Error fetching assignments for course {course.id}: {e}")
            return ProbeOutcome.ERROR

    def probe_front_page(self, course: Course) -> ProbeOutcome:
        """
        Check the front page of a course whose landing view is the wiki.

        Courses landing elsewhere are not faulted and report No.
        """
        if course.default_view != self.config.audit.front_page_view:
            return ProbeOutcome.NO

        try:
            result = self.fetcher.get(f"courses/{course.id}/front_page")
            if not result.ok:
                raise FetchError(
                    f"front page returned status {result.status_code}",
                    status_code=result.status_code,
                )
            try:
                page = FrontPage.model_validate(result.json())
            except ValidationError as e:
                raise DecodeError(f"Unexpected front page shape: {e}") from e
        except AuditException as e:
            logger.error(f"Error fetching front page for course {course.id}: {e}")
            return ProbeOutcome.ERROR

        return ProbeOutcome.from_presence(page.has_content)

    def probe_faculty(self, course: Course) -> Tuple[str, str]:
        """
        Names and emails of the course's teachers.

        Returns:
            Tuple of (joined names, joined emails)
        """
        try:
            teachers: List[Teacher] = self.paginator.collect_all(
                f"courses/{course.id}/users",
                {"enrollment_type[]": "teacher"},
                model=Teacher,
            )
        except AuditException as e:
            logger.error(f"Error fetching teachers for course {course.id}: {e}")
            return ERROR, ERROR

        if not teachers:
            return NO_FACULTY, NO_EMAIL

        names = ", ".join(teacher.name for teacher in teachers)
        emails = ", ".join(teacher.email or NO_EMAIL for teacher in teachers)
        return names, emails

    def audit_course(self, course: Course) -> ReportRow:
        """Run every probe for one course and assemble its row."""
        logger.info(f"Processing course: {course.name} (ID: {course.id})")

        with_modules = self.probe_modules(course)
        with_front_page = self.probe_front_page(course)
        with_assignments = self.probe_assignments(course)
        faculty_name, faculty_email = self.probe_faculty(course)

        return ReportRow(
            course_id=course.id,
            course_name=course.name,
            subject=extract_subject(course.sis_course_id),
            with_modules=with_modules,
            with_assignments=with_assignments,
            with_front_page=with_front_page,
            faculty_name=faculty_name,
            faculty_email=faculty_email,
        )

    def run(
        self,
        on_start: Optional[Callable[[int], None]] = None,
        on_row: Optional[Callable[[ReportRow], None]] = None,
    ) -> AuditResult:
        """
        Audit every candidate course of the account.

        Args:
            on_start: Called with the number of selected courses before probing
            on_row: Called with each row as soon as it is assembled

        Returns:
            AuditResult with one row per selected course

        Raises:
            AuditException: If the course list cannot be fetched
        """
        courses = self.list_courses()
        selected = self.select_courses(courses)
        result = AuditResult(courses_seen=len(courses), courses_selected=len(selected))

        if on_start:
            on_start(len(selected))

        for course in selected:
            row = self.audit_course(course)
            result.rows.append(row)
            if on_row:
                on_row(row)

        logger.info(
            f"Audit complete: {len(result.rows)} rows, {result.rows_with_errors} with probe errors"
        )
        return result
