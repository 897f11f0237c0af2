from datetime import date
from typing import List, Literal, Optional

from pydantic import Field

from models.application import APPLICATION_STATUSES
from models.ready_publication import READY_STATUSES
from schemas.common import FormModel

ReadyStatus = Literal[READY_STATUSES]
ApplicationStatus = Literal[APPLICATION_STATUSES]


class ReadyFromProjectForm(FormModel):
    project_id: int
    paper_title: Optional[str] = Field(default=None, max_length=500)
    mentor_affiliation: Optional[str] = None
    first_draft_link: Optional[str] = None
    plagiarism_report_link: Optional[str] = None
    ai_detection_link: Optional[str] = None
    notes: Optional[str] = None


class ReadyManualForm(FormModel):
    project_id: int
    paper_title: str = Field(max_length=500)
    mentor_affiliation: Optional[str] = None
    first_draft_link: Optional[str] = None
    plagiarism_report_link: Optional[str] = None
    ai_detection_link: Optional[str] = None
    notes: Optional[str] = None
    student_ids: List[int] = Field(default_factory=list)


class ReadyEditForm(FormModel):
    paper_title: str = Field(max_length=500)
    mentor_affiliation: Optional[str] = None
    first_draft_link: Optional[str] = None
    plagiarism_report_link: Optional[str] = None
    ai_detection_link: Optional[str] = None
    final_paper_link: Optional[str] = None
    status: ReadyStatus = 'pending'
    notes: Optional[str] = None


class StudentDetailForm(FormModel):
    student_id: int
    student_affiliation: Optional[str] = None
    student_address: Optional[str] = None
    author_order: int = Field(default=1, ge=1)


class StudentDetailsForm(FormModel):
    students: List[StudentDetailForm] = Field(default_factory=list)


class PublicationLinksForm(FormModel):
    first_draft_link: Optional[str] = None
    plagiarism_report_link: Optional[str] = None
    ai_detection_link: Optional[str] = None
    final_paper_link: Optional[str] = None
    notes: Optional[str] = None


class ConferenceApplicationForm(FormModel):
    conference_id: int
    application_date: date = Field(default_factory=date.today)
    submission_deadline: Optional[date] = None
    submission_link: Optional[str] = None
    notes: Optional[str] = None


class JournalApplicationForm(FormModel):
    journal_id: int
    application_date: date = Field(default_factory=date.today)
    submission_deadline: Optional[date] = None
    submission_link: Optional[str] = None
    manuscript_id: Optional[str] = None
    notes: Optional[str] = None


class ApplicationStatusForm(FormModel):
    application_type: Literal['conference', 'journal']
    application_id: int
    status: ApplicationStatus
    feedback: Optional[str] = None
    response_date: Optional[date] = None
    # conference-only, recorded once accepted
    acceptance_date: Optional[date] = None
    reviewer_changes: Optional[str] = None
    formatted_paper_link: Optional[str] = None
    presentation_link: Optional[str] = None
    attended: Optional[bool] = None
    certificate_received: Optional[bool] = None
