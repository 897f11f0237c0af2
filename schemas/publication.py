from datetime import date
from typing import List, Literal, Optional

from pydantic import Field

from models.publication import VENUE_TYPES
from schemas.common import FormModel


class PublicationForm(FormModel):
    project_id: int
    paper_title: str = Field(max_length=500)
    venue_type: Literal[VENUE_TYPES]

    conference_acceptance_date: Optional[date] = None
    conference_reviewer_comments: Optional[str] = None
    conference_presentation_date: Optional[date] = None
    conference_camera_ready_submission_date: Optional[date] = None
    conference_copyright_submission_date: Optional[date] = None
    conference_doi_link: Optional[str] = None
    conference_publisher: Optional[str] = None

    journal_acceptance_date: Optional[date] = None
    journal_reviewer_comments: Optional[str] = None
    journal_link: Optional[str] = None
    journal_publishing_date: Optional[date] = None
    journal_doi_link: Optional[str] = None
    journal_publisher: Optional[str] = None

    student_ids: List[int] = Field(default_factory=list)
    mentor_ids: List[int] = Field(default_factory=list)
    lead_mentor_id: Optional[int] = None
