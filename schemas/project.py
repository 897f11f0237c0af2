from datetime import date
from typing import List, Literal, Optional

from pydantic import Field

from models.tag import DEFAULT_TAG_COLOR
from schemas.common import FormModel


class ProjectForm(FormModel):
    project_name: str
    status_id: Optional[int] = None
    subject_id: Optional[int] = None
    lead_mentor_id: Optional[int] = None
    rbm_id: Optional[int] = None
    has_prototype: Literal['Yes', 'No'] = 'No'
    start_date: Optional[date] = None
    assigned_date: Optional[date] = None
    completion_date: Optional[date] = None
    drive_link: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    student_ids: List[int] = Field(default_factory=list)
    mentor_ids: List[int] = Field(default_factory=list)
    tag_ids: List[int] = Field(default_factory=list)


class StatusUpdateForm(FormModel):
    status_id: int
    notes: Optional[str] = Field(default=None, alias='additional_details')

    class Config:
        populate_by_name = True


class StatusLookupForm(FormModel):
    status_name: str = Field(max_length=100)


class SubjectLookupForm(FormModel):
    subject_name: str = Field(max_length=100)
    subject_code: Optional[str] = Field(default=None, max_length=20)


class TagLookupForm(FormModel):
    tag_name: str = Field(max_length=50)
    tag_color: str = Field(default=DEFAULT_TAG_COLOR, pattern=r'^#[0-9a-fA-F]{6}$')
