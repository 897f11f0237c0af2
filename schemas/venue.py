from datetime import date
from typing import Optional

from pydantic import Field

from schemas.common import FormModel


class ConferenceForm(FormModel):
    conference_name: str = Field(max_length=255)
    conference_shortform: Optional[str] = Field(default=None, max_length=50)
    conference_link: Optional[str] = None
    affiliation: Optional[str] = None
    conference_type: Optional[str] = None
    conference_date: Optional[date] = None
    submission_due_date: Optional[date] = None


class JournalForm(FormModel):
    journal_name: str = Field(max_length=255)
    publisher: Optional[str] = None
    journal_link: Optional[str] = None
    acceptance_frequency: Optional[str] = None
