from datetime import date, time
from typing import Literal, Optional

from pydantic import Field

from models.timesheet import APPROVAL_ACTIONS, DEFAULT_ACTIVITY_COLOR
from schemas.common import FormModel


class TimesheetEntryForm(FormModel):
    project_id: int
    activity_id: int
    entry_date: date
    start_time: time
    end_time: time
    task_description: str
    notes: Optional[str] = None
    # admins may log time on a mentor's behalf
    mentor_id: Optional[int] = None


class TimesheetUpdateForm(FormModel):
    activity_id: int
    entry_date: date
    start_time: time
    end_time: time
    task_description: str
    notes: Optional[str] = None


class ActivityForm(FormModel):
    activity_name: str = Field(max_length=100)
    color: str = Field(default=DEFAULT_ACTIVITY_COLOR, pattern=r'^#[0-9a-fA-F]{6}$')


class ApprovalForm(FormModel):
    action: Literal[APPROVAL_ACTIONS]
    comments: Optional[str] = None
