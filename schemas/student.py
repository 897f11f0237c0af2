from typing import Optional

from pydantic import EmailStr, Field

from schemas.common import FormModel


class StudentForm(FormModel):
    full_name: str = Field(max_length=100)
    affiliation: Optional[str] = None
    grade: Optional[str] = None
    counselor_id: Optional[int] = None
    rbm_id: Optional[int] = None
    board_id: Optional[int] = None
    # free-text board, created on the fly when no board_id is picked
    custom_board: Optional[str] = Field(default=None, max_length=100)
    contact_no: Optional[str] = None
    email_address: Optional[EmailStr] = None
    application_year: Optional[int] = Field(default=None, ge=2000, le=2100)
