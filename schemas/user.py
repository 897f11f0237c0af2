from typing import Literal, Optional

from pydantic import EmailStr, Field, field_validator

from models.user import USER_TYPES
from schemas.common import FormModel

UserType = Literal[USER_TYPES]


def check_password_strength(password):
    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters long.")
    if not any(c.isupper() for c in password):
        raise ValueError("Password must contain at least one uppercase letter.")
    if not any(c.islower() for c in password):
        raise ValueError("Password must contain at least one lowercase letter.")
    if not any(c.isdigit() for c in password):
        raise ValueError("Password must contain at least one number.")
    return password


class LoginForm(FormModel):
    username: str
    password: str


class UserForm(FormModel):
    username: str = Field(max_length=50)
    full_name: str = Field(max_length=100)
    user_type: UserType
    email: Optional[EmailStr] = None
    contact_no: Optional[str] = None
    specialization: Optional[str] = None
    branch: Optional[str] = None
    organization_name: Optional[str] = None
    status: Literal['active', 'inactive'] = 'active'


class UserCreateForm(UserForm):
    password: str

    @field_validator('password')
    @classmethod
    def strong_password(cls, value):
        return check_password_strength(value)


class UserEditForm(UserForm):
    # blank keeps the current password
    password: Optional[str] = None

    @field_validator('password')
    @classmethod
    def strong_password(cls, value):
        if value is None:
            return value
        return check_password_strength(value)
