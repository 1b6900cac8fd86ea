"""
Forum — Form Schemas
=====================

What:  Pydantic models describing what each HTML form may submit.
Why:   Validation runs as an explicit step before any persistence call and
       yields either a typed draft or per-field errors (see forum.forms).
How:   forum.forms.Form feeds the submitted fields to model_validate() and
       maps pydantic's errors back to field names for redisplay.

A schema's fields are also the ONLY attributes Form.apply_to() copies onto
an entity, so a narrow schema (AnswerBestForm) makes a partial update that
cannot reach the other columns.
"""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

PASSWORD_MIN_LENGTH = 6


class FormSchema(BaseModel):
    """Common config: trim strings, ignore unknown fields (e.g. _method)."""

    model_config = {
        "str_strip_whitespace": True,
        "extra": "ignore",
    }


class QuestionForm(FormSchema):
    title: str = Field(min_length=3, max_length=255)
    content: str = Field(min_length=1)
    category_id: int = Field(gt=0)


class AnswerForm(FormSchema):
    """Full answer form: used by /answer/create and /answer/{id}/edit."""

    content: str = Field(min_length=1)
    question_id: int = Field(gt=0)


class InlineAnswerForm(FormSchema):
    """Answer form embedded in a question's page; the question comes from the URL."""

    content: str = Field(min_length=1)


class AnswerBestForm(FormSchema):
    """Restricted form: the best-answer flag and nothing else."""

    is_best: bool = False


class DeleteForm(FormSchema):
    """Confirmation form with no fields."""


class UserForm(FormSchema):
    email: EmailStr
    nickname: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=4096)
    is_admin: bool = False

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class PasswordForm(FormSchema):
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=4096)
    password_repeat: str

    @model_validator(mode="after")
    def passwords_match(self) -> "PasswordForm":
        if self.password != self.password_repeat:
            raise ValueError("The password fields must match.")
        return self


class LoginForm(FormSchema):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RegistrationForm(PasswordForm):
    email: EmailStr
    nickname: Optional[str] = Field(default=None, max_length=64)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()
