"""
Forum — Form Binding Unit Tests
================================

What we test:
    ✅ Valid payloads produce typed data; invalid ones per-field errors
    ✅ Empty strings count as missing values
    ✅ Submitted values are kept for redisplay, passwords included
    ✅ apply_to() copies only the schema's fields (partial updates)
    ✅ Cross-field errors land under the form-level key
"""

from types import SimpleNamespace

import pytest

from forum.forms import FORM_ERRORS, Form
from forum.schemas.forms import (
    AnswerBestForm,
    DeleteForm,
    PasswordForm,
    QuestionForm,
    UserForm,
)


class TestSubmit:

    def test_unsubmitted_form_is_not_valid(self):
        form = Form(QuestionForm, initial={"title": "Existing title"})
        assert not form.is_submitted()
        assert not form.is_valid()
        assert form.values["title"] == "Existing title"

    def test_valid_payload(self):
        form = Form(QuestionForm).submit(
            {"title": "  Why is the sky blue?  ", "content": "Curious.", "category_id": "2"}
        )
        assert form.is_valid()
        assert form.data.title == "Why is the sky blue?"
        assert form.data.category_id == 2

    def test_blank_fields_are_reported_as_missing(self):
        form = Form(QuestionForm).submit({"title": "", "content": "   ", "category_id": "1"})
        assert form.is_submitted()
        assert not form.is_valid()
        assert form.errors["title"] == ["This value should not be blank."]
        assert form.errors["content"] == ["This value should not be blank."]
        assert "category_id" not in form.errors

    def test_submitted_values_replace_initial_ones(self):
        form = Form(QuestionForm, initial={"title": "Old", "content": "Old body"})
        form.submit({"title": "", "content": "New body"})
        # A cleared field redisplays empty rather than falling back to the old value
        assert form.values["title"] == ""
        assert form.values["content"] == "New body"

    def test_reserved_fields_are_dropped(self):
        form = Form(DeleteForm, method="DELETE").submit({"_form": "delete", "_method": "DELETE"})
        assert form.is_valid()
        assert "_form" not in form.values

    def test_out_of_range_value(self):
        form = Form(QuestionForm).submit({"title": "ab", "content": "x", "category_id": "0"})
        assert set(form.errors) == {"title", "category_id"}

    def test_add_error_invalidates_form(self):
        form = Form(QuestionForm).submit({"title": "Valid title", "content": "x", "category_id": "9"})
        assert form.is_valid()
        form.add_error("category_id", "Choose one of the listed categories.")
        assert not form.is_valid()


class TestPasswordForms:

    def test_mismatch_is_a_form_level_error(self):
        form = Form(PasswordForm).submit({"password": "secret1", "password_repeat": "secret2"})
        assert not form.is_valid()
        assert form.errors[FORM_ERRORS] == ["The password fields must match."]

    def test_too_short(self):
        form = Form(PasswordForm).submit({"password": "abc", "password_repeat": "abc"})
        assert "password" in form.errors

    def test_user_form_lowercases_email_and_reads_checkbox(self):
        form = Form(UserForm).submit(
            {"email": "Someone@Example.COM", "nickname": "someone", "password": "secret1", "is_admin": "1"}
        )
        assert form.is_valid()
        assert form.data.email == "someone@example.com"
        assert form.data.is_admin is True

    def test_user_form_rejects_bad_email(self):
        form = Form(UserForm).submit({"email": "not-an-email", "nickname": "n", "password": "secret1"})
        assert "email" in form.errors


class TestApplyTo:

    def test_best_form_only_touches_is_best(self):
        answer = SimpleNamespace(content="Original", question_id=3, author_id=7, is_best=False)
        form = Form(AnswerBestForm, method="PUT").submit(
            {"is_best": "1", "content": "Hijacked", "question_id": "99", "author_id": "1"}
        )
        form.apply_to(answer)
        assert answer.is_best is True
        assert answer.content == "Original"
        assert answer.question_id == 3
        assert answer.author_id == 7

    def test_unchecked_best_box_clears_the_flag(self):
        answer = SimpleNamespace(is_best=True)
        Form(AnswerBestForm, method="PUT").submit({"_form": "answer_best"}).apply_to(answer)
        assert answer.is_best is False

    def test_exclude(self):
        entity = SimpleNamespace(title=None, content=None, category_id=None)
        form = Form(QuestionForm).submit({"title": "A title", "content": "Body", "category_id": "4"})
        form.apply_to(entity, exclude={"category_id"})
        assert entity.title == "A title"
        assert entity.category_id is None

    def test_invalid_form_cannot_be_applied(self):
        form = Form(QuestionForm).submit({})
        with pytest.raises(RuntimeError):
            form.apply_to(SimpleNamespace())
