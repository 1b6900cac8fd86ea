"""
Forum — Answer Controller Tests
================================

What we test:
    ✅ List / show, unknown ids
    ✅ Create attaches the answer to the chosen question
    ✅ Edit, including moving an answer to another question
    ✅ Delete confirms on GET and removes on DELETE
    ✅ The best form changes is_best and nothing else; one best per question
"""

import pytest

from forum.models import Answer, Question


class TestIndexAndShow:

    @pytest.mark.asyncio
    async def test_empty_first_page(self, client):
        response = await client.get("/answer/")
        assert response.status_code == 200
        assert "No answers yet." in response.text

    @pytest.mark.asyncio
    async def test_list_and_show(self, client, make_question):
        _, (answer_id,) = await make_question(title="Parent question", answers=["Listed answer"])

        listing = await client.get("/answer/")
        shown = await client.get(f"/answer/{answer_id}")

        assert "Listed answer" in listing.text
        assert "Parent question" in listing.text
        assert shown.status_code == 200
        assert "Listed answer" in shown.text

    @pytest.mark.asyncio
    async def test_list_is_paginated(self, client, make_question):
        await make_question(answers=[f"Answer number {index:02d}" for index in range(12)])

        first = await client.get("/answer/")
        second = await client.get("/answer/", params={"page": "2"})

        assert first.status_code == 200
        assert first.text.count("Answer number") == 10
        assert second.text.count("Answer number") == 2
        assert '/answer/?page=2"' in first.text

    @pytest.mark.asyncio
    async def test_unknown_answer_is_404(self, client):
        response = await client.get("/answer/31337")
        assert response.status_code == 404


class TestCreate:

    @pytest.mark.asyncio
    async def test_form_lists_questions(self, client, make_question):
        await make_question(title="Pick me")
        response = await client.get("/answer/create")
        assert response.status_code == 200
        assert "Pick me" in response.text

    @pytest.mark.asyncio
    async def test_create_attaches_to_question(self, client, make_question, fetch):
        question_id, _ = await make_question()

        response = await client.post(
            "/answer/create",
            data={"content": "Standalone answer", "question_id": str(question_id)},
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/answer/"
        question = await fetch(Question, question_id)
        assert [a.content for a in question.answers] == ["Standalone answer"]
        assert question.answers[0].is_best is False

    @pytest.mark.asyncio
    async def test_unknown_question(self, client, seeded, count):
        response = await client.post("/answer/create", data={"content": "Lost", "question_id": "77"})
        assert response.status_code == 200
        assert "Choose one of the listed questions." in response.text
        assert await count(Answer) == 0


class TestEdit:

    @pytest.mark.asyncio
    async def test_edit_content(self, client, make_question, fetch):
        question_id, (answer_id,) = await make_question(answers=["Typo answr"])

        response = await client.put(
            f"/answer/{answer_id}/edit",
            data={"content": "Fixed answer", "question_id": str(question_id)},
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/questions/"
        answer = await fetch(Answer, answer_id)
        assert answer.content == "Fixed answer"
        assert answer.question_id == question_id

    @pytest.mark.asyncio
    async def test_moving_an_answer_drops_best_flag(self, client, make_question, fetch):
        _, (answer_id,) = await make_question(title="Old home", answers=["Mover"])
        new_home_id, _ = await make_question(title="New home")
        await client.put(f"/answer/{answer_id}/best", data={"is_best": "1"})

        await client.put(
            f"/answer/{answer_id}/edit",
            data={"content": "Mover", "question_id": str(new_home_id)},
        )

        answer = await fetch(Answer, answer_id)
        assert answer.question_id == new_home_id
        assert answer.is_best is False

    @pytest.mark.asyncio
    async def test_invalid_edit_rerenders(self, client, make_question, fetch):
        question_id, (answer_id,) = await make_question(answers=["Keep me"])

        response = await client.put(
            f"/answer/{answer_id}/edit",
            data={"content": "", "question_id": str(question_id)},
        )

        assert response.status_code == 200
        assert "This value should not be blank." in response.text
        assert (await fetch(Answer, answer_id)).content == "Keep me"


class TestDelete:

    @pytest.mark.asyncio
    async def test_get_only_confirms(self, client, make_question, count):
        _, (answer_id,) = await make_question(answers=["Not yet"])
        response = await client.get(f"/answer/{answer_id}/delete")
        assert response.status_code == 200
        assert "Not yet" in response.text
        assert await count(Answer) == 1

    @pytest.mark.asyncio
    async def test_delete(self, client, make_question, fetch):
        question_id, (gone_id, kept_id) = await make_question(answers=["Gone", "Kept"])

        response = await client.post(
            f"/answer/{gone_id}/delete?_method=DELETE",
            data={"_form": "delete"},
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/questions/"
        assert await fetch(Answer, gone_id) is None
        question = await fetch(Question, question_id)
        assert [a.id for a in question.answers] == [kept_id]


class TestBest:

    @pytest.mark.asyncio
    async def test_best_form_only_changes_the_flag(self, client, make_question, fetch):
        question_id, (answer_id,) = await make_question(answers=["Original content"])
        other_question_id, _ = await make_question(title="Elsewhere")

        response = await client.put(
            f"/answer/{answer_id}/best",
            data={
                "is_best": "1",
                "content": "Rewritten",
                "question_id": str(other_question_id),
            },
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/questions/"
        answer = await fetch(Answer, answer_id)
        assert answer.is_best is True
        assert answer.content == "Original content"
        assert answer.question_id == question_id

    @pytest.mark.asyncio
    async def test_one_best_answer_per_question(self, client, make_question, fetch):
        question_id, (first_id, second_id) = await make_question(answers=["First", "Second"])

        await client.put(f"/answer/{first_id}/best", data={"is_best": "1"})
        await client.put(f"/answer/{second_id}/best", data={"is_best": "1"})

        question = await fetch(Question, question_id)
        assert question.best_answer.id == second_id
        assert [a.id for a in question.answers if a.is_best] == [second_id]

    @pytest.mark.asyncio
    async def test_unchecking_clears_the_flag(self, client, make_question, fetch):
        _, (answer_id,) = await make_question(answers=["Was best"])
        await client.put(f"/answer/{answer_id}/best", data={"is_best": "1"})

        # An unchecked box sends only the form marker
        response = await client.post(
            f"/answer/{answer_id}/best?_method=PUT",
            data={"_form": "answer_best"},
        )

        assert response.status_code == 303
        assert (await fetch(Answer, answer_id)).is_best is False

    @pytest.mark.asyncio
    async def test_get_shows_current_state(self, client, make_question):
        _, (answer_id,) = await make_question(answers=["Candidate"])
        response = await client.get(f"/answer/{answer_id}/best")
        assert response.status_code == 200
        assert "Candidate" in response.text
        assert "checked" not in response.text
