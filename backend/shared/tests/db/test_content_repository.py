"""Tests for SqliteContentRepository."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from shared.auth.models import Account
from shared.dal.errors import PersistenceError
from shared.dal.models import NewAnswer, NewQuestion
from shared.db import Database, SqliteAccountRepository, SqliteContentRepository

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def db(tmp_path: Path):
    database = Database(tmp_path / "test.db")
    database.connect()
    yield database
    database.close()


@pytest.fixture
def repo(db):
    return SqliteContentRepository(db)


@pytest.fixture
async def owners(db):
    accounts = SqliteAccountRepository(db)
    alice = await accounts.create_account(Account(email="alice@example.com", password_hash="h"))
    bob = await accounts.create_account(Account(email="bob@example.com", password_hash="h"))
    return alice.account_id, bob.account_id


def _question(title: str = "Title", tags: list[str] | None = None) -> NewQuestion:
    return NewQuestion(title=title, content="Some content", tags=tags)


class TestQuestions:
    async def test_add_and_list(self, repo, owners):
        alice, _ = owners
        added = await repo.add_question(_question(tags=["python", "sqlite"]), alice)

        assert await repo.list_questions() == [added]
        assert added.tags == ["python", "sqlite"]

    async def test_tags_may_be_absent(self, repo, owners):
        alice, _ = owners
        added = await repo.add_question(_question(), alice)

        assert (await repo.list_questions())[0].tags is None
        assert added.tags is None

    async def test_pagination(self, repo, owners):
        alice, _ = owners
        for i in range(5):
            await repo.add_question(_question(title=f"q{i}"), alice)

        page = await repo.list_questions(limit=2, offset=1)
        assert [q.title for q in page] == ["q1", "q2"]
        assert [q.title for q in await repo.list_questions(offset=3)] == ["q3", "q4"]
        assert await repo.list_questions(limit=0) == []

    async def test_owner_can_update(self, repo, owners):
        alice, _ = owners
        added = await repo.add_question(_question(), alice)

        updated = await repo.update_question(added.id, _question(title="New"), alice)

        assert updated is not None
        assert updated.title == "New"
        assert (await repo.list_questions())[0].title == "New"

    async def test_update_by_other_account_changes_nothing(self, repo, owners):
        alice, bob = owners
        added = await repo.add_question(_question(), alice)

        assert await repo.update_question(added.id, _question(title="Hijacked"), bob) is None
        assert (await repo.list_questions())[0].title == "Title"

    async def test_delete_by_other_account_changes_nothing(self, repo, owners):
        alice, bob = owners
        added = await repo.add_question(_question(), alice)

        assert await repo.delete_question(added.id, bob) is False
        assert len(await repo.list_questions()) == 1

    async def test_delete_removes_answers(self, repo, owners):
        alice, bob = owners
        added = await repo.add_question(_question(), alice)
        await repo.add_answer(NewAnswer(content="an answer", question_id=added.id), bob)

        assert await repo.delete_question(added.id, alice) is True
        assert await repo.list_questions() == []
        assert await repo.list_answers(added.id) == []

    async def test_ownership(self, repo, owners):
        alice, bob = owners
        added = await repo.add_question(_question(), alice)

        assert await repo.is_question_owner(added.id, alice) is True
        assert await repo.is_question_owner(added.id, bob) is False
        assert await repo.is_question_owner(added.id + 100, alice) is False

    async def test_unknown_account_is_persistence_error(self, repo, owners):
        with pytest.raises(PersistenceError):
            await repo.add_question(_question(), 999)


class TestAnswers:
    @pytest.fixture
    async def question_id(self, repo, owners):
        alice, _ = owners
        return (await repo.add_question(_question(), alice)).id

    async def test_add_and_list(self, repo, owners, question_id):
        _, bob = owners
        first = await repo.add_answer(NewAnswer(content="first", question_id=question_id), bob)
        second = await repo.add_answer(NewAnswer(content="second", question_id=question_id), bob)

        assert await repo.list_answers(question_id) == [first, second]

    async def test_answer_to_missing_question_is_persistence_error(self, repo, owners):
        _, bob = owners
        with pytest.raises(PersistenceError) as exc_info:
            await repo.add_answer(NewAnswer(content="orphan", question_id=12345), bob)
        assert exc_info.value.code == "SQLITE_CONSTRAINT_FOREIGNKEY"

    async def test_owner_can_update(self, repo, owners, question_id):
        _, bob = owners
        answer = await repo.add_answer(NewAnswer(content="first", question_id=question_id), bob)

        updated = await repo.update_answer(answer.id, "edited", bob)

        assert updated is not None
        assert updated.content == "edited"
        assert updated.question_id == question_id

    async def test_update_by_other_account_changes_nothing(self, repo, owners, question_id):
        alice, bob = owners
        answer = await repo.add_answer(NewAnswer(content="first", question_id=question_id), bob)

        assert await repo.update_answer(answer.id, "hijacked", alice) is None
        assert (await repo.list_answers(question_id))[0].content == "first"

    async def test_delete(self, repo, owners, question_id):
        alice, bob = owners
        answer = await repo.add_answer(NewAnswer(content="first", question_id=question_id), bob)

        assert await repo.delete_answer(answer.id, alice) is False
        assert await repo.delete_answer(answer.id, bob) is True
        assert await repo.list_answers(question_id) == []

    async def test_ownership(self, repo, owners, question_id):
        alice, bob = owners
        answer = await repo.add_answer(NewAnswer(content="first", question_id=question_id), bob)

        assert await repo.is_answer_owner(answer.id, bob) is True
        assert await repo.is_answer_owner(answer.id, alice) is False
