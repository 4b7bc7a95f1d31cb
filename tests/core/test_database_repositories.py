from __future__ import annotations

from typing import Any

import pytest
from sqlalchemy import Integer, String
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import Base as SQLAlchemyBase
from src.core.database.repositories import BaseRepository
from tests.fakes.db import FakeAsyncSession, FakeResult


class RepositoryModel(SQLAlchemyBase):
    __tablename__ = "repository_models"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(64))


class RepositoryModelRepository(BaseRepository[RepositoryModel]):
    model = RepositoryModel


def _compiled(statement: Any) -> str:
    return str(statement.compile(compile_kwargs={"literal_binds": True}))


def test_repository_requires_model() -> None:
    class MissingModelRepository(BaseRepository[RepositoryModel]):
        pass

    with pytest.raises(NotImplementedError):
        MissingModelRepository()


@pytest.mark.asyncio
async def test_create_staged() -> None:
    repo = RepositoryModelRepository()
    session = FakeAsyncSession()

    instance = await repo.create(session=session, data={"name": "alpha"})

    assert isinstance(instance, RepositoryModel)
    session.add.assert_called_once_with(instance)
    session.commit.assert_not_awaited()
    session.refresh.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_commit_refreshes_instance() -> None:
    repo = RepositoryModelRepository()
    session = FakeAsyncSession()

    instance = await repo.create(session=session, data={"name": "alpha"}, commit=True)

    session.commit.assert_awaited_once()
    session.refresh.assert_awaited_once_with(instance)


@pytest.mark.asyncio
async def test_create_commit_rolls_back_on_integrity_error() -> None:
    repo = RepositoryModelRepository()
    session = FakeAsyncSession()
    session.commit.side_effect = IntegrityError("stmt", "params", Exception("orig"))

    with pytest.raises(IntegrityError):
        await repo.create(session=session, data={"name": "alpha"}, commit=True)

    session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_get_single_returns_first_match() -> None:
    repo = RepositoryModelRepository()
    session = FakeAsyncSession()
    expected = RepositoryModel(id=1, name="alpha")
    session.execute.return_value = FakeResult(items=[expected])

    result = await repo.get_single(session, id=1)

    assert result is expected


@pytest.mark.asyncio
async def test_get_paginated_list_fetches_page_and_count() -> None:
    repo = RepositoryModelRepository()
    session = FakeAsyncSession()
    page_items = [RepositoryModel(id=3, name="c"), RepositoryModel(id=4, name="d")]
    session.execute.side_effect = [FakeResult(scalar=5), FakeResult(items=page_items)]

    items, total = await repo.get_paginated_list(session, page=2, limit=2, name="x")

    assert items == page_items
    assert total == 5
    count_query = _compiled(session.execute.await_args_list[0].args[0])
    page_query = _compiled(session.execute.await_args_list[1].args[0])
    assert "ORDER BY repository_models.id ASC" in page_query
    assert "LIMIT 2 OFFSET 2" in page_query
    assert "repository_models.name = 'x'" in page_query
    assert "count(*)" in count_query
    assert "repository_models.name = 'x'" in count_query


@pytest.mark.asyncio
@pytest.mark.parametrize("page", [4, 10**18])
async def test_get_paginated_list_skips_fetch_past_last_record(page: int) -> None:
    repo = RepositoryModelRepository()
    session = FakeAsyncSession()
    session.execute.return_value = FakeResult(scalar=5)

    items, total = await repo.get_paginated_list(session, page=page, limit=2)

    assert items == []
    assert total == 5
    session.execute.assert_awaited_once()


@pytest.mark.asyncio
@pytest.mark.parametrize("page,limit", [(0, 10), (1, 0), (-1, -1)])
async def test_get_paginated_list_rejects_non_positive_bounds(
    page: int, limit: int
) -> None:
    repo = RepositoryModelRepository()
    session = FakeAsyncSession()

    with pytest.raises(ValueError):
        await repo.get_paginated_list(session, page=page, limit=limit)

    session.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_requires_filters() -> None:
    repo = RepositoryModelRepository()

    with pytest.raises(ValueError):
        await repo.update(FakeAsyncSession(), {"name": "beta"})


@pytest.mark.asyncio
async def test_update_returns_none_when_missing() -> None:
    repo = RepositoryModelRepository()
    session = FakeAsyncSession()
    session.execute.return_value = FakeResult(items=[])

    result = await repo.update(session, {"name": "beta"}, commit=True, id=42)

    assert result is None
    session.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_applies_data_and_commits() -> None:
    repo = RepositoryModelRepository()
    session = FakeAsyncSession()
    instance = RepositoryModel(id=1, name="alpha")
    session.execute.return_value = FakeResult(items=[instance])

    result = await repo.update(session, {"name": "beta"}, commit=True, id=1)

    assert result is instance
    assert instance.name == "beta"
    session.commit.assert_awaited_once()
    session.refresh.assert_awaited_once_with(instance)


@pytest.mark.asyncio
async def test_update_propagates_storage_errors() -> None:
    repo = RepositoryModelRepository()
    session = FakeAsyncSession()
    session.execute.return_value = FakeResult(items=[RepositoryModel(id=1, name="a")])
    session.commit.side_effect = OperationalError("stmt", "params", Exception("down"))

    with pytest.raises(OperationalError):
        await repo.update(session, {"name": "beta"}, commit=True, id=1)

    session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_delete_returns_none_when_missing() -> None:
    repo = RepositoryModelRepository()
    session = FakeAsyncSession()
    session.execute.return_value = FakeResult(items=[])

    result = await repo.delete(session, commit=True, id=42)

    assert result is None
    session.delete.assert_not_awaited()
    session.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_removes_and_commits() -> None:
    repo = RepositoryModelRepository()
    session = FakeAsyncSession()
    instance = RepositoryModel(id=1, name="alpha")
    session.execute.return_value = FakeResult(items=[instance])

    result = await repo.delete(session, commit=True, id=1)

    assert result is instance
    session.delete.assert_awaited_once_with(instance)
    session.commit.assert_awaited_once()
