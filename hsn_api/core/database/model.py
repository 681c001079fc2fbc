"""
Schema-bound model accessors.

A ``ProjectModel`` binds one SQLModel entity class to one project's
``ProjectDatabase``. It is what model definers hand back to
``DatabaseManager.register_model``: route handlers fetch it by name and use
it for CRUD, and ``DatabaseManager.sync_project`` collects its ``table``.

Transaction model
-----------------

Each method opens an ``AsyncSession``, performs its operation, and commits.
This keeps persistence boundaries simple for route handlers and guarantees
that each stored row is durable when the method returns.
"""

from __future__ import annotations

from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar

from sqlalchemy import Table, func
from sqlalchemy.orm import InstrumentedAttribute
from sqlmodel import SQLModel, select

from .connection import ProjectDatabase

EntityType = TypeVar("EntityType", bound=SQLModel)


class QueryBuilder:
    """Utility class for building SQLModel-based database queries."""

    @staticmethod
    def apply_filters(stmt, model: Type[SQLModel], filters: Dict[str, Any]):
        """Apply equality filters to a select statement.

        ``None`` values and unknown attributes are ignored.
        """
        for key, value in filters.items():
            if value is not None and hasattr(model, key):
                stmt = stmt.where(getattr(model, key) == value)
        return stmt

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int], offset: Optional[int]):
        """Apply limit/offset pagination to a select statement."""
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return stmt


class ProjectModel(Generic[EntityType]):
    """An entity class bound to a project database."""

    def __init__(self, database: ProjectDatabase, entity: Type[EntityType]) -> None:
        """Bind ``entity`` to ``database``.

        Args:
            database: The project's connection handle
            entity: SQLModel table class
        """
        self.database = database
        self.entity = entity

    @property
    def name(self) -> str:
        return self.entity.__name__

    @property
    def table(self) -> Table:
        """The SQLAlchemy table backing the entity."""
        return self.entity.__table__  # type: ignore[attr-defined]

    async def create(self, **values: Any) -> EntityType:
        """Insert a new row and return it with generated fields populated."""
        entity = self.entity(**values)
        async with self.database.session() as session:
            session.add(entity)
            await session.commit()
            await session.refresh(entity)
        return entity

    async def get(self, entity_id: Any) -> Optional[EntityType]:
        """Get a row by primary key, or None."""
        async with self.database.session() as session:
            return await session.get(self.entity, entity_id)

    async def find_one(self, **filters: Any) -> Optional[EntityType]:
        """Get the first row matching all equality ``filters``, or None."""
        stmt = QueryBuilder.apply_filters(select(self.entity), self.entity, filters)
        async with self.database.session() as session:
            result = await session.execute(stmt.limit(1))
            return result.scalars().first()

    async def update(self, entity: EntityType, **values: Any) -> EntityType:
        """Apply ``values`` to ``entity`` and persist it."""
        for key, value in values.items():
            setattr(entity, key, value)
        async with self.database.session() as session:
            merged = await session.merge(entity)
            await session.commit()
            await session.refresh(merged)
        return merged

    async def find_and_count(
        self,
        *,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[InstrumentedAttribute] = None,
        descending: bool = True,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Tuple[int, List[EntityType]]:
        """List a page of rows together with the total number of matching rows.

        Args:
            filters: Equality filters (``None`` values are ignored)
            order_by: Column to order by
            descending: Order direction
            limit: Page size
            offset: Rows to skip

        Returns:
            ``(total, rows)``
        """
        filters = filters or {}
        count_stmt = QueryBuilder.apply_filters(
            select(func.count()).select_from(self.entity), self.entity, filters
        )
        stmt = QueryBuilder.apply_filters(select(self.entity), self.entity, filters)
        if order_by is not None:
            stmt = stmt.order_by(order_by.desc() if descending else order_by.asc())
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)

        async with self.database.session() as session:
            total = (await session.execute(count_stmt)).scalar_one()
            rows = (await session.execute(stmt)).scalars().all()
        return total, list(rows)

    def __repr__(self) -> str:
        return f"ProjectModel(project={self.database.name}, entity={self.name})"
