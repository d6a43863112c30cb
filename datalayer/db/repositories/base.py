"""Base repository pattern for data access.

Reads are built from :class:`~datalayer.query.QueryParameters` by the query
composer. Writes only register changes with the session; flushing and
committing belong to the unit of work that owns the session.
"""

import logging
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import inspect, literal_column
from sqlalchemy.orm import Session, make_transient_to_detached
from sqlalchemy.orm.attributes import flag_modified
from sqlalchemy.sql import Select

from ...exceptions import EntityNotFoundError, InvalidQueryParametersError
from ...mapping import DataMapper
from ...query import PagedResult, QueryParameters, compose, compose_for_count
from ..tracking import EntityState, get_entity_state

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M")


def _require_page(query_parameters: Optional[QueryParameters]) -> QueryParameters:
    if query_parameters is None:
        raise InvalidQueryParametersError(
            "Query parameters can't be None.", "query_parameters"
        )
    if query_parameters.page is None:
        raise InvalidQueryParametersError(
            "Query parameters page can't be None.", "page"
        )
    if not query_parameters.page.is_valid:
        raise InvalidQueryParametersError(
            "Query parameters page is not valid.", "page"
        )
    return query_parameters


def _exists_statement(statement: Select) -> Select:
    return statement.with_only_columns(
        literal_column("1"), maintain_column_froms=True
    ).limit(1)


def _attach(session: Any, entity: Any) -> None:
    """Start tracking ``entity`` as an existing row if ``session`` doesn't yet."""
    if get_entity_state(session, entity) != EntityState.DETACHED:
        return
    if inspect(entity).transient:
        # Carries its primary key already: treat as an existing row, no SELECT
        make_transient_to_detached(entity)
    session.add(entity)
    logger.debug(f"Attached {type(entity).__name__} {_identity(entity)}")


def _mark_as_modified(entity: Any) -> None:
    """Flag every loaded non-key column so the whole row is written on flush."""
    state = inspect(entity)
    unloaded = state.unloaded
    for attr in state.mapper.column_attrs:
        if attr.key in unloaded or any(col.primary_key for col in attr.columns):
            continue
        flag_modified(entity, attr.key)


def _identity(entity: Any) -> Any:
    identity = inspect(entity).identity
    if identity is None:
        return "(new)"
    return identity[0] if len(identity) == 1 else identity


def _paged_result(
    query_parameters: QueryParameters, items: List[Any], total_count: int
) -> PagedResult:
    page = query_parameters.page
    logger.debug(
        f"Page {page.index} (size {page.size}): {len(items)} of {total_count} items"
    )
    return PagedResult(
        page_index=page.index,
        page_size=page.size,
        items=items,
        total_count=total_count,
    )


class Repository(Generic[T]):
    """Generic repository over a synchronous session.

    Works with both SQLAlchemy and SQLModel models.

    Example:
        repo = Repository(context, Product)
        page = repo.get_paged_list(
            QueryParameters(
                filter=FilterRule(Product.price > 10),
                sort=SortRule(Product.name, SortOrder.DESCENDING),
                page=PageRule(index=0, size=20),
            )
        )
    """

    def __init__(self, session: Session, model: Type[T]):
        """Initialize repository with session and model type.

        Args:
            session: Database session (SQLAlchemy or SQLModel compatible)
            model: The model class this repository operates on
        """
        self.session: Any = session  # Any to support both SQLModel and SQLAlchemy
        self.model = model

    def query(self, query_parameters: Optional[QueryParameters] = None) -> Select:
        """Statement selecting entities that satisfy the query parameters."""
        return compose(self.model, query_parameters)

    def model_query(
        self,
        model: Type[M],
        mapper: DataMapper,
        query_parameters: Optional[QueryParameters] = None,
    ) -> Select:
        """Statement selecting ``model`` projections."""
        return mapper.project(self.query(query_parameters), model)

    def count_query(
        self, query_parameters: Optional[QueryParameters] = None
    ) -> Select:
        """Count statement; only the filter of the query parameters applies."""
        return compose_for_count(self.model, query_parameters)

    def paged_result_query(self, query_parameters: QueryParameters) -> Select:
        """Statement for one page of entities.

        Raises:
            InvalidQueryParametersError: If parameters or page are missing,
                or the page is not valid
        """
        return self.query(_require_page(query_parameters))

    def get(self, query_parameters: Optional[QueryParameters] = None) -> Optional[T]:
        """Get the first entity that satisfies the query parameters.

        Returns:
            Entity if found, None otherwise
        """
        result = self.session.execute(self.query(query_parameters).limit(1))
        return result.scalars().first()

    def get_model(
        self,
        model: Type[M],
        mapper: DataMapper,
        query_parameters: Optional[QueryParameters] = None,
    ) -> Optional[M]:
        """Get the first entity projected onto ``model``, or None."""
        statement = self.model_query(model, mapper, query_parameters).limit(1)
        row = self.session.execute(statement).first()
        return mapper.to_model(row, model) if row is not None else None

    def get_by_id(self, id: Any) -> Optional[T]:
        """Get entity by ID.

        Args:
            id: The entity's primary key

        Returns:
            Entity if found, None otherwise
        """
        return self.session.get(self.model, id)

    def get_list(self, query_parameters: Optional[QueryParameters] = None) -> List[T]:
        """Get all entities that satisfy the query parameters."""
        result = self.session.execute(self.query(query_parameters))
        return list(result.scalars().all())

    def get_model_list(
        self,
        model: Type[M],
        mapper: DataMapper,
        query_parameters: Optional[QueryParameters] = None,
    ) -> List[M]:
        """Get all entities that satisfy the query parameters as ``model``."""
        result = self.session.execute(self.model_query(model, mapper, query_parameters))
        return [mapper.to_model(row, model) for row in result]

    def get_paged_list(self, query_parameters: QueryParameters) -> PagedResult[T]:
        """Get one page of entities plus the total number of matches.

        Items and total count are two separate queries sharing the filter.

        Raises:
            InvalidQueryParametersError: If parameters or page are missing,
                or the page is not valid
        """
        result = self.session.execute(self.paged_result_query(query_parameters))
        items = list(result.scalars().all())
        return _paged_result(query_parameters, items, self.count(query_parameters))

    def get_paged_model_list(
        self,
        model: Type[M],
        mapper: DataMapper,
        query_parameters: QueryParameters,
    ) -> PagedResult[M]:
        """Get one page of projections plus the total number of matches."""
        statement = mapper.project(self.paged_result_query(query_parameters), model)
        items = [mapper.to_model(row, model) for row in self.session.execute(statement)]
        return _paged_result(query_parameters, items, self.count(query_parameters))

    def exists(self, query_parameters: Optional[QueryParameters] = None) -> bool:
        """Check whether any entity satisfies the query parameters."""
        statement = _exists_statement(self.query(query_parameters))
        return self.session.execute(statement).first() is not None

    def count(self, query_parameters: Optional[QueryParameters] = None) -> int:
        """Number of entities matching the filter of the query parameters."""
        return self.session.execute(self.count_query(query_parameters)).scalar_one()

    def entity_state(self, entity: T) -> EntityState:
        """Tracking state of ``entity`` in this repository's session."""
        return get_entity_state(self.session, entity)

    def insert(self, entity: T) -> T:
        """Register a new entity for insertion.

        Args:
            entity: Entity to add

        Returns:
            The same entity, now pending
        """
        self.session.add(entity)
        logger.debug(f"Added {type(entity).__name__} for insertion")
        return entity

    def update(self, entity: T, start_track_properties: bool = False) -> T:
        """Register an existing entity for update.

        Args:
            entity: Entity to update; attached first if detached
            start_track_properties: If False, every column is written on
                flush. If True, only attributes changed from now on are.

        Returns:
            The same entity
        """
        _attach(self.session, entity)
        if not start_track_properties:
            _mark_as_modified(entity)
        return entity

    def delete(self, entity: T) -> None:
        """Register an entity for deletion.

        An entity still pending insertion is simply dropped from the session.

        Args:
            entity: Entity to delete; attached first if detached
        """
        if self.entity_state(entity) == EntityState.ADDED:
            self.session.expunge(entity)
            return
        _attach(self.session, entity)
        self.session.delete(entity)
        logger.debug(f"Marked {type(entity).__name__} {_identity(entity)} deleted")

    def delete_by_id(self, id: Any) -> None:
        """Delete the entity with the given ID.

        Raises:
            EntityNotFoundError: If no entity has this ID
        """
        entity = self.get_by_id(id)
        if entity is None:
            raise EntityNotFoundError(self.model, id)
        self.delete(entity)


class AsyncRepository(Generic[T]):
    """Generic repository over an ``AsyncSession``.

    Same operations as :class:`Repository`; reads await the statement
    execution, writes only touch the session's tracking state.
    """

    def __init__(self, session: Any, model: Type[T]):
        """Initialize repository with session and model type.

        Args:
            session: Async database session
            model: The model class this repository operates on
        """
        self.session: Any = session
        self.model = model

    def query(self, query_parameters: Optional[QueryParameters] = None) -> Select:
        """Statement selecting entities that satisfy the query parameters."""
        return compose(self.model, query_parameters)

    def model_query(
        self,
        model: Type[M],
        mapper: DataMapper,
        query_parameters: Optional[QueryParameters] = None,
    ) -> Select:
        """Statement selecting ``model`` projections."""
        return mapper.project(self.query(query_parameters), model)

    def count_query(
        self, query_parameters: Optional[QueryParameters] = None
    ) -> Select:
        """Count statement; only the filter of the query parameters applies."""
        return compose_for_count(self.model, query_parameters)

    def paged_result_query(self, query_parameters: QueryParameters) -> Select:
        """Statement for one page of entities.

        Raises:
            InvalidQueryParametersError: If parameters or page are missing,
                or the page is not valid
        """
        return self.query(_require_page(query_parameters))

    async def get(
        self, query_parameters: Optional[QueryParameters] = None
    ) -> Optional[T]:
        """Get the first entity that satisfies the query parameters.

        Returns:
            Entity if found, None otherwise
        """
        result = await self.session.execute(self.query(query_parameters).limit(1))
        return result.scalars().first()

    async def get_model(
        self,
        model: Type[M],
        mapper: DataMapper,
        query_parameters: Optional[QueryParameters] = None,
    ) -> Optional[M]:
        """Get the first entity projected onto ``model``, or None."""
        statement = self.model_query(model, mapper, query_parameters).limit(1)
        row = (await self.session.execute(statement)).first()
        return mapper.to_model(row, model) if row is not None else None

    async def get_by_id(self, id: Any) -> Optional[T]:
        """Get entity by ID.

        Args:
            id: The entity's primary key

        Returns:
            Entity if found, None otherwise
        """
        return await self.session.get(self.model, id)

    async def get_list(
        self, query_parameters: Optional[QueryParameters] = None
    ) -> List[T]:
        """Get all entities that satisfy the query parameters."""
        result = await self.session.execute(self.query(query_parameters))
        return list(result.scalars().all())

    async def get_model_list(
        self,
        model: Type[M],
        mapper: DataMapper,
        query_parameters: Optional[QueryParameters] = None,
    ) -> List[M]:
        """Get all entities that satisfy the query parameters as ``model``."""
        statement = self.model_query(model, mapper, query_parameters)
        result = await self.session.execute(statement)
        return [mapper.to_model(row, model) for row in result]

    async def get_paged_list(self, query_parameters: QueryParameters) -> PagedResult[T]:
        """Get one page of entities plus the total number of matches.

        Raises:
            InvalidQueryParametersError: If parameters or page are missing,
                or the page is not valid
        """
        result = await self.session.execute(self.paged_result_query(query_parameters))
        items = list(result.scalars().all())
        total_count = await self.count(query_parameters)
        return _paged_result(query_parameters, items, total_count)

    async def get_paged_model_list(
        self,
        model: Type[M],
        mapper: DataMapper,
        query_parameters: QueryParameters,
    ) -> PagedResult[M]:
        """Get one page of projections plus the total number of matches."""
        statement = mapper.project(self.paged_result_query(query_parameters), model)
        result = await self.session.execute(statement)
        items = [mapper.to_model(row, model) for row in result]
        total_count = await self.count(query_parameters)
        return _paged_result(query_parameters, items, total_count)

    async def exists(self, query_parameters: Optional[QueryParameters] = None) -> bool:
        """Check whether any entity satisfies the query parameters."""
        statement = _exists_statement(self.query(query_parameters))
        return (await self.session.execute(statement)).first() is not None

    async def count(self, query_parameters: Optional[QueryParameters] = None) -> int:
        """Number of entities matching the filter of the query parameters."""
        result = await self.session.execute(self.count_query(query_parameters))
        return result.scalar_one()

    def entity_state(self, entity: T) -> EntityState:
        """Tracking state of ``entity`` in this repository's session."""
        return get_entity_state(self.session, entity)

    async def insert(self, entity: T) -> T:
        """Register a new entity for insertion.

        Returns:
            The same entity, now pending
        """
        self.session.add(entity)
        logger.debug(f"Added {type(entity).__name__} for insertion")
        return entity

    async def update(self, entity: T, start_track_properties: bool = False) -> T:
        """Register an existing entity for update.

        Args:
            entity: Entity to update; attached first if detached
            start_track_properties: If False, every column is written on
                flush. If True, only attributes changed from now on are.
        """
        _attach(self.session, entity)
        if not start_track_properties:
            _mark_as_modified(entity)
        return entity

    async def delete(self, entity: T) -> None:
        """Register an entity for deletion; pending entities are dropped."""
        if self.entity_state(entity) == EntityState.ADDED:
            self.session.expunge(entity)
            return
        _attach(self.session, entity)
        await self.session.delete(entity)
        logger.debug(f"Marked {type(entity).__name__} {_identity(entity)} deleted")

    async def delete_by_id(self, id: Any) -> None:
        """Delete the entity with the given ID.

        Raises:
            EntityNotFoundError: If no entity has this ID
        """
        entity = await self.get_by_id(id)
        if entity is None:
            raise EntityNotFoundError(self.model, id)
        await self.delete(entity)
