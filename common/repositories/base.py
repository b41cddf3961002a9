from contextlib import asynccontextmanager
from typing import Generic, TypeVar, Optional, List, Type, AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.future import select

from common.core.exceptions import StorageError
from common.core.otel_axiom_exporter import trace_span
from common.db.scoped import get_session

EntityType = TypeVar("EntityType")
DomainModelType = TypeVar("DomainModelType")


class BaseRepository(Generic[EntityType, DomainModelType]):
    """
    Base repository with support for both explicit and lazy session management.

    1. Explicit session: pass db_session to the constructor. The caller owns
       the session lifecycle.
    2. Lazy session: omit db_session. A session is acquired per operation (or
       the enclosing transaction() session is joined) and released right after,
       so no connection is held across calls to the payments sidecar.

    SQLAlchemy failures surface as StorageError.
    """

    def __init__(
        self,
        entity_class: Type[EntityType],
        domain_class: Type[DomainModelType],
        db_session: Optional[AsyncSession] = None,
    ):
        self.entity_class = entity_class
        self.domain_class = domain_class
        self._explicit_session = db_session
        self.db_session = db_session

    @asynccontextmanager
    async def _get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a session for an operation.

        Uses the explicit session when one was provided, otherwise the lazy
        get_session(), which respects readonly and transaction context.
        """
        try:
            if self._explicit_session is not None:
                yield self._explicit_session
            else:
                async with get_session() as session:
                    yield session
        except SQLAlchemyError as e:
            raise StorageError(
                f"{self.entity_class.__name__} storage operation failed: {e}"
            ) from e

    def _add_org_filter(self, query, org_id: int):
        """Add organization filtering to any query."""
        return query.where(self.entity_class.org_id == org_id)

    def _entity_to_domain(self, entity: EntityType) -> DomainModelType:
        """Convert database entity to domain model."""
        return self.domain_class.model_validate(entity)

    def _entities_to_domain(self, entities: List[EntityType]) -> List[DomainModelType]:
        return [self._entity_to_domain(entity) for entity in entities]

    @trace_span
    async def get(self, id: int) -> Optional[DomainModelType]:
        query = select(self.entity_class).where(self.entity_class.id == id)
        async with self._get_session() as session:
            result = await session.execute(query)
            entity = result.scalar_one_or_none()
            return self._entity_to_domain(entity) if entity else None
