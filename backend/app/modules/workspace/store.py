"""
Document store.

A thin document-style facade over an async SQLAlchemy session: collections
are mapped model classes, documents are rows, and list queries take plain
SQLAlchemy filter expressions (equality, ``in_`` containment) plus an
optional ordering.
"""
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Generic, List, Optional, Type, TypeVar

from app.core.exceptions import InfrastructureException
from app.core.models import BaseModel
from sqlalchemy import ColumnElement, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

logger = get_logger(__name__)

DocumentT = TypeVar("DocumentT", bound=BaseModel)


class DocumentNotFoundError(Exception):
    """Raised when a document id does not exist in a collection."""

    def __init__(self, collection: str, document_id: Any):
        self.collection = collection
        self.document_id = document_id
        super().__init__(f"{collection} document '{document_id}' not found")


class DuplicateDocumentError(Exception):
    """Raised when a write violates a uniqueness constraint."""

    def __init__(self, collection: str):
        self.collection = collection
        super().__init__(f"Duplicate document in {collection}")


@dataclass
class DocumentList(Generic[DocumentT]):
    """Result of a list query."""

    documents: List[DocumentT] = field(default_factory=list)
    total: int = 0


class DocumentStore:
    """Document-style CRUD over one database session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def _guard(self, operation: str, model: Type[BaseModel]) -> AsyncIterator[None]:
        """Translate SQLAlchemy failures and roll back the session."""
        collection = model.__tablename__
        try:
            yield
        except IntegrityError as e:
            await self.session.rollback()
            logger.info("Uniqueness violation", operation=operation, collection=collection)
            raise DuplicateDocumentError(collection) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Document store failure",
                operation=operation,
                collection=collection,
                error=str(e),
            )
            raise InfrastructureException("document_store", f"{operation} on {collection} failed") from e

    async def list_documents(
        self,
        model: Type[DocumentT],
        *filters: ColumnElement[bool],
        order_by: Optional[Any] = None,
    ) -> DocumentList[DocumentT]:
        """
        List documents matching all filters.

        Args:
            model: Collection to query
            filters: SQLAlchemy boolean expressions, combined with AND
            order_by: Optional ordering expression, e.g. ``Model.created_at.desc()``

        Returns:
            The matching documents and their count
        """
        query = select(model).where(*filters)
        if order_by is not None:
            query = query.order_by(order_by)

        async with self._guard("list", model):
            result = await self.session.execute(query)
            documents = list(result.scalars().all())

        return DocumentList(documents=documents, total=len(documents))

    async def get_document(self, model: Type[DocumentT], document_id: Any) -> DocumentT:
        """
        Get a document by id.

        Raises:
            DocumentNotFoundError: If the id does not exist
        """
        async with self._guard("get", model):
            document = await self.session.get(model, document_id)

        if document is None:
            raise DocumentNotFoundError(model.__tablename__, document_id)
        return document

    async def create_document(self, model: Type[DocumentT], **fields: Any) -> DocumentT:
        """
        Insert a document; id and timestamps are assigned by the store.

        Raises:
            DuplicateDocumentError: If a uniqueness constraint is violated
        """
        document = model(**fields)

        async with self._guard("create", model):
            self.session.add(document)
            await self.session.flush()
            await self.session.refresh(document)

        return document

    async def update_document(self, model: Type[DocumentT], document_id: Any, **fields: Any) -> DocumentT:
        """
        Update fields of an existing document.

        Raises:
            DocumentNotFoundError: If the id does not exist
        """
        document = await self.get_document(model, document_id)
        document.update_from_dict(fields)

        async with self._guard("update", model):
            await self.session.flush()
            await self.session.refresh(document)

        return document

    async def delete_document(self, model: Type[DocumentT], document_id: Any) -> None:
        """
        Delete a document.

        Raises:
            DocumentNotFoundError: If the id does not exist
        """
        document = await self.get_document(model, document_id)

        async with self._guard("delete", model):
            await self.session.delete(document)
            await self.session.flush()
