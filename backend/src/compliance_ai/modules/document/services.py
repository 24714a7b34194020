"""Read, update and delete operations for analyzed documents."""

from datetime import UTC, datetime
from typing import Any, Dict, List, Optional, Protocol, Sequence

from fastcrud.paginated.response import paginated_response
from sqlalchemy import Select, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.logging import get_logger
from ..action_suggestion.models import ActionSuggestion
from ..action_suggestion.schemas import ActionSuggestionRead
from ..common.exceptions import DocumentNotFoundError
from ..key_point.models import KeyPoint
from ..key_point.schemas import KeyPointRead
from ..media.models import Media
from .crud import document_crud
from .models import Document, DocumentCategory, DocumentStatus
from .schemas import DocumentRead, DocumentUpdate

logger = get_logger(__name__)


class DownloadLocator(Protocol):
    async def locate(self, stored_name: str) -> str: ...


class DocumentService:
    """Service for reading and editing documents produced by ingestion.

    Documents are returned with their media URL and size and with their
    non-deleted key points and action suggestions nested. Soft-deleted
    documents behave as if they did not exist.

    With a ``storage`` locator the download URL is presigned again on every
    read; without one the URL recorded at upload is returned.
    """

    def __init__(self, storage: Optional[DownloadLocator] = None):
        self.storage = storage

    async def get_document(self, document_id: int, db: AsyncSession) -> DocumentRead:
        """Get a document with its analysis children.

        Args:
            document_id: Document ID to retrieve
            db: Database session

        Returns:
            The document

        Raises:
            DocumentNotFoundError: If the document does not exist or was deleted
        """
        stmt = self._active_documents().where(Document.id == document_id)
        document = (await db.execute(stmt)).scalar_one_or_none()
        if document is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")

        return (await self.assemble([document], db))[0]

    async def get_documents(
        self,
        db: AsyncSession,
        page: int = 1,
        items_per_page: int = 20,
        search: Optional[str] = None,
        category: Optional[DocumentCategory] = None,
        status: Optional[DocumentStatus] = None,
        user_id: Optional[str] = None,
    ) -> dict[str, Any]:
        """List documents, newest first.

        Args:
            db: Database session
            page: Page number (1-indexed)
            items_per_page: Number of documents per page
            search: Case-insensitive match on stored or original file name
            category: Only documents of this category
            status: Only documents in this status
            user_id: Only documents uploaded by this user

        Returns:
            Paginated response with documents
        """
        filters = []
        if search:
            pattern = f"%{search}%"
            filters.append(or_(Document.filename.ilike(pattern), Document.original_name.ilike(pattern)))
        if category is not None:
            filters.append(Document.category == category)
        if status is not None:
            filters.append(Document.status == status)
        if user_id:
            filters.append(Document.user_id == user_id)

        offset = (page - 1) * items_per_page
        stmt = (
            self._active_documents()
            .where(*filters)
            .order_by(Document.created_at.desc(), Document.id.desc())
            .offset(offset)
            .limit(items_per_page)
        )
        documents = (await db.execute(stmt)).scalars().all()

        count_stmt = select(func.count(Document.id)).where(Document.is_deleted.is_(False), *filters)
        total_count = (await db.execute(count_stmt)).scalar_one()

        crud_data = {"data": await self.assemble(documents, db), "total_count": total_count}
        return paginated_response(crud_data, page, items_per_page)

    async def update_document(self, document_id: int, update_data: DocumentUpdate, db: AsyncSession) -> DocumentRead:
        """Update the editable fields of a document.

        Args:
            document_id: Document ID to update
            update_data: Fields to change; unset fields are left alone
            db: Database session

        Returns:
            The updated document
        """
        if not await document_crud.exists(db=db, id=document_id, is_deleted=False):
            raise DocumentNotFoundError(f"Document {document_id} not found")

        update_dict = update_data.model_dump(exclude_unset=True)
        if update_dict:
            await document_crud.update(db=db, object=update_dict, id=document_id)

        return await self.get_document(document_id, db)

    async def delete_document(self, document_id: int, db: AsyncSession) -> None:
        """Soft-delete a document together with its key points and action suggestions."""
        if not await document_crud.exists(db=db, id=document_id, is_deleted=False):
            raise DocumentNotFoundError(f"Document {document_id} not found")

        deleted_at = datetime.now(UTC)
        for child_model in (KeyPoint, ActionSuggestion):
            await db.execute(
                update(child_model)
                .where(child_model.document_id == document_id, child_model.is_deleted.is_(False))
                .values(is_deleted=True, deleted_at=deleted_at)
            )
        await document_crud.delete(db=db, id=document_id)

        logger.info(f"Soft-deleted document {document_id}", extra={"document_id": document_id})

    async def assemble(self, documents: Sequence[Document], db: AsyncSession) -> List[DocumentRead]:
        """Build read models for ``documents``, loading media and children in batches."""
        if not documents:
            return []

        document_ids = [document.id for document in documents]
        media_ids = [document.media_id for document in documents]

        media_stmt = select(Media.id, Media.url, Media.filename, Media.size).where(Media.id.in_(media_ids))
        media_rows = await db.execute(media_stmt)
        media_by_id = {row.id: row for row in media_rows}

        key_points: Dict[int, List[KeyPointRead]] = {document_id: [] for document_id in document_ids}
        key_point_stmt = (
            select(KeyPoint)
            .where(KeyPoint.document_id.in_(document_ids), KeyPoint.is_deleted.is_(False))
            .order_by(KeyPoint.id)
            .execution_options(populate_existing=True)
        )
        for key_point in (await db.execute(key_point_stmt)).scalars():
            key_points[key_point.document_id].append(KeyPointRead.model_validate(key_point))

        actions: Dict[int, List[ActionSuggestionRead]] = {document_id: [] for document_id in document_ids}
        action_stmt = (
            select(ActionSuggestion)
            .where(ActionSuggestion.document_id.in_(document_ids), ActionSuggestion.is_deleted.is_(False))
            .order_by(ActionSuggestion.id)
            .execution_options(populate_existing=True)
        )
        for action in (await db.execute(action_stmt)).scalars():
            actions[action.document_id].append(ActionSuggestionRead.model_validate(action))

        results = []
        for document in documents:
            media = media_by_id.get(document.media_id)
            results.append(
                DocumentRead(
                    id=document.id,
                    filename=document.filename,
                    original_name=document.original_name,
                    total_pages=document.total_pages,
                    category=document.category,
                    summary=document.summary,
                    size=media.size if media else None,
                    status=document.status,
                    processing_time=document.processing_time,
                    media_id=document.media_id,
                    user_id=document.user_id,
                    url=await self._download_url(media),
                    key_points=key_points[document.id],
                    action_suggestions=actions[document.id],
                    created_at=document.created_at,
                    updated_at=document.updated_at,
                    deleted_at=document.deleted_at,
                )
            )
        return results

    async def _download_url(self, media: Any) -> Optional[str]:
        if media is None:
            return None
        if self.storage is None:
            return media.url
        return await self.storage.locate(media.filename)

    @staticmethod
    def _active_documents() -> Select:
        return (
            select(Document).where(Document.is_deleted.is_(False)).execution_options(populate_existing=True)
        )
