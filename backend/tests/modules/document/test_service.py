"""Tests for document service."""

import pytest
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from compliance_ai.modules.action_suggestion.models import ActionSuggestion
from compliance_ai.modules.common.exceptions import DocumentNotFoundError
from compliance_ai.modules.document.models import DocumentCategory, DocumentStatus
from compliance_ai.modules.document.schemas import DocumentUpdate
from compliance_ai.modules.document.services import DocumentService
from compliance_ai.modules.key_point.models import KeyPoint
from compliance_ai.modules.media.models import Media


@pytest.fixture
def document_service():
    """Create document service instance."""
    return DocumentService()


@pytest.mark.asyncio
async def test_get_document(document_service: DocumentService, db_session: AsyncSession, test_document: dict):
    """Test getting a document with its media details and children."""
    result = await document_service.get_document(document_id=test_document["id"], db=db_session)

    assert result.id == test_document["id"]
    assert result.original_name == "supplier-audit.pdf"
    assert result.filename == test_document["filename"]
    assert result.category == DocumentCategory.AUDIT
    assert result.status == DocumentStatus.COMPLETED
    assert result.size == 2048
    assert result.url.endswith(test_document["filename"])
    assert [point.id for point in result.key_points] == [test_document["key_point_id"]]
    assert [action.id for action in result.action_suggestions] == [test_document["action_id"]]


@pytest.mark.asyncio
async def test_get_document_presigns_url_on_read(db_session: AsyncSession, test_document: dict, storage):
    """Test the download URL is generated at read time instead of reusing the one recorded at upload."""
    expired = "http://storage.test/documents/old?X-Amz-Expires=86400&X-Amz-Signature=expired"
    await db_session.execute(update(Media).where(Media.id == test_document["media_id"]).values(url=expired))
    await db_session.commit()

    result = await DocumentService(storage=storage).get_document(test_document["id"], db_session)

    assert result.url == await storage.locate(test_document["filename"])
    assert result.url != expired


@pytest.mark.asyncio
async def test_get_document_not_found(document_service: DocumentService, db_session: AsyncSession):
    """Test getting non-existent document."""
    with pytest.raises(DocumentNotFoundError):
        await document_service.get_document(document_id=99999, db=db_session)


@pytest.mark.asyncio
async def test_get_documents(
    document_service: DocumentService, db_session: AsyncSession, test_document: dict, test_document_2: dict
):
    """Test getting all documents with pagination, newest first."""
    result = await document_service.get_documents(db=db_session, page=1, items_per_page=10)

    assert result["total_count"] == 2
    assert result["has_more"] is False
    assert [doc.id for doc in result["data"]] == [test_document_2["id"], test_document["id"]]


@pytest.mark.asyncio
async def test_get_documents_pagination(
    document_service: DocumentService, db_session: AsyncSession, test_document: dict, test_document_2: dict
):
    """Test pagination for documents."""
    result = await document_service.get_documents(db=db_session, page=1, items_per_page=1)

    assert len(result["data"]) == 1
    assert result["total_count"] == 2
    assert result["has_more"] is True


@pytest.mark.asyncio
async def test_get_documents_filters(
    document_service: DocumentService, db_session: AsyncSession, test_document: dict, test_document_2: dict
):
    """Test search, category and user filters."""
    by_name = await document_service.get_documents(db=db_session, search="PRIVACY")
    by_category = await document_service.get_documents(db=db_session, category=DocumentCategory.AUDIT)
    by_user = await document_service.get_documents(db=db_session, user_id="user-2")
    by_status = await document_service.get_documents(db=db_session, status=DocumentStatus.ERROR)

    assert [doc.id for doc in by_name["data"]] == [test_document_2["id"]]
    assert [doc.id for doc in by_category["data"]] == [test_document["id"]]
    assert [doc.id for doc in by_user["data"]] == [test_document_2["id"]]
    assert by_status["data"] == []
    assert by_status["total_count"] == 0


@pytest.mark.asyncio
async def test_update_document(document_service: DocumentService, db_session: AsyncSession, test_document: dict):
    """Test updating editable fields leaves the others untouched."""
    update_data = DocumentUpdate(original_name="Supplier audit 2024.pdf", category=DocumentCategory.REPORT)

    result = await document_service.update_document(
        document_id=test_document["id"], update_data=update_data, db=db_session
    )

    assert result.original_name == "Supplier audit 2024.pdf"
    assert result.category == DocumentCategory.REPORT
    assert result.summary == "Existing summary"
    assert result.status == DocumentStatus.COMPLETED


@pytest.mark.asyncio
async def test_update_document_not_found(document_service: DocumentService, db_session: AsyncSession):
    """Test updating non-existent document."""
    with pytest.raises(DocumentNotFoundError):
        await document_service.update_document(document_id=99999, update_data=DocumentUpdate(summary="x"), db=db_session)


def test_update_schema_has_no_status():
    """Test the status cannot be set through an update."""
    update_data = DocumentUpdate.model_validate({"status": "COMPLETED", "summary": "Edited"})

    assert update_data.model_dump(exclude_unset=True) == {"summary": "Edited"}


@pytest.mark.asyncio
async def test_delete_document(document_service: DocumentService, db_session: AsyncSession, test_document: dict):
    """Test soft delete hides the document and flags its children."""
    await document_service.delete_document(document_id=test_document["id"], db=db_session)

    with pytest.raises(DocumentNotFoundError):
        await document_service.get_document(document_id=test_document["id"], db=db_session)

    listing = await document_service.get_documents(db=db_session)
    assert listing["total_count"] == 0

    key_point = (
        await db_session.execute(
            select(KeyPoint).where(KeyPoint.id == test_document["key_point_id"]).execution_options(populate_existing=True)
        )
    ).scalar_one()
    action = (
        await db_session.execute(
            select(ActionSuggestion)
            .where(ActionSuggestion.id == test_document["action_id"])
            .execution_options(populate_existing=True)
        )
    ).scalar_one()
    assert key_point.is_deleted is True
    assert key_point.deleted_at is not None
    assert action.is_deleted is True


@pytest.mark.asyncio
async def test_delete_document_twice(document_service: DocumentService, db_session: AsyncSession, test_document: dict):
    """Test deleting an already deleted document reports it as not found."""
    await document_service.delete_document(document_id=test_document["id"], db=db_session)

    with pytest.raises(DocumentNotFoundError):
        await document_service.delete_document(document_id=test_document["id"], db=db_session)
