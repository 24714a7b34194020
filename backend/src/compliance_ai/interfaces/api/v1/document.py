"""Document API endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from ....modules.common.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ....modules.common.schemas import Page
from ....modules.common.utils.error_handler import to_http_exception
from ....modules.document.models import DocumentCategory, DocumentStatus
from ....modules.document.schemas import DocumentRead, DocumentUpdate
from ....modules.document.services import DocumentService
from ....modules.ingestion.schemas import IncomingFile
from ....modules.ingestion.services import DocumentIngestionService
from ..dependencies import DbSession, UserId, get_document_service, get_ingestion_service

router = APIRouter(prefix="/document", tags=["Documents"])


@router.post(
    "/",
    status_code=status.HTTP_201_CREATED,
    response_model=DocumentRead,
    summary="Upload And Analyze Document",
    description="""
    Uploads a compliance document and returns it once the AI analysis is done.

    The file is stored, a PENDING document is created, the active AI provider
    analyzes it and the document comes back COMPLETED with its summary, key
    points and action suggestions.

    - **file**: PDF, plain text, DOC or DOCX file
    - **categoryHint**: Optional category suggested to the AI provider

    If analysis fails the document stays visible in ERROR status.
    """,
    responses={
        201: {"description": "Document analyzed"},
        400: {"description": "Missing file or unsupported file type"},
        500: {"description": "Storage, provider, parsing or persistence failure"},
    },
    response_description="The analyzed document",
)
async def upload_document(
    db: DbSession,
    user_id: UserId,
    file: Annotated[Optional[UploadFile], File(description="Document to analyze")] = None,
    category_hint: Annotated[Optional[DocumentCategory], Form(alias="categoryHint")] = None,
    ingestion_service: DocumentIngestionService = Depends(get_ingestion_service),
) -> DocumentRead:
    """Upload and analyze a document."""
    try:
        incoming = None
        if file is not None:
            incoming = IncomingFile(filename=file.filename, content_type=file.content_type, content=await file.read())
        return await ingestion_service.ingest(incoming, user_id, db, category_hint=category_hint)
    except Exception as e:
        raise to_http_exception(e) from e


@router.get(
    "/",
    response_model=Page[DocumentRead],
    summary="List Documents",
    description="""
    Retrieves a paginated list of documents, newest first. Deleted documents are never listed.

    - **search**: Case-insensitive match on the stored or original file name
    - **category**, **status**, **userId**: Exact filters
    - **page**: Page number (1-indexed)
    - **itemsPerPage**: Number of documents per page
    """,
    responses={200: {"description": "Paginated list of documents"}},
)
async def get_documents(
    db: DbSession,
    search: Annotated[Optional[str], Query(description="Search in file names")] = None,
    category: Annotated[Optional[DocumentCategory], Query(description="Filter by category")] = None,
    document_status: Annotated[Optional[DocumentStatus], Query(alias="status", description="Filter by status")] = None,
    user_id: Annotated[Optional[str], Query(alias="userId", description="Filter by uploader")] = None,
    page: Annotated[int, Query(ge=1, description="Page number (1-indexed)")] = 1,
    items_per_page: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE, alias="itemsPerPage")] = DEFAULT_PAGE_SIZE,
    document_service: DocumentService = Depends(get_document_service),
):
    """Get documents with pagination and filters."""
    try:
        return await document_service.get_documents(
            db,
            page=page,
            items_per_page=items_per_page,
            search=search,
            category=category,
            status=document_status,
            user_id=user_id,
        )
    except Exception as e:
        raise to_http_exception(e) from e


@router.get(
    "/{document_id}",
    response_model=DocumentRead,
    summary="Get Document Details",
    description="Retrieves a document with its media URL, key points and action suggestions.",
    responses={
        200: {"description": "Document details"},
        404: {"description": "Document not found"},
    },
)
async def get_document(
    document_id: int,
    db: DbSession,
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentRead:
    """Get a specific document by ID."""
    try:
        return await document_service.get_document(document_id, db)
    except Exception as e:
        raise to_http_exception(e) from e


@router.patch(
    "/{document_id}",
    response_model=DocumentRead,
    summary="Update Document",
    description="""
    Updates the editable fields of a document. The status is managed by the analysis pipeline and cannot be set.

    - **originalName**, **category**, **summary**, **totalPages**: All optional
    """,
    responses={
        200: {"description": "Document updated successfully"},
        404: {"description": "Document not found"},
        422: {"description": "Invalid update data"},
    },
)
async def update_document(
    document_id: int,
    update_data: DocumentUpdate,
    db: DbSession,
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentRead:
    """Update a document."""
    try:
        return await document_service.update_document(document_id, update_data, db)
    except Exception as e:
        raise to_http_exception(e) from e


@router.delete(
    "/{document_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Document",
    description="Soft-deletes a document together with its key points and action suggestions.",
    responses={
        204: {"description": "Document deleted successfully"},
        404: {"description": "Document not found"},
    },
)
async def delete_document(
    document_id: int,
    db: DbSession,
    document_service: DocumentService = Depends(get_document_service),
) -> None:
    """Soft-delete a document."""
    try:
        await document_service.delete_document(document_id, db)
    except Exception as e:
        raise to_http_exception(e) from e
