"""Upload-to-analyzed-document pipeline."""

import base64
import time
from datetime import UTC, datetime
from typing import Any, List, NoReturn, Optional, Protocol, cast

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.ai.base import AIProvider, AIProviderName, APIKeySource
from ...infrastructure.logging import bind_context, get_logger
from ..action_suggestion.models import ActionSuggestion
from ..analysis.parser import AnalysisResult, parse_analysis
from ..analysis.prompts import build_analysis_prompt
from ..common.exceptions import (
    DocumentProcessingError,
    MissingFileError,
    PersistenceFailureError,
    UnsupportedMediaTypeError,
)
from ..document.crud import document_crud
from ..document.models import Document, DocumentCategory, DocumentStatus
from ..document.schemas import DocumentCreateInternal, DocumentRead
from ..document.services import DocumentService
from ..key_point.models import KeyPoint
from ..media.crud import media_crud
from ..media.schemas import MediaCreateInternal
from ..parameter.provider import AnalysisConfig
from .schemas import IncomingFile, StoredUpload
from .stages import Err, IngestionStage, Ok, StageResult

logger = get_logger(__name__)

ALLOWED_MIME_TYPES = frozenset(
    {
        "application/pdf",
        "text/plain",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    }
)


class ObjectStore(Protocol):
    async def store(self, content: bytes, original_name: str, content_type: str) -> str: ...

    async def locate(self, stored_name: str) -> str: ...

    async def fetch_bytes(self, url: str) -> bytes: ...


class ConfigProvider(Protocol):
    async def load(self, db: AsyncSession) -> AnalysisConfig: ...


class ProviderFactory(Protocol):
    def create(self, provider: AIProviderName, key_source: APIKeySource) -> AIProvider: ...


class DocumentIngestionService:
    """Runs one upload through storage, AI analysis and persistence.

    Failures before the document row exists are raised as-is and leave no
    rows behind. Once the document exists, any failure moves it from PENDING
    to ERROR and is raised as ``DocumentProcessingError`` naming the failed
    step. The stored object is never removed.
    """

    def __init__(
        self,
        storage: ObjectStore,
        config_provider: ConfigProvider,
        provider_factory: ProviderFactory,
        document_service: Optional[DocumentService] = None,
    ):
        self.storage = storage
        self.config_provider = config_provider
        self.provider_factory = provider_factory
        self.document_service = document_service or DocumentService(storage=storage)

    async def ingest(
        self,
        incoming: Optional[IncomingFile],
        user_id: str,
        db: AsyncSession,
        category_hint: Optional[DocumentCategory] = None,
    ) -> DocumentRead:
        """Store, analyze and persist one uploaded file.

        Args:
            incoming: The uploaded file, None when the request had none
            user_id: Uploader reference
            db: Database session
            category_hint: Optional category passed to the prompt

        Returns:
            The COMPLETED document with its key points and action suggestions

        Raises:
            MissingFileError: No file was uploaded
            UnsupportedMediaTypeError: MIME type outside the allow-list
            StorageUnavailableError: The upload could not be stored
            PersistenceFailureError: Media or document row could not be created
            DocumentProcessingError: Analysis or final persistence failed;
                the document is left in ERROR
        """
        started = time.monotonic()
        incoming = self.validate_upload(incoming)
        run_logger = bind_context(logger, original_name=incoming.display_name, user_id=user_id)
        run_logger.info("Upload received", extra={"stage": IngestionStage.RECEIVED.value, "size": incoming.size})

        stored = await self._store(incoming)
        if isinstance(stored, Err):
            raise stored.error
        run_logger.info("Upload stored", extra={"stage": IngestionStage.STORED.value})

        pending = await self._persist_pending(incoming, stored.value, user_id, db)
        if isinstance(pending, Err):
            raise pending.error
        document_id = pending.value.id
        run_logger = bind_context(run_logger, document_id=document_id)
        run_logger.info("Document created", extra={"stage": IngestionStage.PERSISTED_PENDING.value})

        analyzed = await self._analyze(pending.value, stored.value, db, category_hint)
        if isinstance(analyzed, Err):
            await self._fail(document_id, analyzed, db)
        analysis = analyzed.value
        run_logger.info(
            "Analysis parsed",
            extra={
                "stage": IngestionStage.ANALYZED.value,
                "key_points": len(analysis.key_points),
                "action_suggestions": len(analysis.action_suggestions),
            },
        )

        finalized = await self._finalize(document_id, analysis, started, db)
        if isinstance(finalized, Err):
            await self._fail(document_id, finalized, db)
        run_logger.info(
            "Document completed",
            extra={"stage": IngestionStage.FINALIZED.value, "processing_time": finalized.value},
        )

        return await self.document_service.get_document(document_id, db)

    @staticmethod
    def validate_upload(incoming: Optional[IncomingFile]) -> IncomingFile:
        """Reject missing files and MIME types outside the allow-list, before any I/O."""
        if incoming is None or (not incoming.filename and not incoming.content):
            raise MissingFileError("No file uploaded")
        content_type = (incoming.content_type or "").split(";")[0].strip().lower()
        if content_type not in ALLOWED_MIME_TYPES:
            raise UnsupportedMediaTypeError(incoming.content_type)
        if content_type != incoming.content_type:
            incoming = IncomingFile(filename=incoming.filename, content_type=content_type, content=incoming.content)
        return incoming

    async def _store(self, incoming: IncomingFile) -> StageResult[StoredUpload]:
        content_type = cast(str, incoming.content_type)
        try:
            stored_name = await self.storage.store(incoming.content, incoming.display_name, content_type)
            url = await self.storage.locate(stored_name)
        except Exception as e:
            return Err(IngestionStage.RECEIVED, "storage", e)
        return Ok(StoredUpload(stored_name=stored_name, url=url, content_type=content_type))

    async def _persist_pending(
        self, incoming: IncomingFile, stored: StoredUpload, user_id: str, db: AsyncSession
    ) -> StageResult[Document]:
        # Media is committed on its own; a failed document insert leaves it orphaned.
        try:
            media = cast(
                Any,
                await media_crud.create(
                    db=db,
                    object=MediaCreateInternal(
                        url=stored.url,
                        filename=stored.stored_name,
                        original_name=incoming.display_name,
                        mime_type=stored.content_type,
                        size=incoming.size,
                        user_id=user_id,
                    ),
                ),
            )
            document = cast(
                Document,
                await document_crud.create(
                    db=db,
                    object=DocumentCreateInternal(
                        filename=stored.stored_name,
                        original_name=incoming.display_name,
                        media_id=media.id,
                        user_id=user_id,
                    ),
                ),
            )
        except SQLAlchemyError as e:
            await db.rollback()
            error = PersistenceFailureError(f"Could not create media or document record: {e}")
            error.__cause__ = e
            return Err(IngestionStage.STORED, "record creation", error)
        return Ok(document)

    async def _analyze(
        self,
        document: Document,
        stored: StoredUpload,
        db: AsyncSession,
        category_hint: Optional[DocumentCategory],
    ) -> StageResult[AnalysisResult]:
        step = "configuration loading"
        try:
            config = await self.config_provider.load(db)
            # No connection is held while downloading and waiting on the provider.
            await db.commit()
            provider = self.provider_factory.create(config.provider, key_source=config)
            prompt = build_analysis_prompt(document.original_name, category_hint)

            step = "document download"
            content = await self.storage.fetch_bytes(stored.url)
            document_base64 = base64.b64encode(content).decode("ascii")

            step = "provider invocation"
            raw_text = await provider.send_with_document(prompt, document_base64, media_type=stored.content_type)

            step = "analysis parsing"
            analysis = parse_analysis(raw_text)
        except Exception as e:
            return Err(IngestionStage.PERSISTED_PENDING, step, e)
        return Ok(analysis)

    async def _finalize(
        self, document_id: int, analysis: AnalysisResult, started: float, db: AsyncSession
    ) -> StageResult[int]:
        """Insert children and complete the document in one transaction.

        Returns the processing time in milliseconds.
        """
        now = datetime.now(UTC)
        processing_time = int((time.monotonic() - started) * 1000)
        children: List[Any] = [KeyPoint(document_id=document_id, title=point.title) for point in analysis.key_points]
        for suggestion in analysis.action_suggestions:
            children.append(
                ActionSuggestion(
                    document_id=document_id,
                    title=suggestion.title,
                    label=suggestion.label or "",
                    is_completed=suggestion.is_completed,
                    completed_at=now if suggestion.is_completed else None,
                )
            )

        try:
            db.add_all(children)
            result = await db.execute(
                update(Document)
                .where(Document.id == document_id, Document.status == DocumentStatus.PENDING)
                .values(
                    status=DocumentStatus.COMPLETED,
                    summary=analysis.summary,
                    category=DocumentCategory.parse(analysis.category, DocumentCategory.REPORT),
                    total_pages=analysis.total_pages,
                    processing_time=processing_time,
                    updated_at=now,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise PersistenceFailureError(f"Document {document_id} is no longer PENDING")
            await db.commit()
        except (SQLAlchemyError, PersistenceFailureError) as e:
            return Err(IngestionStage.ANALYZED, "result persistence", e)
        return Ok(processing_time)

    async def _fail(self, document_id: int, failure: Err, db: AsyncSession) -> NoReturn:
        """Move the document to ERROR (best effort) and raise ``DocumentProcessingError``."""
        await db.rollback()
        try:
            await db.execute(
                update(Document)
                .where(Document.id == document_id, Document.status == DocumentStatus.PENDING)
                .values(status=DocumentStatus.ERROR, updated_at=datetime.now(UTC))
                .execution_options(synchronize_session=False)
            )
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception(
                f"Could not mark document {document_id} as ERROR",
                extra={"document_id": document_id, "stage": IngestionStage.FAILED.value},
            )

        logger.error(
            f"Ingestion of document {document_id} failed during {failure.step}: {failure.error}",
            exc_info=failure.error,
            extra={"document_id": document_id, "stage": IngestionStage.FAILED.value, "failed_in": failure.stage.value},
        )
        raise DocumentProcessingError(failure.step, document_id, failure.error) from failure.error
