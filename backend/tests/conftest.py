"""Test configuration and fixtures for the compliance analysis service."""

import json
import os
from typing import Any, Callable, Dict, List, Optional

# Must be set before the application modules read their settings.
os.environ.setdefault("ENVIRONMENT", "local")
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")
os.environ.setdefault("S3_CREATE_BUCKET_ON_STARTUP", "false")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from testcontainers.core.docker_client import DockerClient  # noqa: E402
from testcontainers.postgres import PostgresContainer  # noqa: E402

from compliance_ai.infrastructure.ai.base import AIProviderName  # noqa: E402
from compliance_ai.infrastructure.config.settings import Settings  # noqa: E402
from compliance_ai.infrastructure.database.session import Base, async_session, load_models  # noqa: E402
from compliance_ai.infrastructure.logging import configure_testing_logging  # noqa: E402
from compliance_ai.infrastructure.storage import ObjectStorageService  # noqa: E402
from compliance_ai.interfaces.api.dependencies import get_provider_factory, get_storage_service  # noqa: E402
from compliance_ai.interfaces.main import app  # noqa: E402
from compliance_ai.modules.action_suggestion.models import ActionSuggestion  # noqa: E402
from compliance_ai.modules.common.exceptions import StorageUnavailableError  # noqa: E402
from compliance_ai.modules.document.models import Document, DocumentCategory, DocumentStatus  # noqa: E402
from compliance_ai.modules.key_point.models import KeyPoint  # noqa: E402
from compliance_ai.modules.media.models import Media  # noqa: E402
from compliance_ai.modules.parameter.services import ParameterService  # noqa: E402

VALID_ANALYSIS: Dict[str, Any] = {
    "summary": "Data processing agreement between the company and its payroll provider.",
    "keyPoints": [
        {"title": "Personal data may only be processed on documented instructions"},
        {"title": "Sub-processors require prior written authorisation"},
    ],
    "actionSuggestions": [
        {"title": "Review the list of authorised sub-processors", "isCompleted": False, "label": "review"},
        {"title": "Sign the annex on security measures", "isCompleted": True, "label": "signature"},
    ],
    "category": "CONTRACT",
    "totalPages": 12,
    "isComplete": True,
}


@pytest.fixture(scope="session", autouse=True)
def quiet_logging():
    configure_testing_logging()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with an API key for every provider."""
    return Settings(
        CLAUDE_API_KEY="sk-test-claude-key",
        GEMINI_API_KEY="gm-test-gemini-key",
        MISTRAL_API_KEY="ms-test-mistral-key",
        AI_DEFAULT_PROVIDER="claude",
    )


class InMemoryStorage:
    """Object store keeping uploads in a dict; set ``fail_store`` or ``fail_fetch`` to simulate an outage."""

    base_url = "http://storage.test/documents"

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.fail_store = False
        self.fail_fetch = False

    async def store(self, content: bytes, original_name: str, content_type: str) -> str:
        if self.fail_store:
            raise StorageUnavailableError("Could not store file in object storage: bucket unreachable")
        stored_name = ObjectStorageService.generate_stored_name(original_name)
        self.objects[stored_name] = content
        return stored_name

    async def locate(self, stored_name: str) -> str:
        return f"{self.base_url}/{stored_name}?X-Amz-Signature=test"

    async def fetch_bytes(self, url: str) -> bytes:
        if self.fail_fetch:
            raise StorageUnavailableError("Could not read file from object storage: bucket unreachable")
        return self.objects[ObjectStorageService.stored_name_from_url(url)]


class ScriptedProvider:
    def __init__(self, factory: "ScriptedProviderFactory", name: AIProviderName):
        self.factory = factory
        self.name = name

    async def send_text_only(self, prompt: str) -> str:
        return await self._answer(prompt, None, None)

    async def send_with_document(self, prompt: str, document_base64: str, media_type: str = "application/pdf") -> str:
        return await self._answer(prompt, document_base64, media_type)

    async def _answer(self, prompt: str, document_base64: Optional[str], media_type: Optional[str]) -> str:
        self.factory.calls.append(
            {"provider": self.name, "prompt": prompt, "document": document_base64, "media_type": media_type}
        )
        if self.factory.on_call is not None:
            self.factory.on_call()
        if self.factory.error is not None:
            raise self.factory.error
        return self.factory.response


class ScriptedProviderFactory:
    """Provider factory whose adapters return ``response`` or raise ``error``.

    ``on_call`` runs inside every provider call, before the answer is returned.
    """

    def __init__(self):
        self.response = json.dumps(VALID_ANALYSIS)
        self.error: Optional[Exception] = None
        self.calls: List[Dict[str, Any]] = []
        self.on_call: Optional[Callable[[], Any]] = None

    def create(self, provider: AIProviderName, key_source: Any) -> ScriptedProvider:
        return ScriptedProvider(self, provider)


@pytest.fixture
def valid_analysis() -> Dict[str, Any]:
    return json.loads(json.dumps(VALID_ANALYSIS))


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def provider_factory() -> ScriptedProviderFactory:
    return ScriptedProviderFactory()


def is_docker_running() -> bool:
    """Check if Docker daemon is running."""
    try:
        DockerClient()
        return True
    except Exception:
        return False


@pytest.fixture(scope="session")
def pg_container():
    """PostgreSQL container, used when TEST_DATABASE=postgres."""
    if not is_docker_running():
        pytest.skip("Docker is required, but not running")

    with PostgresContainer("postgres:16-alpine", driver="asyncpg") as pg:
        yield pg


@pytest.fixture(scope="function")
def test_db_url(request, tmp_path) -> str:
    """SQLite file per test by default; a real PostgreSQL with TEST_DATABASE=postgres."""
    if os.environ.get("TEST_DATABASE", "sqlite").lower() == "postgres":
        return request.getfixturevalue("pg_container").get_connection_url()
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest_asyncio.fixture(scope="function")
async def test_db_engine(test_db_url):
    """Create a SQLAlchemy engine with every table created."""
    engine = create_async_engine(test_db_url, echo=False)
    load_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session_factory(test_db_engine):
    return async_sessionmaker(test_db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def db_session(test_session_factory):
    """Create a test database session."""
    async with test_session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def seeded_parameters(test_session_factory, test_settings):
    """Default parameters created the way the application does at startup."""
    async with test_session_factory() as session:
        await ParameterService().ensure_defaults(session, test_settings)


@pytest_asyncio.fixture(scope="function")
async def client(test_session_factory, seeded_parameters, storage, provider_factory):
    """Create a test client; each request gets its own session on the test database."""
    app.dependency_overrides = {}

    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[async_session] = override_get_db
    app.dependency_overrides[get_storage_service] = lambda: storage
    app.dependency_overrides[get_provider_factory] = lambda: provider_factory

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}


async def _create_document(
    db: AsyncSession,
    original_name: str,
    status: DocumentStatus = DocumentStatus.COMPLETED,
    category: DocumentCategory = DocumentCategory.REPORT,
    user_id: str = "user-1",
) -> Dict[str, Any]:
    stored_name = ObjectStorageService.generate_stored_name(original_name)
    media = Media(
        url=f"{InMemoryStorage.base_url}/{stored_name}",
        filename=stored_name,
        original_name=original_name,
        mime_type="application/pdf",
        size=2048,
        user_id=user_id,
    )
    db.add(media)
    await db.flush()

    document = Document(
        filename=stored_name,
        original_name=original_name,
        media_id=media.id,
        user_id=user_id,
        category=category,
        status=status,
        summary="Existing summary" if status == DocumentStatus.COMPLETED else None,
    )
    db.add(document)
    await db.flush()

    key_point = KeyPoint(document_id=document.id, title=f"Key point of {original_name}")
    action = ActionSuggestion(document_id=document.id, title=f"Action for {original_name}", label="follow-up")
    db.add_all([key_point, action])
    await db.commit()

    return {
        "id": document.id,
        "media_id": media.id,
        "filename": stored_name,
        "original_name": original_name,
        "key_point_id": key_point.id,
        "action_id": action.id,
    }


@pytest_asyncio.fixture
async def test_document(db_session: AsyncSession):
    """A completed audit document with one key point and one action."""
    return await _create_document(db_session, "supplier-audit.pdf", category=DocumentCategory.AUDIT)


@pytest_asyncio.fixture
async def test_document_2(db_session: AsyncSession):
    """A second completed document from another user."""
    return await _create_document(db_session, "privacy-policy.pdf", category=DocumentCategory.POLICY, user_id="user-2")
