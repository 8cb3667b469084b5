import os
import sys
import tempfile
from unittest.mock import MagicMock

import pytest

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Settings are read at import time, so the environment has to be ready first
os.environ.setdefault("GOOGLE_API_KEY", "test-google-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="pdfchat-uploads-")

from fastapi.testclient import TestClient  # noqa: E402
from langchain_core.embeddings import DeterministicFakeEmbedding  # noqa: E402
from langchain_core.messages import AIMessage  # noqa: E402
from qdrant_client import QdrantClient  # noqa: E402

from pdfchat.config import settings  # noqa: E402
from pdfchat.db import Base, SessionLocal, engine  # noqa: E402
from pdfchat.dependencies import (  # noqa: E402
    get_chat_service,
    get_conversation_service,
    get_document_service,
    get_user_data_service,
    get_vector_service,
)
from pdfchat.services import (  # noqa: E402
    ChatService,
    ConversationService,
    DocumentService,
    UserDataService,
    VectorService,
)


def build_pdf(text: str) -> bytes:
    """Build a single-page PDF showing ``text`` in Helvetica."""
    stream = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (
        len(objects) + 1,
        xref_offset,
    )
    return bytes(out)


# ============= Fixtures =============


@pytest.fixture
def pdf_bytes():
    return build_pdf("Hello PDF world. The answer to X is forty two.")


@pytest.fixture
def blank_pdf_bytes():
    return build_pdf("")


@pytest.fixture
def db_session():
    """Fresh tables for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def vector_service():
    """Vector service backed by an in-process Qdrant and fake embeddings."""
    return VectorService(
        client=QdrantClient(":memory:"),
        embeddings=DeterministicFakeEmbedding(size=settings.vector_dimension),
        collection_name="test-pdf-chat",
    )


@pytest.fixture
def llm():
    mock_llm = MagicMock()
    mock_llm.invoke.return_value = AIMessage(content="X is forty two.")
    return mock_llm


@pytest.fixture
def chat_service(llm):
    return ChatService(llm=llm)


@pytest.fixture
def document_service(vector_service, tmp_path):
    return DocumentService(vector_service=vector_service, upload_dir=str(tmp_path / "assets"))


@pytest.fixture
def conversation_service(vector_service, chat_service):
    return ConversationService(vector_service=vector_service, chat_service=chat_service)


@pytest.fixture
def user_data_service(vector_service):
    return UserDataService(vector_service=vector_service)


@pytest.fixture
def client(
    db_session,
    vector_service,
    chat_service,
    document_service,
    conversation_service,
    user_data_service,
):
    from pdfchat.main import app

    app.dependency_overrides[get_vector_service] = lambda: vector_service
    app.dependency_overrides[get_chat_service] = lambda: chat_service
    app.dependency_overrides[get_document_service] = lambda: document_service
    app.dependency_overrides[get_conversation_service] = lambda: conversation_service
    app.dependency_overrides[get_user_data_service] = lambda: user_data_service

    yield TestClient(app)

    app.dependency_overrides.clear()
