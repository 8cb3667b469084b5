import string

import pytest
from langchain_core.documents import Document

from pdfchat.services.pdf_processor import PDFProcessor
from pdfchat.utils import ServiceError


@pytest.fixture
def processor():
    return PDFProcessor(chunk_size=1000, chunk_overlap=100)


def _long_text(length: int) -> str:
    # No whitespace, so the splitter falls back to character-level splits
    return "".join(string.ascii_lowercase[i % 26] for i in range(length))


def test_adjacent_chunks_share_exactly_the_overlap(processor):
    chunks = processor.split_documents_into_chunks([Document(page_content=_long_text(2500))])

    assert [len(c.page_content) for c in chunks] == [1000, 1000, 700]
    for left, right in zip(chunks, chunks[1:]):
        assert left.page_content[-100:] == right.page_content[:100]


def test_short_document_yields_one_chunk(processor):
    chunks = processor.split_documents_into_chunks([Document(page_content="short text")])

    assert len(chunks) == 1
    assert chunks[0].page_content == "short text"


def test_chunks_keep_page_metadata_and_get_an_index(processor):
    doc = Document(page_content=_long_text(1500), metadata={"source": "a.pdf", "page": 2})

    chunks = processor.split_documents_into_chunks([doc])

    assert [c.metadata["chunk_index"] for c in chunks] == [0, 1]
    assert all(c.metadata["total_chunks"] == 2 for c in chunks)
    assert all(c.metadata["source"] == "a.pdf" and c.metadata["page"] == 2 for c in chunks)


def test_default_settings_use_1000_and_100():
    processor = PDFProcessor()

    assert processor.chunk_size == 1000
    assert processor.chunk_overlap == 100


def test_extract_text_from_pdf(processor, pdf_bytes, tmp_path):
    path = tmp_path / "hello-1.pdf"
    path.write_bytes(pdf_bytes)

    documents = processor.extract_text_from_pdf(str(path))

    assert len(documents) == 1
    assert "Hello" in documents[0].page_content
    assert documents[0].metadata == {"source": "hello-1.pdf", "page": 1, "total_pages": 1}


def test_extract_skips_pages_without_text(processor, blank_pdf_bytes, tmp_path):
    path = tmp_path / "blank.pdf"
    path.write_bytes(blank_pdf_bytes)

    assert processor.extract_text_from_pdf(str(path)) == []


def test_extract_rejects_non_pdf(processor, tmp_path):
    path = tmp_path / "fake.pdf"
    path.write_bytes(b"this is not a pdf")

    with pytest.raises(ServiceError):
        processor.extract_text_from_pdf(str(path))
