"""
PDF processing service for extracting and chunking text from stored PDF files.
"""

import os
import PyPDF2
from typing import List, Optional
from langchain_core.documents import Document
from langchain_text_splitters import RecursiveCharacterTextSplitter

from ..config import settings
from ..utils import (
    measure_time,
    log_processing_info,
    handle_processing_error,
    ServiceError
)
import logging

logger = logging.getLogger(__name__)


class PDFProcessor:
    """Service for processing PDF files and extracting text."""
    
    def __init__(self, chunk_size: Optional[int] = None, chunk_overlap: Optional[int] = None):
        """Initialize the PDF processor."""
        self.chunk_size = chunk_size or settings.chunk_size
        self.chunk_overlap = chunk_overlap if chunk_overlap is not None else settings.chunk_overlap
        self.text_splitter = RecursiveCharacterTextSplitter(
            chunk_size=self.chunk_size,
            chunk_overlap=self.chunk_overlap
        )
    
    @measure_time
    def extract_text_from_pdf(self, file_path: str) -> List[Document]:
        """
        Extract text from a PDF stored on disk, one document per non-empty page.
        
        Args:
            file_path: Path of the stored PDF
            
        Returns:
            List of Document objects with extracted text
        """
        filename = os.path.basename(file_path)
        documents = []
        
        try:
            with open(file_path, "rb") as pdf_stream:
                pdf_reader = PyPDF2.PdfReader(pdf_stream)
                total_pages = len(pdf_reader.pages)
                
                log_processing_info("PDF extraction started", {
                    "filename": filename,
                    "total_pages": total_pages
                })
                
                for page_num, page in enumerate(pdf_reader.pages):
                    try:
                        page_text = page.extract_text()
                    except Exception as page_error:
                        error_info = handle_processing_error(
                            "page_extraction",
                            page_error,
                            {"filename": filename, "page": page_num + 1}
                        )
                        logger.warning(f"Skipping page {page_num + 1}: {error_info}")
                        continue
                    
                    if page_text and page_text.strip():
                        documents.append(Document(
                            page_content=page_text,
                            metadata={
                                "source": filename,
                                "page": page_num + 1,
                                "total_pages": total_pages
                            }
                        ))
            
            log_processing_info("PDF extraction completed", {
                "filename": filename,
                "documents_created": len(documents),
                "total_pages": total_pages
            })
            
            return documents
            
        except Exception as e:
            error_info = handle_processing_error(
                "pdf_extraction",
                e,
                {"filename": filename}
            )
            raise ServiceError(f"Failed to extract text from PDF {filename}: {error_info}") from e
    
    def split_documents_into_chunks(self, documents: List[Document]) -> List[Document]:
        """
        Split documents into overlapping chunks for vector search.
        
        Args:
            documents: List of Document objects
            
        Returns:
            List of chunked Document objects
        """
        try:
            chunks = self.text_splitter.split_documents(documents)
            
            for i, chunk in enumerate(chunks):
                chunk.metadata.update({
                    'chunk_index': i,
                    'total_chunks': len(chunks)
                })
            
            log_processing_info("Document chunking completed", {
                "original_documents": len(documents),
                "chunks_created": len(chunks)
            })
            
            return chunks
            
        except Exception as e:
            error_info = handle_processing_error(
                "document_chunking",
                e,
                {"document_count": len(documents)}
            )
            raise ServiceError(f"Failed to split documents into chunks: {error_info}") from e
