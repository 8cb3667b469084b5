"""
Ingestion pipeline: store an uploaded PDF, record its metadata, then extract,
chunk and embed its text into the uploader's vector namespace.
"""

import os
import time
from typing import Optional

from sqlalchemy.orm import Session as OrmSession

from .pdf_processor import PDFProcessor
from .vector_service import VectorService
from .db_repositories import FileRepository
from ..config import settings
from ..models import ProcessingResult
from ..utils import (
    build_storage_filename,
    log_processing_info,
    handle_processing_error,
    ServiceError
)
import logging

logger = logging.getLogger(__name__)


class DocumentService:
    """Service for uploading and indexing PDF documents."""
    
    def __init__(
        self,
        vector_service: VectorService,
        pdf_processor: Optional[PDFProcessor] = None,
        files: Optional[FileRepository] = None,
        upload_dir: Optional[str] = None
    ):
        self.vector_service = vector_service
        self.pdf_processor = pdf_processor or PDFProcessor()
        self.files = files or FileRepository()
        self.upload_dir = upload_dir or settings.upload_dir
    
    def save_upload(self, content: bytes, original_filename: str) -> str:
        """
        Write upload bytes into the upload directory.
        
        Returns:
            Path of the stored file
        """
        os.makedirs(self.upload_dir, exist_ok=True)
        stored_name = build_storage_filename(original_filename)
        file_path = os.path.join(self.upload_dir, stored_name)
        
        with open(file_path, "wb") as out:
            out.write(content)
        
        log_processing_info("Upload stored", {
            "original_filename": original_filename,
            "stored_name": stored_name,
            "size": len(content)
        })
        
        return file_path
    
    def ingest_file(
        self,
        db: OrmSession,
        user_id: str,
        original_filename: str,
        content: bytes,
        content_type: Optional[str],
        size: Optional[int] = None
    ) -> ProcessingResult:
        """
        Run the full ingestion pipeline for one uploaded PDF.
        
        Steps are not rolled back: if embedding fails the file record and the
        stored file remain.
        
        Args:
            db: Database session
            user_id: Owner of the file, also the vector namespace
            original_filename: Name the client sent
            content: Raw PDF bytes
            content_type: MIME type the client sent
            size: Size the client reported, defaults to ``len(content)``
            
        Returns:
            ProcessingResult describing what was written
        """
        start_time = time.time()
        
        try:
            file_path = self.save_upload(content, original_filename)
            stored_name = os.path.basename(file_path)
            
            self.files.create(
                db,
                user_id=user_id,
                name=stored_name,
                size=size if size is not None else len(content),
                type=content_type
            )
            
            documents = self.pdf_processor.extract_text_from_pdf(file_path)
            if not documents:
                raise ServiceError(f"No text could be extracted from {original_filename}")
            
            chunks = self.pdf_processor.split_documents_into_chunks(documents)
            self.vector_service.upsert_documents(chunks, namespace=user_id)
            
            result = ProcessingResult(
                status="success",
                file_name=stored_name,
                pages_extracted=len(documents),
                chunks_created=len(chunks),
                namespace=user_id,
                processing_time=time.time() - start_time
            )
            
            log_processing_info("Document processing completed", result.model_dump())
            
            return result
            
        except Exception as e:
            handle_processing_error(
                "document_processing",
                e,
                {"user_id": user_id, "filename": original_filename}
            )
            raise
