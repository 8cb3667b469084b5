"""
FastAPI application for the PDF Chat Backend.
"""

import os
from typing import Any, Iterable, Optional, Type
from fastapi import FastAPI, File, UploadFile, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel
import logging

from sqlalchemy.orm import Session as OrmSession

from .config import settings, validate_required_settings
from .db import Base, engine, get_db
from .dependencies import (
    get_chat_service,
    get_conversation_service,
    get_document_service,
    get_user_data_service,
    get_vector_service,
)
from .models import (
    ApiResponse, ChatEnvelope, ChatListEnvelope, ChatMessageResponse,
    ChatRequest, FileListEnvelope, FileRecordResponse, HealthResponse
)
from .services import (
    ChatService, ConversationService, DocumentService, UserDataService, VectorService
)
from .utils import (
    format_timestamp,
    return_error,
    return_success,
    validate_file_size,
    validate_file_type
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Validate required settings on startup
try:
    validate_required_settings()
except ValueError as e:
    logger.error(f"Configuration validation failed: {e}")
    raise

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Upload PDFs and chat with them through retrieval-augmented generation",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup_prepare_storage():
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ensured.")
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
    os.makedirs(settings.upload_dir, exist_ok=True)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    logger.warning(f"Rejected request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content=return_error("Invalid request body", 422))


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {str(exc)}")
    message = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(status_code=500, content=return_error(message, 500))


def _serialize(schema: Type[BaseModel], rows: Any) -> Any:
    """Convert ORM rows into camelCase JSON-ready dicts."""
    if isinstance(rows, Iterable):
        return [schema.model_validate(row).model_dump(by_alias=True, mode="json") for row in rows]
    return schema.model_validate(rows).model_dump(by_alias=True, mode="json")


@app.get("/", response_model=dict)
async def root():
    """Root endpoint."""
    return {
        "message": "PDF Chat API is running",
        "version": settings.app_version,
        "timestamp": format_timestamp()
    }


@app.get("/health", response_model=HealthResponse)
async def health_check(
    vector_service: VectorService = Depends(get_vector_service),
    chat_service: ChatService = Depends(get_chat_service)
):
    """Health of the vector store and the language model."""
    vector_health = await run_in_threadpool(vector_service.health_check)
    chat_health = await run_in_threadpool(chat_service.health_check)
    
    healthy = vector_health.get("status") == "healthy" and chat_health.get("status") == "healthy"
    
    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        message="Service health check completed",
        version=settings.app_version,
        timestamp=format_timestamp()
    )


@app.post("/uploadFile/{user_id}", response_class=PlainTextResponse)
async def upload_file(
    user_id: str,
    pdf_file: Optional[UploadFile] = File(None, alias="pdf-file"),
    db: OrmSession = Depends(get_db),
    document_service: DocumentService = Depends(get_document_service)
):
    """
    Upload one PDF, store it and index its text under the user's namespace.
    """
    if pdf_file is None or not pdf_file.filename:
        return PlainTextResponse("No file uploaded", status_code=400)
    
    if not validate_file_type(pdf_file.filename):
        return PlainTextResponse("Only PDF files are allowed", status_code=400)
    
    try:
        content = await pdf_file.read()
        
        if not validate_file_size(len(content)):
            return PlainTextResponse("File too large", status_code=400)
        
        result = await run_in_threadpool(
            document_service.ingest_file,
            db,
            user_id,
            pdf_file.filename,
            content,
            pdf_file.content_type,
            pdf_file.size
        )
        logger.info(
            f"Indexed {result.chunks_created} chunks from {result.file_name} "
            f"for user {user_id} in {result.processing_time:.2f}s"
        )
        
        return PlainTextResponse("File uploaded successfully", status_code=200)
        
    except Exception as e:
        logger.error(f"Upload failed for user {user_id}: {str(e)}")
        return PlainTextResponse("Error uploading file", status_code=500)


@app.get("/uploadFile/{user_id}", response_model=FileListEnvelope)
async def list_files(
    user_id: str,
    db: OrmSession = Depends(get_db),
    document_service: DocumentService = Depends(get_document_service)
):
    """List the metadata of every file a user uploaded."""
    try:
        files = await run_in_threadpool(document_service.files.list_for_user, db, user_id)
        data = _serialize(FileRecordResponse, files)
        return JSONResponse(status_code=200, content=return_success(data, True, "File found", 200))
        
    except Exception as e:
        logger.error(f"Failed to list files for user {user_id}: {str(e)}")
        return JSONResponse(status_code=500, content=return_error("Files not fetched", 500))


@app.post("/chat/{user_id}", response_model=ChatEnvelope)
async def chat(
    user_id: str,
    request: ChatRequest,
    db: OrmSession = Depends(get_db),
    conversation_service: ConversationService = Depends(get_conversation_service)
):
    """Ask a question about the user's uploaded PDFs."""
    try:
        reply = await run_in_threadpool(conversation_service.chat, db, user_id, request.content)
        data = _serialize(ChatMessageResponse, reply)
        return JSONResponse(status_code=200, content=return_success(data, True, "Chat created", 200))
        
    except Exception as e:
        logger.error(f"Chat failed for user {user_id}: {str(e)}")
        return JSONResponse(status_code=500, content=return_error("Chat not created", 500))


@app.get("/chat/{user_id}", response_model=ChatListEnvelope)
async def list_chats(
    user_id: str,
    db: OrmSession = Depends(get_db),
    conversation_service: ConversationService = Depends(get_conversation_service)
):
    """Full chat history of a user."""
    try:
        chats = await run_in_threadpool(conversation_service.history, db, user_id)
        data = _serialize(ChatMessageResponse, chats)
        return JSONResponse(status_code=200, content=return_success(data, True, "Chat found", 200))
        
    except Exception as e:
        logger.error(f"Failed to list chats for user {user_id}: {str(e)}")
        return JSONResponse(status_code=500, content=return_error("Chat not found", 500))


@app.delete("/deleteFile/{user_id}", response_model=ApiResponse)
async def delete_user_data(
    user_id: str,
    db: OrmSession = Depends(get_db),
    user_data_service: UserDataService = Depends(get_user_data_service)
):
    """Delete the user's vectors, file records and chat history."""
    try:
        deleted = await run_in_threadpool(user_data_service.delete_user_data, db, user_id)
        
        if not deleted:
            return PlainTextResponse("Namespace not found", status_code=404)
        
        return JSONResponse(
            status_code=200,
            content=return_success(None, True, "File data deleted successfully", 200)
        )
        
    except Exception as e:
        logger.error(f"Failed to delete data for user {user_id}: {str(e)}")
        return JSONResponse(status_code=500, content=return_error("File data not deleted", 500))


def run():
    import uvicorn
    uvicorn.run(
        "pdfchat.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )


if __name__ == "__main__":
    run()
