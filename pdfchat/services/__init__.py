"""
Services package for the PDF Chat Backend.
"""

from .pdf_processor import PDFProcessor
from .vector_service import VectorService
from .chat_service import ChatService
from .document_service import DocumentService
from .conversation_service import ConversationService
from .user_data_service import UserDataService

__all__ = [
    "PDFProcessor",
    "VectorService", 
    "ChatService",
    "DocumentService",
    "ConversationService",
    "UserDataService"
]
