"""
Process-wide service providers used as FastAPI dependencies.

Each provider builds its service once and caches it; tests replace them through
``app.dependency_overrides``.
"""

from functools import lru_cache

from .services import (
    ChatService,
    ConversationService,
    DocumentService,
    UserDataService,
    VectorService,
)


@lru_cache()
def get_vector_service() -> VectorService:
    return VectorService()


@lru_cache()
def get_chat_service() -> ChatService:
    return ChatService()


@lru_cache()
def get_document_service() -> DocumentService:
    return DocumentService(vector_service=get_vector_service())


@lru_cache()
def get_conversation_service() -> ConversationService:
    return ConversationService(
        vector_service=get_vector_service(),
        chat_service=get_chat_service()
    )


@lru_cache()
def get_user_data_service() -> UserDataService:
    return UserDataService(vector_service=get_vector_service())
