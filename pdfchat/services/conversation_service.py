"""
Conversational retrieval flow and chat history.
"""

from typing import List, Optional

from sqlalchemy.orm import Session as OrmSession

from .vector_service import VectorService
from .chat_service import ChatService
from .db_repositories import ChatRepository
from ..models_db import Chat, SENDER_AI, SENDER_USER
from ..utils import measure_time, log_processing_info
import logging

logger = logging.getLogger(__name__)


class ConversationService:
    """Answers user questions from their own uploaded documents."""
    
    def __init__(
        self,
        vector_service: VectorService,
        chat_service: ChatService,
        chats: Optional[ChatRepository] = None
    ):
        self.vector_service = vector_service
        self.chat_service = chat_service
        self.chats = chats or ChatRepository()
    
    @measure_time
    def chat(self, db: OrmSession, user_id: str, content: str) -> Chat:
        """
        Persist the question, answer it from the user's namespace and persist
        the answer.
        
        The question stays stored even if retrieval or the model call fails.
        
        Returns:
            The assistant's Chat record
        """
        self.chats.create(db, user_id=user_id, sender=SENDER_USER, content=content)
        
        documents = self.vector_service.search_similar_documents(
            query=content,
            namespace=user_id
        )
        answer = self.chat_service.generate_response(content, documents)
        
        reply = self.chats.create(db, user_id=user_id, sender=SENDER_AI, content=answer)
        
        log_processing_info("Chat completed", {
            "user_id": user_id,
            "retrieved_chunks": len(documents),
            "reply_id": reply.id
        })
        
        return reply
    
    def history(self, db: OrmSession, user_id: str) -> List[Chat]:
        """All messages of a user in insertion order."""
        return self.chats.list_for_user(db, user_id)
