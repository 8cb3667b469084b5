"""
Namespace lifecycle: purge everything stored for a user.
"""

from typing import Optional

from sqlalchemy.orm import Session as OrmSession

from .vector_service import VectorService
from .db_repositories import ChatRepository, FileRepository
from ..utils import log_processing_info
import logging

logger = logging.getLogger(__name__)


class UserDataService:
    """Deletes a user's vectors, file records and chat history."""
    
    def __init__(
        self,
        vector_service: VectorService,
        files: Optional[FileRepository] = None,
        chats: Optional[ChatRepository] = None
    ):
        self.vector_service = vector_service
        self.files = files or FileRepository()
        self.chats = chats or ChatRepository()
    
    def namespace_exists(self, user_id: str) -> bool:
        return self.vector_service.namespace_exists(user_id)
    
    def delete_user_data(self, db: OrmSession, user_id: str) -> bool:
        """
        Delete vectors, then file records, then chats of a user.
        
        The three deletes are not transactional; a failure part way leaves the
        earlier deletes applied.
        
        Returns:
            False if the user's namespace does not exist (nothing is touched),
            True once everything was deleted
        """
        if not self.namespace_exists(user_id):
            log_processing_info("Namespace not found", {"user_id": user_id})
            return False
        
        self.vector_service.delete_namespace(user_id)
        files_deleted = self.files.delete_for_user(db, user_id)
        chats_deleted = self.chats.delete_for_user(db, user_id)
        
        log_processing_info("User data deleted", {
            "user_id": user_id,
            "files_deleted": files_deleted,
            "chats_deleted": chats_deleted
        })
        
        return True
