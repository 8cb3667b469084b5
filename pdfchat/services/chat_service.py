"""
Chat service for generating grounded answers with the language model.
"""

from typing import List, Dict, Any, Optional
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_core.documents import Document
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from ..config import settings
from ..utils import (
    measure_time,
    log_processing_info,
    handle_processing_error,
    ServiceError
)
import logging

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a helpful assistant answering questions from a PDF."


def build_context(documents: List[Document]) -> str:
    """Join retrieved chunk texts into one context block."""
    return "\n\n".join(doc.page_content for doc in documents)


def build_user_prompt(question: str, context: str) -> str:
    return f"Context from PDF:\n{context}\n\nQuestion: {question}"


def _content_to_text(content: Any) -> str:
    # Gemini may answer with a list of content parts instead of a plain string
    if isinstance(content, str):
        return content
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


class ChatService:
    """Service for generating chat responses using LLM."""
    
    def __init__(self, llm: Optional[BaseChatModel] = None):
        """Initialize the chat service."""
        self.llm = llm if llm is not None else self._initialize_llm()
    
    def _initialize_llm(self) -> ChatGoogleGenerativeAI:
        """Initialize the language model."""
        try:
            llm = ChatGoogleGenerativeAI(
                model=settings.google_chat_model,
                google_api_key=settings.google_api_key,
                temperature=settings.google_temperature
            )
            
            log_processing_info("LLM initialized", {
                "model": settings.google_chat_model,
                "temperature": settings.google_temperature
            })
            
            return llm
            
        except Exception as e:
            error_info = handle_processing_error("llm_init", e)
            raise ServiceError(f"Failed to initialize LLM: {error_info}") from e
    
    @measure_time
    def generate_response(self, question: str, documents: List[Document]) -> str:
        """
        Answer a question from the retrieved documents.
        
        The model is called even when nothing was retrieved; it then sees an
        empty context block.
        
        Args:
            question: User's question
            documents: Retrieved chunks, most similar first
            
        Returns:
            The model's answer text
        """
        context = build_context(documents)
        
        try:
            response = self.llm.invoke([
                SystemMessage(content=SYSTEM_PROMPT),
                HumanMessage(content=build_user_prompt(question, context)),
            ])
            answer = _content_to_text(response.content)
            
            log_processing_info("Response generated", {
                "question_length": len(question),
                "context_length": len(context),
                "documents_count": len(documents),
                "answer_length": len(answer)
            })
            
            return answer
            
        except Exception as e:
            error_info = handle_processing_error(
                "response_generation",
                e,
                {"documents_count": len(documents)}
            )
            raise ServiceError(f"Failed to generate response: {error_info}") from e
    
    def health_check(self) -> Dict[str, Any]:
        """
        Perform health check on the chat service.
        
        Returns:
            Dictionary with health status information
        """
        try:
            test_response = self.llm.invoke("Hello, are you working?")
            
            return {
                "status": "healthy",
                "model": settings.google_chat_model,
                "test_response_length": len(_content_to_text(test_response.content))
            }
            
        except Exception as e:
            handle_processing_error("chat_health_check", e)
            return {
                "status": "unhealthy",
                "error": str(e),
                "model": settings.google_chat_model
            }
