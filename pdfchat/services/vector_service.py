"""
Vector database service for managing embeddings and namespaced similarity search.

All users share one Qdrant collection; every point carries its owner in the
``metadata.namespace`` payload field and every read, count and delete is
filtered on it.
"""

from typing import List, Dict, Any, Optional
from uuid import uuid4
from qdrant_client import QdrantClient
from qdrant_client.models import (
    Distance,
    FieldCondition,
    Filter,
    FilterSelector,
    MatchValue,
    PayloadSchemaType,
    VectorParams,
)
from langchain_qdrant import QdrantVectorStore
from langchain_google_genai import GoogleGenerativeAIEmbeddings
from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings

from ..config import settings
from ..utils import (
    measure_time,
    log_processing_info,
    handle_processing_error,
    ServiceError
)
import logging

logger = logging.getLogger(__name__)

NAMESPACE_KEY = "metadata.namespace"


def namespace_filter(namespace: str) -> Filter:
    """Build a payload filter matching a single namespace."""
    return Filter(must=[FieldCondition(key=NAMESPACE_KEY, match=MatchValue(value=namespace))])


class VectorService:
    """Service for managing vector database operations."""
    
    def __init__(
        self,
        client: Optional[QdrantClient] = None,
        embeddings: Optional[Embeddings] = None,
        collection_name: Optional[str] = None
    ):
        """Initialize the vector service."""
        self.client = client if client is not None else self._initialize_qdrant_client()
        self.embeddings = embeddings if embeddings is not None else self._initialize_embeddings()
        self.collection_name = collection_name or settings.qdrant_collection
        self._store: Optional[QdrantVectorStore] = None
    
    def _initialize_qdrant_client(self) -> QdrantClient:
        """Initialize Qdrant client."""
        try:
            if settings.qdrant_api_key:
                client = QdrantClient(
                    url=settings.qdrant_url,
                    api_key=settings.qdrant_api_key
                )
            else:
                client = QdrantClient(url=settings.qdrant_url)
            
            log_processing_info("Qdrant client initialized", {
                "url": settings.qdrant_url,
                "has_api_key": bool(settings.qdrant_api_key)
            })
            
            return client
            
        except Exception as e:
            error_info = handle_processing_error("qdrant_client_init", e)
            raise ServiceError(f"Failed to initialize Qdrant client: {error_info}") from e
    
    def _initialize_embeddings(self) -> GoogleGenerativeAIEmbeddings:
        """Initialize Google Generative AI embeddings."""
        try:
            embeddings = GoogleGenerativeAIEmbeddings(
                model=settings.google_embedding_model,
                google_api_key=settings.google_api_key
            )
            
            log_processing_info("Embeddings initialized", {
                "model": settings.google_embedding_model
            })
            
            return embeddings
            
        except Exception as e:
            error_info = handle_processing_error("embeddings_init", e)
            raise ServiceError(f"Failed to initialize embeddings: {error_info}") from e
    
    def collection_exists(self) -> bool:
        return self.client.collection_exists(self.collection_name)
    
    def ensure_collection(self) -> bool:
        """
        Create the shared collection if it does not exist yet.
        
        Returns:
            True if created, False if it already existed
        """
        if self.collection_exists():
            return False
        
        try:
            self.client.create_collection(
                collection_name=self.collection_name,
                vectors_config=VectorParams(
                    size=settings.vector_dimension,
                    distance=Distance.COSINE
                )
            )
        except Exception:
            # Another request created it between the check and the create
            if self.collection_exists():
                return False
            raise
        
        self.client.create_payload_index(
            collection_name=self.collection_name,
            field_name=NAMESPACE_KEY,
            field_schema=PayloadSchemaType.KEYWORD
        )
        
        log_processing_info("Collection created", {
            "collection_name": self.collection_name,
            "vector_dimension": settings.vector_dimension
        })
        
        return True
    
    def _vector_store(self) -> QdrantVectorStore:
        # Built once; construction validates the collection with an embedding call
        if self._store is None:
            self._store = QdrantVectorStore(
                client=self.client,
                collection_name=self.collection_name,
                embedding=self.embeddings
            )
        return self._store
    
    @measure_time
    def upsert_documents(self, documents: List[Document], namespace: str) -> int:
        """
        Embed documents and store them under a namespace.
        
        Args:
            documents: Chunked Document objects
            namespace: Namespace (user ID) that owns the vectors
            
        Returns:
            Number of vectors written
        """
        try:
            self.ensure_collection()
            
            for doc in documents:
                doc.metadata["namespace"] = namespace
            
            document_ids = [str(uuid4()) for _ in range(len(documents))]
            self._vector_store().add_documents(documents=documents, ids=document_ids)
            
            log_processing_info("Documents stored successfully", {
                "collection_name": self.collection_name,
                "namespace": namespace,
                "document_count": len(documents)
            })
            
            return len(document_ids)
            
        except Exception as e:
            error_info = handle_processing_error(
                "document_storage",
                e,
                {
                    "namespace": namespace,
                    "document_count": len(documents)
                }
            )
            raise ServiceError(f"Failed to store documents: {error_info}") from e
    
    @measure_time
    def search_similar_documents(
        self, 
        query: str, 
        namespace: str, 
        k: int = None
    ) -> List[Document]:
        """
        Search for the documents of a namespace most similar to a query.
        
        A namespace that holds nothing yields an empty list.
        """
        if k is None:
            k = settings.similarity_search_k
        
        try:
            if not self.collection_exists():
                log_processing_info("Similarity search skipped, collection missing", {
                    "collection_name": self.collection_name,
                    "namespace": namespace
                })
                return []
            
            similar_docs = self._vector_store().similarity_search(
                query,
                k=k,
                filter=namespace_filter(namespace)
            )
            
            log_processing_info("Similarity search completed", {
                "namespace": namespace,
                "query_length": len(query),
                "results_count": len(similar_docs),
                "k": k
            })
            
            return similar_docs
            
        except Exception as e:
            error_info = handle_processing_error(
                "similarity_search",
                e,
                {
                    "namespace": namespace,
                    "k": k
                }
            )
            raise ServiceError(f"Failed to search similar documents: {error_info}") from e
    
    def count_vectors(self, namespace: str) -> int:
        """Number of vectors stored under a namespace."""
        if not self.collection_exists():
            return 0
        
        result = self.client.count(
            collection_name=self.collection_name,
            count_filter=namespace_filter(namespace),
            exact=True
        )
        return result.count
    
    def namespace_exists(self, namespace: str) -> bool:
        return self.count_vectors(namespace) > 0
    
    def delete_namespace(self, namespace: str) -> None:
        """Delete every vector stored under a namespace."""
        try:
            self.client.delete(
                collection_name=self.collection_name,
                points_selector=FilterSelector(filter=namespace_filter(namespace))
            )
            
            log_processing_info("Namespace deleted", {
                "collection_name": self.collection_name,
                "namespace": namespace
            })
            
        except Exception as e:
            error_info = handle_processing_error(
                "namespace_deletion",
                e,
                {"namespace": namespace}
            )
            raise ServiceError(f"Failed to delete namespace {namespace}: {error_info}") from e
    
    def health_check(self) -> Dict[str, Any]:
        """
        Perform health check on the vector service.
        
        Returns:
            Dictionary with health status information
        """
        try:
            collections = self.client.get_collections()
            
            return {
                "status": "healthy",
                "collection": self.collection_name,
                "collections_count": len(collections.collections)
            }
            
        except Exception as e:
            handle_processing_error("health_check", e)
            return {
                "status": "unhealthy",
                "error": str(e),
                "collection": self.collection_name
            }
