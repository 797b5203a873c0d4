"""
Vector Store
Generic text + embedding store with thresholded similarity search, plus a
session-scoped chat message log sharing the same database.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Union

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db.models import ChatMessage, ChatSession, Embedding, MessageRole, EMBEDDING_DIMENSION
from ..db.vectors import as_embedding, to_vector_literal
from .exceptions import PersistenceError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5
DEFAULT_THRESHOLD = 0.7

SIMILARITY_SEARCH_SQL = text("""
    SELECT
        id,
        text,
        metadata,
        1 - (embedding <=> CAST(:query_embedding AS vector)) AS similarity
    FROM embeddings
    WHERE 1 - (embedding <=> CAST(:query_embedding AS vector)) > :threshold
    ORDER BY embedding <=> CAST(:query_embedding AS vector) ASC, id ASC
    LIMIT :limit
""")


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass
class VectorSearchResult:
    """Stored text ranked by similarity to a query embedding."""

    id: str
    text: str
    similarity: float
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "text": self.text,
            "similarity": self.similarity,
            "metadata": self.metadata,
        }


def _embedding_to_dict(row: Embedding) -> dict:
    return {
        "id": str(row.id),
        "text": row.text,
        "metadata": row.embedding_metadata or {},
        "createdAt": _isoformat(row.created_at),
    }


def _session_to_dict(row: ChatSession) -> dict:
    return {
        "id": str(row.id),
        "title": row.title,
        "createdAt": _isoformat(row.created_at),
        "updatedAt": _isoformat(row.updated_at),
    }


def _message_to_dict(row: ChatMessage) -> dict:
    return {
        "id": str(row.id),
        "sessionId": str(row.session_id),
        "role": row.role.value if isinstance(row.role, MessageRole) else row.role,
        "content": row.content,
        "hasEmbedding": row.embedding is not None,
        "createdAt": _isoformat(row.created_at),
    }


class VectorStore:
    """
    Domain-agnostic embedding store backed by pgvector.

    Unlike product vector search, similarity search here always applies a
    threshold (default 0.7).
    """

    def __init__(self, session: Session, dimension: int = EMBEDDING_DIMENSION):
        """
        Initialize vector store.

        Args:
            session: Database session
            dimension: Required embedding dimension
        """
        self.session = session
        self.dimension = dimension

    def _validate_embedding(self, embedding: Sequence[float], name: str = "embedding"):
        try:
            return as_embedding(embedding, self.dimension)
        except ValueError as e:
            raise ValidationError(f"Invalid {name}: {e}", field=name)

    def _commit(self, action: str) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Vector store {action} failed: {e}", exc_info=True)
            raise PersistenceError(f"Failed to {action}") from e

    def store(
        self,
        text_value: str,
        embedding: Sequence[float],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> dict:
        """
        Store text with its embedding.

        Returns:
            Stored row as dict (without the embedding)
        """
        if not text_value or not text_value.strip():
            raise ValidationError("text is required", field="text")

        vector = self._validate_embedding(embedding)

        row = Embedding(text=text_value, embedding=vector, embedding_metadata=metadata or {})
        self.session.add(row)
        self._commit("store embedding")
        self.session.refresh(row)

        logger.info(f"Stored embedding {row.id}")

        return _embedding_to_dict(row)

    def similarity_search(
        self,
        query_embedding: Sequence[float],
        limit: int = DEFAULT_LIMIT,
        threshold: float = DEFAULT_THRESHOLD,
    ) -> List[VectorSearchResult]:
        """
        Find stored texts whose similarity to the query exceeds threshold.

        Args:
            query_embedding: Query vector
            limit: Maximum number of results
            threshold: Minimum similarity (exclusive)

        Returns:
            Results ordered by distance ascending (most similar first)
        """
        vector = self._validate_embedding(query_embedding, "queryEmbedding")

        if limit < 0:
            raise ValidationError("limit cannot be negative", field="limit")
        if limit == 0:
            return []

        params = {
            "query_embedding": to_vector_literal(vector),
            "threshold": float(threshold),
            "limit": int(limit),
        }

        try:
            rows = self.session.execute(SIMILARITY_SEARCH_SQL, params).mappings().all()
        except SQLAlchemyError as e:
            logger.error(f"Similarity search failed: {e}", exc_info=True)
            raise PersistenceError("Similarity search failed") from e

        logger.info(f"Similarity search: {len(rows)} results above threshold {threshold}")

        return [
            VectorSearchResult(
                id=str(row["id"]),
                text=row["text"],
                similarity=float(row["similarity"]),
                metadata=row["metadata"] or {},
            )
            for row in rows
        ]

    def create_chat_session(self, title: Optional[str] = None) -> dict:
        """Create a new chat session."""
        chat_session = ChatSession(title=title)
        self.session.add(chat_session)
        self._commit("create chat session")
        self.session.refresh(chat_session)

        logger.info(f"Created chat session {chat_session.id}")

        return _session_to_dict(chat_session)

    def store_message(
        self,
        session_id: Union[str, uuid.UUID],
        role: Union[str, MessageRole],
        content: str,
        embedding: Optional[Sequence[float]] = None,
    ) -> dict:
        """
        Append a message to a chat session.

        Raises:
            ValidationError: If the session does not exist or input is malformed
        """
        chat_session_id = self._parse_session_id(session_id)
        message_role = self._parse_role(role)

        if content is None or not content.strip():
            raise ValidationError("content is required", field="content")

        vector = self._validate_embedding(embedding) if embedding is not None else None

        try:
            chat_session = self.session.get(ChatSession, chat_session_id)
        except SQLAlchemyError as e:
            logger.error(f"Chat session lookup failed: {e}", exc_info=True)
            raise PersistenceError("Failed to look up chat session") from e

        if chat_session is None:
            raise ValidationError(f"Chat session not found: {session_id}", field="sessionId")

        message = ChatMessage(
            session_id=chat_session_id,
            role=message_role,
            content=content,
            embedding=vector,
        )
        self.session.add(message)
        self._commit("store message")
        self.session.refresh(message)

        return _message_to_dict(message)

    def get_chat_history(self, session_id: Union[str, uuid.UUID]) -> List[dict]:
        """
        Get all messages of a session, oldest first.

        An unknown session yields an empty list.
        """
        chat_session_id = self._parse_session_id(session_id)

        statement = (
            select(ChatMessage)
            .where(ChatMessage.session_id == chat_session_id)
            .order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc())
        )

        try:
            messages = self.session.execute(statement).scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Chat history query failed: {e}", exc_info=True)
            raise PersistenceError("Failed to load chat history") from e

        return [_message_to_dict(message) for message in messages]

    @staticmethod
    def _parse_session_id(session_id: Union[str, uuid.UUID]) -> uuid.UUID:
        if isinstance(session_id, uuid.UUID):
            return session_id
        try:
            return uuid.UUID(str(session_id))
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid sessionId: {session_id}", field="sessionId")

    @staticmethod
    def _parse_role(role: Union[str, MessageRole]) -> MessageRole:
        if isinstance(role, MessageRole):
            return role
        try:
            return MessageRole(str(role).strip().upper())
        except ValueError:
            allowed = ", ".join(r.value.lower() for r in MessageRole)
            raise ValidationError(f"Invalid role '{role}'. Expected one of: {allowed}", field="role")
