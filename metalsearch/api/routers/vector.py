"""
Vector Store Endpoint
POST /vector - Action-dispatched access to the generic embedding store and
chat history.
"""

import logging
from typing import Any, Dict
from fastapi import APIRouter, Body, Depends, status
from pydantic import ValidationError as PydanticValidationError

from ..config import get_settings, APISettings
from ..dependencies import get_vector_store, get_request_id
from ..errors import INTERNAL_ERROR, InvalidRequestError, SearchError
from ..models.vector import (
    CreateSessionAction,
    GetHistoryAction,
    SearchAction,
    StoreAction,
    StoreMessageAction,
    VectorAction,
    VectorResponse,
    vector_action_adapter,
)
from ...search import VectorStore, ValidationError, PersistenceError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["vector"])

INVALID_ACTION = "Invalid action"

_TAG_ERRORS = {"union_tag_invalid", "union_tag_not_found"}


def parse_action(body: Dict[str, Any]) -> VectorAction:
    """
    Parse the request body into its tagged action variant.

    Raises:
        InvalidRequestError: Unknown action or malformed data
    """
    try:
        return vector_action_adapter.validate_python(body)
    except PydanticValidationError as e:
        errors = e.errors()
        if any(error.get("type") in _TAG_ERRORS for error in errors):
            raise InvalidRequestError(INVALID_ACTION, details={"action": body.get("action")})

        parts = []
        for error in errors:
            # loc is (action, "data", field, ...); drop the variant tag
            loc = [str(part) for part in error.get("loc", ())[1:]]
            parts.append(f"{'.'.join(loc)}: {error.get('msg')}" if loc else str(error.get("msg")))
        raise InvalidRequestError("; ".join(parts) or "Invalid request data")


def dispatch(action: VectorAction, store: VectorStore, settings: APISettings) -> Any:
    """Run one action against the store and return its data payload."""
    if isinstance(action, StoreAction):
        return store.store(action.data.text, action.data.embedding, action.data.metadata)

    if isinstance(action, SearchAction):
        limit = action.data.limit if action.data.limit is not None else settings.vector_store_limit
        threshold = (
            action.data.threshold
            if action.data.threshold is not None
            else settings.vector_store_threshold
        )
        results = store.similarity_search(action.data.query_embedding, limit, threshold)
        return [result.to_dict() for result in results]

    if isinstance(action, StoreMessageAction):
        return store.store_message(
            action.data.session_id,
            action.data.role,
            action.data.content,
            action.data.embedding,
        )

    if isinstance(action, GetHistoryAction):
        return store.get_chat_history(action.data.session_id)

    if isinstance(action, CreateSessionAction):
        return store.create_chat_session(action.data.title)

    raise TypeError(f"Unhandled vector action: {type(action).__name__}")


@router.post("/vector", response_model=VectorResponse, status_code=status.HTTP_200_OK)
def vector_action(
    body: Dict[str, Any] = Body(...),
    store: VectorStore = Depends(get_vector_store),
    settings: APISettings = Depends(get_settings),
    request_id: str = Depends(get_request_id),
) -> VectorResponse:
    """
    Execute a vector store action.

    Actions: store, search, store-message, get-history, create-session.
    """
    action = parse_action(body)

    logger.info(f"Vector action: {action.action}", extra={"request_id": request_id})

    try:
        data = dispatch(action, store, settings)
    except ValidationError as e:
        raise InvalidRequestError(e.message, details={"field": e.field, "request_id": request_id})
    except PersistenceError as e:
        raise SearchError(INTERNAL_ERROR, details={"error": e.message, "request_id": request_id})

    return VectorResponse(success=True, data=data)
