"""
Vector Store Models
Tagged request variants for the generic vector store endpoint.

Each action is its own model; the "action" field selects the variant, so an
unknown action is rejected while parsing.
"""

from typing import Annotated, Optional, List, Dict, Any, Union, Literal
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class StoreData(BaseModel):
    text: str = Field(..., min_length=1)
    embedding: List[float]
    metadata: Optional[Dict[str, Any]] = None


class SearchData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query_embedding: List[float] = Field(..., alias="queryEmbedding")
    limit: Optional[int] = Field(None, ge=0)
    threshold: Optional[float] = None


class StoreMessageData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., alias="sessionId")
    role: str
    content: str
    embedding: Optional[List[float]] = None


class GetHistoryData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., alias="sessionId")


class CreateSessionData(BaseModel):
    title: Optional[str] = Field(None, max_length=255)


class StoreAction(BaseModel):
    action: Literal["store"]
    data: StoreData


class SearchAction(BaseModel):
    action: Literal["search"]
    data: SearchData


class StoreMessageAction(BaseModel):
    action: Literal["store-message"]
    data: StoreMessageData


class GetHistoryAction(BaseModel):
    action: Literal["get-history"]
    data: GetHistoryData


class CreateSessionAction(BaseModel):
    action: Literal["create-session"]
    data: CreateSessionData = Field(default_factory=CreateSessionData)


VectorAction = Annotated[
    Union[StoreAction, SearchAction, StoreMessageAction, GetHistoryAction, CreateSessionAction],
    Field(discriminator="action"),
]

vector_action_adapter = TypeAdapter(VectorAction)


class VectorResponse(BaseModel):
    """Successful vector store response."""

    success: bool = True
    data: Any = None
