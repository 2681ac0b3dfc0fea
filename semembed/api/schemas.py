"""Request and response models for the OpenAI-compatible API."""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field


class EmbeddingRequest(BaseModel):
    """Request model for ``POST /v1/embeddings``."""

    input: Union[str, List[str]] = Field(..., description="Text or ordered list of texts to embed")
    model: Optional[str] = Field(None, description="Advisory only; the loaded model is always used")
    encoding_format: Literal["float", "base64"] = Field("float", description="Wire format of each embedding")


class EmbeddingData(BaseModel):
    """A single embedding, tagged with its input position."""

    object: Literal["embedding"] = "embedding"
    embedding: Union[List[float], str] = Field(..., description="Float list, or base64 of little-endian float32")
    index: int = Field(..., description="Position of the text in the normalized input")


class EmbeddingUsage(BaseModel):
    """Approximate (whitespace-delimited) token usage."""

    prompt_tokens: int
    total_tokens: int


class EmbeddingResponse(BaseModel):
    """Response model for ``POST /v1/embeddings``."""

    object: Literal["list"] = "list"
    data: List[EmbeddingData]
    model: str
    usage: EmbeddingUsage


class HealthResponse(BaseModel):
    status: str
    model: str


class ModelsResponse(BaseModel):
    models: List[str]


class ErrorDetail(BaseModel):
    message: str
    type: str


class ErrorResponse(BaseModel):
    error: ErrorDetail
