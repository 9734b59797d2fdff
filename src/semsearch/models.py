from pydantic import BaseModel, Field
from typing import TypeAlias, Literal, Any

MessageKind: TypeAlias = Literal[
    "init", "embed", "embedResult", "embedError", "modelReady"
]


class Document(BaseModel):
    """A searchable document as supplied by ingestion"""

    id: str = Field(description="Identifier, unique within a batch")
    title: str = Field(default="", description="Display title")
    text: str = Field(default="", description="Document body")
    tags: list[str] = Field(default_factory=list, description="Ordered tags")

    def with_text(self, text: str) -> "Document":
        return self.model_copy(update={"text": text})

    def metadata(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "tags": list(self.tags)}


class InitRequest(BaseModel):
    """Message asking the worker to load a model ahead of the first request"""

    kind: Literal["init"] = "init"
    model_id: str = Field(description="Model to load")


class EmbedRequest(BaseModel):
    """Message asking the worker to embed one text"""

    kind: Literal["embed"] = "embed"
    id: str = Field(description="Request id used to correlate the response")
    text: str = Field(description="Text to embed")
    model_id: str = Field(description="Model identity to embed with")


class EmbedPayload(BaseModel):
    embedding: list[float]


class EmbedResult(BaseModel):
    """Worker response carrying the embedding for one request"""

    kind: Literal["embedResult"] = "embedResult"
    id: str
    payload: EmbedPayload


class EmbedError(BaseModel):
    """Worker response reporting that a request could not be embedded"""

    kind: Literal["embedError"] = "embedError"
    id: str
    error: str


class ModelReadyPayload(BaseModel):
    load_ms: int


class ModelReady(BaseModel):
    """Unsolicited worker message reporting model warm-up latency"""

    kind: Literal["modelReady"] = "modelReady"
    model_id: str
    payload: ModelReadyPayload


WorkerRequest: TypeAlias = InitRequest | EmbedRequest
WorkerResponse: TypeAlias = EmbedResult | EmbedError | ModelReady
