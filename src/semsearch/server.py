"""
FastAPI server exposing document preparation, indexing and search.

A single ``SearchSession`` is created on startup and shared by all requests.
"""

from contextlib import asynccontextmanager
from typing import Any, Callable, Literal

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .config import SearchSettings
from .errors import (
    CacheStoreError,
    IndexingInProgressError,
    IngestError,
    RequestTimeoutError,
    SemsearchError,
)
from .models import Document
from .session import SearchSession


class DocumentsRequest(BaseModel):
    """Request model for document preparation."""

    source_mode: Literal["builtin", "paste", "upload"] = "builtin"
    content: str | None = None
    documents: list[Document] | None = None


class SearchRequest(BaseModel):
    """Request model for search queries."""

    query: str
    top_k: int | None = Field(default=None, gt=0)
    min_score: float | None = None


def _session_status(session: SearchSession) -> dict[str, Any]:
    return {
        "model_id": session.settings.model_id,
        "is_indexing": session.is_indexing,
        "total_docs": session.total_docs,
        "indexed_count": session.indexed_count,
        "progress_percent": session.progress_percent,
        "model_load_ms": session.model_load_ms,
        "average_index_ms": session.average_index_ms,
        "query_time_ms": session.query_time_ms,
        "cache_count": session.cache_count,
    }


def create_app(
    session_factory: Callable[[], SearchSession] | None = None,
) -> FastAPI:
    """Build the API; the session is created when the app starts."""
    factory = session_factory or (lambda: SearchSession(SearchSettings.from_env()))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        session = factory()
        await session.start()
        app.state.session = session
        try:
            yield
        finally:
            session.close()

    app = FastAPI(
        title="semsearch",
        description="Semantic document search with cached embeddings",
        lifespan=lifespan,
    )

    @app.get("/api/status")
    async def status(request: Request):
        """Return indexing progress and latency figures."""
        return _session_status(request.app.state.session)

    @app.post("/api/documents")
    async def prepare_documents(request: Request, body: DocumentsRequest):
        """Parse and normalise documents, replacing the current index."""
        session: SearchSession = request.app.state.session
        try:
            docs = session.prepare_documents(
                body.source_mode, body.content, documents=body.documents
            )
        except IngestError as exc:
            return JSONResponse({"error": str(exc)}, status_code=400)
        except IndexingInProgressError as exc:
            return JSONResponse({"error": str(exc)}, status_code=409)
        return {
            "total_docs": len(docs),
            "documents": [doc.model_dump() for doc in docs],
        }

    @app.post("/api/index")
    async def build_index(request: Request):
        """Index the prepared documents."""
        session: SearchSession = request.app.state.session
        try:
            result = await session.index_documents()
        except RequestTimeoutError as exc:
            return JSONResponse({"error": str(exc)}, status_code=504)
        except CacheStoreError as exc:
            return JSONResponse({"error": str(exc)}, status_code=503)
        except SemsearchError as exc:
            return JSONResponse({"error": str(exc)}, status_code=500)
        if result is None:
            return {"started": False, **_session_status(session)}
        return {
            "started": True,
            "indexed_count": result.indexed_count,
            "total_docs": result.total_docs,
            "cache_hits": result.cache_hits,
            "cache_misses": result.cache_misses,
            "average_latency_ms": result.average_latency_ms,
            "cache_count": result.cache_count,
        }

    @app.post("/api/search")
    async def search_index(request: Request, body: SearchRequest):
        """Search the index and return ranked, highlighted hits."""
        session: SearchSession = request.app.state.session
        try:
            response = await session.run_search(
                body.query, top_k=body.top_k, min_score=body.min_score
            )
        except RequestTimeoutError as exc:
            return JSONResponse({"error": str(exc)}, status_code=504)
        except SemsearchError as exc:
            return JSONResponse({"error": str(exc)}, status_code=500)
        return {
            "query": response.query,
            "latency_ms": response.latency_ms,
            "results": [
                {
                    "id": result.id,
                    "title": result.title,
                    "text": result.text,
                    "tags": result.tags,
                    "score": result.score,
                    "highlighted": result.highlighted,
                }
                for result in response.results
            ],
        }

    return app


app = create_app()


def run_server(host: str = "127.0.0.1", port: int = 8000):
    """Run the FastAPI server."""
    import uvicorn

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
