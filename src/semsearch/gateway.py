"""
Inference gateway over a single background embedding worker.

Requests are correlated to responses purely by request id: every call to
``InferenceGateway.embed`` registers a future in a pending table and posts an
``embed`` message; the worker answers with ``embedResult`` (or ``embedError``)
carrying the same id, and the gateway pops and resolves the matching future.
Responses may arrive in any order.
"""

from __future__ import annotations

import asyncio
import logging
import queue
import threading
import time
import uuid
from typing import Any, Callable, Protocol

import numpy as np

from .errors import InferenceError, RequestTimeoutError
from .models import (
    EmbedError,
    EmbedPayload,
    EmbedRequest,
    EmbedResult,
    InitRequest,
    ModelReady,
    ModelReadyPayload,
    WorkerRequest,
    WorkerResponse,
)

logger = logging.getLogger(__name__)

Listener = Callable[[WorkerResponse], None]


class Embedder(Protocol):
    def embed(self, text: str) -> Any: ...


class Worker(Protocol):
    """Message-passing endpoint the gateway talks to."""

    def set_listener(self, listener: Listener) -> None: ...

    def post(self, message: WorkerRequest) -> None: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...


class EmbeddingWorker:
    """
    Single background thread that performs all embedding inference.

    The embedder is created lazily on first use and memoised by model id;
    a request for a different model id rebuilds it and announces the new
    load time with a ``modelReady`` message.
    """

    def __init__(self, embedder_factory: Callable[[str], Embedder]) -> None:
        self._embedder_factory = embedder_factory
        self._inbox: queue.Queue[WorkerRequest | None] = queue.Queue()
        self._listener: Listener | None = None
        self._thread: threading.Thread | None = None
        self._embedder: Embedder | None = None
        self._embedder_model_id: str | None = None

    def set_listener(self, listener: Listener) -> None:
        self._listener = listener

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._thread = threading.Thread(
            target=self._run, name="semsearch-embedding-worker", daemon=True
        )
        self._thread.start()

    def post(self, message: WorkerRequest) -> None:
        self._inbox.put(message)

    def stop(self, timeout: float | None = 5.0) -> None:
        if self._thread is None:
            return
        self._inbox.put(None)
        self._thread.join(timeout=timeout)
        self._thread = None

    def _run(self) -> None:
        while True:
            message = self._inbox.get()
            if message is None:
                return
            if isinstance(message, InitRequest):
                try:
                    self._load(message.model_id)
                except Exception:
                    logger.exception("Failed to load embedding model %s", message.model_id)
            elif isinstance(message, EmbedRequest):
                self._emit(self._embed(message))

    def _load(self, model_id: str) -> Embedder:
        if self._embedder is not None and self._embedder_model_id == model_id:
            return self._embedder
        start = time.perf_counter()
        embedder = self._embedder_factory(model_id)
        load_ms = round((time.perf_counter() - start) * 1000)
        self._embedder = embedder
        self._embedder_model_id = model_id
        self._emit(
            ModelReady(model_id=model_id, payload=ModelReadyPayload(load_ms=load_ms))
        )
        return embedder

    def _embed(self, message: EmbedRequest) -> EmbedResult | EmbedError:
        try:
            embedder = self._load(message.model_id)
            vector = np.asarray(embedder.embed(message.text), dtype=np.float32)
        except Exception as exc:
            logger.exception("Embedding request %s failed", message.id)
            return EmbedError(id=message.id, error=str(exc) or type(exc).__name__)
        return EmbedResult(id=message.id, payload=EmbedPayload(embedding=vector.tolist()))

    def _emit(self, message: WorkerResponse) -> None:
        if self._listener is not None:
            self._listener(message)


class InferenceGateway:
    """Async request/response facade over one embedding worker."""

    def __init__(
        self,
        worker: Worker,
        *,
        model_id: str,
        timeout: float | None = None,
    ) -> None:
        self.model_id = model_id
        self.timeout = timeout
        self.model_load_ms: int | None = None
        self._worker = worker
        self._pending: dict[str, asyncio.Future[EmbedPayload]] = {}
        self._loop: asyncio.AbstractEventLoop | None = None
        self._started = False
        self._worker.set_listener(self._on_worker_message)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def start(self) -> None:
        if not self._started:
            self._worker.start()
            self._started = True

    def close(self) -> None:
        if self._started:
            self._worker.stop()
            self._started = False

    async def warm_up(self, model_id: str | None = None) -> None:
        """Ask the worker to load the model before the first embed request."""
        self._bind_loop()
        self.start()
        self._worker.post(InitRequest(model_id=model_id or self.model_id))

    async def embed(self, text: str, model_id: str | None = None) -> np.ndarray:
        """Embed ``text`` on the worker and return a float32 vector."""
        loop = self._bind_loop()
        self.start()
        request_id = uuid.uuid4().hex
        future: asyncio.Future[EmbedPayload] = loop.create_future()
        self._pending[request_id] = future
        self._worker.post(
            EmbedRequest(id=request_id, text=text, model_id=model_id or self.model_id)
        )
        try:
            if self.timeout is None:
                payload = await future
            else:
                try:
                    payload = await asyncio.wait_for(future, self.timeout)
                except asyncio.TimeoutError:
                    raise RequestTimeoutError(request_id, self.timeout) from None
        finally:
            self._pending.pop(request_id, None)
        return np.asarray(payload.embedding, dtype=np.float32)

    def handle_message(self, message: WorkerResponse) -> None:
        """Route one worker message. Must run on the gateway's event loop."""
        if isinstance(message, ModelReady):
            self.model_load_ms = message.payload.load_ms
            logger.info(
                "Embedding model %s ready in %d ms",
                message.model_id,
                message.payload.load_ms,
            )
            return

        future = self._pending.pop(message.id, None)
        if future is None:
            logger.debug("Dropping response for unknown request %s", message.id)
            return
        if future.done():
            return
        if isinstance(message, EmbedResult):
            future.set_result(message.payload)
        else:
            future.set_exception(InferenceError(message.id, message.error))

    def _bind_loop(self) -> asyncio.AbstractEventLoop:
        loop = asyncio.get_running_loop()
        self._loop = loop
        return loop

    def _on_worker_message(self, message: WorkerResponse) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            logger.debug("No event loop to deliver %s message", message.kind)
            return
        try:
            loop.call_soon_threadsafe(self.handle_message, message)
        except RuntimeError:
            logger.debug("Event loop closed before %s message was delivered", message.kind)
