"""Queue-fed analysis worker.

Health scoring and mesh building are CPU-bound and independent per post, so
they run off the caller's control flow: requests go onto an
``asyncio.Queue``, a fixed number of consumer tasks pick them up and run
:func:`handle_message` in a thread pool, and each caller awaits its own
future.  Requests share nothing; a caller that loses interest simply stops
awaiting.

Usage::

    async with AnalysisWorker(concurrency=4) as worker:
        response = await worker.submit(AnalyzeHealthRequest(...))
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from types import TracebackType
from typing import Iterable, Optional

import structlog

from contentmesh.analysis.health import analyze_health
from contentmesh.analysis.mesh import build_mesh
from contentmesh.analysis.models import Document, HealthResult
from contentmesh.config import settings
from contentmesh.worker.messages import (
    AnalyzeHealthRequest,
    BuildMeshRequest,
    HealthResultResponse,
    MeshResultResponse,
    Request,
    Response,
)

logger = structlog.get_logger(__name__)

_QueueItem = Optional[tuple[Request, "asyncio.Future[Response]"]]


def handle_message(request: Request) -> Response:
    """Run one request synchronously and return its tagged response.

    Raises:
        ValueError: If *request* is not a known request type.
    """
    if isinstance(request, AnalyzeHealthRequest):
        result = analyze_health(request.id, request.content, request.modified, request.site_url)
        return HealthResultResponse(result=result)

    if isinstance(request, BuildMeshRequest):
        return MeshResultResponse(nodes=tuple(build_mesh(request.documents)))

    raise ValueError(f"Unknown request: {type(request).__name__}")


class AnalysisWorker:
    """A pool of consumer tasks fed by one request queue."""

    def __init__(self, concurrency: int | None = None) -> None:
        self.concurrency = max(1, concurrency or settings.workers)
        self._queue: asyncio.Queue[_QueueItem] | None = None
        self._tasks: list[asyncio.Task[None]] = []
        self._executor: ThreadPoolExecutor | None = None

    async def __aenter__(self) -> AnalysisWorker:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def running(self) -> bool:
        return bool(self._tasks)

    async def start(self) -> None:
        if self.running:
            return
        self._queue = asyncio.Queue()
        self._executor = ThreadPoolExecutor(
            max_workers=self.concurrency, thread_name_prefix="contentmesh"
        )
        self._tasks = [asyncio.create_task(self._consume()) for _ in range(self.concurrency)]
        logger.debug("worker_started", concurrency=self.concurrency)

    async def close(self) -> None:
        """Drain queued requests, then stop every consumer."""
        if not self.running or self._queue is None:
            return
        for _ in self._tasks:
            await self._queue.put(None)
        await asyncio.gather(*self._tasks)
        self._tasks = []
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        logger.debug("worker_stopped")

    async def submit(self, request: Request) -> Response:
        """Queue *request* and wait for its response.

        Raises:
            RuntimeError: If the worker has not been started.
            ValueError: Propagated from :func:`handle_message`.
        """
        if not self.running or self._queue is None:
            raise RuntimeError("AnalysisWorker is not running")
        future: asyncio.Future[Response] = asyncio.get_running_loop().create_future()
        await self._queue.put((request, future))
        return await future

    async def _consume(self) -> None:
        assert self._queue is not None
        loop = asyncio.get_running_loop()
        while True:
            item = await self._queue.get()
            if item is None:
                return
            request, future = item
            if future.done():
                continue  # the caller gave up
            try:
                response = await loop.run_in_executor(self._executor, handle_message, request)
            except Exception as exc:
                if not future.done():
                    future.set_exception(exc)
            else:
                if not future.done():
                    future.set_result(response)


async def analyze_documents(
    documents: Iterable[Document],
    site_url: str,
    concurrency: int | None = None,
) -> list[HealthResult]:
    """Score *documents* concurrently.  Results keep the input order."""
    requests = [
        AnalyzeHealthRequest(id=d.id, content=d.content, modified=d.modified, site_url=site_url)
        for d in documents
    ]
    async with AnalysisWorker(concurrency) as worker:
        responses = await asyncio.gather(*(worker.submit(r) for r in requests))

    results = [r.result for r in responses if isinstance(r, HealthResultResponse)]
    logger.info("documents_scored", count=len(results))
    return results
