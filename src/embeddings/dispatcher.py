# src/embeddings/dispatcher.py - v1
"""Bounded worker pool for batch embedding with fail-fast semantics.

Every input text becomes one EmbeddingJob carrying its index. W worker tasks
share one bounded queue; each writes its result straight into the slot owned
by the job's index, so the output needs no locking and keeps input order no
matter which worker finishes first.

The first failing job records its error in a set-once cell and raises a
shared cancellation event. Workers look at the event before taking on a new
job, so calls already in flight run to completion but nothing new starts.
The caller gets exactly that first error, never a partial result.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Awaitable, Callable, Sequence

from bedrockllm.embeddings.base_embedder import EmbeddingVector
from bedrockllm.llm.errors import BatchEmbeddingError
from bedrockllm.llm.models import EmbeddingJob

logger = logging.getLogger(__name__)

EmbedFn = Callable[[str], Awaitable[EmbeddingVector]]


class _FirstFailure:
    """Write-once (index, error) cell; later records are dropped."""

    def __init__(self) -> None:
        self.first: tuple[int, Exception] | None = None

    def record(self, index: int, error: Exception) -> None:
        # No await between check and set: atomic on the event loop.
        if self.first is None:
            self.first = (index, error)


class EmbeddingBatchDispatcher:
    """Compute embeddings for many texts with at most num_workers in flight."""

    def __init__(self, embed_one: EmbedFn, num_workers: int = 10) -> None:
        """Initialize the dispatcher.

        Args:
            embed_one: Coroutine function embedding a single text.
            num_workers: Maximum number of concurrent invocations.
        """
        if num_workers < 1:
            raise ValueError(f"num_workers must be >= 1, got {num_workers}")
        self._embed_one = embed_one
        self._num_workers = num_workers

    @property
    def num_workers(self) -> int:
        return self._num_workers

    async def run(
        self, texts: Sequence[str], timeout: float | None = None
    ) -> list[EmbeddingVector]:
        """Embed texts, returning vectors in input order.

        Args:
            texts: Input texts.
            timeout: Overall deadline in seconds; each invocation is bounded
                by the time remaining. Expiry fails the batch like any error.

        Returns:
            One vector per input text, result[i] for texts[i].

        Raises:
            BatchEmbeddingError: First individual failure, chained to its cause.
        """
        if not texts:
            return []

        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout
        workers = min(self._num_workers, len(texts))

        results: list[EmbeddingVector | None] = [None] * len(texts)
        jobs: asyncio.Queue[EmbeddingJob | None] = asyncio.Queue(maxsize=workers)
        cancelled = asyncio.Event()
        failure = _FirstFailure()

        feeder = asyncio.create_task(self._feed(jobs, texts, workers, cancelled))
        tasks = [
            asyncio.create_task(
                self._work(worker_id, jobs, results, cancelled, failure, deadline)
            )
            for worker_id in range(workers)
        ]
        try:
            await asyncio.gather(*tasks)
        finally:
            # Workers gone: a feeder still blocked on a full queue is stale.
            feeder.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await feeder

        if failure.first is not None:
            index, error = failure.first
            raise BatchEmbeddingError(index, error) from error
        return results  # type: ignore[return-value]

    @staticmethod
    async def _feed(
        jobs: asyncio.Queue[EmbeddingJob | None],
        texts: Sequence[str],
        workers: int,
        cancelled: asyncio.Event,
    ) -> None:
        for index, text in enumerate(texts):
            if cancelled.is_set():
                break
            await jobs.put(EmbeddingJob(index=index, text=text))
        for _ in range(workers):
            await jobs.put(None)

    async def _work(
        self,
        worker_id: int,
        jobs: asyncio.Queue[EmbeddingJob | None],
        results: list[EmbeddingVector | None],
        cancelled: asyncio.Event,
        failure: _FirstFailure,
        deadline: float | None,
    ) -> None:
        logger.debug("Start embedding worker: id=%d", worker_id)
        while True:
            job = await jobs.get()
            if job is None:
                break
            if cancelled.is_set():
                logger.debug("Embedding worker cancelled: id=%d", worker_id)
                return
            logger.debug("Create embedding: worker=%d, index=%d", worker_id, job.index)
            try:
                vector = await self._invoke(job.text, deadline)
            except Exception as e:
                logger.debug(
                    "Failed to create embedding: worker=%d, index=%d, error=%s",
                    worker_id, job.index, e,
                )
                failure.record(job.index, e)
                cancelled.set()
                return
            results[job.index] = vector
        logger.debug("Finish embedding worker: id=%d", worker_id)

    async def _invoke(self, text: str, deadline: float | None) -> EmbeddingVector:
        if deadline is None:
            return await self._embed_one(text)
        remaining = deadline - asyncio.get_running_loop().time()
        return await asyncio.wait_for(self._embed_one(text), timeout=max(remaining, 0.0))
