"""Bounded fan-out of model calls."""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, Protocol, Sequence, TypeVar

from loguru import logger

ItemT = TypeVar("ItemT")
ResultT = TypeVar("ResultT")


class Progress(Protocol):
    def update(self, n: int = 1) -> object: ...


@dataclass
class BatchResult(Generic[ResultT]):
    """Outcome of one bounded batch.

    Attributes:
        results: Successful results, in submission order
        failed: Number of items whose worker raised
    """

    results: list[ResultT] = field(default_factory=list)
    failed: int = 0

    @property
    def succeeded(self) -> int:
        return len(self.results)


async def run_bounded(
    items: Sequence[ItemT],
    worker: Callable[[ItemT], Awaitable[ResultT]],
    *,
    parallel: int,
    describe: Callable[[ItemT], str] = str,
    progress: Progress | None = None,
) -> BatchResult[ResultT]:
    """Run ``worker`` over every item with at most ``parallel`` calls in flight.

    A failing item is logged and dropped without affecting the others. Progress
    advances exactly once per item, whether it succeeded or not.

    Args:
        items: Independent work items
        worker: Coroutine function applied to each item
        parallel: Maximum number of concurrent workers
        describe: Renders an item for log messages
        progress: Optional progress sink, e.g. a tqdm bar

    Returns:
        BatchResult with successful results and the failure count
    """
    if parallel < 1:
        raise ValueError(f"parallel must be at least 1, got {parallel}")

    semaphore = asyncio.Semaphore(parallel)

    async def run_one(item: ItemT) -> tuple[bool, ResultT | None]:
        try:
            async with semaphore:
                return True, await worker(item)
        except Exception as e:
            logger.error(f"Failed to process {describe(item)}: {e}")
            return False, None
        finally:
            if progress is not None:
                progress.update(1)

    outcomes = await asyncio.gather(*(run_one(item) for item in items))

    batch: BatchResult[ResultT] = BatchResult()
    for ok, result in outcomes:
        if ok:
            batch.results.append(result)  # type: ignore[arg-type]
        else:
            batch.failed += 1
    return batch
