import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, Hashable, Iterable, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True)
class Settled(Generic[V]):
    """Outcome of one lookup in a batch: a value or the error that replaced it."""
    value: Optional[V] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def gather_settled(
    keys: Iterable[K],
    lookup: Callable[[K], Awaitable[V]],
    timeout: Optional[float] = None,
    max_concurrency: Optional[int] = None,
) -> Dict[K, Settled[V]]:
    """Run ``lookup`` for every distinct key concurrently and wait for all of them.

    Every key gets its own slot in the result. A lookup that raises or runs past
    ``timeout`` settles as an error in its slot and never affects the others.
    Keys are deduplicated in first-seen order.
    """
    unique_keys = list(dict.fromkeys(keys))
    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    async def run(key: K) -> V:
        if semaphore is None:
            return await asyncio.wait_for(lookup(key), timeout)
        async with semaphore:
            return await asyncio.wait_for(lookup(key), timeout)

    outcomes = await asyncio.gather(*(run(key) for key in unique_keys), return_exceptions=True)

    results: Dict[K, Settled[V]] = {}
    for key, outcome in zip(unique_keys, outcomes):
        if isinstance(outcome, BaseException):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            results[key] = Settled(error=outcome)
        else:
            results[key] = Settled(value=outcome)
    return results


async def run_blocking(func: Callable[..., V], *args: Any) -> V:
    """Run a blocking provider call in a worker thread."""
    return await asyncio.to_thread(func, *args)
