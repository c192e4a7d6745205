"""Bounded fan-out with per-item error capture."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, Iterable, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class Outcome(Generic[R]):
    key: Hashable
    value: Optional[R] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _run_one(fn: Callable[[T], R], item: T, key: Hashable) -> Outcome[R]:
    try:
        return Outcome(key=key, value=fn(item))
    except Exception as exc:
        return Outcome(key=key, error=exc)


def fan_out(
    items: Iterable[T],
    fn: Callable[[T], R],
    *,
    max_workers: int,
    key: Callable[[T], Hashable] = lambda item: item,
) -> list[Outcome[R]]:
    """Apply `fn` to every item, at most `max_workers` at a time.

    Results come back in input order regardless of completion order. An exception
    in one item is captured in its Outcome and never cancels the others.
    """
    items = list(items)
    if max_workers <= 1 or len(items) <= 1:
        return [_run_one(fn, item, key(item)) for item in items]

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="payroll-worker") as pool:
        futures = [pool.submit(_run_one, fn, item, key(item)) for item in items]
        return [f.result() for f in futures]
