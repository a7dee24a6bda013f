from __future__ import annotations

import time
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass


@dataclass
class _StoreTimer:
    total_ms: float = 0.0


# Holds a mutable timer so that tasks spawned by a request fan-out add to the same total.
_store_timer: ContextVar[_StoreTimer | None] = ContextVar("store_timer", default=None)


def start_store_timer() -> Token:
    return _store_timer.set(_StoreTimer())


def stop_store_timer(token: Token) -> None:
    _store_timer.reset(token)


def add_store_time(delta_ms: float) -> None:
    timer = _store_timer.get()
    if timer is None:
        return
    timer.total_ms += delta_ms


def get_store_time_ms() -> float | None:
    timer = _store_timer.get()
    return timer.total_ms if timer is not None else None


@contextmanager
def timed_store_call():
    start = time.perf_counter()
    try:
        yield
    finally:
        add_store_time((time.perf_counter() - start) * 1000)
