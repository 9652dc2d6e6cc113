"""Tracing of the chain of assets being generated in the current pass."""

import contextvars
from contextlib import contextmanager
import logging
from time import perf_counter
from typing import Generator


_LOGGER = logging.getLogger(__name__)

# No public API
__all__: list[str] = []


_generation_path: contextvars.ContextVar[tuple[str, ...]] = contextvars.ContextVar(
    "_generation_path", default=()
)


def generation_path() -> list[str]:
    """Return the names of the assets currently being resolved, root first."""
    return list(_generation_path.get())


@contextmanager
def generation_context(asset_name: str) -> Generator[None, None, None]:
    """Record that `asset_name` is being resolved for the duration of the block."""
    path = _generation_path.get() + (asset_name,)
    token = _generation_path.set(path)
    label = " > ".join(path)
    t1 = perf_counter()
    _LOGGER.debug("[Generate] > %s", label)
    try:
        yield
    finally:
        t2 = perf_counter()
        _generation_path.reset(token)
        _LOGGER.debug("[Generate] < %s (%0.2fs)", label, (t2 - t1))
