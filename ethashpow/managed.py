"""Process-wide epoch contexts, shared between threads and reused per epoch."""

from __future__ import annotations

import functools
import threading
from collections.abc import Callable
from typing import Any

from .epoch import EpochContext, create_epoch_context


class _SharedContext:
    """One shared context guarded by a lock, with a per-thread reference to it."""

    def __init__(self, factory: Callable[[int], Any]) -> None:
        self._factory = factory
        self._lock = threading.Lock()
        self._shared: Any = None
        self._local = threading.local()

    def get(self, epoch_number: int) -> Any:
        context = getattr(self._local, "context", None)
        if context is not None and context.epoch_number == epoch_number:
            return context

        # Drop this thread's reference to the obsolete context first.
        self._local.context = None
        with self._lock:
            if self._shared is None or self._shared.epoch_number != epoch_number:
                self._shared = None
                self._shared = self._factory(epoch_number)
            context = self._shared
        self._local.context = context
        return context


_light = _SharedContext(create_epoch_context)
_full = _SharedContext(functools.partial(create_epoch_context, full=True))


def get_global_epoch_context(epoch_number: int) -> EpochContext:
    """Return the shared light context of an epoch, building it if needed."""
    return _light.get(epoch_number)


def get_global_epoch_context_full(epoch_number: int) -> EpochContext:
    """Return the shared full context of an epoch, building it if needed."""
    return _full.get(epoch_number)