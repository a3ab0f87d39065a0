from __future__ import annotations
import logging
import threading

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Union

from expression import Error, Ok, Result

from fp_future.exceptions import AlreadySettledError
from fp_future.future import Future, Producer

logger = logging.getLogger(__name__)


class MemoState(Enum):
    IDLE = "idle"
    STARTED = "started"
    SETTLED_SUCCESS = "settled-success"
    SETTLED_FAILURE = "settled-failure"


@dataclass(slots=True, frozen=True)
class Waiter:
    """A caller that forked while the producer was still running."""

    on_failure: Callable[[Any], Any]
    on_success: Callable[[Any], Any]

    def notify(self, outcome: Result) -> None:
        if outcome.is_ok():
            self.on_success(outcome.default_value(None))
        else:
            self.on_failure(outcome.error)


class Memo:
    """Run-once state machine behind a memoised Future.

    The first ``fork`` starts the producer. Forks that arrive before it
    settles are queued; once it settles, the first caller is notified, then
    the queue in arrival order. Every later fork is answered synchronously
    from the cached outcome.

    The state is moved to settled and the queue is swapped out before any
    continuation runs, so a continuation that forks this memo again is
    answered from the cache instead of being appended to the queue that is
    being drained. A continuation that raises does not stop the others from
    being notified; the first error is re-raised after the drain. A producer
    that raises before settling puts the memo back to idle.

    Checks and transitions happen under a lock; the producer and all
    continuations run outside it.
    """

    __slots__ = ("_producer", "_state", "_outcome", "_pending", "_lock")

    def __init__(self, producer: Producer):
        self._producer = producer
        self._state = MemoState.IDLE
        self._outcome: Optional[Result] = None
        self._pending: List[Waiter] = []
        self._lock = threading.Lock()

    @property
    def state(self) -> MemoState:
        return self._state

    @property
    def outcome(self) -> Optional[Result]:
        """``Ok``/``Error`` once settled, ``None`` before."""
        return self._outcome

    @property
    def pending(self) -> int:
        return len(self._pending)

    def fork(self, on_failure: Callable[[Any], Any], on_success: Callable[[Any], Any]) -> None:
        caller = Waiter(on_failure, on_success)
        with self._lock:
            state = self._state
            if state is MemoState.IDLE:
                self._state = MemoState.STARTED
            elif state is MemoState.STARTED:
                self._pending.append(caller)
                logger.debug("%r still running, queued caller #%s", self, len(self._pending))
                return
            outcome = self._outcome

        if state is MemoState.IDLE:
            logger.debug("%r starting producer %s", self, self._producer)
            try:
                self._producer(self._settler(caller, Error), self._settler(caller, Ok))
            except Exception:
                # Raised before settling: let the next fork start it again
                with self._lock:
                    if self._state is MemoState.STARTED:
                        self._state = MemoState.IDLE
                        logger.debug("%r producer raised before settling, back to idle", self)
                raise
            return

        caller.notify(outcome)

    def _settler(self, caller: Waiter, wrap: Callable[[Any], Result]) -> Callable[[Any], None]:
        def _settle(value: Any) -> None:
            outcome = wrap(value)
            settled = MemoState.SETTLED_SUCCESS if outcome.is_ok() else MemoState.SETTLED_FAILURE
            with self._lock:
                if self._state is not MemoState.STARTED:
                    raise AlreadySettledError(self, "success" if outcome.is_ok() else "failure")
                self._state = settled
                self._outcome = outcome
                pending, self._pending = self._pending, []

            logger.debug("%r settled as %s, notifying %s queued caller(s)", self, settled.value, len(pending))
            first_error: Optional[Exception] = None
            for waiter in [caller, *pending]:
                try:
                    waiter.notify(outcome)
                except Exception as exc:
                    logger.debug("%r continuation %s raised %r", self, waiter, exc)
                    if first_error is None:
                        first_error = exc
            if first_error is not None:
                raise first_error

        return _settle

    def __repr__(self) -> str:
        return f"<Memo {self._state.value}>"


def memoise(source: Union[Future, Producer]) -> Future:
    """Wrap a Future (or a bare producer) so its producer runs at most once.

    Args:
        source: A Future, or a producer ``(on_failure, on_success) -> None``.

    Returns:
        A Future sharing one evaluation of *source* among all its forks.

    Raises:
        TypeError: If *source* is neither a Future nor callable.

    Example:
        >>> calls = []
        >>> shared = memoise(lambda rej, res: calls.append(1) or res("v"))
        >>> shared.fork(print, print); shared.fork(print, print)
        v
        v
        >>> len(calls)
        1
    """
    if isinstance(source, Future):
        producer = source.fork
    elif callable(source):
        producer = source
    else:
        raise TypeError(f"memoise() expects a Future or a producer, got {type(source).__name__}")
    return Future(Memo(producer).fork)
