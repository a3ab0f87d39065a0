from __future__ import annotations
import asyncio
from typing import Any, Callable, Generic, TypeVar

from expression import Error, Ok, Result

from fp_future import config

E = TypeVar("E")
T = TypeVar("T")
F = TypeVar("F")
S = TypeVar("S")

Continuation = Callable[[Any], None]
Producer = Callable[[Continuation, Continuation], None]


def _expect_future(value: Any, combinator: str) -> "Future":
    """Check what a user function handed back to ``chain``/``or_else``.

    Args:
        value: The object returned by the user function.
        combinator: Name of the calling combinator, used in the error message.

    Returns:
        The value itself when it can be forked.

    Raises:
        TypeError: If the value is not a Future (or, with ``FP_FUTURE_STRICT``
            off, has no callable ``fork``).
    """
    if isinstance(value, Future):
        return value
    if not config.STRICT and callable(getattr(value, "fork", None)):
        return value
    raise TypeError(
        f"{combinator}() expects a function returning a Future, "
        f"got {type(value).__name__}"
    )


class Future(Generic[E, T]):
    """A deferred computation that settles on a failure or a success channel.

    Nothing runs until ``fork`` is called. Every combinator returns a new
    Future wrapping a new producer; the receiver is never touched.

    Examples:
    ```python
    >>> def fetch(on_failure, on_success):
    ...     loop.call_later(0.1, on_success, 42)
    >>> Future(fetch).map(lambda n: n + 1).fork(print, print)

    # A plain Future reruns fetch on every fork, a memoised one only once:
    >>> shared = Future(fetch).memoise()
    >>> shared.fork(print, print); shared.fork(print, print)

    # Inside a coroutine the outcome comes back as a Result:
    >>> (await Future.of(5)).default_value(None)
    5
    ```
    """

    __slots__ = ("__fork",)

    def __init__(self, fork: Producer):
        if not callable(fork):
            raise TypeError(f"Future expects a callable producer, got {type(fork).__name__}")
        self.__fork = fork  # fn: (a -> ()) -> (b -> ()) -> ()

    @staticmethod
    def of(value: T) -> "Future[Any, T]":
        """A Future that always succeeds with *value*."""
        return Future(lambda on_failure, on_success: on_success(value))

    @staticmethod
    def rejected(value: E) -> "Future[E, Any]":
        """A Future that always fails with *value*."""
        return Future(lambda on_failure, on_success: on_failure(value))

    @staticmethod
    def from_result(result: Result[T, E]) -> "Future[E, T]":
        """Lift an already known ``Result``: ``Ok`` succeeds, ``Error`` fails."""
        if result.is_ok():
            return Future.of(result.default_value(None))
        return Future.rejected(result.error)

    def memoise(self) -> "Future[E, T]":
        """A Future that runs this one at most once and replays its outcome."""
        from fp_future.memo import memoise
        return memoise(self)

    def fork(self, on_failure: Callable[[E], Any], on_success: Callable[[T], Any]) -> None:
        """Run the computation, eventually calling exactly one continuation once."""
        self.__fork(on_failure, on_success)

    def chain(self, fn: Callable[[T], "Future[E, S]"]) -> "Future[E, S]":
        """Bind: fork the Future built from the success value with our continuations.

        Args:
            fn: Function from a success value to the next Future.

        Returns:
            A new Future. Failures of the receiver skip *fn* entirely.

        Raises:
            TypeError: At fork time, if *fn* does not return a Future.
        """
        def _fork(on_failure, on_success):
            self.fork(
                on_failure,
                lambda value: _expect_future(fn(value), "chain").fork(on_failure, on_success),
            )
        return Future(_fork)

    def map(self, fn: Callable[[T], S]) -> "Future[E, S]":
        """Transform the success value; failures pass through."""
        return self.chain(lambda value: Future.of(fn(value)))

    def ap(self, other: "Future[E, Any]") -> "Future[E, Any]":
        """Apply the function held by this Future to the value held by *other*.

        The receiver is forked first. If it fails, *other* is never forked and
        the receiver's failure is what comes out, even when both would fail.
        """
        if not isinstance(other, Future):
            raise TypeError(f"ap() expects a Future, got {type(other).__name__}")
        return self.chain(lambda fn: other.map(fn))

    def or_else(self, fn: Callable[[E], "Future[F, T]"]) -> "Future[F, T]":
        """Recover from a failure with the Future built by *fn*; successes pass through."""
        def _fork(on_failure, on_success):
            self.fork(
                lambda reason: _expect_future(fn(reason), "or_else").fork(on_failure, on_success),
                on_success,
            )
        return Future(_fork)

    def rejected_map(self, fn: Callable[[E], F]) -> "Future[F, T]":
        """Transform the failure value; successes pass through."""
        return self.or_else(lambda reason: Future.rejected(fn(reason)))

    def bimap(self, on_left: Callable[[E], F], on_right: Callable[[T], S]) -> "Future[F, S]":
        """Transform whichever channel the Future settles on, keeping the channel."""
        return Future(
            lambda on_failure, on_success: self.fork(
                lambda reason: on_failure(on_left(reason)),
                lambda value: on_success(on_right(value)),
            )
        )

    def fold(self, on_left: Callable[[E], S], on_right: Callable[[T], S]) -> "Future[Any, S]":
        """Collapse both channels into success. The result never fails."""
        return Future(
            lambda on_failure, on_success: self.fork(
                lambda reason: on_success(on_left(reason)),
                lambda value: on_success(on_right(value)),
            )
        )

    def swap(self) -> "Future[T, E]":
        """Failures become successes and successes become failures."""
        return Future(lambda on_failure, on_success: self.fork(on_success, on_failure))

    def fork_result(self, callback: Callable[[Result[T, E]], Any]) -> None:
        """Fork, handing the outcome to *callback* as ``Ok``/``Error``."""
        self.fork(
            lambda reason: callback(Error(reason)),
            lambda value: callback(Ok(value)),
        )

    async def run(self) -> Result[T, E]:
        """Fork on the running loop and wait for the outcome.

        The producer may settle on the loop thread or on any other thread.

        Returns:
            ``Ok(value)`` on success, ``Error(reason)`` on failure.
        """
        loop = asyncio.get_running_loop()
        waiter = loop.create_future()

        def _resolve(outcome: Result[T, E]) -> None:
            # cancelled while waiting, or settled twice
            if waiter.done():
                return
            waiter.set_result(outcome)

        def _done(outcome: Result[T, E]) -> None:
            loop.call_soon_threadsafe(_resolve, outcome)

        self.fork_result(_done)
        return await waiter

    def __await__(self):
        """Make the Future awaitable; the awaited value is a ``Result``."""
        return self.run().__await__()

    def __str__(self) -> str:
        return "Future"

    def __repr__(self) -> str:
        return "<Future>"


of = Future.of
rejected = Future.rejected
from_result = Future.from_result
