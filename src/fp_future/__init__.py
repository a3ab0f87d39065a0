from fp_future.future import Future, of, rejected, from_result
from fp_future.memo import Memo, MemoState, memoise
from fp_future.monads import Monad, Bifunctor
from fp_future.exceptions import FutureError, AlreadySettledError

__all__ = [
    "Future",
    "of",
    "rejected",
    "from_result",
    "memoise",
    "Memo",
    "MemoState",
    "Monad",
    "Bifunctor",
    "FutureError",
    "AlreadySettledError",
]
