from abc import abstractmethod
from typing import Protocol, runtime_checkable, TypeVar, Callable

T = TypeVar("T")
E = TypeVar("E")
S = TypeVar("S")
F = TypeVar("F")

@runtime_checkable
class Monad(Protocol):
    @staticmethod
    @abstractmethod
    def of(value: T) -> 'Monad':
        raise NotImplementedError

    @abstractmethod
    def chain(self, fn: Callable[[T], 'Monad']) -> 'Monad':
        raise NotImplementedError

    @abstractmethod
    def map(self, fn: Callable[[T], S]) -> 'Monad':
        raise NotImplementedError


@runtime_checkable
class Bifunctor(Protocol):
    """Two independent channels, each mappable on its own."""

    @abstractmethod
    def bimap(self, on_left: Callable[[E], F], on_right: Callable[[T], S]) -> 'Bifunctor':
        raise NotImplementedError

    @abstractmethod
    def rejected_map(self, fn: Callable[[E], F]) -> 'Bifunctor':
        raise NotImplementedError
