from abc import abstractmethod
from typing import (
    Callable,
    Generic,
    Optional,
    Protocol,
    TypeVar,
    cast,
    runtime_checkable,
)

from pydantic import BaseModel
from typing_extensions import Self

T = TypeVar("T")


@runtime_checkable
class Semigroup(Protocol):
    """Basically 'has plus'"""

    @abstractmethod
    def __add__(self, other: Self) -> Self:
        pass


E = TypeVar("E", bound=Semigroup)


class Either(Generic[T, E]):
    """Mostly for lazy gathering of errors during validation. Looks fancier than actually is"""

    def __init__(self, t: Optional[T] = None, e: Optional[E] = None):
        self.t = t
        self.e = e

    @classmethod
    def ok(cls, t: T) -> Self:
        return cls(t=t)

    @classmethod
    def error(cls, e: E) -> Self:
        return cls(e=e)

    def get_or_raise(self, raiser: Optional[Callable[[E], BaseException]] = None) -> T:
        if self.e:
            if not raiser:
                raise ValueError(self.e)
            else:
                raise raiser(self.e)
        else:
            return cast(T, self.t)

    def append(self, other: Optional[E]) -> Self:
        if other:
            if not self.e:
                return self.error(other)
            else:
                return self.error(self.e + other)
        else:
            return self


B = TypeVar("B", bound=BaseModel)
def pyd_replace(model: B, **kwargs) -> B:
    """Like dataclasses.replace but for pydantic"""
    return model.model_copy(update=kwargs)
