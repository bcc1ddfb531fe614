"""
Result values and the single-assignment result channel.

Every asynchronous SDK operation (query, entity, datoms, transact,
create_database, basis_t) returns a ResultChannel. The channel is
delivered exactly once with either Ok(value) or Err(DatomicError), so
callers handle both paths by inspecting the delivered value:

    >>> result = await api.q("[:find ?e :where [?e :db/ident :foo]]", db)
    >>> if result.is_ok():
    ...     rows = result.value
    ... else:
    ...     print(result.error.status, result.error.message)

Invariants:
    - A channel is written exactly once; a second write raises
      ChannelClosedError
    - Any number of awaits observe the same cached Result
    - Awaiting never cancels the underlying request
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine, Generator
from dataclasses import dataclass
from typing import Any, Callable, Generic, Literal, TypeVar, Union

from .errors import ChannelClosedError, DatomicError

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Success variant of Result."""

    value: T

    def is_ok(self) -> Literal[True]:
        return True

    def is_err(self) -> Literal[False]:
        return False

    def unwrap(self) -> T:
        """Return the wrapped value."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        """Apply fn to the success value."""
        return Ok(fn(self.value))


@dataclass(frozen=True)
class Err:
    """Failure variant of Result.

    Attributes:
        error: The DatomicError describing what went wrong
    """

    error: DatomicError

    def is_ok(self) -> Literal[False]:
        return False

    def is_err(self) -> Literal[True]:
        return True

    @property
    def status(self) -> int | None:
        """HTTP status when the remote service answered, else None."""
        return self.error.status

    @property
    def message(self) -> str:
        return self.error.message

    def unwrap(self) -> Any:
        """Re-raise the carried error."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, fn: Callable[[Any], U]) -> Err:
        return self


Result = Union[Ok[T], Err]


class ResultChannel(Generic[T]):
    """Single-assignment delivery of one Result.

    Backed by an asyncio.Future on the running loop. The producer calls
    deliver() once; consumers await the channel (or call wait()) as many
    times as they like.

    Example:
        >>> channel = ResultChannel.spawn(fetch_something())
        >>> result = await channel
        >>> same = await channel  # cached, no second request
    """

    def __init__(self) -> None:
        """Create an undelivered channel on the running event loop."""
        self._future: asyncio.Future[Result[T]] = asyncio.get_running_loop().create_future()
        self._task: asyncio.Task[None] | None = None

    @classmethod
    def resolved(cls, value: T) -> ResultChannel[T]:
        """Create a channel already delivered with Ok(value)."""
        channel: ResultChannel[T] = cls()
        channel.deliver(Ok(value))
        return channel

    @classmethod
    def failed(cls, error: DatomicError) -> ResultChannel[T]:
        """Create a channel already delivered with Err(error)."""
        channel: ResultChannel[T] = cls()
        channel.deliver(Err(error))
        return channel

    @classmethod
    def spawn(cls, coro: Coroutine[Any, Any, T]) -> ResultChannel[T]:
        """Run coro as a task and deliver its outcome.

        DatomicError raised by coro is delivered as Err. Any other
        exception is a bug and is set on the channel so that awaiting
        re-raises it.
        """
        try:
            channel: ResultChannel[T] = cls()
        except RuntimeError:
            coro.close()
            raise
        channel._task = asyncio.get_running_loop().create_task(channel._run(coro))
        return channel

    async def _run(self, coro: Coroutine[Any, Any, T]) -> None:
        try:
            value = await coro
        except DatomicError as e:
            self.deliver(Err(e))
        except asyncio.CancelledError:
            self._future.cancel()
            raise
        except Exception as e:
            logger.error(f"Unexpected error in SDK operation: {e!r}")
            self._future.set_exception(e)
            # Already logged; awaiters still re-raise it.
            self._future.exception()
        else:
            self.deliver(Ok(value))

    def deliver(self, result: Result[T]) -> None:
        """Write the single result.

        Raises:
            ChannelClosedError: If the channel was already delivered
        """
        if self._future.done():
            raise ChannelClosedError("ResultChannel already delivered")
        self._future.set_result(result)

    def done(self) -> bool:
        """Whether a result has been delivered."""
        return self._future.done()

    def result(self) -> Result[T]:
        """Return the delivered result without waiting.

        Raises:
            asyncio.InvalidStateError: If nothing was delivered yet
        """
        return self._future.result()

    async def wait(self, timeout: float | None = None) -> Result[T]:
        """Await the result, giving up after timeout seconds.

        A timeout only stops this waiter; the request keeps running and
        later awaits still observe its result.
        """
        return await asyncio.wait_for(asyncio.shield(self._future), timeout)

    def __await__(self) -> Generator[Any, None, Result[T]]:
        return asyncio.shield(self._future).__await__()

    def __repr__(self) -> str:
        if (
            self._future.done()
            and not self._future.cancelled()
            and self._future.exception() is None
        ):
            return f"ResultChannel({self._future.result()!r})"
        return "ResultChannel(<pending>)"
