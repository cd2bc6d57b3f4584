"""Base protocol for pipeline handlers."""

from collections.abc import Awaitable
import inspect
from typing import Protocol, TypeVar

from rendezvous.core.types import Result

# Contravariant input (handlers can accept supertypes), invariant output
T_In = TypeVar("T_In", contravariant=True)
T_Out = TypeVar("T_Out")
T_Error = TypeVar("T_Error", bound=BaseException)
T = TypeVar("T")


class BaseAsyncHandler(Protocol[T_In, T_Out, T_Error]):
    """Protocol for asynchronous pipeline handlers.

    Each handler performs a single step of a command invocation, making it
    easy to test and reason about. Unexpected errors are returned as
    `Failure` rather than raised.
    """

    async def handle(self, state: T_In) -> Result[T_Out, T_Error]:
        """Process a pipeline state.

        Args:
            state: The state produced by the previous stage.

        Returns:
            A Result object containing either the next state or an error.
        """
        ...


def stage_name(handler: object) -> str:
    return type(handler).__name__


async def resolve_awaitable(value: T | Awaitable[T]) -> T:
    """Await ``value`` if it is awaitable, so callbacks may be sync or async."""
    if inspect.isawaitable(value):
        return await value
    return value
