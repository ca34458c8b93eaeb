"""Protocols for the collaborators a host application plugs into a flow.

Using Protocol instead of ABC allows duck-typing: a plain function with the
right signature is a valid pricing policy, and any object with a matching
``generate`` coroutine is a valid executor.
"""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from wizardflow.models.generation import GenerationRequest, OutputType

ProgressCallback = Callable[[int], None]


@runtime_checkable
class PricingFunction(Protocol):
    """Host pricing policy for one generation request."""

    def __call__(
        self,
        duration: int | float | None,
        resolution: str | None,
        output_type: OutputType,
        has_image_input: bool,
    ) -> float:
        """Return the credit cost; non-positive or non-finite means "unknown"."""
        ...


@runtime_checkable
class GenerationExecutorProtocol(Protocol):
    """Host-owned generation job runner."""

    async def generate(
        self,
        request: GenerationRequest,
        on_progress: ProgressCallback,
    ) -> Any:
        """Run one generation job and return its result.

        ``on_progress`` may be called any number of times with a percentage.
        Failures are reported by raising.
        """
        ...
