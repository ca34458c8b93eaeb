"""Transition resolution for wizard flows.

``resolve_next_step`` performs exactly one hop per call. Skipping is layered
on top by ``resolve_next_step_skipping``, which callers use when a chain of
skippable steps should collapse into a single move.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from wizardflow.models.steps import DecisionContext, FlowConfigError, StepDefinition
from wizardflow.state.models import DataBag

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionContext:
    """Flow data a transition may depend on."""

    data_bag: DataBag = field(default_factory=DataBag)
    completed_steps: tuple[str, ...] = ()

    def for_step(self, step_id: str) -> DecisionContext:
        """Build the context handed to decisions and skip predicates."""
        return DecisionContext(
            data_bag=self.data_bag,
            current_step_id=step_id,
            completed_steps=tuple(self.completed_steps),
        )


def _index_of(steps: Sequence[StepDefinition], step_id: str) -> int:
    for index, step in enumerate(steps):
        if step.id == step_id:
            return index
    return -1


def resolve_next_step(
    current_id: str,
    steps: Sequence[StepDefinition],
    context: ResolutionContext,
) -> str | None:
    """Decide which step follows ``current_id``.

    Resolution order:
        1. A decision function on the current step is called and its result
           returned verbatim (``None`` means no forward transition).
        2. A literal ``next`` id is returned as is.
        3. Otherwise the following step in list order, or ``None`` at the end.

    Unknown ``current_id`` values resolve to ``None``.
    """
    index = _index_of(steps, current_id)
    if index < 0:
        logger.debug("Cannot resolve next step: unknown step %r", current_id)
        return None

    target = steps[index].next
    if callable(target):
        return target(context.for_step(current_id))
    if isinstance(target, str):
        return target
    if index < len(steps) - 1:
        return steps[index + 1].id
    return None


def resolve_previous_step(
    current_id: str,
    steps: Sequence[StepDefinition],
    context: ResolutionContext | None = None,
) -> str | None:
    """Decide which step ``back`` leads to: explicit ``back`` id, else the previous step."""
    index = _index_of(steps, current_id)
    if index < 0:
        return None

    back = steps[index].back
    if back is not None:
        return back
    if index > 0:
        return steps[index - 1].id
    return None


def should_skip(step: StepDefinition, context: ResolutionContext) -> bool:
    """Evaluate a step's ``skip_if`` predicate, if it has one."""
    predicate = step.skip_if
    if predicate is None:
        return False
    return bool(predicate(context.for_step(step.id)))


def resolve_next_step_skipping(
    current_id: str,
    steps: Sequence[StepDefinition],
    context: ResolutionContext,
) -> str | None:
    """Resolve the next step, hopping over every step whose ``skip_if`` holds.

    Each candidate is checked in turn; a skipped candidate is resolved
    onward from itself until a non-skipped step or ``None`` is reached.

    Raises:
        FlowConfigError: If the hop chain revisits a step.
    """
    visited = {current_id}
    candidate = resolve_next_step(current_id, steps, context)

    while candidate is not None:
        index = _index_of(steps, candidate)
        if index < 0:
            raise FlowConfigError(f"Transition to unknown step {candidate!r}")
        if not should_skip(steps[index], context):
            return candidate
        if candidate in visited:
            raise FlowConfigError(
                f"Skipping from {current_id!r} loops back to {candidate!r}"
            )
        logger.debug("Skipping step %r", candidate)
        visited.add(candidate)
        candidate = resolve_next_step(candidate, steps, context)

    return None
