"""Flow state store: the state machine behind one wizard session.

One ``FlowStore`` is created per flow session with a fixed step list and
handed to whoever drives the flow. Every action is synchronous and runs
under a single re-entrant lock, so the store has exactly one logical writer
even when a host delivers executor callbacks from another thread.

Generation callbacks carry the epoch of the cycle they belong to. A call
from a finished, abandoned, or superseded cycle is ignored instead of
overwriting the state of the current one.
"""

import logging
import math
import threading
from collections.abc import Callable, Sequence
from typing import Any

from wizardflow.models.steps import StepDefinition, validate_steps

from .models import ACTIVE_STATUSES, FlowState, GenerationStatus, UploadedImage

logger = logging.getLogger(__name__)

StateListener = Callable[[FlowState], None]


class GenerationHandle:
    """Callbacks bound to one generation cycle.

    Hand this to the executor instead of the store itself; once the cycle
    ends or the flow is reset, every call on the handle becomes a no-op.
    """

    def __init__(self, store: "FlowStore", epoch: int) -> None:
        self._store = store
        self.epoch = epoch

    @property
    def is_current(self) -> bool:
        """Whether this handle's cycle is still the active one."""
        return self._store.is_current_generation(self.epoch)

    def update_progress(self, progress: float) -> None:
        self._store.update_progress(progress, epoch=self.epoch)

    def set_result(self, result: Any) -> None:
        self._store.set_result(result, epoch=self.epoch)

    def set_error(self, error: str) -> None:
        self._store.set_error(error, epoch=self.epoch)


class FlowStore:
    """Holds and mutates the ``FlowState`` of one flow session.

    Args:
        steps: The session's fixed step list.
        initial_step_id: Step to start on. Unknown ids fall back to the
            first step.
        initial_step_index: Index to start on, clamped into range. Takes
            precedence over ``initial_step_id``.

    Raises:
        FlowConfigError: If ``steps`` is empty or inconsistent.
    """

    def __init__(
        self,
        steps: Sequence[StepDefinition],
        *,
        initial_step_id: str | None = None,
        initial_step_index: int | None = None,
    ) -> None:
        validate_steps(steps)
        self._steps: tuple[StepDefinition, ...] = tuple(steps)
        self._index_by_id = {step.id: i for i, step in enumerate(self._steps)}
        self._lock = threading.RLock()
        self._listeners: list[StateListener] = []

        start = self._initial_index(initial_step_id, initial_step_index)
        self._state = FlowState(
            current_step_id=self._steps[start].id,
            current_step_index=start,
        )

    def _initial_index(self, step_id: str | None, index: int | None) -> int:
        if index is not None:
            return max(0, min(index, len(self._steps) - 1))
        if step_id is not None:
            found = self._index_by_id.get(step_id)
            if found is None:
                logger.warning("Initial step %r not found, using first step", step_id)
                return 0
            return found
        return 0

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def steps(self) -> tuple[StepDefinition, ...]:
        return self._steps

    @property
    def state(self) -> FlowState:
        """A snapshot of the current state."""
        with self._lock:
            return self._snapshot()

    @property
    def current_index(self) -> int:
        with self._lock:
            return self._state.current_step_index

    def partner_image(self, partner_id: str) -> UploadedImage | None:
        with self._lock:
            return self._state.data_bag.partners.get(partner_id)

    def partner_name(self, partner_id: str) -> str:
        with self._lock:
            return self._state.data_bag.partner_names.get(partner_id, "")

    @property
    def current_step(self) -> StepDefinition:
        with self._lock:
            return self._steps[self._state.current_step_index]

    def is_current_generation(self, epoch: int) -> bool:
        with self._lock:
            return (
                epoch == self._state.generation_epoch
                and self._state.generation_status in ACTIVE_STATUSES
            )

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with a snapshot after each mutation.

        Returns:
            A function that removes the listener.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _snapshot(self) -> FlowState:
        """Copy the state. Caller holds the lock.

        ``generation_result`` belongs to the host and is shared, not copied.
        """
        state = self._state
        return state.model_copy(
            update={
                "completed_steps": list(state.completed_steps),
                "data_bag": state.data_bag.model_copy(deep=True),
            }
        )

    def _commit(self, **changes: Any) -> None:
        """Apply field changes and notify listeners. Caller holds the lock."""
        for name, value in changes.items():
            setattr(self._state, name, value)
        if self._listeners:
            snapshot = self._snapshot()
            for listener in list(self._listeners):
                listener(snapshot)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def go_to_step(self, step_id: str) -> None:
        """Jump directly to a step and clear any generation error.

        Unknown ids are ignored.
        """
        with self._lock:
            index = self._index_by_id.get(step_id)
            if index is None:
                logger.warning("go_to_step ignored: unknown step %r", step_id)
                return
            self._commit(
                current_step_id=step_id,
                current_step_index=index,
                generation_error=None,
            )

    def next_step(self) -> None:
        """Complete the current step and advance by one; no-op at the last step."""
        with self._lock:
            state = self._state
            next_index = state.current_step_index + 1
            if next_index >= len(self._steps):
                logger.debug("next_step blocked: already at last step %r", state.current_step_id)
                return
            self._commit(
                current_step_id=self._steps[next_index].id,
                current_step_index=next_index,
                completed_steps=self._with_completed(state.current_step_id),
            )

    def advance_to(self, step_id: str) -> None:
        """Complete the current step and jump to ``step_id`` in one mutation.

        Used for resolver-driven navigation, where the target is not
        necessarily the next index. Unknown ids are ignored.
        """
        with self._lock:
            index = self._index_by_id.get(step_id)
            if index is None:
                logger.warning("advance_to ignored: unknown step %r", step_id)
                return
            self._commit(
                current_step_id=step_id,
                current_step_index=index,
                completed_steps=self._with_completed(self._state.current_step_id),
            )

    def previous_step(self) -> None:
        """Go back one step; no-op at the first step."""
        with self._lock:
            index = self._state.current_step_index
            if index == 0:
                return
            self._commit(
                current_step_id=self._steps[index - 1].id,
                current_step_index=index - 1,
            )

    def complete_step(self, step_id: str) -> None:
        """Mark a step completed without moving."""
        with self._lock:
            if step_id not in self._index_by_id:
                logger.warning("complete_step ignored: unknown step %r", step_id)
                return
            if step_id in self._state.completed_steps:
                return
            self._commit(completed_steps=self._with_completed(step_id))

    def _with_completed(self, step_id: str) -> list[str]:
        completed = self._state.completed_steps
        if step_id in completed:
            return list(completed)
        return [*completed, step_id]

    # ------------------------------------------------------------------
    # Data bag
    # ------------------------------------------------------------------

    def _update_bag(self, **changes: Any) -> None:
        with self._lock:
            bag = self._state.data_bag.model_copy(update=changes)
            self._commit(data_bag=bag)

    def set_partner_image(self, partner_id: str, image: UploadedImage | None) -> None:
        with self._lock:
            partners = {**self._state.data_bag.partners, partner_id: image}
            self._update_bag(partners=partners)

    def set_partner_name(self, partner_id: str, name: str) -> None:
        with self._lock:
            names = {**self._state.data_bag.partner_names, partner_id: name}
            self._update_bag(partner_names=names)

    def set_text_input(self, text: str) -> None:
        self._update_bag(text_input=text)

    def set_visual_style(self, style_id: str) -> None:
        self._update_bag(visual_style=style_id)

    def set_selected_features(self, feature_type: str, ids: Sequence[str]) -> None:
        with self._lock:
            features = {**self._state.data_bag.selected_features, feature_type: list(ids)}
            self._update_bag(selected_features=features)

    def set_custom_data(self, key: str, value: Any) -> None:
        with self._lock:
            custom = {**self._state.data_bag.custom_data, key: value}
            self._update_bag(custom_data=custom)

    def set_category(self, category: Any) -> None:
        self._update_bag(selected_category=category)

    def set_scenario(self, scenario: Any) -> None:
        self._update_bag(selected_scenario=scenario)

    # ------------------------------------------------------------------
    # Generation lifecycle
    # ------------------------------------------------------------------

    def start_generation(self) -> GenerationHandle:
        """Begin a new generation cycle.

        Any handle from an earlier cycle goes stale immediately.
        """
        with self._lock:
            epoch = self._state.generation_epoch + 1
            self._commit(
                generation_status=GenerationStatus.PREPARING,
                generation_progress=0,
                generation_result=None,
                generation_error=None,
                generation_epoch=epoch,
            )
            logger.info("Generation cycle %d started", epoch)
            return GenerationHandle(self, epoch)

    def _accepts(self, epoch: int | None, action: str) -> bool:
        """Whether a generation callback belongs to the live cycle. Caller holds the lock."""
        state = self._state
        if epoch is not None and epoch != state.generation_epoch:
            logger.debug(
                "Ignoring stale %s from cycle %d (current %d)",
                action,
                epoch,
                state.generation_epoch,
            )
            return False
        if state.generation_status not in ACTIVE_STATUSES:
            logger.debug(
                "Ignoring %s: no generation in progress (status %s)",
                action,
                state.generation_status,
            )
            return False
        return True

    def update_progress(self, progress: float, *, epoch: int | None = None) -> None:
        """Record progress, clamped into 0-100.

        Status moves to ``generating`` once progress is above zero and never
        moves back to ``preparing`` within a cycle.
        """
        with self._lock:
            if not self._accepts(epoch, "progress"):
                return
            if not math.isfinite(progress):
                logger.debug("Ignoring non-finite progress %r", progress)
                return
            value = int(max(0, min(100, progress)))
            status = (
                GenerationStatus.GENERATING
                if value > 0 or self._state.generation_status == GenerationStatus.GENERATING
                else GenerationStatus.PREPARING
            )
            self._commit(generation_progress=value, generation_status=status)

    def set_result(self, result: Any, *, epoch: int | None = None) -> None:
        """Complete the cycle with a result; progress is forced to 100."""
        with self._lock:
            if not self._accepts(epoch, "result"):
                return
            self._commit(
                generation_result=result,
                generation_status=GenerationStatus.COMPLETED,
                generation_progress=100,
            )
            logger.info("Generation cycle %d completed", self._state.generation_epoch)

    def set_error(self, error: str, *, epoch: int | None = None) -> None:
        """Fail the cycle with an error message; progress resets to 0."""
        with self._lock:
            if not self._accepts(epoch, "error"):
                return
            self._commit(
                generation_error=error,
                generation_status=GenerationStatus.FAILED,
                generation_progress=0,
            )
            logger.info("Generation cycle %d failed: %s", self._state.generation_epoch, error)

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Restore session-initial values and return to the first step.

        Any in-flight generation is detached: its handle goes stale, but
        the external job itself keeps running.
        """
        with self._lock:
            epoch = self._state.generation_epoch + 1
            fresh = FlowState(
                current_step_id=self._steps[0].id,
                current_step_index=0,
                generation_epoch=epoch,
            )
            self._commit(**{name: getattr(fresh, name) for name in FlowState.model_fields})
            logger.debug("Flow reset to %r", self._steps[0].id)
