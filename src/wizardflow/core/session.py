"""Flow session: wires the builder, resolver, calculator and store together.

A host creates one ``FlowSession`` per user journey, drives navigation
through ``advance``/``back``, records selections, and finally awaits
``generate`` with its own executor. Retries and cancellation of the
external job stay with the host.
"""

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from wizardflow.api.base import GenerationExecutorProtocol, PricingFunction
from wizardflow.config.settings import Settings
from wizardflow.models.generation import GenerationRequest
from wizardflow.models.scenario import ScenarioConfig
from wizardflow.models.steps import SelectionType, StepDefinition
from wizardflow.state import FlowState, FlowStore, FlowView

from .builder import StepBuilder
from .credits import CreditCalculator, CreditQuote
from .extractors import SELECTION_KEY
from .resolver import ResolutionContext, resolve_next_step_skipping, resolve_previous_step

logger = logging.getLogger(__name__)


class FlowSession:
    """One user's pass through a flow.

    Args:
        steps: The session's step list, usually from ``StepBuilder``.
        pricing_fn: Host pricing policy.
        settings: Resolved application settings.
        executor: Default executor used by ``generate``.
    """

    def __init__(
        self,
        steps: Sequence[StepDefinition],
        pricing_fn: PricingFunction,
        *,
        settings: Settings | None = None,
        executor: GenerationExecutorProtocol | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.store = FlowStore(steps)
        self.view = FlowView(self.store)
        self.executor = executor
        self.calculator = CreditCalculator.from_settings(
            pricing_fn, self.settings, steps=self.store.steps
        )

    @classmethod
    def from_scenario(
        cls,
        scenario: ScenarioConfig,
        pricing_fn: PricingFunction,
        *,
        settings: Settings | None = None,
        executor: GenerationExecutorProtocol | None = None,
    ) -> "FlowSession":
        """Quick-build a scenario and start a session on it."""
        settings = settings or Settings()
        steps = StepBuilder(settings.builder).quick_build(
            scenario,
            include_preview=settings.flow.include_preview,
            include_result=settings.flow.include_result,
        )
        return cls(steps, pricing_fn, settings=settings, executor=executor)

    @property
    def state(self) -> FlowState:
        return self.store.state

    def _context(self, state: FlowState) -> ResolutionContext:
        return ResolutionContext(
            data_bag=state.data_bag,
            completed_steps=tuple(state.completed_steps),
        )

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def advance(self) -> str | None:
        """Move to the resolved next step, skipping steps whose ``skip_if`` holds.

        Returns:
            The id moved to, or ``None`` if there is no forward transition.
        """
        state = self.store.state
        target = resolve_next_step_skipping(
            state.current_step_id, self.store.steps, self._context(state)
        )
        if target is None:
            logger.debug("No forward transition from %r", state.current_step_id)
            return None
        self.store.advance_to(target)
        return target

    def back(self) -> str | None:
        """Move to the resolved previous step.

        Returns:
            The id moved to, or ``None`` at the start of the flow.
        """
        state = self.store.state
        target = resolve_previous_step(
            state.current_step_id, self.store.steps, self._context(state)
        )
        if target is None:
            return None
        self.store.go_to_step(target)
        return target

    # ------------------------------------------------------------------
    # Selections and pricing
    # ------------------------------------------------------------------

    def select(self, category: str, value: Any) -> None:
        """Record a selection-step value under ``category`` in the data bag."""
        self.store.set_custom_data(category, {SELECTION_KEY: value})
        if category == SelectionType.STYLE and isinstance(value, str):
            self.store.set_visual_style(value)

    def _has_image_input(self, state: FlowState) -> bool:
        return state.data_bag.has_image_input or self.calculator.has_image_input

    def quote(self) -> CreditQuote:
        """Quote the cost of generating with the current selections."""
        state = self.store.state
        return self.calculator.calculate(
            state.data_bag.custom_data, has_image_input=self._has_image_input(state)
        )

    def preview_quote(self, category: str, value: Any) -> CreditQuote:
        """Quote the cost as if ``value`` were chosen for ``category``."""
        state = self.store.state
        return self.calculator.preview(
            category,
            {SELECTION_KEY: value},
            state.data_bag.custom_data,
            has_image_input=self._has_image_input(state),
        )

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def _build_request(self, epoch: int, quote: CreditQuote, state: FlowState) -> GenerationRequest:
        bag = state.data_bag
        return GenerationRequest(
            flow_id=self.settings.flow.flow_id,
            epoch=epoch,
            output_type=quote.inputs.output_type,
            credits=quote.credits,
            duration=quote.inputs.duration,
            resolution=quote.inputs.resolution,
            text_input=bag.text_input,
            visual_style=bag.visual_style,
            partner_ids=[pid for pid, image in bag.partners.items() if image is not None],
            selections=dict(bag.custom_data),
        )

    async def generate(
        self, executor: GenerationExecutorProtocol | None = None
    ) -> FlowState:
        """Run one generation cycle through the host executor.

        The credit cost is quoted with the same calculator used for live
        previews. Executor failures are recorded with ``set_error``; a
        result or error arriving after the flow was reset is dropped.
        Cancelling the awaiting task fails the cycle with ``"cancelled"``
        and re-raises.

        Returns:
            Snapshot of the state after the cycle.

        Raises:
            ValueError: If no executor was given here or at construction.
        """
        executor = executor or self.executor
        if executor is None:
            raise ValueError("No generation executor configured for this session")

        quote = self.quote()
        handle = self.store.start_generation()
        request = self._build_request(handle.epoch, quote, self.store.state)
        logger.info(
            "Starting generation cycle %d: %s", handle.epoch, quote.format_summary()
        )

        try:
            result = await executor.generate(request, handle.update_progress)
        except asyncio.CancelledError:
            logger.warning("Generation cycle %d cancelled", handle.epoch)
            handle.set_error("cancelled")
            raise
        except Exception as exc:
            logger.warning("Generation cycle %d failed: %s", handle.epoch, exc)
            handle.set_error(str(exc) or type(exc).__name__)
        else:
            handle.set_result(result)

        state = self.store.state
        if state.generation_epoch != handle.epoch:
            logger.info("Generation cycle %d finished after being detached", handle.epoch)
        return state

    def abandon(self) -> None:
        """Reset the flow, detaching any generation still in flight."""
        self.store.reset()
