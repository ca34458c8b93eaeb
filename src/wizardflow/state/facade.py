"""Read-only derived view over a flow store."""

from wizardflow.models.steps import StepDefinition

from .models import FlowState, UploadedImage
from .store import FlowStore


class FlowView:
    """Derived accessors a host renders from; never mutates the store."""

    def __init__(self, store: FlowStore) -> None:
        self._store = store

    @property
    def state(self) -> FlowState:
        return self._store.state

    @property
    def current_step(self) -> StepDefinition:
        return self._store.current_step

    @property
    def total_steps(self) -> int:
        return len(self._store.steps)

    @property
    def current_index(self) -> int:
        return self._store.current_index

    @property
    def can_go_next(self) -> bool:
        return self.current_index < self.total_steps - 1

    @property
    def can_go_back(self) -> bool:
        return self.current_index > 0

    @property
    def is_first_step(self) -> bool:
        return self.current_index == 0

    @property
    def is_last_step(self) -> bool:
        return self.current_index == self.total_steps - 1

    @property
    def progress_fraction(self) -> float:
        """Share of the flow already passed, from 0.0 on the first step to 1.0 on the last."""
        if self.total_steps <= 1:
            return 1.0
        return self.current_index / (self.total_steps - 1)

    def has_partner(self, partner_id: str) -> bool:
        return self._store.partner_image(partner_id) is not None

    def get_partner_image(self, partner_id: str) -> UploadedImage | None:
        return self._store.partner_image(partner_id)

    def get_partner_name(self, partner_id: str) -> str:
        return self._store.partner_name(partner_id)
