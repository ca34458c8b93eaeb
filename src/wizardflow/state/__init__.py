"""State management module for the wizard flow engine."""

from .facade import FlowView
from .models import DataBag, FlowState, GenerationStatus, UploadedImage
from .store import FlowStore, GenerationHandle, StateListener

__all__ = [
    "DataBag",
    "FlowState",
    "FlowStore",
    "FlowView",
    "GenerationHandle",
    "GenerationStatus",
    "StateListener",
    "UploadedImage",
]
