"""Interfaces the host application implements for a flow."""

from .base import GenerationExecutorProtocol, PricingFunction, ProgressCallback

__all__ = [
    "GenerationExecutorProtocol",
    "PricingFunction",
    "ProgressCallback",
]
