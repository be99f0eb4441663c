"""Embeddability classification and script-dependence detection."""

from .classifier import check_embeddable, classify, classify_outcome
from .heuristics import needs_script_rendering

__all__ = ["check_embeddable", "classify", "classify_outcome", "needs_script_rendering"]
