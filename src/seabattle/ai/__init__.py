"""AI package exports."""

from .targeting import Axis, Behavior, Orientation, TargetingAI, TargetingState

__all__ = ["Axis", "Behavior", "Orientation", "TargetingAI", "TargetingState"]
