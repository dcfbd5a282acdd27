from .runner import AffectCycle, CycleResult, coerce_stimuli

__all__ = ["AffectCycle", "CycleResult", "coerce_stimuli"]
