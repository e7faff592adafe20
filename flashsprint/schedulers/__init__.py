"""Scheduler loading."""

from flashsprint.schedulers.base import Scheduler
from flashsprint.schedulers.ladder import DEFAULT_MAX_TIER, LadderScheduler
from flashsprint.schedulers.rotation import RotationScheduler

SCHEDULERS = {
    LadderScheduler.scheduler_id: LadderScheduler,
    RotationScheduler.scheduler_id: RotationScheduler,
}


def load_scheduler(name: str, lookup, settings: dict | None = None) -> Scheduler:
    settings = settings or {}
    if name not in SCHEDULERS:
        raise ValueError(f"Unknown scheduler: {name!r} (expected one of {', '.join(SCHEDULERS)})")
    if name == LadderScheduler.scheduler_id:
        return LadderScheduler(lookup, max_tier=int(settings.get("max_tier", DEFAULT_MAX_TIER)))
    return RotationScheduler(lookup)


__all__ = ["LadderScheduler", "RotationScheduler", "Scheduler", "SCHEDULERS", "load_scheduler"]
