"""Schedule generation pipeline.

validate -> order -> (calendar projection, critical path) -> metrics.
Each call owns its working state, so concurrent calls need no locking.
"""

from planner_scheduler.core.schedule.generate_schedule import generate_schedule

__all__ = ["generate_schedule"]
