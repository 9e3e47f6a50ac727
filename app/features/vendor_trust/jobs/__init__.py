"""
Background jobs for the vendor trust feature.
"""

from .inactivity_sweep_job import (
    run_inactivity_sweep,
    run_inactivity_sweep_worker,
    start_inactivity_sweep_scheduler,
)

__all__ = [
    "run_inactivity_sweep",
    "run_inactivity_sweep_worker",
    "start_inactivity_sweep_scheduler",
]
