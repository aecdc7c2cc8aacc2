"""
Stage logger for narrating what each walkthrough stage does.

Components take a `verbose` flag and hand it to a StageLogger. With verbose
off nothing is printed, so library code stays quiet by default while the
demo can switch on a step-by-step trace.
"""

import time
from typing import Any, Dict, Optional


class StageLogger:
    """Logger for printing stage-by-stage progress when verbose."""

    def __init__(self, verbose: bool = False) -> None:
        """
        Initialize the stage logger.

        Args:
            verbose: Whether to print anything
        """
        self.verbose = verbose
        self.timers: Dict[str, float] = {}

    def log(self, message: str, **kwargs: Any) -> None:
        """
        Log a message if verbose mode is enabled.

        Args:
            message: Message to log, optionally with str.format fields
            **kwargs: Values for the format fields
        """
        if self.verbose:
            if kwargs:
                print(message.format(**kwargs))
            else:
                print(message)

    def log_stage(self, stage_name: str, timer_name: Optional[str] = None) -> None:
        """
        Log the start of a stage and optionally start a timer for it.

        Args:
            stage_name: Name of the stage to display
            timer_name: Timer to start, read back by log_complete()
        """
        if self.verbose:
            print(f"\n[{stage_name}]")
        if timer_name is not None:
            self.timers[timer_name] = time.perf_counter()

    def get_elapsed(self, timer_name: str) -> float:
        """Seconds since the named timer started; 0.0 for unknown timers."""
        if timer_name not in self.timers:
            return 0.0
        return time.perf_counter() - self.timers[timer_name]

    def log_complete(self, stage_name: str, timer_name: str) -> None:
        """Log completion of a stage with its elapsed time."""
        if self.verbose:
            elapsed_ms = self.get_elapsed(timer_name) * 1000.0
            print(f"  {stage_name} done in {elapsed_ms:.2f} ms")
