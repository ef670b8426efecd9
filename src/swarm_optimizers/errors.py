"""Exception types raised by the optimizers and the experiment layer."""

from __future__ import annotations

from typing import Dict, Optional


class SwarmError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(SwarmError, ValueError):
    """Invalid parameters. Raised before any trial is started."""


class NumericalInstabilityError(SwarmError, ArithmeticError):
    """A fitness evaluation returned NaN or +/-inf."""

    def __init__(self, function_name: str, value: float, iteration: int):
        self.function_name = function_name
        self.value = value
        self.iteration = iteration
        super().__init__(
            f"{function_name}: non-finite fitness {value!r} at iteration {iteration}"
        )

    def __reduce__(self):
        # keep the exception picklable across worker processes
        return (type(self), (self.function_name, self.value, self.iteration))


class TrialFailureError(SwarmError):
    """One or more trials of a batch failed; the partial batch is not summarized."""

    def __init__(self, failures: Dict[int, BaseException], results: Optional[Dict[int, object]] = None):
        self.failures = dict(failures)
        self.results: Dict[int, object] = dict(results or {})
        failed = sorted(self.failures)
        super().__init__(
            f"{len(failed)} trial(s) failed (indices {failed}); "
            f"{len(self.results)} trial(s) completed"
        )


class SweepCancelled(SwarmError):
    """The sweep was cancelled from outside between two trials."""
