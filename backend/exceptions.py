"""
Domain errors raised at the validation edges.

The calculation engine itself never raises. These are used by the vitamin D
report flow and translated into HTTP responses by the routers.
"""


class SunTimeError(Exception):
    """Base class for SunTime domain errors."""


class InvalidVitaminDValueError(SunTimeError, ValueError):
    """A lab value outside the accepted 10-100 ng/mL range."""

    def __init__(self, value, minimum: float, maximum: float):
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"Vitamin D level must be between {minimum:g} ng/mL and {maximum:g} ng/mL (got {value!r})"
        )


class ReportRateLimitedError(SunTimeError):
    """A vitamin D report upload inside the rolling rate-limit window."""

    def __init__(self, days_remaining: int):
        self.days_remaining = days_remaining
        super().__init__(f"You can upload a new report in {days_remaining} days.")
