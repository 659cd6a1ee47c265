from enum import Enum
from typing import Optional


class Invariant(str, Enum):
    """Cross-field rules a benchmark plan must satisfy."""

    REQUESTS_POSITIVE = "requests_positive"
    CONCURRENCY_POSITIVE = "concurrency_positive"
    TIME_LIMIT_NON_NEGATIVE = "time_limit_non_negative"
    CONCURRENCY_WITHIN_REQUESTS = "concurrency_within_requests"
    VERBOSITY_NON_NEGATIVE = "verbosity_non_negative"
    PARALLELISM_POSITIVE = "parallelism_positive"


class ParseError(ValueError):
    """The target URL or a numeric flag value could not be parsed."""

    def __init__(self, message: str, value: Optional[str] = None):
        self.value = value
        super().__init__(message)


class ValidationError(ValueError):
    """A resolved value breaks one of the plan invariants."""

    def __init__(self, invariant: Invariant, message: str):
        self.invariant = invariant
        super().__init__(message)


class FatalResolutionError(Exception):
    """No benchmark target can be resolved; the process must not continue."""

    def __init__(self, message: str, authority: str):
        self.authority = authority
        super().__init__(message)
