from __future__ import annotations


class JobError(Exception):
    """Base class for failures raised by the price update job."""


class ConfigError(JobError, ValueError):
    pass


class PriceUnavailable(JobError):
    def __init__(self, currency: str, attempts: int) -> None:
        super().__init__(f"Can not fetch {currency} price after {attempts} attempts")
        self.currency = currency
        self.attempts = attempts


class ResolutionFailed(JobError):
    pass


class DivisionByZero(JobError, ZeroDivisionError):
    pass


class RowCountMismatch(JobError):
    pass


class TriggerFailed(JobError):
    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Trigger request failed with status {status_code}: {body}")
        self.status_code = status_code
        self.body = body
