"""Failures raised by the scheduling API client.

ScheduleClient._get maps every HTTP outcome onto one of these classes, and
its tenacity decorator retries only TransientError and its subclasses:

    timeout, connection error, 5xx  -> TransientError
    429                             -> RateLimitError
    401, 403                        -> AuthenticationError
    404                             -> NotFoundError
    other 4xx, non-JSON body,
    payload without a record list   -> PermanentError

Parsing and grid reconciliation never raise these: a record that cannot be
placed is simply left out of the grid.
"""


class ScheduleError(Exception):
    """Anything that went wrong talking to the scheduling API."""


class TransientError(ScheduleError):
    """The API could not be reached or answered 5xx; the request is retried."""


class RateLimitError(TransientError):
    """The API answered 429. Retried with the same exponential backoff."""


class PermanentError(ScheduleError):
    """The API rejected the request or sent something that is not a schedule list.

    Raised for 4xx statuses without a dedicated class, bodies that are not
    JSON and payloads that unwrap_list cannot find records in.
    """


class AuthenticationError(PermanentError):
    """SCHEDULE_API_TOKEN is missing, expired or not allowed (401/403)."""


class NotFoundError(PermanentError):
    """The endpoint does not exist on this API server (404)."""
