"""Error hierarchy for substitution fetching and decoding.

Transient failures (network hiccups, overloaded server) are retried by the
client's tenacity decorator; permanent failures are not.

The lesson text parser never raises: free-text entries degrade to absent
fields instead. Only the structured parts of a bulletin (the JSON envelope
and the ABSENCE records) can fail with MalformedInput.
"""


class SubstitutionError(Exception):
    """Base exception for all jecnasupl errors."""

    pass


class TransientError(SubstitutionError):
    """Temporary failure that may succeed on retry.

    Examples: connection reset, read timeout, 503 Service Unavailable, 429.
    """

    pass


class PermanentError(SubstitutionError):
    """Failure that won't succeed on retry.

    Examples: 404 from a misconfigured endpoint, malformed bulletin JSON.
    """

    pass


class MalformedInput(PermanentError):
    """The bulletin envelope or an absence record does not have the expected shape."""

    pass


class ConfigurationError(PermanentError):
    """Client used before the endpoint URL or class symbol was configured."""

    pass
