"""HTTP client for the jecnarozvrh substitution endpoint.

Fetches the bulletin JSON and hands the body to the parser. All network
concerns (timeouts, retries, status classification) live here; the parser
never performs I/O.
"""

import requests
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from jecnasupl.config import SuplConfig
from jecnasupl.errors import (
    ConfigurationError,
    MalformedInput,
    PermanentError,
    TransientError,
)
from jecnasupl.logging import get_logger
from jecnasupl.models import ScheduleWithAbsences, SubstitutedLesson
from jecnasupl.parser.response import parse_complete_schedule

log = get_logger(__name__)

REQUIRED_URL_PART = "jecnarozvrh"
MIN_CLASS_SYMBOL_LENGTH = 2

_HEADERS = {
    "User-Agent": "jecnasupl/1.0",
    "Accept": "application/json",
}


class SubstitutionClient:
    """Client for one substitution endpoint and, optionally, one class.

    Example:
        client = SubstitutionClient()
        client.set_endpoint_url("https://example.com/jecnarozvrh/data")
        client.set_class_symbol("C2b")
        for date, lessons in client.fetch_class_substitutions():
            ...
    """

    def __init__(
        self,
        timeout: float = 10.0,
        fetch_attempts: int = 3,
        retry_wait_seconds: float = 2.0,
    ) -> None:
        self.endpoint_url: str | None = None
        self.class_symbol: str | None = None
        self.timeout = timeout
        self.fetch_attempts = fetch_attempts
        self.retry_wait_seconds = retry_wait_seconds

    @classmethod
    def from_config(cls, config: SuplConfig) -> "SubstitutionClient":
        """Build a client from settings; empty URL/class settings are left unset."""
        client = cls(
            timeout=config.request_timeout_seconds,
            fetch_attempts=config.fetch_attempts,
            retry_wait_seconds=config.retry_wait_seconds,
        )
        if config.supl_endpoint_url:
            client.set_endpoint_url(config.supl_endpoint_url)
        if config.supl_class_symbol:
            client.set_class_symbol(config.supl_class_symbol)
        return client

    def set_endpoint_url(self, url: str) -> None:
        """Set the bulletin URL.

        Raises:
            ValueError: If the URL does not point at a jecnarozvrh endpoint.
        """
        if REQUIRED_URL_PART not in url:
            raise ValueError(f"Endpoint URL must contain {REQUIRED_URL_PART!r}: {url!r}")
        self.endpoint_url = url

    def set_class_symbol(self, symbol: str) -> None:
        """Set the class whose substitutions fetch_class_substitutions returns.

        Raises:
            ValueError: If the symbol is blank or shorter than two characters.
        """
        cleaned = symbol.strip()
        if len(cleaned) < MIN_CLASS_SYMBOL_LENGTH:
            raise ValueError(
                f"Class symbol must have at least {MIN_CLASS_SYMBOL_LENGTH} characters, "
                f"got {symbol!r}"
            )
        self.class_symbol = cleaned

    def fetch_raw(self) -> str:
        """GET the bulletin body, retrying transient failures.

        Raises:
            ConfigurationError: If no endpoint URL has been set.
            TransientError: If every attempt failed transiently.
            PermanentError: On a non-retryable HTTP status.
            MalformedInput: If the body is not UTF-8.
        """
        if self.endpoint_url is None:
            raise ConfigurationError("Endpoint URL is not set")

        for attempt in Retrying(
            stop=stop_after_attempt(self.fetch_attempts),
            wait=wait_fixed(self.retry_wait_seconds),
            retry=retry_if_exception_type(TransientError),
            reraise=True,
        ):
            with attempt:
                return self._get(self.endpoint_url)

    def _get(self, url: str) -> str:
        log.debug("substitutions_fetch_started", url=url)
        try:
            response = requests.get(url, headers=_HEADERS, timeout=self.timeout)
        except (requests.Timeout, requests.ConnectionError) as e:
            log.warning("substitutions_fetch_failed", url=url, error=str(e))
            raise TransientError(f"Fetching substitutions failed: {e}") from e

        if response.status_code == 429 or response.status_code >= 500:
            log.warning("substitutions_fetch_failed", url=url, status=response.status_code)
            raise TransientError(f"Unexpected HTTP status: {response.status_code}")
        if response.status_code != 200:
            log.error("substitutions_fetch_failed", url=url, status=response.status_code)
            raise PermanentError(f"Unexpected HTTP status: {response.status_code}")

        try:
            body = response.content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise MalformedInput(f"Response body is not UTF-8: {e}") from e

        log.info("substitutions_fetched", url=url, size=len(body))
        return body

    def fetch_schedule(self) -> ScheduleWithAbsences:
        """Fetch and parse the whole bulletin."""
        return parse_complete_schedule(self.fetch_raw())

    def fetch_class_substitutions(self) -> list[tuple[str, list[SubstitutedLesson]]]:
        """Fetch the bulletin and return (date, lessons) for the configured class.

        Raises:
            ConfigurationError: If no class symbol has been set.
        """
        if self.class_symbol is None:
            raise ConfigurationError("Class symbol is not set")
        schedule = self.fetch_schedule()
        days = schedule.for_class(self.class_symbol)
        log.info(
            "class_substitutions_found",
            class_symbol=self.class_symbol,
            days=len(days),
        )
        return days
