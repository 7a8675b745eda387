"""Secret retrieval with bounded, fixed-delay retry."""

import asyncio
import threading
from typing import Any

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_fixed,
)

from ..domain.exceptions import (
    ConfigurationError,
    RetrievalCancelledError,
    RetryInterruptedError,
    SecretStoreError,
)
from ..domain.models import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_REGION,
    DEFAULT_RETRY_DELAY_MS,
    ErrorCode,
    OutcomeRecord,
    RetrievalRequest,
    RetrievalState,
)
from ..observability.logging import get_logger
from .classifier import classify_error, is_transient
from .client_cache import RegionClientCache
from .normalizer import normalize_secret

logger = get_logger(__name__)

SECRET_NAME_MISSING = "Secret name not specified"

# How often an async retry wait checks the cancellation token
CANCELLATION_POLL_S = 0.05


class CancellationToken:
    """Interrupts the wait between two retry attempts."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: float) -> bool:
        """Block for up to ``seconds``. Returns True if cancelled meanwhile."""
        return self._event.wait(seconds)


def parse_int_with_default(value: str | None, default: int, field: str) -> int:
    """Parse a non-negative integer, falling back to ``default``.

    Blank values use the default silently; malformed or negative values
    are logged and use the default.
    """
    if value is None or not value.strip():
        return default
    try:
        number = int(value.strip())
    except ValueError:
        logger.warning(
            "Invalid integer value, using default",
            field=field,
            value=value,
            default=default,
        )
        return default
    if number < 0:
        logger.warning(
            "Negative value, using default", field=field, value=number, default=default
        )
        return default
    return number


def build_request(
    secret_id: str | None,
    region: str | None = None,
    max_retries: str | None = None,
    retry_delay: str | None = None,
    version_id: str | None = None,
    version_stage: str | None = None,
    default_region: str = DEFAULT_REGION,
    default_max_retries: int = DEFAULT_MAX_RETRIES,
    default_retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS,
) -> RetrievalRequest:
    """Build a request from resolved field text, applying defaults."""
    return RetrievalRequest(
        secret_id=(secret_id or "").strip(),
        region=(region or "").strip() or default_region,
        max_retries=parse_int_with_default(
            max_retries, default_max_retries, "maxRetries"
        ),
        retry_delay_ms=parse_int_with_default(
            retry_delay, default_retry_delay_ms, "retryDelay"
        ),
        version_id=(version_id or "").strip() or None,
        version_stage=(version_stage or "").strip() or None,
    )


def validate_request(request: RetrievalRequest) -> None:
    """Reject requests that must not reach the secret store."""
    if not request.secret_id.strip():
        raise ConfigurationError(SECRET_NAME_MISSING, field="secretName")


def call_parameters(request: RetrievalRequest) -> dict[str, str]:
    params = {"SecretId": request.secret_id}
    if request.version_id:
        params["VersionId"] = request.version_id
    if request.version_stage:
        params["VersionStage"] = request.version_stage
    return params


class _Run:
    """Mutable progress of one retrieval."""

    def __init__(self, request: RetrievalRequest, token: CancellationToken):
        self.request = request
        self.token = token
        self.attempts = 0
        self.last_error: SecretStoreError | None = None
        self.state = RetrievalState.VALIDATING

    def transition(self, state: RetrievalState) -> None:
        logger.debug(
            "Retrieval state changed",
            secret_id=self.request.secret_id,
            from_state=self.state.value,
            to_state=state.value,
            attempt=self.attempts,
        )
        self.state = state

    def sleep(self, seconds: float) -> None:
        if self.token.wait(seconds):
            raise RetryInterruptedError(self.attempts)

    async def async_sleep(self, seconds: float) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + seconds
        while not self.token.cancelled:
            remaining = deadline - loop.time()
            if remaining <= 0:
                return
            await asyncio.sleep(min(remaining, CANCELLATION_POLL_S))
        raise RetryInterruptedError(self.attempts)

    def before_sleep(self, retry_state: RetryCallState) -> None:
        self.transition(RetrievalState.RETRYING)
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Secret retrieval failed, retrying",
            secret_id=self.request.secret_id,
            attempt=retry_state.attempt_number,
            max_attempts=self.request.max_attempts,
            delay=self.request.retry_delay_seconds,
            error_type=type(error).__name__ if error else None,
            error_message=str(error) if error else None,
        )


class SecretRetriever:
    """Runs the retrieval state machine against region-bound clients."""

    def __init__(
        self,
        clients: RegionClientCache,
        cancellation: CancellationToken | None = None,
    ):
        self.clients = clients
        self.cancellation = cancellation or CancellationToken()

    def _retrying_options(self, run: _Run) -> dict[str, Any]:
        return {
            "stop": stop_after_attempt(run.request.max_attempts),
            "wait": wait_fixed(run.request.retry_delay_seconds),
            "retry": retry_if_exception(is_transient),
            "before_sleep": run.before_sleep,
            "reraise": True,
        }

    def _validate(self, run: _Run) -> OutcomeRecord | None:
        try:
            validate_request(run.request)
        except ConfigurationError as e:
            logger.error(e.message, field=e.field)
            run.transition(RetrievalState.PERMANENT_FAILURE)
            return OutcomeRecord.failure(
                RetrievalState.PERMANENT_FAILURE, e.error_code, e.message
            )
        return None

    def _fetch(self, run: _Run) -> dict[str, Any]:
        run.attempts += 1
        run.transition(RetrievalState.FETCHING)
        request = run.request
        logger.info(
            "Fetching secret",
            secret_id=request.secret_id,
            region=request.region,
            attempt=run.attempts,
            max_attempts=request.max_attempts,
        )
        try:
            client = self.clients.get(request.region)
            return client.get_secret_value(**call_parameters(request))
        except SecretStoreError as e:
            run.last_error = e
            raise
        except Exception as e:
            error = classify_error(e, request.secret_id)
            run.last_error = error
            raise error from e

    def _succeeded(self, run: _Run, response: dict[str, Any]) -> OutcomeRecord:
        run.transition(RetrievalState.SUCCEEDED)
        result = normalize_secret(response)
        logger.info(
            "Secret retrieved",
            secret_id=run.request.secret_id,
            attempts=run.attempts,
            value_type=result.value_type.value,
            version_id=result.version_id,
        )
        return OutcomeRecord.success(result, run.attempts)

    def _store_failure(self, run: _Run, error: SecretStoreError) -> OutcomeRecord:
        if not error.retryable:
            run.transition(RetrievalState.PERMANENT_FAILURE)
            logger.error(
                "Secret retrieval failed",
                secret_id=run.request.secret_id,
                error_code=error.error_code.value,
                remote_code=error.remote_code,
                status_code=error.status_code,
                attempts=run.attempts,
            )
            return OutcomeRecord.failure(
                RetrievalState.PERMANENT_FAILURE,
                error.error_code,
                error.message,
                error.status_code,
                run.attempts,
            )

        run.transition(RetrievalState.EXHAUSTED_FAILURE)
        logger.error(
            "Secret retrieval failed after all retries",
            secret_id=run.request.secret_id,
            attempts=run.attempts,
            error_message=error.message,
        )
        return OutcomeRecord.failure(
            RetrievalState.EXHAUSTED_FAILURE,
            ErrorCode.RETRY_EXHAUSTED,
            f"Failed to retrieve secret after {run.attempts} attempts: {error.message}",
            500,
            run.attempts,
        )

    def _interrupted(self, run: _Run) -> OutcomeRecord:
        run.transition(RetrievalState.EXHAUSTED_FAILURE)
        last_message = run.last_error.message if run.last_error else "no response"
        logger.warning(
            "Secret retrieval interrupted",
            secret_id=run.request.secret_id,
            attempts=run.attempts,
        )
        return OutcomeRecord.failure(
            RetrievalState.EXHAUSTED_FAILURE,
            ErrorCode.RETRY_INTERRUPTED,
            f"Retry interrupted after {run.attempts} attempts: {last_message}",
            500,
            run.attempts,
        )

    def retrieve(
        self,
        request: RetrievalRequest,
        cancellation: CancellationToken | None = None,
    ) -> OutcomeRecord:
        """Fetch one secret, retrying transient failures.

        Args:
            request: The lookup to perform
            cancellation: Token that interrupts the wait between attempts;
                defaults to the retriever's own token

        Returns:
            The outcome of the invocation. Store failures are reported in the
            record, never raised.
        """
        run = _Run(request, cancellation or self.cancellation)
        invalid = self._validate(run)
        if invalid is not None:
            return invalid

        retrying = Retrying(sleep=run.sleep, **self._retrying_options(run))
        try:
            for attempt in retrying:
                with attempt:
                    response = self._fetch(run)
        except RetryInterruptedError:
            return self._interrupted(run)
        except SecretStoreError as e:
            return self._store_failure(run, e)

        return self._succeeded(run, response)

    async def aretrieve(
        self,
        request: RetrievalRequest,
        cancellation: CancellationToken | None = None,
    ) -> OutcomeRecord:
        """Async variant of ``retrieve``.

        The blocking client call runs in a worker thread so the event loop is
        never blocked. If the surrounding task is cancelled, the interrupted
        outcome travels on a ``RetrievalCancelledError``.
        """
        run = _Run(request, cancellation or self.cancellation)
        invalid = self._validate(run)
        if invalid is not None:
            return invalid

        retrying = AsyncRetrying(sleep=run.async_sleep, **self._retrying_options(run))
        try:
            async for attempt in retrying:
                with attempt:
                    response = await asyncio.to_thread(self._fetch, run)
        except RetryInterruptedError:
            return self._interrupted(run)
        except SecretStoreError as e:
            return self._store_failure(run, e)
        except asyncio.CancelledError:
            raise RetrievalCancelledError(self._interrupted(run))

        return self._succeeded(run, response)
