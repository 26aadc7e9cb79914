import logging
import time
from typing import Callable, TypeVar

from django.conf import settings
from django.db import InterfaceError, OperationalError

from clinic.exceptions import BackendUnavailable

logger = logging.getLogger(__name__)

T = TypeVar('T')

TRANSIENT_ERRORS = (OperationalError, InterfaceError)


def retry_read(fn: Callable[[], T], *, attempts: int | None = None, base_delay: float | None = None,
               sleep: Callable[[float], None] = time.sleep) -> T:
    """Run a read with exponential backoff on transient database errors.

    Raises :class:`BackendUnavailable` once the attempts are used up. Only
    use it for reads; writes are never replayed.
    """
    attempts = max(1, attempts or settings.READ_RETRY_ATTEMPTS)
    delay = settings.READ_RETRY_BASE_DELAY if base_delay is None else base_delay
    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except TRANSIENT_ERRORS as exc:
            if attempt == attempts:
                logger.error('read failed after %d attempts: %s', attempts, exc)
                raise BackendUnavailable() from exc
            logger.warning('transient read error (attempt %d/%d): %s', attempt, attempts, exc)
            sleep(delay * (2 ** (attempt - 1)))
    raise BackendUnavailable()
