# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

import logging
import random as _random
import time
from typing import Any, Callable, TypeVar

from budget_horizon.config import RetryPolicy

T = TypeVar("T")

logger = logging.getLogger("budget_horizon.retry")


def _as_status(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def extract_status_code(error: BaseException) -> int | None:
    """
    Find an HTTP-like status code on an exception.

    Checks ``status_code``, ``status`` and ``code`` on the error itself,
    then ``status``/``status_code`` on its ``resp`` or ``response``.
    Returns None when nothing numeric is found.
    """
    for attribute in ("status_code", "status", "code"):
        status = _as_status(getattr(error, attribute, None))
        if status is not None:
            return status

    for holder_name in ("resp", "response"):
        holder = getattr(error, holder_name, None)
        if holder is None:
            continue
        for attribute in ("status", "status_code"):
            status = _as_status(getattr(holder, attribute, None))
            if status is not None:
                return status

    return None


def should_retry(error: BaseException, policy: RetryPolicy) -> bool:
    status = extract_status_code(error)
    return status is not None and status in policy.retry_status_codes


def compute_delay(attempt: int, policy: RetryPolicy, random: Callable[[], float]) -> float:
    """
    Delay in seconds before retry number ``attempt`` (0-based).

    Exponential growth capped at ``max_delay_seconds``, scaled by a jitter
    factor in ``[0.5, 1.0)``.
    """
    exponential = min(policy.max_delay_seconds, policy.base_delay_seconds * (2**attempt))
    return exponential * (0.5 + random() * 0.5)


def execute_with_retry(
    run: Callable[[], T],
    policy: RetryPolicy | None = None,
    *,
    sleep: Callable[[float], None] = time.sleep,
    random: Callable[[], float] = _random.random,
    description: str = "store call",
) -> T:
    """
    Run ``run`` and retry transient failures with exponential backoff.

    Only errors carrying a retryable status code (rate limits, timeouts,
    server errors) are retried. Anything else, or the last failed attempt,
    propagates unchanged.
    """
    policy = policy or RetryPolicy()
    attempt = 0

    while True:
        try:
            return run()
        except Exception as error:
            attempt += 1
            if not should_retry(error, policy) or attempt >= policy.max_attempts:
                raise
            delay = compute_delay(attempt - 1, policy, random)
            logger.warning(
                "%s failed with status %s (attempt %d/%d); retrying in %.3fs",
                description,
                extract_status_code(error),
                attempt,
                policy.max_attempts,
                delay,
            )
            sleep(delay)
