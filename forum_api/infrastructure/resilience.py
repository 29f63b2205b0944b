# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Retry helper for calls to external stores."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from forum_api.shared.config import load_config
from forum_api.shared.logging import logger

T = TypeVar("T")

TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (RedisConnectionError, RedisTimeoutError)


def call_with_retries(  # noqa: UP047
    func: Callable[..., T],
    *args: Any,
    **kwargs: Any,
) -> T:
    """Run ``func`` retrying transient connection failures, then re-raise the last one."""

    config = load_config().resilience
    retry = Retrying(
        stop=stop_after_attempt(config.max_retries + 1),
        wait=wait_exponential(multiplier=config.backoff_base, max=config.backoff_cap),
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        reraise=True,
    )

    for attempt in retry:
        with attempt:
            if attempt.retry_state.attempt_number > 1:
                logger.debug(
                    f"resilience: attempt={attempt.retry_state.attempt_number} "
                    f"func={getattr(func, '__name__', func)}"
                )
            return func(*args, **kwargs)
    raise RuntimeError("resilience: reached unexpected branch")


__all__ = ["call_with_retries"]
