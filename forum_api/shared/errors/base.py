# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, ClassVar


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code}
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class _DefaultedError(AppError):
    """AppError whose code and status come from class attributes unless overridden."""

    default_code: ClassVar[str] = "app_error"
    default_status: ClassVar[HTTPStatus] = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(
        self,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code or self.default_code,
            status=status or self.default_status,
            context=context,
        )


class DomainError(_DefaultedError):
    """Business rule violation; safe to show to the caller."""

    default_code = "domain_error"
    default_status = HTTPStatus.BAD_REQUEST


class InfrastructureError(_DefaultedError):
    """A backing service failed; details stay in the logs."""

    default_code = "infrastructure_error"


class PersistenceError(InfrastructureError):
    default_code = "persistence_error"

    def __init__(self, operation: str) -> None:
        super().__init__(context={"operation": operation})


class SessionStoreUnavailableError(InfrastructureError):
    default_code = "session_store_unavailable"
    default_status = HTTPStatus.SERVICE_UNAVAILABLE

    def __init__(self, operation: str) -> None:
        super().__init__(context={"operation": operation})
