"""Error Taxonomy - closed, tagged set of failures raised by the FNE client.

Invariants:
    - Exactly four kinds: VALIDATION, AUTH, REMOTE, TRANSPORT (ErrorKind is the discriminator)
    - Every error carries a code (str), a human-readable message and an ErrorContext
    - to_dict() output is JSON-serializable (timestamps ISO-8601, causes stringified)
    - ValidationFailure always carries the complete Error Set, never only the first violation

Design Decisions:
    - Single hierarchy under FneError: callers catch one base, branch on `kind`
    - ErrorContext as dataclass: observability fields without coupling to logging
    - Sub-classifications (AuthReason, TransportReason) are str Enums, serialized by value
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Discriminator for exhaustive branching on FneError."""
    VALIDATION = "validation"
    AUTH = "auth"
    REMOTE = "remote"
    TRANSPORT = "transport"


class AuthReason(str, Enum):
    MISSING_CREDENTIAL = "missing_credential"
    CREDENTIAL_TOO_SHORT = "credential_too_short"
    INVALID_CREDENTIAL = "invalid_credential"
    SESSION_EXPIRED = "session_expired"
    UNAUTHORIZED = "unauthorized"


class TransportReason(str, Enum):
    TIMEOUT = "timeout"
    DNS = "dns"
    CONNECTION_REFUSED = "connection_refused"
    CONNECTION_RESET = "connection_reset"
    TLS = "tls"
    GENERIC = "generic"


@dataclass
class ErrorContext:
    """Machine-readable context attached to every FneError."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    method: str | None = None
    endpoint: str | None = None
    attempt: int | None = None
    debug_info: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "method": self.method,
            "endpoint": self.endpoint,
            "attempt": self.attempt,
            "debug_info": dict(self.debug_info),
        }


class FneError(Exception):
    """Base exception for all FNE client failures."""

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        code: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.context = context or ErrorContext()

    def with_context(self, **fields: Any) -> "FneError":
        """Merge fields into the context. Known attributes are set, the rest go to debug_info."""
        for key, value in fields.items():
            if key in ("method", "endpoint", "attempt"):
                setattr(self.context, key, value)
            else:
                self.context.debug_info[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Plain structured form for logging and telemetry."""
        return {
            "kind": self.kind.value,
            "code": self.code,
            "message": self.message,
            "context": self.context.to_dict(),
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


# ─── Validation ──────────────────────────────────────────────────

class ValidationFailure(FneError):
    """Document failed local validation. Raised before any network call."""

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str,
        errors: dict[str, str] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(message, "VALIDATION_ERROR", context)
        self._errors: dict[str, str] = dict(errors or {})

    @classmethod
    def with_errors(cls, errors: dict[str, str]) -> "ValidationFailure":
        return cls(f"Validation failed: {len(errors)} error(s) found", errors)

    @classmethod
    def for_field(cls, field_name: str, message: str) -> "ValidationFailure":
        return cls(
            f"Validation failed for {field_name}: {message}",
            {field_name: message},
        )

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

    def has_error(self, field_name: str) -> bool:
        return field_name in self._errors

    def get_error(self, field_name: str) -> str | None:
        return self._errors.get(field_name)

    def field_names(self) -> list[str]:
        return list(self._errors)

    def error_count(self) -> int:
        return len(self._errors)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["errors"] = self.errors
        return data


# ─── Authentication ──────────────────────────────────────────────

class AuthFailure(FneError):
    """Credential missing, malformed or rejected by the service (HTTP 401)."""

    kind = ErrorKind.AUTH

    def __init__(
        self,
        message: str,
        reason: AuthReason,
        context: ErrorContext | None = None,
    ):
        super().__init__(message, "AUTH_ERROR", context)
        self.reason = reason

    @classmethod
    def missing_credential(cls) -> "AuthFailure":
        return cls(
            "No API key provided. Configure an API key before sending requests.",
            AuthReason.MISSING_CREDENTIAL,
        )

    @classmethod
    def credential_too_short(cls, min_length: int) -> "AuthFailure":
        err = cls(
            f"The API key must contain at least {min_length} characters.",
            AuthReason.CREDENTIAL_TOO_SHORT,
        )
        err.context.debug_info["min_length"] = min_length
        return err

    @classmethod
    def invalid_credential(cls) -> "AuthFailure":
        return cls(
            "Invalid or missing API key. Check your API key.",
            AuthReason.INVALID_CREDENTIAL,
        )

    @classmethod
    def session_expired(cls) -> "AuthFailure":
        return cls(
            "The token has expired. Authenticate again.",
            AuthReason.SESSION_EXPIRED,
        )

    @classmethod
    def unauthorized(cls) -> "AuthFailure":
        return cls(
            "Authentication failed. You are not authorized to access this resource.",
            AuthReason.UNAUTHORIZED,
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["reason"] = self.reason.value
        return data


# ─── Remote (HTTP status) ────────────────────────────────────────

class RemoteFailure(FneError):
    """Service answered with a non-success status (other than 401)."""

    kind = ErrorKind.REMOTE

    def __init__(
        self,
        message: str,
        status_code: int,
        body: Any = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(message, "REMOTE_ERROR", context)
        self.status_code = status_code
        self.body = body

    @classmethod
    def from_response(cls, status_code: int, body: Any = None) -> "RemoteFailure":
        detail = body.get("message") or body.get("error") if isinstance(body, dict) else None
        message = str(detail) if detail else f"API error: {status_code}"
        return cls(message, status_code, body)

    @classmethod
    def invalid_response(cls, status_code: int, body_text: str) -> "RemoteFailure":
        """Success status but the body is not the expected JSON object."""
        err = cls("Invalid API response: body is not the expected JSON object", status_code)
        err.context.debug_info["body_preview"] = body_text[:200]
        return err

    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    def is_server_error(self) -> bool:
        return self.status_code >= 500

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        data["body"] = self.body
        return data


# ─── Transport ───────────────────────────────────────────────────

class TransportFailure(FneError):
    """Request never produced an HTTP response (network, TLS, timeout)."""

    kind = ErrorKind.TRANSPORT

    def __init__(
        self,
        message: str,
        reason: TransportReason = TransportReason.GENERIC,
        cause: BaseException | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(message, "TRANSPORT_ERROR", context)
        self.reason = reason
        self.cause = cause

    @classmethod
    def timeout(
        cls, timeout_ms: int | None = None, cause: BaseException | None = None,
    ) -> "TransportFailure":
        if timeout_ms:
            message = f"Request timed out after {timeout_ms}ms. The server is not responding."
        else:
            message = "Request timed out. The server is not responding."
        err = cls(message, TransportReason.TIMEOUT, cause)
        if timeout_ms:
            err.context.debug_info["timeout_ms"] = timeout_ms
        return err

    @classmethod
    def dns_resolution(cls, host: str | None = None, cause: BaseException | None = None) -> "TransportFailure":
        suffix = f": {host}" if host else "."
        return cls(f"Unable to resolve the server address{suffix}", TransportReason.DNS, cause)

    @classmethod
    def connection_refused(cls, host: str | None = None, cause: BaseException | None = None) -> "TransportFailure":
        suffix = f": {host}" if host else "."
        return cls(f"Connection refused by the server{suffix}", TransportReason.CONNECTION_REFUSED, cause)

    @classmethod
    def connection_reset(cls, cause: BaseException | None = None) -> "TransportFailure":
        return cls(
            "The connection was reset by the server.",
            TransportReason.CONNECTION_RESET,
            cause,
        )

    @classmethod
    def tls_failure(cls, cause: BaseException | None = None) -> "TransportFailure":
        return cls(
            "SSL/TLS certificate error. The secure connection failed.",
            TransportReason.TLS,
            cause,
        )

    @classmethod
    def connection_failed(cls, cause: BaseException | None = None) -> "TransportFailure":
        return cls(
            "Unable to connect to the FNE server. Check your network connection.",
            TransportReason.GENERIC,
            cause,
        )

    @classmethod
    def from_exception(cls, exc: BaseException) -> "TransportFailure":
        """Classify a low-level exception by its type name and message."""
        text = f"{type(exc).__name__} {exc}".lower()
        if "timeout" in text or "timed out" in text:
            return cls.timeout(cause=exc)
        if (
            "enotfound" in text or "dns" in text
            or "name or service not known" in text
            or "nodename nor servname" in text
            or "getaddrinfo" in text
        ):
            return cls.dns_resolution(cause=exc)
        if "econnrefused" in text or "connection refused" in text:
            return cls.connection_refused(cause=exc)
        if "econnreset" in text or "connection reset" in text:
            return cls.connection_reset(cause=exc)
        if "ssl" in text or "certificate" in text or "tls" in text:
            return cls.tls_failure(cause=exc)
        return cls.connection_failed(cause=exc)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["reason"] = self.reason.value
        data["cause"] = str(self.cause) if self.cause is not None else None
        return data
