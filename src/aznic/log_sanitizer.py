"""Log sanitization for messages that reach the console or logs.

Azure SDK errors can echo request fragments back to the caller. Before an
error message is printed it is passed through LogSanitizer so that:
- Client secrets (assignments and AZURE_CLIENT_SECRET=...) are redacted
- VM admin passwords (adminPassword / password fields) are redacted
- Bearer tokens and access tokens are redacted
- Known secret values registered at startup are scrubbed verbatim

Design Philosophy:
- Security first: err on side of over-redaction
- Pattern-based, plus exact-value scrubbing for secrets we know about
"""

import re
import threading
from re import Pattern


class LogSanitizer:
    """Sanitize sensitive data from logs and error messages.

    All methods are class methods and can be called without instantiation.
    """

    REDACTED = "[REDACTED]"
    MASKED = "****"

    # Order matters: more specific patterns come first
    SECRET_PATTERNS: dict[str, Pattern] = {
        "client_secret_env": re.compile(
            r"(AZURE_CLIENT_SECRET[\"']?\s*[:=]\s*[\"']?)([^\s\"'&,\)]+)",
            re.IGNORECASE,
        ),
        "client_secret_assignment": re.compile(
            r'(client[_-]?secret["\']?\s*[:=]\s*["\']?)([^\s"\'&,\)]+)',
            re.IGNORECASE,
        ),
        # Matches both adminPassword (ARM JSON) and admin_password (SDK models)
        "password": re.compile(
            r'((?:admin[_-]?)?password["\']?\s*[:=]\s*["\']?)([^\s"\'&,\)]+)', re.IGNORECASE
        ),
        "authorization_bearer": re.compile(r"(Bearer\s+)([^\s\"']+)", re.IGNORECASE),
        "access_token": re.compile(
            r'(access[_-]?token["\']?\s*[:=]\s*["\']?)([^\s"\'&,\)]+)',
            re.IGNORECASE,
        ),
    }

    UUID_PATTERN: Pattern = re.compile(
        r"\b([0-9a-f]{8})-([0-9a-f]{4})-([0-9a-f]{4})-([0-9a-f]{4})-([0-9a-f]{12})\b",
        re.IGNORECASE,
    )

    _known_secrets: set[str] = set()
    _lock = threading.Lock()

    @classmethod
    def register_secret(cls, value: str | None) -> None:
        """Remember a secret value so it is scrubbed wherever it appears.

        Values shorter than four characters are ignored; masking them would
        mangle unrelated text.
        """
        if value and len(value) >= 4:
            with cls._lock:
                cls._known_secrets.add(value)

    @classmethod
    def clear_secrets(cls) -> None:
        """Forget all registered secret values."""
        with cls._lock:
            cls._known_secrets.clear()

    @classmethod
    def sanitize(cls, message: str) -> str:
        """Sanitize message by redacting sensitive patterns.

        Args:
            message: The message to sanitize

        Returns:
            Sanitized message with secrets replaced by [REDACTED]

        Examples:
            >>> LogSanitizer.sanitize("client_secret=abc123")
            'client_secret=[REDACTED]'
            >>> LogSanitizer.sanitize('"adminPassword": "Pa55word"')
            '"adminPassword": "[REDACTED]"'
        """
        if not isinstance(message, str):
            message = str(message)

        with cls._lock:
            known = sorted(cls._known_secrets, key=len, reverse=True)
        result = message
        for secret in known:
            result = result.replace(secret, cls.REDACTED)

        for pattern in cls.SECRET_PATTERNS.values():
            result = pattern.sub(r"\1" + cls.REDACTED, result)

        return result

    @classmethod
    def mask_uuids(cls, message: str) -> str:
        """Partially mask UUIDs (tenant, client and subscription ids).

        Examples:
            >>> LogSanitizer.mask_uuids("tenant 12345678-1234-1234-1234-123456789abc")
            'tenant 12345678-****-****-****-************'
        """
        return cls.UUID_PATTERN.sub(lambda m: f"{m.group(1)}-****-****-****-************", message)

    @classmethod
    def sanitize_exception(cls, exc: BaseException) -> str:
        """Sanitize an exception message.

        Examples:
            >>> LogSanitizer.sanitize_exception(ValueError("client_secret=abc123"))
            'client_secret=[REDACTED]'
        """
        return cls.sanitize(str(exc))

    @classmethod
    def create_safe_error_message(cls, error: BaseException, context: str = "") -> str:
        """Create an error message with secrets sanitized.

        Examples:
            >>> err = ValueError("Auth failed with client_secret=abc123")
            >>> LogSanitizer.create_safe_error_message(err, "Authentication")
            'Authentication: Auth failed with client_secret=[REDACTED]'
        """
        sanitized_msg = cls.sanitize_exception(error)
        if context:
            return f"{context}: {sanitized_msg}"
        return sanitized_msg
