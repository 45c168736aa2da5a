"""
Portfolio service: domain-specific HTTP exceptions.

All exceptions use preset status codes, messages and a machine-readable `code`
so that callers never need to specify these at the call site. The error
handlers in shared.middleware wrap them in the standard error envelope.
"""
import enum

from fastapi import HTTPException, status


class AppError(HTTPException):
    code: str = "http_error"

    def __init__(self, status_code: int, detail: str, headers: dict[str, str] | None = None) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


# ── Validation ────────────────────────────────────────────────────────────────

class ValidationError(AppError):
    """Malformed input detected before any state mutation or external call."""

    code = "validation_error"

    def __init__(self, detail: str = "Invalid request.") -> None:
        super().__init__(status.HTTP_400_BAD_REQUEST, detail)


class PasswordMismatch(ValidationError):
    code = "password_mismatch"

    def __init__(self) -> None:
        super().__init__("Passwords do not match.")


class PasswordTooShort(ValidationError):
    code = "password_too_short"

    def __init__(self, min_length: int) -> None:
        super().__init__(f"Password must be at least {min_length} characters long.")


class PasswordTooLong(ValidationError):
    code = "password_too_long"

    def __init__(self, max_length: int) -> None:
        super().__init__(f"Password must be at most {max_length} characters long.")


class PasswordUnchanged(ValidationError):
    code = "password_unchanged"

    def __init__(self) -> None:
        super().__init__("New password cannot be the same as the current password.")


class OTPFormatInvalid(ValidationError):
    code = "otp_format_invalid"

    def __init__(self) -> None:
        super().__init__("Please enter a valid 6-digit OTP.")


class CarouselLimitExceeded(ValidationError):
    code = "carousel_limit_exceeded"

    def __init__(self, limit: int) -> None:
        super().__init__(f"The carousel can hold at most {limit} items.")


# ── Authentication ────────────────────────────────────────────────────────────

class InvalidCredentials(AppError):
    code = "invalid_credentials"

    def __init__(self) -> None:
        super().__init__(status.HTTP_401_UNAUTHORIZED, "Invalid email or password.")


class IncorrectCurrentPassword(AppError):
    code = "incorrect_current_password"

    def __init__(self) -> None:
        super().__init__(status.HTTP_401_UNAUTHORIZED, "Your current password is incorrect.")


class AccountGone(AppError):
    """The account behind a valid token has been deleted."""

    code = "account_gone"

    def __init__(self) -> None:
        super().__init__(
            status.HTTP_401_UNAUTHORIZED,
            "The user belonging to this token no longer exists.",
            headers={"WWW-Authenticate": "Bearer"},
        )


class TokenStale(AppError):
    """The password changed after this token was issued."""

    code = "token_stale"

    def __init__(self) -> None:
        super().__init__(
            status.HTTP_401_UNAUTHORIZED,
            "Password was changed recently. Please log in again.",
            headers={"WWW-Authenticate": "Bearer"},
        )


# ── OTP ───────────────────────────────────────────────────────────────────────

class InvalidOrExpiredOTP(AppError):
    code = "invalid_or_expired_otp"

    def __init__(self) -> None:
        super().__init__(status.HTTP_400_BAD_REQUEST, "Invalid or expired OTP.")


# ── Not found ─────────────────────────────────────────────────────────────────

class UserNotFound(AppError):
    code = "user_not_found"

    def __init__(self) -> None:
        super().__init__(status.HTTP_404_NOT_FOUND, "No account found with that email address.")


class PortfolioOwnerNotFound(AppError):
    """No superadmin account exists yet, so there is no public profile to show."""

    code = "portfolio_owner_not_found"

    def __init__(self) -> None:
        super().__init__(status.HTTP_404_NOT_FOUND, "Portfolio profile not found.")


class PublicationNotFound(AppError):
    code = "publication_not_found"

    def __init__(self) -> None:
        super().__init__(status.HTTP_404_NOT_FOUND, "Publication not found.")


# ── Email ─────────────────────────────────────────────────────────────────────

class EmailErrorKind(str, enum.Enum):
    SENDER_REJECTED = "sender_rejected"
    ACCESS_DENIED = "access_denied"
    UNKNOWN = "unknown"


_EMAIL_ERROR_MESSAGES: dict[EmailErrorKind, str] = {
    EmailErrorKind.SENDER_REJECTED: "Email rejected by the provider. Please verify the sender address.",
    EmailErrorKind.ACCESS_DENIED: "Email provider denied access. Check the service credentials.",
    EmailErrorKind.UNKNOWN: "Failed to send email. Please try again later.",
}


class EmailDeliveryError(AppError):
    """The transactional email provider failed; never retried automatically."""

    def __init__(self, kind: EmailErrorKind = EmailErrorKind.UNKNOWN, detail: str | None = None) -> None:
        self.kind = kind
        self.code = f"email_{kind.value}"
        super().__init__(
            status.HTTP_502_BAD_GATEWAY,
            detail or _EMAIL_ERROR_MESSAGES[kind],
        )


# ── Uploads ───────────────────────────────────────────────────────────────────

class UnsupportedFileType(AppError):
    code = "unsupported_file_type"

    def __init__(self, field: str, allowed: str) -> None:
        super().__init__(
            status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            f"Unsupported file for '{field}'. Allowed: {allowed}.",
        )


class FileTooLarge(AppError):
    code = "file_too_large"

    def __init__(self, field: str, max_bytes: int) -> None:
        super().__init__(
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            f"The file for '{field}' exceeds the maximum allowed size of {max_bytes // (1024 * 1024)} MB.",
        )


class StorageError(AppError):
    code = "storage_error"

    def __init__(self) -> None:
        super().__init__(
            status.HTTP_502_BAD_GATEWAY,
            "Could not store the uploaded file. Please try again.",
        )
