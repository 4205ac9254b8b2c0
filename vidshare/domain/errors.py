"""
Error taxonomy shared by every layer.

Each error carries a stable ``code`` (the source of truth for callers) and a
human-readable message. The HTTP layer maps classes to status codes in
``vidshare.middleware.error_handler``; nothing below it knows about HTTP.
"""


class VidShareError(Exception):
    code = "ERROR"
    default_message = "Unexpected error"

    def __init__(self, message: str | None = None, *, field: str | None = None):
        self.message = message or self.default_message
        self.field = field
        super().__init__(self.message)

    def to_dict(self) -> dict:
        details = {"field": self.field} if self.field else None
        return {"code": self.code, "message": self.message, "details": details}


# ── Validation ───────────────────────────────────────────

class ValidationError(VidShareError):
    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class MissingFieldError(ValidationError):
    code = "MISSING_FIELD"
    default_message = "All fields are required!"


class TooShortError(ValidationError):
    code = "TOO_SHORT"
    default_message = "All fields must have at least 3 characters"


class FieldTooLongError(ValidationError):
    code = "FIELD_TOO_LONG"
    default_message = "Field is too long"


class PasswordTooLongError(ValidationError):
    code = "PASSWORD_TOO_LONG"
    default_message = "Password cannot exceed 15 characters"


class UsernameHasSpacesError(ValidationError):
    code = "USERNAME_HAS_SPACES"
    default_message = "Username cannot contain spaces"


class WeakPasswordError(ValidationError):
    code = "WEAK_PASSWORD"
    default_message = (
        "Password must be 5 to 15 characters long and contain at least one "
        "lowercase letter, one uppercase letter, and one number"
    )


class InvalidUsernameCharsError(ValidationError):
    code = "INVALID_USERNAME_CHARS"
    default_message = "Username must only contain letters and numbers"


class InvalidEmailError(ValidationError):
    code = "INVALID_EMAIL"
    default_message = "Email must be a valid address of at most 30 characters"


class TitleTooLongError(ValidationError):
    code = "TITLE_TOO_LONG"
    default_message = "Title is too long"


class UnsupportedFileTypeError(ValidationError):
    code = "UNSUPPORTED_FILE_TYPE"
    default_message = "File type is not allowed"


class FileTooLargeError(ValidationError):
    code = "FILE_TOO_LARGE"
    default_message = "File is too large"


class CommentTooLongError(ValidationError):
    code = "COMMENT_TOO_LONG"
    default_message = "Comment is too long"


# ── Authentication / permissions ─────────────────────────

class InvalidCredentialsError(VidShareError):
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid username or password"


class UnauthorizedUploadError(VidShareError):
    code = "UNAUTHORIZED_UPLOAD"
    default_message = "Only registered users can upload videos"


class ForbiddenError(VidShareError):
    code = "FORBIDDEN"
    default_message = "You are not allowed to modify this resource"


class NotFoundError(VidShareError):
    code = "NOT_FOUND"
    default_message = "Resource not found"


# ── Persistence ──────────────────────────────────────────

class DuplicateUsernameError(VidShareError):
    code = "DUPLICATE_USERNAME"
    default_message = "Username already registered"


class DuplicateEmailError(VidShareError):
    code = "DUPLICATE_EMAIL"
    default_message = "Email already registered"


class PoolExhaustedError(VidShareError):
    code = "POOL_EXHAUSTED"
    default_message = "Database is busy, try again later"


class PersistenceError(VidShareError):
    code = "PERSISTENCE_ERROR"
    default_message = "Database operation failed"


# ── Storage ──────────────────────────────────────────────

class StorageError(VidShareError):
    code = "STORAGE_ERROR"
    default_message = "Storage failure"


class StorageWriteError(StorageError):
    code = "STORAGE_WRITE_FAILED"
    default_message = "Could not write the file to staging storage"


class StoragePromotionError(StorageError):
    code = "STORAGE_PROMOTION_FAILED"
    default_message = "Could not move the file to durable storage"
