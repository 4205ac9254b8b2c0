"""
Input validation for registration, video uploads and comments.

Rules run in a fixed order (presence, length, character class, composite
strength) and the first failing rule is raised, so the reported error is
deterministic for any input.
"""

import re
from dataclasses import dataclass
from pathlib import PurePath

from vidshare.domain.errors import (
    CommentTooLongError,
    FieldTooLongError,
    FileTooLargeError,
    InvalidEmailError,
    InvalidUsernameCharsError,
    MissingFieldError,
    PasswordTooLongError,
    TitleTooLongError,
    TooShortError,
    UnsupportedFileTypeError,
    UsernameHasSpacesError,
    WeakPasswordError,
)

MIN_FIELD_LENGTH = 3
PASSWORD_MAX_LENGTH = 15
MAX_FIELD_LENGTHS = {"first_name": 100, "last_name": 100, "username": 15}
EMAIL_MAX_LENGTH = 30
TITLE_MAX_LENGTH = 100
COMMENT_MAX_LENGTH = 1000

PASSWORD_PATTERN = re.compile(r"(?=.*[a-z])(?=.*[A-Z])(?=.*\d).{5,15}")
USERNAME_PATTERN = re.compile(r"[A-Za-z0-9]+")
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


@dataclass(frozen=True)
class Registration:
    first_name: str
    last_name: str
    username: str
    password: str
    email: str


@dataclass(frozen=True)
class VideoUpload:
    title: str
    extension: str
    size: int


def validate_registration(
    first_name: str | None,
    last_name: str | None,
    username: str | None,
    password: str | None,
    email: str | None,
) -> Registration:
    """Check a registration tuple and return it normalized.

    Names and email are stripped and the email lower-cased; username and
    password are kept verbatim so that embedded spaces are reported.
    """
    first_name = (first_name or "").strip()
    last_name = (last_name or "").strip()
    email = (email or "").strip().lower()
    username = username or ""
    password = password or ""

    fields = {
        "first_name": first_name,
        "last_name": last_name,
        "username": username,
        "password": password,
        "email": email,
    }
    for name, value in fields.items():
        if not value:
            raise MissingFieldError(field=name)

    for name in ("first_name", "last_name", "username"):
        if len(fields[name]) < MIN_FIELD_LENGTH:
            raise TooShortError(field=name)

    if len(password) > PASSWORD_MAX_LENGTH:
        raise PasswordTooLongError(field="password")

    if any(ch.isspace() for ch in username):
        raise UsernameHasSpacesError(field="username")

    if not PASSWORD_PATTERN.fullmatch(password):
        raise WeakPasswordError(field="password")

    if not USERNAME_PATTERN.fullmatch(username):
        raise InvalidUsernameCharsError(field="username")

    # Upper bounds run last; character errors take precedence.
    for name, limit in MAX_FIELD_LENGTHS.items():
        if len(fields[name]) > limit:
            label = name.replace("_", " ").capitalize()
            raise FieldTooLongError(f"{label} cannot exceed {limit} characters", field=name)

    if len(email) > EMAIL_MAX_LENGTH or not EMAIL_PATTERN.fullmatch(email):
        raise InvalidEmailError(field="email")

    return Registration(first_name, last_name, username, password, email)


def file_extension(filename: str) -> str:
    """Lower-cased extension without the dot, or "" when there is none."""
    return PurePath(filename).suffix.lstrip(".").lower()


def validate_video_upload(
    title: str | None,
    filename: str | None,
    size: int,
    *,
    allowed_extensions: list[str] | tuple[str, ...],
    max_size_bytes: int,
) -> VideoUpload:
    title = validate_video_title(title)

    if not filename or size <= 0:
        raise MissingFieldError("A video file is required", field="file")

    extension = file_extension(filename)
    allowed = {ext.lower().lstrip(".") for ext in allowed_extensions}
    if extension not in allowed:
        raise UnsupportedFileTypeError(
            f"File type '.{extension}' is not allowed. Allowed: {', '.join(sorted(allowed))}",
            field="file",
        )

    if size > max_size_bytes:
        max_mb = max_size_bytes / (1024 * 1024)
        raise FileTooLargeError(
            f"File too large ({size / (1024 * 1024):.1f} MB). Max is {max_mb:.0f} MB.",
            field="file",
        )

    return VideoUpload(title=title, extension=extension, size=size)


def validate_video_title(title: str | None) -> str:
    """Title rules alone, for metadata updates."""
    title = (title or "").strip()
    if not title:
        raise MissingFieldError("Title is required", field="title")
    if len(title) > TITLE_MAX_LENGTH:
        raise TitleTooLongError(
            f"Title cannot exceed {TITLE_MAX_LENGTH} characters", field="title"
        )
    return title


def validate_comment(text: str | None) -> str:
    text = (text or "").strip()
    if not text:
        raise MissingFieldError("Comment text is required", field="text")
    if len(text) > COMMENT_MAX_LENGTH:
        raise CommentTooLongError(
            f"Comment cannot exceed {COMMENT_MAX_LENGTH} characters", field="text"
        )
    return text
