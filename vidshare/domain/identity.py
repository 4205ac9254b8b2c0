"""Identifier generation for stored artifacts."""

import uuid


def new_identifier() -> uuid.UUID:
    return uuid.uuid4()


def storage_filename(identifier: uuid.UUID, extension: str) -> str:
    return f"{identifier}.{extension.lstrip('.')}"
