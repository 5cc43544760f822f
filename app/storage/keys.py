"""Key derivation for the storage folders.

A processed artifact keeps one file name (``<identity>.pdf``) across
every folder, so sent and company keys are derived from the processed key.
"""

import re
import uuid
from enum import Enum

PDF_EXTENSION = ".pdf"

_EMAIL_UNSAFE = re.compile(r"[^a-zA-Z0-9@._-]")
_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")


class StorageLocation(str, Enum):
    ORIGINAL = "original"
    PROCESSED = "processed"
    SENT = "sent"
    COMPANY = "company"


def new_file_name() -> str:
    return f"{uuid.uuid4()}{PDF_EXTENSION}"


def file_name_of(key: str) -> str:
    return key.rsplit("/", 1)[-1]


def sanitize_email(email: str) -> str:
    return _EMAIL_UNSAFE.sub("_", email).lower()


def sanitize_company_name(company_name: str) -> str:
    """Lowercase and collapse every run of non-alphanumerics into one underscore."""
    return _NON_ALNUM_RUN.sub("_", company_name.lower())


def user_scope(email: str) -> str:
    return f"client/{sanitize_email(email)}"


def original_key(file_name: str) -> str:
    return f"original/{file_name}"


def processed_key(scope: str, file_name: str) -> str:
    return f"{scope}/pdf_processed/{file_name}"


def sent_key(processed: str) -> str:
    return f"sent/{file_name_of(processed)}"


def company_key(processed: str, company_name: str) -> str:
    return f"company/{sanitize_company_name(company_name)}/{file_name_of(processed)}"
