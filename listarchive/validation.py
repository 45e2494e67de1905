"""Record-shape validation for messages and subjects.

Validation runs before any write and never touches a store, so it can be
exercised on its own:

    result = validate_message(record)
    if not result.ok:
        print(result.errors)

    is_message(record)  # raises ValidationError when invalid
"""

import re
from datetime import datetime
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError

_URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)

# Key the document store keeps for its own record id
RESERVED_KEYS = ("id",)

# Ordering keys may be native datetimes, ISO strings or epoch numbers
Timestamp = Union[datetime, StrictStr, int, float]


class MessageShape(BaseModel):
    """Required fields of a message record. Extra headers are allowed."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    message_id: StrictStr = Field(alias="_id", min_length=1)
    subject_token: StrictStr = Field(alias="subjectToken", min_length=1)
    date: Timestamp
    body: StrictStr


class SubjectShape(BaseModel):
    """Required fields of a topic/subject record. Extra fields are allowed."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    subject_id: StrictStr = Field(alias="_id", min_length=1)
    source: StrictStr = Field(min_length=1)
    end: Timestamp


class ValidationResult(BaseModel):
    """Tagged outcome of a shape check."""

    ok: bool
    kind: str
    errors: list[str] = Field(default_factory=list)

    def raise_if_invalid(self) -> None:
        """Raise ValidationError carrying the collected errors."""
        if not self.ok:
            raise ValidationError(
                f"Invalid {self.kind}: {'; '.join(self.errors)}",
                errors=list(self.errors),
            )


def _check(shape: type[BaseModel], kind: str, record: Any) -> ValidationResult:
    if not isinstance(record, dict):
        return ValidationResult(
            ok=False,
            kind=kind,
            errors=[f"expected a dict, got {type(record).__name__}"],
        )
    errors = [f"{key}: reserved by the document store" for key in RESERVED_KEYS if key in record]
    try:
        shape.model_validate(record)
    except PydanticValidationError as e:
        for err in e.errors():
            location = ".".join(str(part) for part in err["loc"])
            errors.append(f"{location}: {err['msg']}")
    if errors:
        return ValidationResult(ok=False, kind=kind, errors=errors)
    return ValidationResult(ok=True, kind=kind)


def validate_message(record: Any) -> ValidationResult:
    """Check that a record has the shape of a message.

    Args:
        record: Candidate message dict

    Returns:
        ValidationResult with ok=False and per-field errors when malformed
    """
    return _check(MessageShape, "message", record)


def validate_subject(record: Any) -> ValidationResult:
    """Check that a record has the shape of a topic/subject.

    Args:
        record: Candidate subject dict

    Returns:
        ValidationResult with ok=False and per-field errors when malformed
    """
    return _check(SubjectShape, "subject", record)


def is_message(record: Any) -> bool:
    """Return True for a well-formed message, raise ValidationError otherwise."""
    validate_message(record).raise_if_invalid()
    return True


def is_subject(record: Any) -> bool:
    """Return True for a well-formed subject, raise ValidationError otherwise."""
    validate_subject(record).raise_if_invalid()
    return True


def require_identifier(value: Any, name: str = "id") -> str:
    """Ensure an identifier is a non-empty string."""
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{name} must be a non-empty string")
    return value


def require_source_url(url: Any) -> str:
    """Ensure a source URL is a non-empty string with an http(s) scheme."""
    if not isinstance(url, str):
        raise ValidationError("The url must be a string.")
    if not _URL_PATTERN.match(url):
        raise ValidationError(f"The url must start with http: {url!r}")
    return url
