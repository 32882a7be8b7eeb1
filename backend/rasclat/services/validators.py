"""Required-field checks and input coercion for the write routes.

A rule set is an ordered list of ``(field, message)`` pairs. Checks run in
the declared order and stop at the first failure, so a request missing both
the title and the artists only ever hears about the title.
"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Iterable, Mapping

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..core.errors import ValidationError

Rule = tuple[str, str]

_datetime = TypeAdapter(datetime)

# rule fields that name an uploaded file part rather than a body field
FILE_FIELDS = frozenset({'image', 'audio'})


def is_missing(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


def first_missing(payload: Mapping, rules: Iterable[Rule], files: Mapping | None = None) -> str | None:
    """Return the message of the first rule whose field is missing, else None.

    Fields named in ``files`` are looked up there instead of in the payload.
    """
    files = files or {}
    for field, message in rules:
        source = files if field in FILE_FIELDS else payload
        if is_missing(source.get(field)):
            return message
    return None


def validate(payload: Mapping, rules: Iterable[Rule], files: Mapping | None = None) -> None:
    message = first_missing(payload, rules, files)
    if message is not None:
        raise ValidationError(message)


def parse_datetime(value, field: str) -> datetime:
    """Parse an ISO-8601 string or timestamp into a naive UTC datetime."""
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = _datetime.validate_python(value)
        except PydanticValidationError as exc:
            raise ValidationError(f'The given {field} is not a valid date.', exc) from exc
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def as_text(value, field: str):
    """Scalar body value as text; JSON numbers become their string form."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise ValidationError(f'The given {field} value is not valid.')


def parse_id_list(value, field: str = 'ids') -> list[str]:
    """Accept a list, a JSON array string or a comma separated string of ids."""
    if value is None:
        return []
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if isinstance(value, str):
        text = value.strip()
        if text.startswith('['):
            try:
                value = json.loads(text)
            except json.JSONDecodeError:
                value = text.strip('[]').split(',')
        else:
            value = text.split(',')
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f'The given {field} could not be read.')
    items = []
    for item in value:
        # repeated form fields may themselves be comma separated
        for part in str(item).split(','):
            part = part.strip().strip('"\'')
            if part and part not in items:
                items.append(part)
    return items
