"""Term-to-field casting.

Coerces a text search term into the declared SQLAlchemy type of a field.
A term that does not look like a valid value for the field is rejected,
which only drops that (term, field) pair.

Rules
- String / Text / Unicode -> the text itself (matched with ILIKE later)
- Enum                    -> a declared value or member
- Boolean                 -> "true" / "false" / "1" / "0"
- Integer                 -> optional sign + ASCII digits
- Float                   -> finite, decimal or exponent notation
- Numeric                 -> finite Decimal, no underscores or padding
- Date / DateTime / Time  -> ISO 8601
- Uuid                    -> canonical hyphenated form
- LargeBinary             -> UTF-8 bytes
- TypeDecorator           -> rules of its impl
Everything else (JSON, ARRAY, Interval, PickleType, ...) is rejected.
"""

from __future__ import annotations

import math
import re
import uuid
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable

from dateutil.parser import isoparse, isoparser
from sqlalchemy import types as sqltypes

from FuzzyCast.core.errors import CastError
from FuzzyCast.core.models import CastRejection, FieldCast
from FuzzyCast.schema.reflect import SchemaMetadata

_RE_INTEGER = re.compile(r"[+-]?[0-9]+")
_RE_FLOAT = re.compile(r"[+-]?[0-9]+(\.[0-9]+)?([eE][+-]?[0-9]+)?")
_RE_DECIMAL = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")
_RE_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_RE_DATETIME = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}[T ][0-9]{2}:[0-9]{2}")
_RE_TIME = re.compile(r"[0-9]{2}:[0-9]{2}:[0-9]{2}")
_RE_UUID = re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}")

_TRUE_TEXT = frozenset({"true", "1"})
_FALSE_TEXT = frozenset({"false", "0"})

_ISO_TIME = isoparser()


def _cast_enum(type_: sqltypes.Enum, text: str) -> Any:
    enum_class = type_.enum_class
    if enum_class is not None:
        for member in enum_class:
            if text == member.name or text == str(member.value):
                return member
    elif text in type_.enums:
        return text
    raise CastError(f"not one of {list(type_.enums)}")


def _cast_string(type_: sqltypes.String, text: str) -> str:
    del type_
    return text


def _cast_boolean(type_: sqltypes.Boolean, text: str) -> bool:
    del type_
    if text in _TRUE_TEXT:
        return True
    if text in _FALSE_TEXT:
        return False
    raise CastError("not a boolean")


def _cast_integer(type_: sqltypes.Integer, text: str) -> int:
    del type_
    if not _RE_INTEGER.fullmatch(text):
        raise CastError("not an integer")
    return int(text)


def _cast_float(type_: sqltypes.Float, text: str) -> float:
    del type_
    if not _RE_FLOAT.fullmatch(text):
        raise CastError("not a float")
    value = float(text)
    if not math.isfinite(value):
        raise CastError("float is not finite")
    return value


def _cast_numeric(type_: sqltypes.Numeric, text: str) -> Decimal | float:
    if not _RE_DECIMAL.fullmatch(text):
        raise CastError("not a decimal")
    try:
        value = Decimal(text)
    except InvalidOperation as exc:
        raise CastError("not a decimal") from exc
    if not value.is_finite():
        raise CastError("decimal is not finite")
    return value if type_.asdecimal else float(value)


def _cast_date(type_: sqltypes.Date, text: str) -> date:
    del type_
    if not _RE_DATE.match(text):
        raise CastError("not an ISO 8601 date")
    try:
        return isoparse(text).date()
    except ValueError as exc:
        raise CastError("not an ISO 8601 date") from exc


def _cast_datetime(type_: sqltypes.DateTime, text: str) -> datetime:
    if not _RE_DATETIME.match(text):
        raise CastError("not an ISO 8601 datetime")
    try:
        value = isoparse(text)
    except ValueError as exc:
        raise CastError("not an ISO 8601 datetime") from exc
    if type_.timezone:
        return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value.astimezone(timezone.utc)
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _cast_time(type_: sqltypes.Time, text: str) -> time:
    del type_
    if not _RE_TIME.match(text):
        raise CastError("not an ISO 8601 time")
    try:
        return _ISO_TIME.parse_isotime(text)
    except ValueError as exc:
        raise CastError("not an ISO 8601 time") from exc


def _cast_uuid(type_: sqltypes.Uuid, text: str) -> uuid.UUID | str:
    if not _RE_UUID.fullmatch(text):
        raise CastError("not a UUID")
    value = uuid.UUID(text)
    return value if type_.as_uuid else str(value)


def _cast_binary(type_: sqltypes.LargeBinary, text: str) -> bytes:
    del type_
    return text.encode("utf-8")


# Order matters: Enum is a String, Float is a Numeric.
_CAST_RULES: tuple[tuple[type, Callable[[Any, str], Any]], ...] = (
    (sqltypes.Enum, _cast_enum),
    (sqltypes.String, _cast_string),
    (sqltypes.Boolean, _cast_boolean),
    (sqltypes.Integer, _cast_integer),
    (sqltypes.Float, _cast_float),
    (sqltypes.Numeric, _cast_numeric),
    (sqltypes.DateTime, _cast_datetime),
    (sqltypes.Date, _cast_date),
    (sqltypes.Time, _cast_time),
    (sqltypes.Uuid, _cast_uuid),
    (sqltypes.LargeBinary, _cast_binary),
)

_OPAQUE_DECORATORS: tuple[type, ...] = (sqltypes.Interval, sqltypes.PickleType)


def cast_value(type_: sqltypes.TypeEngine, text: str) -> Any:
    """Cast ``text`` into a value of ``type_``.

    Args:
        type_: Declared SQLAlchemy type of the field.
        text: Search term.

    Returns:
        The typed value.

    Raises:
        CastError: If the term is not a valid value for the type.
    """
    if isinstance(type_, _OPAQUE_DECORATORS):
        raise CastError(f"unsupported type {type(type_).__name__}")
    if isinstance(type_, sqltypes.TypeDecorator):
        return cast_value(type_.impl, text)
    for type_class, rule in _CAST_RULES:
        if isinstance(type_, type_class):
            return rule(type_, text)
    raise CastError(f"unsupported type {type(type_).__name__}")


def is_text_type(type_: sqltypes.TypeEngine) -> bool:
    """Return True if values of ``type_`` are searched by substring."""
    if isinstance(type_, sqltypes.TypeDecorator) and not isinstance(type_, _OPAQUE_DECORATORS):
        return is_text_type(type_.impl)
    return isinstance(type_, sqltypes.String) and not isinstance(type_, sqltypes.Enum)


def cast_term(schema: SchemaMetadata, field: str, term: str) -> FieldCast | CastRejection:
    """Attempt to cast one term against one field of ``schema``.

    Unknown fields and failed casts are returned as ``CastRejection``, never
    raised.
    """
    type_ = schema.type_of(field)
    if type_ is None:
        return CastRejection(field=field, term=term, reason="unknown field")
    try:
        value = cast_value(type_, term)
    except CastError as exc:
        return CastRejection(field=field, term=term, reason=str(exc))
    return FieldCast(field=field, value=value, type=type_)
