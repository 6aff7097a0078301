"""Custom Temporal DataConverter for swapbook frozen-dataclass types.

Handles serialization of: Decimal, date, datetime, Enum, tuples and
discriminated dataclass unions (Reference = ById | ByName, optional
ReferenceEntity fields) by adding __type__ tags during encoding.
"""

from __future__ import annotations

import dataclasses
import importlib
import json
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, get_type_hints

from temporalio.converter import (
    CompositePayloadConverter,
    DataConverter,
    DefaultPayloadConverter,
    JSONPlainPayloadConverter,
    JSONTypeConverter,
)

# ---------------------------------------------------------------------------
# Recursive serializer
# ---------------------------------------------------------------------------


def _to_json(obj: Any) -> Any:
    """Recursively convert swapbook objects to JSON-compatible values.

    Dataclass instances carry a ``__type__`` tag so union-typed fields
    decode back to the right variant.
    """
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, Decimal):
        return {"__decimal__": str(obj)}
    if isinstance(obj, datetime):
        return {"__datetime__": obj.isoformat()}
    if isinstance(obj, date):
        return {"__date__": obj.isoformat()}
    if isinstance(obj, Enum):
        return obj.value
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        d: dict[str, Any] = {
            "__type__": f"{type(obj).__module__}.{type(obj).__qualname__}",
        }
        for field in dataclasses.fields(obj):
            d[field.name] = _to_json(getattr(obj, field.name))
        return d
    if isinstance(obj, (tuple, list)):
        return [_to_json(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): _to_json(v) for k, v in obj.items()}
    raise TypeError(f"Cannot serialize {type(obj).__name__}")


class SwapbookJSONEncoder(json.JSONEncoder):
    """JSON encoder using _to_json for swapbook types."""

    def default(self, o: Any) -> Any:
        return _to_json(o)

    def encode(self, o: Any) -> str:
        # Tag dataclasses before the stdlib encoder turns them into nothing.
        return super().encode(_to_json(o))


# ---------------------------------------------------------------------------
# Recursive deserializer
# ---------------------------------------------------------------------------

# Only classes from these modules are ever instantiated from a payload.
_ALLOWED_MODULES: frozenset[str] = frozenset({
    "swapbook.core.types",
    "swapbook.trade.types",
    "swapbook.workflow.types",
})

_CLASS_CACHE: dict[str, type] = {}


def _resolve_class(fqn: str) -> type | None:
    """Resolve a fully qualified class name from _ALLOWED_MODULES."""
    if fqn in _CLASS_CACHE:
        return _CLASS_CACHE[fqn]
    module_name, _, class_name = fqn.rpartition(".")
    if module_name not in _ALLOWED_MODULES:
        return None
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    cls = getattr(module, class_name, None)
    if isinstance(cls, type):
        _CLASS_CACHE[fqn] = cls
        return cls
    return None


def _from_json(hint: Any, value: Any) -> Any:
    """Recursively convert JSON values back to swapbook types."""
    if value is None:
        return None

    if isinstance(value, dict):
        if "__type__" in value:
            cls = _resolve_class(value["__type__"])
            if cls is None or not dataclasses.is_dataclass(cls):
                raise TypeError(f"Refusing to decode type {value['__type__']!r}")
            hints = get_type_hints(cls)
            kwargs: dict[str, Any] = {
                field.name: _from_json(hints.get(field.name, Any), value[field.name])
                for field in dataclasses.fields(cls)
                if field.name in value
            }
            return cls(**kwargs)
        if "__decimal__" in value:
            return Decimal(value["__decimal__"])
        if "__datetime__" in value:
            return datetime.fromisoformat(value["__datetime__"])
        if "__date__" in value:
            return date.fromisoformat(value["__date__"])

    if isinstance(hint, type) and issubclass(hint, Enum) and not isinstance(value, Enum):
        return hint(value)

    if isinstance(value, list):
        return tuple(_from_json(Any, x) for x in value)

    return value


class SwapbookJSONTypeConverter(JSONTypeConverter):
    """Decode tagged JSON values back to swapbook types."""

    def to_typed_value(self, hint: type, value: Any) -> Any:
        if isinstance(value, dict) and (
            "__type__" in value or "__decimal__" in value
            or "__datetime__" in value or "__date__" in value
        ):
            return _from_json(hint, value)
        # Python 3.12 type aliases (type Reference = ...)
        if hasattr(hint, "__value__"):
            return _from_json(hint.__value__, value)
        return JSONTypeConverter.Unhandled


# ---------------------------------------------------------------------------
# Wire up
# ---------------------------------------------------------------------------


class SwapbookPayloadConverter(CompositePayloadConverter):
    """Payload converter with swapbook-aware JSON handling."""

    def __init__(self) -> None:
        json_converter = JSONPlainPayloadConverter(
            encoder=SwapbookJSONEncoder,
            custom_type_converters=[SwapbookJSONTypeConverter()],
        )
        super().__init__(
            *(
                c
                for c in DefaultPayloadConverter.default_encoding_payload_converters
                if not isinstance(c, JSONPlainPayloadConverter)
            ),
            json_converter,
        )


SWAPBOOK_DATA_CONVERTER = DataConverter(
    payload_converter_class=SwapbookPayloadConverter,
)
