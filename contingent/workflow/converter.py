"""Custom Temporal DataConverter for contingent frozen-dataclass types.

Claim trees, fixing tables and versions are nested unions of frozen
dataclasses whose leaves (times, assets, observable ids) are untyped, so
every non-JSON value is tagged during encoding and decoding never relies on
type hints:

    dataclass  -> {"__type__": fqn, <fields>}
    Decimal    -> {"__decimal__": str}
    datetime   -> {"__datetime__": iso}
    date       -> {"__date__": iso}
    Enum       -> {"__enum__": fqn, "value": value}
    tuple/list -> list (decoded as tuple)
"""

from __future__ import annotations

import dataclasses
import importlib
import json
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

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


def _fqn(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def _to_json(obj: Any) -> Any:  # noqa: PLR0911
    """Recursively convert contingent objects to JSON-compatible values."""
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, Decimal):
        return {"__decimal__": str(obj)}
    # datetime before date (datetime is a subclass of date)
    if isinstance(obj, datetime):
        return {"__datetime__": obj.isoformat()}
    if isinstance(obj, date):
        return {"__date__": obj.isoformat()}
    if isinstance(obj, Enum):
        return {"__enum__": _fqn(type(obj)), "value": _to_json(obj.value)}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        d: dict[str, Any] = {"__type__": _fqn(type(obj))}
        for field in dataclasses.fields(obj):
            d[field.name] = _to_json(getattr(obj, field.name))
        return d
    if isinstance(obj, (tuple, list)):
        return [_to_json(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): _to_json(v) for k, v in obj.items()}
    raise TypeError(f"Cannot encode {type(obj).__name__} for a workflow payload")


class ContingentJSONEncoder(json.JSONEncoder):
    """JSON encoder using _to_json for full contingent type support."""

    def default(self, o: Any) -> Any:
        return _to_json(o)


# ---------------------------------------------------------------------------
# Recursive deserializer
# ---------------------------------------------------------------------------

# Security: only resolve classes from these modules.
_ALLOWED_MODULES: frozenset[str] = frozenset({
    "contingent.claims.claim",
    "contingent.claims.inequality",
    "contingent.claims.observation",
    "contingent.core.numeric",
    "contingent.core.types",
    "contingent.lifecycle.effect",
    "contingent.lifecycle.events",
    "contingent.lifecycle.version",
    "contingent.oracle.fixings",
    "contingent.workflow.types",
})

_CLASS_CACHE: dict[str, type] = {}


def _resolve_class(fqn: str) -> type | None:
    """Resolve a fully qualified class name to a type.

    Only classes from ``_ALLOWED_MODULES`` are resolved, which prevents
    arbitrary class instantiation from crafted payloads.
    """
    if fqn in _CLASS_CACHE:
        return _CLASS_CACHE[fqn]
    parts = fqn.rsplit(".", 1)
    if len(parts) != 2:
        return None
    module_name, class_name = parts
    if module_name not in _ALLOWED_MODULES:
        return None
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    cls = getattr(module, class_name, None)
    if not isinstance(cls, type):
        return None
    _CLASS_CACHE[fqn] = cls
    return cls


def _from_json(value: Any) -> Any:  # noqa: PLR0911
    """Recursively convert tagged JSON values back to contingent types."""
    if isinstance(value, list):
        return tuple(_from_json(x) for x in value)
    if not isinstance(value, dict):
        return value

    if "__type__" in value:
        cls = _resolve_class(value["__type__"])
        if cls is None or not dataclasses.is_dataclass(cls):
            raise TypeError(f"Refusing to decode unknown type {value['__type__']!r}")
        kwargs = {
            field.name: _from_json(value[field.name])
            for field in dataclasses.fields(cls)
            if field.init and field.name in value
        }
        return cls(**kwargs)
    if "__decimal__" in value:
        return Decimal(value["__decimal__"])
    if "__datetime__" in value:
        return datetime.fromisoformat(value["__datetime__"])
    if "__date__" in value:
        return date.fromisoformat(value["__date__"])
    if "__enum__" in value:
        cls = _resolve_class(value["__enum__"])
        if cls is None or not issubclass(cls, Enum):
            raise TypeError(f"Refusing to decode unknown enum {value['__enum__']!r}")
        return cls(_from_json(value["value"]))
    return {k: _from_json(v) for k, v in value.items()}


_TAGS: tuple[str, ...] = ("__type__", "__decimal__", "__datetime__", "__date__", "__enum__")


class ContingentJSONTypeConverter(JSONTypeConverter):
    """Deserialize tagged JSON values back to contingent types."""

    def to_typed_value(self, hint: type, value: Any) -> Any:
        if isinstance(value, dict) and any(tag in value for tag in _TAGS):
            return _from_json(value)
        # Python 3.12 type aliases (``type X = A | B``) are opaque to Temporal
        if hasattr(hint, "__value__"):
            return _from_json(value)
        return JSONTypeConverter.Unhandled


# ---------------------------------------------------------------------------
# Wire up
# ---------------------------------------------------------------------------


class ContingentPayloadConverter(CompositePayloadConverter):
    """Payload converter with contingent-aware JSON handling."""

    def __init__(self) -> None:
        json_converter = JSONPlainPayloadConverter(
            encoder=ContingentJSONEncoder,
            custom_type_converters=[ContingentJSONTypeConverter()],
        )
        super().__init__(
            *(
                c
                for c in DefaultPayloadConverter.default_encoding_payload_converters
                if not isinstance(c, JSONPlainPayloadConverter)
            ),
            json_converter,
        )


CONTINGENT_DATA_CONVERTER = DataConverter(
    payload_converter_class=ContingentPayloadConverter,
)
