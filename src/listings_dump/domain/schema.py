# src/listings_dump/domain/schema.py
from __future__ import annotations

import types
from datetime import date, datetime
from typing import Any, Sequence, Union, get_args, get_origin

from google.cloud.bigquery import SchemaField
from pydantic import BaseModel

from listings_dump.domain.errors import SchemaInferenceError
from listings_dump.domain.ports import Row


# bool must come before int (bool is an int subclass)
_SCALAR_TYPES: list[tuple[type, str]] = [
    (bool, "BOOLEAN"),
    (int, "INTEGER"),
    (float, "FLOAT"),
    (str, "STRING"),
    (datetime, "TIMESTAMP"),
    (date, "DATE"),
]


def _unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) != 1:
            raise SchemaInferenceError(f"unsupported union type: {annotation!r}")
        return args[0], True
    return annotation, False


def _scalar_type(annotation: Any) -> str | None:
    if not isinstance(annotation, type):
        return None
    for py_type, bq_type in _SCALAR_TYPES:
        if issubclass(annotation, py_type):
            return bq_type
    return None


def _field_for(name: str, annotation: Any) -> SchemaField:
    inner, optional = _unwrap_optional(annotation)
    mode = "NULLABLE" if optional else "REQUIRED"

    if get_origin(inner) is list:
        (item,) = get_args(inner) or (Any,)
        item, _ = _unwrap_optional(item)
        if get_origin(item) is list:
            raise SchemaInferenceError(f"{name}: nested repeated fields are not supported")
        inner, mode = item, "REPEATED"

    if get_origin(inner) is not None:
        raise SchemaInferenceError(f"{name}: can't map {inner!r} to a BigQuery type")

    if isinstance(inner, type) and issubclass(inner, BaseModel):
        return SchemaField(name, "RECORD", mode=mode, fields=infer_schema(inner))

    bq_type = _scalar_type(inner)
    if bq_type is None:
        raise SchemaInferenceError(f"{name}: can't map {inner!r} to a BigQuery type")
    return SchemaField(name, bq_type, mode=mode)


def infer_schema(model: type[BaseModel]) -> list[SchemaField]:
    """
    Derive a BigQuery schema from a pydantic model.

    Column names are the model's attribute names. Optional fields come out
    NULLABLE, lists REPEATED, nested models RECORD, everything else REQUIRED.
    """
    return [_field_for(name, f.annotation) for name, f in model.model_fields.items()]


def relax(schema: Sequence[SchemaField]) -> list[SchemaField]:
    """
    Same schema with no REQUIRED fields left, at any depth.
    """
    out: list[SchemaField] = []
    for f in schema:
        mode = "NULLABLE" if f.mode == "REQUIRED" else f.mode
        out.append(
            SchemaField(
                f.name,
                f.field_type,
                mode=mode,
                description=f.description,
                fields=relax(f.fields) if f.fields else (),
            )
        )
    return out


def row_schema() -> list[SchemaField]:
    return relax(infer_schema(Row))
