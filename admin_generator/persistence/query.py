"""
Query parameter parsing.

Turns the `filter`, `sort`, `start` and `limit` request parameters into
SQLAlchemy criteria for a mapped entity class.

Filter formats:

    {"filter": [{"property": "title", "value": "like:%news%"}]}
    {"filter": [{"property": "id", "operator": "in", "value": [1, 2]}]}
    {"filter": {"id": 5}}
"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy import Select, inspect as sa_inspect
from sqlalchemy.sql.elements import ColumnElement

from admin_generator.database.coercion import coerce_column_value
from admin_generator.exceptions import BadRequestError


OPERATORS: Dict[str, Callable[[Any, Any], ColumnElement]] = {
    "eq": lambda column, value: column.is_(None) if value is None else column == value,
    "neq": lambda column, value: column.is_not(None) if value is None else column != value,
    "like": lambda column, value: column.like(value),
    "notLike": lambda column, value: column.not_like(value),
    "gt": lambda column, value: column > value,
    "gte": lambda column, value: column >= value,
    "lt": lambda column, value: column < value,
    "lte": lambda column, value: column <= value,
    "in": lambda column, value: column.in_(value),
    "notIn": lambda column, value: column.not_in(value),
    "isNull": lambda column, value: column.is_(None),
    "isNotNull": lambda column, value: column.is_not(None),
}

_VALUELESS_OPERATORS = {"isNull", "isNotNull"}
_LIST_OPERATORS = {"in", "notIn"}
_TEXT_OPERATORS = {"like", "notLike"}


def split_operator(value: Any) -> Tuple[str, Any]:
    """
    Split an "operator:value" string; values without a known prefix are "eq".

    Example:
        split_operator("gte:10") -> ("gte", "10")
        split_operator("isNull") -> ("isNull", None)
    """
    if not isinstance(value, str):
        return "eq", value
    if value in _VALUELESS_OPERATORS:
        return value, None

    operator, separator, rest = value.partition(":")
    if separator and operator in OPERATORS:
        return operator, rest
    return "eq", value


def _normalize_filters(raw_filters: Any, params: Dict[str, Any]) -> List[Tuple[str, str, Any]]:
    if raw_filters is None:
        return []

    if isinstance(raw_filters, Mapping):
        return [(prop, *split_operator(value)) for prop, value in raw_filters.items()]

    if not isinstance(raw_filters, list):
        raise BadRequestError("Filter must be a list or a mapping.", path="/filter", params=params)

    normalized = []
    for index, item in enumerate(raw_filters):
        if not isinstance(item, Mapping) or "property" not in item:
            raise BadRequestError(
                "Each filter must be a mapping with a 'property' key.",
                path=f"/filter/{index}",
                params=params,
            )
        if "operator" in item:
            normalized.append((item["property"], item["operator"], item.get("value")))
        else:
            normalized.append((item["property"], *split_operator(item.get("value"))))
    return normalized


def _get_column(entity_class: type, prop: str, path: str, params: Dict[str, Any]) -> Any:
    mapper = sa_inspect(entity_class)
    if prop not in mapper.columns:
        raise BadRequestError(
            f"Unknown property '{prop}' on {entity_class.__name__}.",
            path=path,
            params=params,
        )
    return getattr(entity_class, prop)


def _coerce(column_attr: Any, operator: str, value: Any, params: Dict[str, Any]) -> Any:
    if operator in _VALUELESS_OPERATORS or operator in _TEXT_OPERATORS:
        return value

    column = column_attr.property.columns[0]
    try:
        if operator in _LIST_OPERATORS:
            if value is not None and not isinstance(value, (str, list, tuple)):
                raise BadRequestError(
                    f"Operator '{operator}' expects a list or a comma separated string.",
                    path="/filter",
                    params=params,
                )
            values = value.split(",") if isinstance(value, str) else list(value or [])
            return [coerce_column_value(column, item) for item in values]
        return coerce_column_value(column, value)
    except ValueError as e:
        raise BadRequestError(str(e), path="/filter", params=params) from e


def build_criteria(entity_class: type, params: Dict[str, Any]) -> List[ColumnElement]:
    """
    Build WHERE criteria from the `filter` parameter.

    Raises:
        BadRequestError: On unknown properties, operators or bad values.
    """
    criteria = []
    for prop, operator, value in _normalize_filters(params.get("filter"), params):
        if operator not in OPERATORS:
            raise BadRequestError(f"Unsupported filter operator '{operator}'.", path="/filter", params=params)

        column_attr = _get_column(entity_class, prop, "/filter", params)
        criteria.append(OPERATORS[operator](column_attr, _coerce(column_attr, operator, value, params)))
    return criteria


def has_filter(params: Dict[str, Any]) -> bool:
    return bool(params.get("filter"))


def apply_sorting(stmt: Select, entity_class: type, params: Dict[str, Any]) -> Select:
    """Apply the `sort` parameter: a list of {"property", "direction"} items or names."""
    sort = params.get("sort") or []
    if isinstance(sort, (str, Mapping)):
        sort = [sort]

    for item in sort:
        if isinstance(item, str):
            prop, direction = item, "ASC"
        elif isinstance(item, Mapping) and "property" in item:
            prop, direction = item["property"], str(item.get("direction", "ASC"))
        else:
            raise BadRequestError("Invalid sort definition.", path="/sort", params=params)

        column_attr = _get_column(entity_class, prop, "/sort", params)
        if direction.upper() == "DESC":
            stmt = stmt.order_by(column_attr.desc())
        elif direction.upper() == "ASC":
            stmt = stmt.order_by(column_attr.asc())
        else:
            raise BadRequestError(f"Invalid sort direction '{direction}'.", path="/sort", params=params)
    return stmt


def _read_int(params: Dict[str, Any], key: str) -> Optional[int]:
    value = params.get(key)
    if value is None:
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        number = -1
    if number < 0:
        raise BadRequestError(f"'{key}' must be a non-negative integer.", path=f"/{key}", params=params)
    return number


def apply_paging(stmt: Select, params: Dict[str, Any]) -> Select:
    """Apply `start` / `limit` parameters."""
    start = _read_int(params, "start")
    limit = _read_int(params, "limit")
    if start:
        stmt = stmt.offset(start)
    if limit is not None:
        stmt = stmt.limit(limit)
    return stmt
