from typing import Any, Callable, Iterable, List, Optional, Sequence, Union

FieldGetter = Union[str, Callable[[Any], Any]]

ALL = "all"


def _read(row: Any, field: FieldGetter) -> Any:
    if callable(field):
        return field(row)
    return getattr(row, field, None)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    # str enums compare on their value
    return str(getattr(value, "value", value))


def matches_search(row: Any, term: Optional[str], fields: Sequence[FieldGetter]) -> bool:
    """True when any searchable field contains term, case-insensitively"""
    if not term or not term.strip():
        return True
    needle = term.strip().lower()
    return any(needle in _as_text(_read(row, field)).lower() for field in fields)


def matches_status(row: Any, status: Optional[str], status_field: FieldGetter = "status") -> bool:
    """True when status is unset/"all" or equals the row's status"""
    if not status or status == ALL:
        return True
    return _as_text(_read(row, status_field)) == status


def filter_rows(
    rows: Iterable[Any],
    search: Optional[str] = None,
    fields: Sequence[FieldGetter] = (),
    status: Optional[str] = None,
    status_field: FieldGetter = "status",
) -> List[Any]:
    """Search filter intersected with the status filter, order preserved"""
    return [
        row for row in rows
        if matches_search(row, search, fields) and matches_status(row, status, status_field)
    ]
