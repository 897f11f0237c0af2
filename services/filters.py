"""
Composable query-string filters for the list endpoints.

Each list view declares ``{query arg: builder}``; a builder receives the raw
argument and returns a SQLAlchemy criterion, or None to skip it.
"""

from datetime import date

from sqlalchemy import or_

TRUTHY = ("1", "true", "yes")
FALSY = ("0", "false", "no")


class FilterError(ValueError):
    """A query argument could not be understood."""

    def __init__(self, name, value):
        super().__init__(f"Invalid value for '{name}': {value}")
        self.name = name
        self.value = value


def eq(column, cast=int):
    def build(value):
        return column == cast(value)
    return build


def search(*columns):
    """Case-insensitive substring match on any of the columns."""
    def build(value):
        pattern = f"%{value.strip()}%"
        return or_(*[column.ilike(pattern) for column in columns])
    return build


def date_from(column):
    """Rows on or after an ISO date."""
    def build(value):
        return column >= date.fromisoformat(value.strip())
    return build


def date_to(column):
    """Rows on or before an ISO date."""
    def build(value):
        return column <= date.fromisoformat(value.strip())
    return build


def flag(column):
    def build(value):
        text = str(value).strip().lower()
        if text not in TRUTHY + FALSY:
            raise ValueError(value)
        return column == (text in TRUTHY)
    return build


def apply_filters(query, args, builders):
    for name, build in builders.items():
        value = args.get(name)
        if value is None or str(value).strip() == '':
            continue
        try:
            criterion = build(value)
        except (TypeError, ValueError):
            raise FilterError(name, value)
        if criterion is not None:
            query = query.filter(criterion)
    return query


def apply_sort(query, sort_key, orderings, default):
    """Order by ``orderings[sort_key]``, falling back to ``default``."""
    ordering = orderings.get(sort_key) or orderings[default]
    if not isinstance(ordering, (list, tuple)):
        ordering = (ordering,)
    return query.order_by(*ordering)
