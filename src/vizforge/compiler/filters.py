"""Translate bucket filters into the execution service's `where` clause.

attribute filters become `$in` / `$not: {$in}` clauses keyed by display
form, date filters become `$between` clauses keyed by the date dimension.
"""

from typing import Any

from vizforge.models.visualization import AttributeFilter, BucketFilter, DateFilter


def attribute_filter_to_where(attribute_filter: AttributeFilter) -> dict[str, Any]:
    # element uris look like ".../elements?id=5", the service wants just "5"
    elements = [{"id": e.split("=")[-1]} for e in attribute_filter.elements]
    clause: dict[str, Any] = {"$in": elements}
    if attribute_filter.negative_selection:
        clause = {"$not": clause}
    return {attribute_filter.display_form: clause}


def date_filter_to_where(date_filter: DateFilter) -> dict[str, Any]:
    return {
        date_filter.date_uri: {
            "$between": [date_filter.from_, date_filter.to],
            "$granularity": date_filter.granularity,
        }
    }


def build_where(filters: list[BucketFilter]) -> dict[str, Any]:
    """Merge executable filters into a single where object.

    date clauses are merged by key (last one wins, collisions aren't
    expected); attribute clauses always go under a top-level `$and`.
    """
    attribute_clauses = [
        attribute_filter_to_where(f.list_attribute_filter)
        for f in filters
        if f.list_attribute_filter and f.list_attribute_filter.is_executable()
    ]

    where: dict[str, Any] = {}
    for f in filters:
        if f.date_filter and f.date_filter.is_executable():
            where.update(date_filter_to_where(f.date_filter))

    where["$and"] = attribute_clauses
    return where
