"""Query-language expressions for generated metrics.

the execution service speaks MAQL, not sql - objects are referenced by uri
in square brackets and aggregations wrap them like functions:

    SELECT SUM([/gdc/md/p1/obj/1]) WHERE [/gdc/md/p1/obj/2] IN ([e1],[e2])

expressions are built as plain strings. there is no parser for MAQL we
could lean on, and the grammar we emit is small enough that string
templates stay readable.
"""

from vizforge.models.visualization import AttributeFilter, Category, Measure, MeasureType


def is_derived(measure: Measure) -> bool:
    """Facts and attributes need a generated aggregate, so do filtered measures."""
    return (
        measure.type in (MeasureType.FACT, MeasureType.ATTRIBUTE)
        or measure.has_selected_filters()
    )


def get_filter_expression(attribute_filter: AttributeFilter) -> str | None:
    """Build one `[attr] [NOT ]IN (...)` clause, None for empty selections."""
    if not attribute_filter.is_executable():
        return None

    elements = ",".join(f"[{e}]" for e in attribute_filter.elements)
    negative = "NOT " if attribute_filter.negative_selection else ""
    return f"[{attribute_filter.attribute}] {negative}IN ({elements})"


def get_where_expression(measure: Measure) -> str:
    """The ` WHERE ...` tail for a measure's filters, or "" when unfiltered."""
    clauses = [get_filter_expression(f) for f in measure.attribute_filters]
    clauses = [c for c in clauses if c]
    if not clauses:
        return ""
    return f" WHERE {' AND '.join(clauses)}"


def get_generated_metric_expression(measure: Measure, include_filters: bool = True) -> str:
    """`SELECT AGG([uri])` (or `SELECT [uri]`) plus the filter tail."""
    aggregation = (measure.aggregation or "").upper()
    uri = measure.object_uri
    select = f"{aggregation}([{uri}])" if aggregation else f"[{uri}]"
    where = get_where_expression(measure) if include_filters else ""
    return f"SELECT {select}{where}"


def get_percent_metric_expression(measure: Measure, category: Category) -> str:
    """Share of the measure in its total over all values of the category.

    the where tail goes inside both sides of the division so numerator and
    denominator are filtered the same way.
    """
    if is_derived(measure):
        base = get_generated_metric_expression(measure, include_filters=False)
    else:
        base = f"SELECT [{measure.object_uri}]"

    where = get_where_expression(measure)
    return f"SELECT ({base}{where}) / ({base} BY ALL [{category.attribute}]{where})"


def get_pop_expression(date_attribute_uri: str, metric_expression: str) -> str:
    """Wrap a metric reference or parenthesized expression with FOR PREVIOUS."""
    return f"SELECT {metric_expression} FOR PREVIOUS ([{date_attribute_uri}])"
