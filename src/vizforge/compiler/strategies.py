"""Metric construction strategies.

each strategy turns one measure into the generated metrics needed to
execute it. plain metrics are referenced directly; everything else gets a
generated definition with a content-addressed identifier. PoP strategies
return two metrics: the PoP one first, then the metric it compares against.
"""

from collections.abc import Callable
from dataclasses import dataclass

from vizforge.compiler.expressions import (
    get_generated_metric_expression,
    get_percent_metric_expression,
    get_pop_expression,
    is_derived,
)
from vizforge.compiler.identifiers import get_generated_metric_identifier
from vizforge.compiler.titles import get_base_metric_title, get_pop_metric_title
from vizforge.errors import MissingAttributeError
from vizforge.models.execution import MetricDefinition, MetricDefinitionItem
from vizforge.models.visualization import Buckets, Measure, MetricSort, SortDirection

CONTRIBUTION_METRIC_FORMAT = "#,##0.00%"


@dataclass(frozen=True)
class MetricMeta:
    measure_index: int
    is_pop: bool | None = None


@dataclass(frozen=True)
class GeneratedMetric:
    """A column produced from a measure, with its definition if generated."""

    element: str
    meta: MetricMeta
    definition: MetricDefinitionItem | None = None
    sort: str | None = None

    @property
    def expression(self) -> str | None:
        if self.definition is None:
            return None
        return self.definition.metric_definition.expression


MetricStrategy = Callable[[Measure, Buckets, int], list[GeneratedMetric]]


def get_metric_sort(sort: str | MetricSort | None, is_pop_metric: bool = False) -> str | None:
    """Resolve which generated metric a measure's sort applies to.

    a plain direction string is the legacy form and applies to everything.
    the object form targets the PoP metric only when sortByPoP is set.
    """
    if sort is None:
        return None
    if isinstance(sort, SortDirection):
        return sort.value
    if isinstance(sort, str):
        return sort

    if is_pop_metric == sort.sort_by_po_p:
        return sort.direction.value
    return None


def _definition(
    identifier: str, expression: str, title: str, format: str | None
) -> MetricDefinitionItem:
    return MetricDefinitionItem(
        metric_definition=MetricDefinition(
            identifier=identifier, expression=expression, title=title, format=format
        )
    )


def _get_date_attribute(buckets: Buckets, measure: Measure) -> str:
    # a date category wins over a date filter
    date = buckets.get_date_category() or buckets.get_date_filter()
    if date is None or not date.attribute:
        raise MissingAttributeError(
            f"Measure '{measure.title}' shows previous period but the bucket has "
            "no date category or date filter"
        )
    return date.attribute


def create_pure_metric(
    measure: Measure, buckets: Buckets, measure_index: int
) -> list[GeneratedMetric]:
    return [
        GeneratedMetric(
            element=measure.object_uri,
            sort=get_metric_sort(measure.sort),
            meta=MetricMeta(measure_index=measure_index),
        )
    ]


def _derived_metric(measure: Measure, measure_index: int) -> GeneratedMetric:
    title = get_base_metric_title(measure.title)
    aggregation = (measure.aggregation or "base").lower()
    expression = get_generated_metric_expression(measure)
    identifier = get_generated_metric_identifier(
        measure, aggregation, expression, title, measure.format
    )
    return GeneratedMetric(
        element=identifier,
        definition=_definition(identifier, expression, title, measure.format),
        sort=get_metric_sort(measure.sort),
        meta=MetricMeta(measure_index=measure_index),
    )


def create_derived_metric(
    measure: Measure, buckets: Buckets, measure_index: int
) -> list[GeneratedMetric]:
    return [_derived_metric(measure, measure_index)]


def _contribution_metric(
    measure: Measure, buckets: Buckets, measure_index: int
) -> GeneratedMetric:
    categories = buckets.get_categories()
    if not categories or not categories[0].attribute:
        raise MissingAttributeError(
            f"Measure '{measure.title}' is shown in percent but the bucket has no category"
        )

    title = get_base_metric_title(measure.title)
    expression = get_percent_metric_expression(measure, categories[0])
    identifier = get_generated_metric_identifier(
        measure, "percent", expression, title, CONTRIBUTION_METRIC_FORMAT
    )
    return GeneratedMetric(
        element=identifier,
        definition=_definition(identifier, expression, title, CONTRIBUTION_METRIC_FORMAT),
        sort=get_metric_sort(measure.sort),
        meta=MetricMeta(measure_index=measure_index),
    )


def create_contribution_metric(
    measure: Measure, buckets: Buckets, measure_index: int
) -> list[GeneratedMetric]:
    return [_contribution_metric(measure, buckets, measure_index)]


def _pop_metric(
    measure: Measure,
    date_attribute: str,
    base_reference: str,
    format: str | None,
    measure_index: int,
) -> GeneratedMetric:
    title = get_pop_metric_title(measure.title)
    expression = get_pop_expression(date_attribute, base_reference)
    identifier = get_generated_metric_identifier(measure, "pop", expression, title, format)
    return GeneratedMetric(
        element=identifier,
        definition=_definition(identifier, expression, title, format),
        sort=get_metric_sort(measure.sort, is_pop_metric=True),
        meta=MetricMeta(measure_index=measure_index, is_pop=True),
    )


def create_pop_metric(
    measure: Measure, buckets: Buckets, measure_index: int
) -> list[GeneratedMetric]:
    date_attribute = _get_date_attribute(buckets, measure)

    if is_derived(measure):
        base = _derived_metric(measure, measure_index)
        base_reference = f"({base.expression})"
    else:
        base = create_pure_metric(measure, buckets, measure_index)[0]
        base_reference = f"[{measure.object_uri}]"

    pop = _pop_metric(measure, date_attribute, base_reference, measure.format, measure_index)
    return [pop, base]


def create_contribution_pop_metric(
    measure: Measure, buckets: Buckets, measure_index: int
) -> list[GeneratedMetric]:
    date_attribute = _get_date_attribute(buckets, measure)
    base = _contribution_metric(measure, buckets, measure_index)
    pop = _pop_metric(
        measure, date_attribute, f"({base.expression})", CONTRIBUTION_METRIC_FORMAT, measure_index
    )
    return [pop, base]
