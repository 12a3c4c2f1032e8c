"""Compile visualization metadata into an execution configuration.

this is the entry point of the compiler. the basic flow:
  1. dispatch every measure to a strategy and collect generated metrics
  2. resolve categories (optionally without the date ones)
  3. columns = category elements, then metric elements
  4. order by (bar charts always sort by their first metric)
  5. definitions, where clause and metric mappings

the compiler is stateless - safe to share between callers.
"""

import logging
from typing import Any

from vizforge.compiler.definitions import sort_definitions
from vizforge.compiler.filters import build_where
from vizforge.compiler.rules import RuleSet, build_metric_rules
from vizforge.compiler.strategies import GeneratedMetric
from vizforge.models.execution import (
    CompileOptions,
    ExecutionConfiguration,
    MetricMapping,
    OrderBy,
)
from vizforge.models.visualization import (
    BucketFilter,
    Buckets,
    Category,
    SortDirection,
    VisualizationObject,
)

logger = logging.getLogger(__name__)

BAR_CHART = "bar"


class ExecutionConfigCompiler:
    """Compiles VisualizationObjects into ExecutionConfigurations."""

    def __init__(self, rules: RuleSet | None = None) -> None:
        self.rules = rules if rules is not None else build_metric_rules()

    def compile(
        self,
        visualization: VisualizationObject,
        options: CompileOptions | None = None,
    ) -> ExecutionConfiguration:
        options = options or CompileOptions()
        buckets = visualization.buckets

        metrics = self._build_metrics(buckets)
        categories, filters = self._resolve_categories_and_filters(buckets, options)

        category_items = [(c.display_form, c.sort.value if c.sort else None) for c in categories]
        metric_items = [(m.element, m.sort) for m in metrics]

        columns = [element for element, _ in [*category_items, *metric_items] if element]

        definitions = sort_definitions([m.definition for m in metrics if m.definition])
        where: dict[str, Any] = build_where(filters) if columns else {}

        logger.debug(
            "Compiled %d columns (%d generated definitions)", len(columns), len(definitions)
        )

        return ExecutionConfiguration(
            columns=columns,
            order_by=self._build_order_by(metric_items, category_items, visualization.type),
            definitions=definitions,
            where=where,
            metric_mappings=[
                MetricMapping(
                    element=m.element,
                    measure_index=m.meta.measure_index,
                    is_po_p=m.meta.is_pop,
                )
                for m in metrics
            ],
        )

    def _build_metrics(self, buckets: Buckets) -> list[GeneratedMetric]:
        """Run every measure through its strategy, keeping measure order."""
        metrics: list[GeneratedMetric] = []
        for index, measure in enumerate(buckets.get_measures()):
            strategy = self.rules.match(measure)
            metrics.extend(strategy(measure, buckets, index))
        return metrics

    def _resolve_categories_and_filters(
        self, buckets: Buckets, options: CompileOptions
    ) -> tuple[list[Category], list[BucketFilter]]:
        categories = buckets.get_categories()
        filters = list(buckets.filters)

        if options.remove_date_items:
            categories = [c for c in categories if not c.is_date()]
            filters = [f for f in filters if not f.date_filter]

        return categories, filters

    def _build_order_by(
        self,
        metric_items: list[tuple[str, str | None]],
        category_items: list[tuple[str, str | None]],
        visualization_type: str | None,
    ) -> list[OrderBy]:
        """Order by items that carry a sort, categories first.

        bar charts ignore all of that and sort by value of the first metric.
        """
        if visualization_type == BAR_CHART and metric_items:
            first = next((element for element, _ in metric_items if element), None)
            return [OrderBy(column=first, direction=SortDirection.DESC.value)]

        return [
            OrderBy(column=element, direction=sort)
            for element, sort in [*category_items, *metric_items]
            if sort
        ]
