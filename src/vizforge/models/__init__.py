"""Pydantic models for vizforge."""

from vizforge.models.execution import (
    CompileOptions,
    ExecutionConfiguration,
    ExecutionResult,
    Header,
    MetricDefinition,
    MetricDefinitionItem,
    MetricMapping,
    OrderBy,
)
from vizforge.models.visualization import (
    AttributeFilter,
    AttributeFilterSelection,
    BucketFilter,
    Buckets,
    Category,
    CategoryItem,
    CategoryType,
    DateFilter,
    Measure,
    MeasureItem,
    MeasureType,
    MetricSort,
    SortDirection,
    VisualizationObject,
)

__all__ = [
    "AttributeFilter",
    "AttributeFilterSelection",
    "BucketFilter",
    "Buckets",
    "Category",
    "CategoryItem",
    "CategoryType",
    "CompileOptions",
    "DateFilter",
    "ExecutionConfiguration",
    "ExecutionResult",
    "Header",
    "Measure",
    "MeasureItem",
    "MeasureType",
    "MetricDefinition",
    "MetricDefinitionItem",
    "MetricMapping",
    "MetricSort",
    "OrderBy",
    "SortDirection",
    "VisualizationObject",
]
