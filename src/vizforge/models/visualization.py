"""Pydantic models for visualization metadata objects.

a metadata object is what the UI hands us: buckets of measures, categories
and filters. the models mirror the wire shape closely (camelCase keys,
`{measure: ...}` style wrappers) so json straight from the UI validates as-is.
everything is frozen - the compiler must never mutate its input.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for models that read camelCase keys but expose snake_case fields."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class MeasureType(str, Enum):
    """Object types a measure can point at."""

    FACT = "fact"
    ATTRIBUTE = "attribute"
    METRIC = "metric"


class CategoryType(str, Enum):
    DATE = "date"
    ATTRIBUTE = "attribute"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class AttributeFilterSelection(WireModel):
    """The selected elements of an attribute filter."""

    attribute_elements: list[str] = Field(default_factory=list)
    negative_selection: bool = False


class AttributeFilter(WireModel):
    """A list filter over attribute elements.

    elements are element uris like "/gdc/md/p1/obj/2/elements?id=5" - the
    translator only keeps what follows the last "=".
    """

    attribute: str | None = None
    display_form: str | None = None
    selection: AttributeFilterSelection = Field(
        default_factory=AttributeFilterSelection, alias="default"
    )

    @property
    def elements(self) -> list[str]:
        return self.selection.attribute_elements

    @property
    def negative_selection(self) -> bool:
        return self.selection.negative_selection

    def is_executable(self) -> bool:
        """Filters with no selected elements don't restrict anything."""
        return bool(self.elements)


class DateFilter(WireModel):
    """A date range filter on a date dimension."""

    attribute: str | None = None
    dimension: str | None = None
    data_set: str | None = None
    # lowercase 's' spelling is deprecated but still sent by older clients
    dataset: str | None = None
    granularity: str | None = None
    from_: Any = Field(default=None, alias="from")
    to: Any = None

    @property
    def date_uri(self) -> str | None:
        return self.dimension or self.data_set or self.dataset

    def is_executable(self) -> bool:
        # an explicit null bound is still a bound, only missing keys count
        return {"from_", "to"} <= self.model_fields_set


class BucketFilter(WireModel):
    """One filter entry - exactly one of the two keys is normally set."""

    list_attribute_filter: AttributeFilter | None = None
    date_filter: DateFilter | None = None


class MetricSort(WireModel):
    """Sort setting that can target either the measure or its PoP metric."""

    direction: SortDirection
    sort_by_po_p: bool = Field(default=False, alias="sortByPoP")


class Measure(WireModel):
    """A measure in the measures bucket.

    type is kept as a plain string on purpose - unknown types have to reach
    the rule dispatcher so it can reject them by name.
    """

    object_uri: str
    type: str
    aggregation: str | None = None
    title: str | None = None
    format: str | None = None
    sort: SortDirection | MetricSort | None = None
    show_po_p: bool = Field(default=False, alias="showPoP")
    show_in_percent: bool = False
    measure_filters: list[BucketFilter] = Field(default_factory=list)

    @property
    def attribute_filters(self) -> list[AttributeFilter]:
        return [f.list_attribute_filter for f in self.measure_filters if f.list_attribute_filter]

    def has_selected_filters(self) -> bool:
        """True when at least one measure filter actually selects elements."""
        return any(f.is_executable() for f in self.attribute_filters)


class Category(WireModel):
    """A category (attribute slicing) in the categories bucket."""

    display_form: str
    type: str = CategoryType.ATTRIBUTE.value
    attribute: str | None = None
    sort: SortDirection | None = None

    def is_date(self) -> bool:
        return self.type == CategoryType.DATE


class MeasureItem(WireModel):
    measure: Measure


class CategoryItem(WireModel):
    category: Category


class Buckets(WireModel):
    measures: list[MeasureItem] = Field(default_factory=list)
    categories: list[CategoryItem] = Field(default_factory=list)
    filters: list[BucketFilter] = Field(default_factory=list)

    def get_measures(self) -> list[Measure]:
        return [item.measure for item in self.measures]

    def get_categories(self) -> list[Category]:
        return [item.category for item in self.categories]

    def get_date_category(self) -> Category | None:
        for category in self.get_categories():
            if category.is_date():
                return category
        return None

    def get_date_filter(self) -> DateFilter | None:
        for item in self.filters:
            if item.date_filter:
                return item.date_filter
        return None


class VisualizationObject(WireModel):
    """The metadata object for one visualization.

    type is the visualization type ("bar", "table", "line", ...). only "bar"
    changes compilation (it forces sorting by the first metric).
    """

    name: str | None = None
    type: str | None = None
    buckets: Buckets = Field(default_factory=Buckets)

    def with_measures(self, measures: list[Measure]) -> "VisualizationObject":
        """Return a copy of this object with its measures replaced."""
        buckets = self.buckets.model_copy(
            update={"measures": [MeasureItem(measure=m) for m in measures]}
        )
        return self.model_copy(update={"buckets": buckets})
