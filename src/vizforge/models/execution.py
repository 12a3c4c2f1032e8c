"""Pydantic models for compiled execution payloads and their results.

ExecutionConfiguration is the only thing the compiler produces - the
transport layer turns it into a request body. dumping with by_alias=True
gives the camelCase keys the execution service expects.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PayloadModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MetricDefinition(PayloadModel):
    """A generated metric the server should create on the fly."""

    identifier: str
    expression: str
    title: str
    format: str | None = None


class MetricDefinitionItem(PayloadModel):
    """Wire wrapper: `{metricDefinition: {...}}`."""

    metric_definition: MetricDefinition


class OrderBy(PayloadModel):
    column: str
    direction: str


class MetricMapping(PayloadModel):
    """Links a returned column back to the measure that produced it."""

    element: str
    measure_index: int
    is_po_p: bool | None = Field(default=None, alias="isPoP")


class CompileOptions(BaseModel):
    # drop date categories and date filters, used when the date is
    # handled outside of the visualization (e.g. dashboard-level filter)
    remove_date_items: bool = False


class ExecutionConfiguration(PayloadModel):
    """Compiled request payload for the tabular-data execution service."""

    columns: list[str] = Field(default_factory=list)
    order_by: list[OrderBy] = Field(default_factory=list)
    definitions: list[MetricDefinitionItem] = Field(default_factory=list)
    where: dict[str, Any] = Field(default_factory=dict)
    metric_mappings: list[MetricMapping] = Field(default_factory=list)
    # execution context filters, passed through untouched
    filters: list[dict[str, Any]] | None = None

    def to_payload(self) -> dict[str, Any]:
        """Serialize with wire keys, leaving out unset optional values."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Header(BaseModel):
    """A result header as returned by the execution service.

    unknown keys are kept - the server sends more than we care about.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    id: str | None = None
    uri: str | None = None
    title: str | None = None
    type: str | None = None
    measure_index: int | None = Field(default=None, alias="measureIndex")
    is_po_p: bool | None = Field(default=None, alias="isPoP")


class ExecutionResult(BaseModel):
    """Result of executing a visualization."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    is_loaded: bool = False
    headers: list[Header] = Field(default_factory=list)
    raw_data: list[Any] = Field(default_factory=list)
    warnings: list[Any] = Field(default_factory=list)
    is_empty: bool = False
