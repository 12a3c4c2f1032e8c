"""Tests for compiling visualizations into execution configurations."""

import pytest

from conftest import (
    REGION_DISPLAY_FORM,
    REVENUE_URI,
    YEAR_ATTRIBUTE,
    YEAR_DISPLAY_FORM,
    attribute_filter,
    date_filter,
    make_visualization,
    quantity,
    region_category,
    revenue,
    year_category,
)
from vizforge.compiler.execution_config import ExecutionConfigCompiler
from vizforge.compiler.rules import RuleSet, is_pop
from vizforge.compiler.strategies import create_pure_metric
from vizforge.errors import MissingAttributeError, UnknownMetricStrategy
from vizforge.models.execution import CompileOptions, OrderBy


@pytest.fixture
def compiler() -> ExecutionConfigCompiler:
    return ExecutionConfigCompiler()


class TestExecutionConfigCompiler:
    def test_plain_metric(self, compiler: ExecutionConfigCompiler):
        """A plain metric compiles to its uri with no definition and no filters."""
        config = compiler.compile(make_visualization([revenue()]))

        assert config.columns == [REVENUE_URI]
        assert config.definitions == []
        assert config.where == {"$and": []}
        assert config.order_by == []
        assert [m.model_dump() for m in config.metric_mappings] == [
            {"element": REVENUE_URI, "measure_index": 0, "is_po_p": None}
        ]

    def test_pop_metric(self, compiler: ExecutionConfigCompiler):
        """PoP compiles to the PoP metric plus the original metric."""
        config = compiler.compile(
            make_visualization([revenue(showPoP=True)], categories=[year_category()])
        )

        assert len(config.definitions) == 1
        definition = config.definitions[0].metric_definition
        assert definition.title == "Revenue - previous year"
        assert definition.expression == (
            f"SELECT [{REVENUE_URI}] FOR PREVIOUS ([{YEAR_ATTRIBUTE}])"
        )
        assert config.columns == [YEAR_DISPLAY_FORM, definition.identifier, REVENUE_URI]

        pop_mapping, base_mapping = config.metric_mappings
        assert pop_mapping.element == definition.identifier
        assert pop_mapping.measure_index == base_mapping.measure_index == 0
        assert pop_mapping.is_po_p is True
        assert base_mapping.is_po_p is None

    def test_categories_come_before_metrics(self, compiler: ExecutionConfigCompiler):
        """Columns list category display forms first, then metrics in measure order."""
        config = compiler.compile(
            make_visualization(
                [revenue(), quantity()],
                categories=[region_category(), year_category()],
            )
        )

        assert config.columns[:3] == [REGION_DISPLAY_FORM, YEAR_DISPLAY_FORM, REVENUE_URI]
        assert config.columns[3].startswith("fact_p1_7.generated.")
        assert [m.measure_index for m in config.metric_mappings] == [0, 1]

    def test_order_by_collects_sorts(self, compiler: ExecutionConfigCompiler):
        """Sorted categories and metrics become order by entries, categories first."""
        config = compiler.compile(
            make_visualization(
                [revenue(sort="asc"), quantity()],
                categories=[region_category(sort="desc"), year_category()],
            )
        )

        assert config.order_by == [
            OrderBy(column=REGION_DISPLAY_FORM, direction="desc"),
            OrderBy(column=REVENUE_URI, direction="asc"),
        ]

    def test_bar_chart_sorts_by_first_metric(self, compiler: ExecutionConfigCompiler):
        """Bar charts ignore item sorts and sort descending by the first metric."""
        config = compiler.compile(
            make_visualization(
                [revenue(sort="asc"), quantity(sort="asc")],
                categories=[region_category(sort="asc")],
                type="bar",
            )
        )

        assert config.order_by == [OrderBy(column=REVENUE_URI, direction="desc")]

    def test_bar_chart_without_metrics(self, compiler: ExecutionConfigCompiler):
        """Bar charts with no metrics fall back to item sorts."""
        config = compiler.compile(
            make_visualization([], categories=[region_category(sort="asc")], type="bar")
        )
        assert config.order_by == [OrderBy(column=REGION_DISPLAY_FORM, direction="asc")]

    def test_where_from_bucket_filters(self, compiler: ExecutionConfigCompiler):
        """Bucket filters are translated into the where clause."""
        config = compiler.compile(
            make_visualization(
                [revenue()],
                filters=[attribute_filter(["a=1"], display_form="df"), date_filter()],
            )
        )

        assert config.where["$and"] == [{"df": {"$in": [{"id": "1"}]}}]
        assert len(config.where) == 2

    def test_no_columns_means_no_where(self, compiler: ExecutionConfigCompiler):
        """Without columns the where clause is empty, filters or not."""
        config = compiler.compile(
            make_visualization([], filters=[attribute_filter(["a=1"])])
        )

        assert config.columns == []
        assert config.where == {}

    def test_remove_date_items(self, compiler: ExecutionConfigCompiler):
        """Date categories and date filters can be dropped."""
        config = compiler.compile(
            make_visualization(
                [revenue()],
                categories=[region_category(), year_category()],
                filters=[date_filter()],
            ),
            CompileOptions(remove_date_items=True),
        )

        assert config.columns == [REGION_DISPLAY_FORM, REVENUE_URI]
        assert config.where == {"$and": []}

    def test_duplicate_definitions_are_merged(self, compiler: ExecutionConfigCompiler):
        """The same generated metric twice is defined once."""
        config = compiler.compile(make_visualization([quantity(), quantity()]))

        assert len(config.columns) == 2
        assert config.columns[0] == config.columns[1]
        assert len(config.definitions) == 1
        assert [m.measure_index for m in config.metric_mappings] == [0, 1]

    def test_contribution_pop(self, compiler: ExecutionConfigCompiler):
        """Contribution with PoP emits two definitions, PoP first."""
        config = compiler.compile(
            make_visualization(
                [revenue(showPoP=True, showInPercent=True)],
                categories=[region_category(), year_category()],
            )
        )

        identifiers = [d.metric_definition.identifier for d in config.definitions]
        assert identifiers[0].endswith("_pop")
        assert identifiers[1].endswith("_percent")
        assert config.columns[2:] == identifiers

    def test_compile_does_not_mutate_input(self, compiler: ExecutionConfigCompiler):
        """The visualization is unchanged by compilation."""
        vis = make_visualization([revenue(showPoP=True)], categories=[year_category()])
        before = vis.model_dump()

        compiler.compile(vis)

        assert vis.model_dump() == before

    def test_pop_without_date_fails(self, compiler: ExecutionConfigCompiler):
        with pytest.raises(MissingAttributeError):
            compiler.compile(make_visualization([revenue(showPoP=True)]))

    def test_custom_rules(self):
        """The compiler uses the ruleset it was given."""
        compiler = ExecutionConfigCompiler(RuleSet([]).add_rule([is_pop], create_pure_metric))

        config = compiler.compile(make_visualization([revenue(showPoP=True)]))
        assert config.columns == [REVENUE_URI]

        with pytest.raises(UnknownMetricStrategy):
            compiler.compile(make_visualization([revenue()]))


class TestPayload:
    def test_payload_uses_wire_keys(self, compiler: ExecutionConfigCompiler):
        """to_payload emits camelCase keys and leaves out unset flags."""
        config = compiler.compile(
            make_visualization([revenue(showPoP=True, sort="desc")], categories=[year_category()])
        )
        payload = config.to_payload()

        assert set(payload) == {"columns", "orderBy", "definitions", "where", "metricMappings"}
        assert "metricDefinition" in payload["definitions"][0]
        assert payload["metricMappings"][0]["isPoP"] is True
        assert "isPoP" not in payload["metricMappings"][1]
        assert payload["metricMappings"][1]["measureIndex"] == 0
