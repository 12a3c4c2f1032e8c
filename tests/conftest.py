"""Pytest fixtures for vizforge tests."""

from pathlib import Path
from typing import Any

import pytest

from vizforge.models.visualization import Measure, VisualizationObject

PROJECT_URI = "/gdc/md/p1/obj"
REVENUE_URI = f"{PROJECT_URI}/5"
QUANTITY_URI = f"{PROJECT_URI}/7"
REGION_ATTRIBUTE = f"{PROJECT_URI}/10"
REGION_DISPLAY_FORM = f"{PROJECT_URI}/11"
YEAR_ATTRIBUTE = f"{PROJECT_URI}/20"
YEAR_DISPLAY_FORM = f"{PROJECT_URI}/21"
DATE_DATASET = f"{PROJECT_URI}/22"
PRODUCT_ATTRIBUTE = f"{PROJECT_URI}/30"
PRODUCT_DISPLAY_FORM = f"{PROJECT_URI}/31"


def attribute_filter(
    elements: list[str],
    negative: bool = False,
    attribute: str = PRODUCT_ATTRIBUTE,
    display_form: str = PRODUCT_DISPLAY_FORM,
) -> dict[str, Any]:
    return {
        "listAttributeFilter": {
            "attribute": attribute,
            "displayForm": display_form,
            "default": {"negativeSelection": negative, "attributeElements": elements},
        }
    }


def date_filter(**overrides: Any) -> dict[str, Any]:
    data = {
        "attribute": YEAR_ATTRIBUTE,
        "dataSet": DATE_DATASET,
        "granularity": "GDC.time.year",
        "from": -1,
        "to": 0,
    }
    data.update(overrides)
    return {"dateFilter": data}


def region_category(**overrides: Any) -> dict[str, Any]:
    data = {"type": "attribute", "attribute": REGION_ATTRIBUTE, "displayForm": REGION_DISPLAY_FORM}
    data.update(overrides)
    return {"category": data}


def year_category(**overrides: Any) -> dict[str, Any]:
    data = {"type": "date", "attribute": YEAR_ATTRIBUTE, "displayForm": YEAR_DISPLAY_FORM}
    data.update(overrides)
    return {"category": data}


def revenue(**overrides: Any) -> dict[str, Any]:
    data = {
        "objectUri": REVENUE_URI,
        "type": "metric",
        "title": "Revenue",
        "format": "#,##0",
        "measureFilters": [],
    }
    data.update(overrides)
    return data


def quantity(**overrides: Any) -> dict[str, Any]:
    data = {
        "objectUri": QUANTITY_URI,
        "type": "fact",
        "aggregation": "sum",
        "title": "Sum of Quantity",
        "format": "#,##0.00",
        "measureFilters": [],
    }
    data.update(overrides)
    return data


def make_measure(data: dict[str, Any]) -> Measure:
    return Measure.model_validate(data)


def make_visualization(
    measures: list[dict[str, Any]],
    categories: list[dict[str, Any]] | None = None,
    filters: list[dict[str, Any]] | None = None,
    type: str = "table",
) -> VisualizationObject:
    return VisualizationObject.model_validate(
        {
            "type": type,
            "buckets": {
                "measures": [{"measure": m} for m in measures],
                "categories": categories or [],
                "filters": filters or [],
            },
        }
    )


@pytest.fixture
def sample_visualizations_yaml() -> str:
    """Sample visualization YAML content for testing."""
    return f"""
visualizations:
  - name: revenue_by_region
    type: bar
    buckets:
      measures:
        - measure:
            objectUri: {REVENUE_URI}
            type: metric
            title: Revenue
            format: "#,##0"
            showPoP: true
      categories:
        - category:
            type: attribute
            attribute: {REGION_ATTRIBUTE}
            displayForm: {REGION_DISPLAY_FORM}
        - category:
            type: date
            attribute: {YEAR_ATTRIBUTE}
            displayForm: {YEAR_DISPLAY_FORM}

  - name: quantity_share
    type: table
    buckets:
      measures:
        - measure:
            objectUri: {QUANTITY_URI}
            type: fact
            aggregation: sum
            title: Quantity
            format: "#,##0"
            showInPercent: true
      categories:
        - category:
            type: attribute
            attribute: {REGION_ATTRIBUTE}
            displayForm: {REGION_DISPLAY_FORM}
            sort: asc
"""


@pytest.fixture
def visualizations_dir(tmp_path: Path, sample_visualizations_yaml: str) -> Path:
    """Create a temporary visualizations directory with sample files."""
    path = tmp_path / "visualizations"
    path.mkdir()
    (path / "sales.yaml").write_text(sample_visualizations_yaml)
    (path / "plain_revenue.json").write_text(
        '{"type": "table", "buckets": {"measures": [{"measure": '
        f'{{"objectUri": "{REVENUE_URI}", "type": "metric", "title": "Revenue"}}'
        "}]}}"
    )
    return path


@pytest.fixture
def broken_visualizations_dir(tmp_path: Path) -> Path:
    """A directory whose only visualization can't be compiled (PoP without a date)."""
    path = tmp_path / "broken"
    path.mkdir()
    (path / "no_date.yaml").write_text(
        f"""
type: table
buckets:
  measures:
    - measure:
        objectUri: {REVENUE_URI}
        type: metric
        title: Revenue
        showPoP: true
"""
    )
    return path
