"""Content-addressed identifiers for generated metrics.

identical definitions must get identical identifiers so the server can
reuse a metric it already created for an earlier request. the identifier
embeds the source object so they stay readable in server logs, e.g.

    metric_p1_5.generated.3f2a...9c_filtered_sum
"""

import hashlib
import logging

from vizforge.models.visualization import Measure

logger = logging.getLogger(__name__)


def get_generated_metric_hash(expression: str, title: str, format: str | None) -> str:
    """Hash the definition content. order matters: expression, title, format."""
    content = f"{expression}#{title}#{format or ''}"
    return hashlib.md5(content.encode("utf-8")).hexdigest()


def parse_object_uri(object_uri: str) -> tuple[str, str]:
    """Split "/gdc/md/<project>/obj/<id>" into (project, id)."""
    parts = object_uri.split("/")
    if len(parts) < 6:
        raise ValueError(f"Malformed object uri: {object_uri}")
    return parts[3], parts[5]


def get_generated_metric_identifier(
    measure: Measure,
    aggregation: str,
    expression: str,
    title: str,
    format: str | None,
) -> str:
    project_id, object_id = parse_object_uri(measure.object_uri)
    content_hash = get_generated_metric_hash(expression, title, format)
    filtered = "_filtered" if measure.has_selected_filters() else ""

    identifier = (
        f"{measure.type}_{project_id}_{object_id}.generated.{content_hash}{filtered}_{aggregation}"
    )
    logger.debug("Generated identifier %s for %s", identifier, measure.object_uri)
    return identifier
