"""Execution of compiled visualizations against the tabular-data service.

two round trips per execution: a POST that starts the execution and
returns headers plus a result url, then a single GET on that url. a 204
from the second call means the result is empty, not that it failed.
"""

import asyncio
import logging
from typing import Any

from vizforge.compiler.execution_config import ExecutionConfigCompiler
from vizforge.executor.transport import Transport
from vizforge.models.execution import (
    ExecutionConfiguration,
    ExecutionResult,
    Header,
    MetricMapping,
)
from vizforge.models.visualization import Measure, VisualizationObject

logger = logging.getLogger(__name__)

EXECUTIONS_PATH = "/gdc/internal/projects/{project_id}/experimental/executions"
RESULT_KEY = "tabularDataResult"
EXTENDED_RESULT_KEY = "extendedTabularDataResult"
HTTP_NO_CONTENT = 204

# properties of the configuration that go into the request unless unset
REQUEST_PROPERTIES = ("filters", "where", "orderBy", "definitions")


def annotate_headers(mappings: list[MetricMapping], headers: list[Header]) -> list[Header]:
    """Attach measure index and PoP flag to the headers mappings point at.

    builds new headers instead of touching the ones we were given. each
    mapping claims the first header with a matching id or uri that no
    earlier mapping claimed.
    """
    annotated = list(headers)
    for mapping in mappings:
        for index, header in enumerate(annotated):
            if header.measure_index is not None:
                continue
            if mapping.element in (header.id, header.uri):
                annotated[index] = header.model_copy(
                    update={"measure_index": mapping.measure_index, "is_po_p": mapping.is_po_p}
                )
                break
    return annotated


def build_execution_request(
    columns: list[str], configuration: ExecutionConfiguration
) -> dict[str, Any]:
    payload = configuration.to_payload()
    execution: dict[str, Any] = {"columns": columns}
    for key in REQUEST_PROPERTIES:
        if key in payload:
            execution[key] = payload[key]
    return {"execution": execution}


class ExecutionClient:
    """Runs visualizations on the execution service.

    holds a transport and a compiler; neither keeps per-request state so one
    client can serve concurrent executions.
    """

    def __init__(
        self,
        transport: Transport,
        compiler: ExecutionConfigCompiler | None = None,
    ) -> None:
        self.transport = transport
        self.compiler = compiler or ExecutionConfigCompiler()

    async def get_data(
        self,
        project_id: str,
        columns: list[str],
        configuration: ExecutionConfiguration | None = None,
        extended: bool = False,
    ) -> ExecutionResult:
        """Execute columns and return headers with the raw row data.

        extended results include internal attribute element ids, handy for
        building filters for follow-up executions.
        """
        configuration = configuration or ExecutionConfiguration()
        result_key = EXTENDED_RESULT_KEY if extended else RESULT_KEY

        path = EXECUTIONS_PATH.format(project_id=project_id)
        logger.info("Starting execution of %d columns in project %s", len(columns), project_id)
        response = await self.transport.post_json(
            path, build_execution_request(columns, configuration)
        )
        execution_result = response.json()["executionResult"]

        headers = annotate_headers(
            configuration.metric_mappings,
            [Header.model_validate(h) for h in execution_result.get("headers", [])],
        )

        logger.info("Fetching execution result from %s", execution_result[result_key])
        data_response = await self.transport.poll_resource(execution_result[result_key])

        if data_response.status_code == HTTP_NO_CONTENT:
            return ExecutionResult(is_loaded=True, headers=headers, is_empty=True)

        body = data_response.json() or {}
        result = body.get(result_key, {})
        return ExecutionResult(
            is_loaded=True,
            headers=headers,
            raw_data=result.get("values", []),
            warnings=result.get("warnings", []),
            is_empty=False,
        )

    async def get_original_formats(
        self, visualization: VisualizationObject
    ) -> VisualizationObject:
        """Look up the server-side format of measures that get generated metrics.

        PoP and filtered measures produce generated definitions that should
        carry the original metric's format, which the UI may not have sent.
        lookups run concurrently, one per measure.
        """
        measures = await asyncio.gather(
            *(self._fetch_format(m) for m in visualization.buckets.get_measures())
        )
        return visualization.with_measures(list(measures))

    async def _fetch_format(self, measure: Measure) -> Measure:
        if not (measure.show_po_p or measure.measure_filters):
            return measure

        obj = await self.transport.get_json(measure.object_uri)
        format = ((obj or {}).get("metric") or {}).get("content", {}).get("format")
        return measure.model_copy(update={"format": format or measure.format})

    async def get_data_for_vis(
        self,
        project_id: str,
        visualization: VisualizationObject,
        extended: bool = False,
    ) -> ExecutionResult:
        """Resolve formats, compile and execute a visualization."""
        visualization = await self.get_original_formats(visualization)
        configuration = self.compiler.compile(visualization)
        return await self.get_data(project_id, configuration.columns, configuration, extended)
