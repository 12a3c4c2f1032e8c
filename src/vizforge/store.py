"""Main VisualizationStore interface for vizforge."""

import asyncio
from pathlib import Path

import httpx

from vizforge.compiler.execution_config import ExecutionConfigCompiler
from vizforge.executor.execution import ExecutionClient
from vizforge.executor.transport import Transport
from vizforge.models.execution import CompileOptions, ExecutionConfiguration, ExecutionResult
from vizforge.models.visualization import VisualizationObject
from vizforge.parser.loader import VisualizationRegistry
from vizforge.settings import ClientSettings


class VisualizationStore:
    """Main interface for vizforge."""

    def __init__(
        self,
        visualizations_path: str | Path,
        settings: ClientSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            visualizations_path: Directory containing visualization files.
            settings: Execution service settings, read from env when omitted.
            transport: Optional httpx transport (tests use MockTransport).
        """
        self.visualizations_path = Path(visualizations_path)
        self.settings = settings or ClientSettings()
        self.registry = VisualizationRegistry()
        self.compiler = ExecutionConfigCompiler()
        self._transport = transport

        # load everything upfront - broken files should fail fast
        self.registry.load_directory(self.visualizations_path)

    def compile(self, name: str, remove_date_items: bool = False) -> ExecutionConfiguration:
        """Compile a visualization without executing it."""
        visualization = self.registry.get(name)
        return self.compiler.compile(
            visualization, CompileOptions(remove_date_items=remove_date_items)
        )

    def execute(self, name: str, project_id: str, extended: bool = False) -> ExecutionResult:
        """Execute a visualization and wait for its result.

        Args:
            name: Visualization name.
            project_id: Project to execute in.
            extended: Include internal attribute element ids in the result.
        """
        visualization = self.registry.get(name)
        return asyncio.run(self._execute(visualization, project_id, extended))

    async def _execute(
        self, visualization: VisualizationObject, project_id: str, extended: bool
    ) -> ExecutionResult:
        async with Transport(self.settings, transport=self._transport) as transport:
            client = ExecutionClient(transport, self.compiler)
            return await client.get_data_for_vis(project_id, visualization, extended)

    def list_visualizations(self) -> list[dict]:
        """List all loaded visualizations."""
        return [
            {
                "name": name,
                "type": vis.type,
                "measures": len(vis.buckets.measures),
                "categories": len(vis.buckets.categories),
                "filters": len(vis.buckets.filters),
            }
            for name, vis in self.registry.visualizations.items()
        ]

    def validate(self) -> list[str]:
        """Compile every visualization. Returns list of errors."""
        errors = []
        for name in self.registry.names():
            try:
                self.compile(name)
            except Exception as e:
                errors.append(f"Visualization '{name}': {e}")
        return errors
