"""Basic usage example for vizforge."""

import json
import sys
from pathlib import Path

# Add parent to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from vizforge import VisualizationStore


def main():
    """Compile the sample visualizations and print their payloads."""
    store = VisualizationStore(Path(__file__).parent / "visualizations")

    print("=" * 60)
    print("vizforge compilation demo")
    print("=" * 60)

    for vis in store.list_visualizations():
        print(f"\n{vis['name']} ({vis['type']}):")
        configuration = store.compile(vis["name"])
        print(json.dumps(configuration.to_payload(), indent=2))

    # executing needs a running service:
    #   VIZFORGE_BASE_URL=https://secure.example.com python examples/basic_usage.py
    # then store.execute("revenue_by_region", project_id="demo")


if __name__ == "__main__":
    main()
