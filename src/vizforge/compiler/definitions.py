"""Ordering of generated metric definitions.

the server creates definitions in the order it receives them, so a
definition that references another generated metric ({identifier} in its
expression) has to come after it. duplicates are dropped - identical
content gives identical identifiers, so the first copy is as good as any.
"""

from vizforge.models.execution import MetricDefinitionItem


def _references(item: MetricDefinitionItem, identifier: str) -> bool:
    return f"{{{identifier}}}" in item.metric_definition.expression


def sort_definitions(definitions: list[MetricDefinitionItem]) -> list[MetricDefinitionItem]:
    """Deduplicate by identifier and put dependencies first, otherwise keep order."""
    unique: dict[str, MetricDefinitionItem] = {}
    for item in definitions:
        unique.setdefault(item.metric_definition.identifier, item)

    pending = list(unique.values())
    ordered: list[MetricDefinitionItem] = []

    while pending:
        for index, item in enumerate(pending):
            blockers = [
                other
                for other in pending
                if other is not item and _references(item, other.metric_definition.identifier)
            ]
            if not blockers:
                break
        else:
            # circular references - nothing we can do, keep the rest as is
            ordered.extend(pending)
            break

        ordered.append(pending.pop(index))

    return ordered
