"""Rule-based dispatch from a measure to its metric construction strategy.

a rule is a set of predicates plus a strategy. rules are checked in the
order they were added and the first rule whose predicates all hold wins,
so the order of rules IS the priority. the ruleset is immutable - build it
once and hand it to the compiler.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from vizforge.compiler import strategies
from vizforge.compiler.expressions import is_derived
from vizforge.errors import UnknownMetricStrategy
from vizforge.models.visualization import Measure, MeasureType

logger = logging.getLogger(__name__)

Predicate = Callable[[Measure], bool]


def is_pop(measure: Measure) -> bool:
    return measure.show_po_p


def is_contribution(measure: Measure) -> bool:
    return measure.show_in_percent


def is_calculated_measure(measure: Measure) -> bool:
    return measure.type == MeasureType.METRIC


@dataclass(frozen=True)
class Rule:
    predicates: tuple[Predicate, ...]
    strategy: strategies.MetricStrategy

    def matches(self, measure: Measure) -> bool:
        return all(predicate(measure) for predicate in self.predicates)


class RuleSet:
    """Ordered, immutable collection of rules."""

    def __init__(self, rules: Sequence[Rule]) -> None:
        self._rules = tuple(rules)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def add_rule(
        self, predicates: Sequence[Predicate], strategy: strategies.MetricStrategy
    ) -> "RuleSet":
        """Return a new ruleset with one more rule at the lowest priority."""
        return RuleSet([*self._rules, Rule(tuple(predicates), strategy)])

    def match(self, measure: Measure) -> strategies.MetricStrategy:
        """Return the strategy of the first matching rule.

        there's no fallback: a measure nothing matches is malformed input.
        """
        for rule in self._rules:
            if rule.matches(measure):
                logger.debug(
                    "Measure %s dispatched to %s",
                    measure.object_uri,
                    getattr(rule.strategy, "__name__", rule.strategy),
                )
                return rule.strategy
        raise UnknownMetricStrategy(measure)


def build_metric_rules() -> RuleSet:
    """The standard ruleset.

    order matters: PoP+contribution must be checked before either flag on
    its own, and the flags before the plain derived/calculated cases.
    """
    return (
        RuleSet([])
        .add_rule([is_pop, is_contribution], strategies.create_contribution_pop_metric)
        .add_rule([is_pop], strategies.create_pop_metric)
        .add_rule([is_contribution], strategies.create_contribution_metric)
        .add_rule([is_derived], strategies.create_derived_metric)
        .add_rule([is_calculated_measure], strategies.create_pure_metric)
    )
