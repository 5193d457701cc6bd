"""
Evaluation orchestrator.

Criteria state is a plain dict of criterion id -> EvaluationResult owned by the
caller. Every operation returns a new dict and never mutates the one passed in;
entries are only ever overwritten, never removed.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from config import ENGINE
from criteria import ERROR, PENDING, REGISTRY, CriteriaRegistry, EvaluationResult, RegistryError
from scoring import EVALUATION_FUNCTIONS, build_report, overall_status, total_score
from snapshot import ContentSnapshot

logger = logging.getLogger(ENGINE["logger_name"])

MISSING_EVALUATOR_MESSAGE = "no evaluator registered"
EVALUATOR_FAILED_MESSAGE = "evaluator failed"


@dataclass(frozen=True)
class AffectedCriterion:
    id: int
    previous_status: str
    status: str
    previous_score: int
    score: int
    message: str

    @property
    def impact(self) -> str:
        if self.score > self.previous_score:
            return "positive"
        if self.score < self.previous_score:
            return "negative"
        return "neutral"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "previous_status": self.previous_status,
            "status": self.status,
            "previous_score": self.previous_score,
            "score": self.score,
            "message": self.message,
            "impact": self.impact,
        }


def missing_evaluators(registry: CriteriaRegistry, evaluators: dict) -> list[int]:
    return [cid for cid in registry.ids() if cid not in evaluators]


class EvaluationEngine:
    """Dispatches field changes to the evaluation functions of the criteria reading them.

    The engine holds no criteria state of its own; callers keep the dict
    returned by ``evaluate_field``/``evaluate_all`` and pass it back in.
    """

    def __init__(
        self,
        registry: CriteriaRegistry = REGISTRY,
        evaluators: Optional[dict] = None,
        strict: Optional[bool] = None,
    ):
        self.registry = registry
        self.evaluators = dict(EVALUATION_FUNCTIONS if evaluators is None else evaluators)
        strict = ENGINE["strict_tables"] if strict is None else strict

        unknown = sorted(cid for cid in self.evaluators if cid not in registry)
        if unknown:
            logger.warning("Evaluators registered for unknown criteria: %s", unknown)
        missing = missing_evaluators(registry, self.evaluators)
        if missing:
            if strict:
                raise RegistryError(f"No evaluator registered for criteria {missing}")
            logger.warning("No evaluator registered for criteria %s; they will report errors", missing)

    def evaluate_criterion(self, criterion_id: int, value: Any, snapshot: ContentSnapshot) -> EvaluationResult:
        evaluate = self.evaluators.get(criterion_id)
        if evaluate is None:
            logger.warning("Criterion %s has no evaluator", criterion_id)
            return EvaluationResult(ERROR, MISSING_EVALUATOR_MESSAGE, 0)
        try:
            result = evaluate(value, snapshot)
        except Exception:
            logger.exception("Evaluator for criterion %s failed", criterion_id)
            return EvaluationResult(ERROR, EVALUATOR_FAILED_MESSAGE, 0)
        logger.debug("Criterion %s -> %s (%s)", criterion_id, result.status, result.score)
        return result

    def evaluate_field(
        self, input_key: str, value: Any, snapshot: ContentSnapshot, state: Optional[dict] = None,
    ) -> dict:
        """Re-evaluate the criteria reading ``input_key`` after it changed to ``value``.

        Returns ``state`` itself when no criterion reads the field, otherwise a
        copy with only the affected entries replaced.
        """
        state = {} if state is None else state
        criteria_ids = self.registry.affected_criteria(input_key)
        if not criteria_ids:
            return state
        current = snapshot.with_value(input_key, value)
        new_state = dict(state)
        for criterion_id in criteria_ids:
            new_state[criterion_id] = self.evaluate_criterion(criterion_id, value, current)
        return new_state

    def evaluate_all(self, snapshot: ContentSnapshot, state: Optional[dict] = None) -> dict:
        new_state = {}
        for criterion in self.registry:
            new_state[criterion.id] = self.evaluate_criterion(criterion.id, None, snapshot)
        return new_state

    def simulate_field_change(
        self, input_key: str, value: Any, snapshot: ContentSnapshot, state: Optional[dict] = None,
    ) -> list[AffectedCriterion]:
        """Preview how a change to ``input_key`` would move each affected criterion."""
        state = {} if state is None else state
        new_state = self.evaluate_field(input_key, value, snapshot, state)
        affected = []
        for criterion_id in self.registry.affected_criteria(input_key):
            before = state.get(criterion_id)
            after = new_state[criterion_id]
            affected.append(AffectedCriterion(
                id=criterion_id,
                previous_status=before.status if before else PENDING,
                status=after.status,
                previous_score=before.score if before else 0,
                score=after.score,
                message=after.message,
            ))
        return affected

    def total_score(self, state: dict) -> int:
        return total_score(state)

    def overall_status(self, state: dict) -> str:
        return overall_status(state)

    def report(self, state: dict, iteration: int = 0):
        return build_report(state, self.registry, iteration=iteration)


def changed_criteria(before: dict, after: dict) -> list[int]:
    """Ids whose result differs between two states, in ``after`` order."""
    return [cid for cid, result in after.items() if before.get(cid) != result]


_default_engine: Optional[EvaluationEngine] = None


def default_engine() -> EvaluationEngine:
    global _default_engine
    if _default_engine is None:
        _default_engine = EvaluationEngine()
    return _default_engine


def evaluate_field(input_key: str, value: Any, snapshot: ContentSnapshot, state: Optional[dict] = None) -> dict:
    return default_engine().evaluate_field(input_key, value, snapshot, state)


def evaluate_all(snapshot: ContentSnapshot, state: Optional[dict] = None) -> dict:
    return default_engine().evaluate_all(snapshot, state)
