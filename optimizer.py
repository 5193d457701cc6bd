"""
SEO criteria optimizer — improvement suggestions and an iterative auto-fix loop.

Improvement functions are pure: ``(value, snapshot) -> new value`` for the
criterion's primary input field, or a ``FieldUpdate`` naming another field.
They never evaluate or mutate anything; callers apply the suggestion and
re-run evaluation.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from config import ENGINE, ITERATIONS, RULES
from criteria import ERROR, REGISTRY, WARNING, CriteriaRegistry, RegistryError
from engine import EvaluationEngine, changed_criteria, default_engine
from scoring import extract_subheadings, total_score
from snapshot import ContentSnapshot, slugify

logger = logging.getLogger(ENGINE["logger_name"])


class NotOptimizableError(ValueError):
    """Raised when an improvement is requested for a criterion without one."""


@dataclass(frozen=True)
class FieldUpdate:
    field: str
    value: Any


ImprovementFunction = Callable[[Any, ContentSnapshot], Any]

IMPROVEMENT_FUNCTIONS: dict[int, ImprovementFunction] = {}


def improvement(criterion_id: int):
    def register(fn):
        IMPROVEMENT_FUNCTIONS[criterion_id] = fn
        return fn
    return register


def _current(value, snapshot: ContentSnapshot, key: str) -> str:
    return str(value) if value else snapshot.text(key)


def _cut_at_word(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    cut = text[:limit + 1].rsplit(" ", 1)[0]
    return cut.rstrip(" ,;:-|") if len(cut) <= limit else text[:limit]


@improvement(101)
def prefix_meta_title(value, snapshot: ContentSnapshot):
    meta_title = _current(value, snapshot, "metaTitle")
    keyword = snapshot.text("primaryKeyword").strip()
    if not meta_title:
        return keyword or "Untitled"
    if not keyword or keyword.lower() in meta_title.lower():
        return meta_title
    return f"{keyword}: {meta_title}"


@improvement(102)
def add_keyword_to_meta_description(value, snapshot: ContentSnapshot):
    description = _current(value, snapshot, "metaDescription")
    keyword = snapshot.text("primaryKeyword").strip()
    if not description:
        return f"Learn about {keyword or 'this topic'} in this comprehensive guide."
    if not keyword or keyword.lower() in description.lower():
        return description
    return f"{description.rstrip()} Learn more about {keyword}."


@improvement(103)
def add_keyword_to_slug(value, snapshot: ContentSnapshot):
    slug = _current(value, snapshot, "urlSlug")
    keyword_slug = slugify(snapshot.text("primaryKeyword"))
    if not slug:
        return keyword_slug or "article"
    if not keyword_slug or keyword_slug in slug.lower():
        return slug
    return f"{keyword_slug}-{slug.strip('-')}"


@improvement(107)
def fit_meta_description_length(value, snapshot: ContentSnapshot):
    cfg = RULES["meta_description_length"]
    description = _current(value, snapshot, "metaDescription").strip()
    keyword = snapshot.text("primaryKeyword").strip() or "this topic"
    if len(description) > cfg["target_length_max"]:
        return _cut_at_word(description, cfg["target_length_max"])
    if len(description) < cfg["target_length_min"]:
        padded = f"{description} Discover everything you need to know about {keyword}.".strip()
        return _cut_at_word(padded, cfg["target_length_max"])
    return description


@improvement(203)
def fit_slug_length(value, snapshot: ContentSnapshot):
    cfg = RULES["url_slug_length"]
    words = [w for w in slugify(_current(value, snapshot, "urlSlug")).split("-") if w]
    if len(words) > cfg["target_words_max"]:
        significant = [w for w in words if w not in cfg["stop_words"]]
        words = (significant or words)[:cfg["target_words_max"]]
    if len(words) < cfg["target_words_min"]:
        for term in slugify(snapshot.text("primaryKeyword")).split("-"):
            if len(words) >= cfg["target_words_min"]:
                break
            if term and term not in words:
                words.append(term)
    return "-".join(words)


@improvement(301)
def move_keyword_to_title_start(value, snapshot: ContentSnapshot):
    title = _current(value, snapshot, "title")
    keyword = snapshot.text("primaryKeyword").strip()
    if not title:
        return keyword or "Untitled"
    if not keyword or title.strip().lower().startswith(keyword.lower()):
        return title
    return f"{keyword}: {title}"


@improvement(304)
def fit_meta_title_length(value, snapshot: ContentSnapshot):
    cfg = RULES["meta_title_length"]
    meta_title = _current(value, snapshot, "metaTitle").strip()
    keyword = snapshot.text("primaryKeyword").strip()
    if len(meta_title) > cfg["target_length_max"]:
        return _cut_at_word(meta_title, cfg["target_length_max"])
    if len(meta_title) < cfg["target_length_min"] and keyword and keyword.lower() not in meta_title.lower():
        return _cut_at_word(f"{meta_title} | {keyword}", cfg["target_length_max"])
    return meta_title


@improvement(401)
def build_table_of_contents(value, snapshot: ContentSnapshot):
    # Fixing the TOC criterion writes the ``toc`` field, not the content itself.
    content = str(value) if value else snapshot.text("content")
    return FieldUpdate("toc", extract_subheadings(content))


def check_improvement_table(registry: CriteriaRegistry, table: dict) -> None:
    unknown = sorted(cid for cid in table if cid not in registry)
    if unknown:
        raise RegistryError(f"Improvement functions registered for unknown criteria {unknown}")
    not_optimizable = sorted(cid for cid in table if not registry[cid].optimizable)
    if not_optimizable:
        raise RegistryError(f"Improvement functions registered for non-optimizable criteria {not_optimizable}")
    missing = [c.id for c in registry if c.optimizable and c.id not in table]
    if missing:
        raise RegistryError(f"Optimizable criteria without improvement function {missing}")


check_improvement_table(REGISTRY, IMPROVEMENT_FUNCTIONS)


def is_optimizable(criterion_id: int, registry: CriteriaRegistry = REGISTRY,
                   improvements: Optional[dict] = None) -> bool:
    improvements = IMPROVEMENT_FUNCTIONS if improvements is None else improvements
    criterion = registry.get(criterion_id)
    return bool(criterion and criterion.optimizable and criterion_id in improvements)


def suggest_improvement(
    criterion_id: int,
    value: Any,
    snapshot: ContentSnapshot,
    registry: CriteriaRegistry = REGISTRY,
    improvements: Optional[dict] = None,
) -> FieldUpdate:
    """Proposed new value for the field that fixes ``criterion_id``.

    A plain return value from the improvement function targets the criterion's
    primary input field. Raises NotOptimizableError for unknown criteria and
    criteria not marked optimizable.
    """
    improvements = IMPROVEMENT_FUNCTIONS if improvements is None else improvements
    criterion = registry.get(criterion_id)
    if criterion is None:
        raise NotOptimizableError(f"Unknown criterion {criterion_id}")
    if not criterion.optimizable or criterion_id not in improvements:
        raise NotOptimizableError(f"Criterion {criterion_id} cannot be optimized automatically")
    result = improvements[criterion_id](value, snapshot)
    if isinstance(result, FieldUpdate):
        return result
    return FieldUpdate(criterion.primary_input, result)


def apply_suggestion(
    criterion_id: int,
    snapshot: ContentSnapshot,
    state: dict,
    engine: Optional[EvaluationEngine] = None,
) -> tuple[ContentSnapshot, dict]:
    """Apply the suggested fix for one criterion and re-evaluate the touched field."""
    engine = engine or default_engine()
    update = suggest_improvement(criterion_id, None, snapshot, engine.registry)
    new_snapshot = snapshot.with_value(update.field, update.value)
    new_state = engine.evaluate_field(update.field, update.value, new_snapshot, state)
    return new_snapshot, new_state


@dataclass
class OptimizationResult:
    best_snapshot: ContentSnapshot
    best_state: dict
    best_score: int
    best_iteration: int
    history: list[dict] = field(default_factory=list)

    @property
    def iterations_run(self) -> int:
        return len(self.history) - 1


def fixable_criteria(state: dict, registry: CriteriaRegistry = REGISTRY) -> list[int]:
    """Failing or warning optimizable criteria, most points lost first."""
    candidates = [
        (registry[cid].weight - result.score, cid)
        for cid, result in state.items()
        if cid in registry and result.status in (ERROR, WARNING) and is_optimizable(cid, registry)
    ]
    return [cid for _, cid in sorted(candidates, key=lambda x: (-x[0], x[1]))]


def run_optimization(
    snapshot: ContentSnapshot,
    engine: Optional[EvaluationEngine] = None,
    iterations: Optional[int] = None,
) -> OptimizationResult:
    """Repeatedly apply every available fix until the score stops improving."""
    engine = engine or default_engine()
    if iterations is None:
        iterations = ITERATIONS["default_count"]
    iterations = min(iterations, ITERATIONS["max_count"])

    state = engine.evaluate_all(snapshot)
    score = total_score(state)
    history = [{"iteration": 0, "score": score, "applied": [], "changed": []}]
    best = OptimizationResult(snapshot, state, score, 0, history)
    plateau_count = 0

    for i in range(1, iterations + 1):
        targets = fixable_criteria(state, engine.registry)
        if not targets:
            logger.debug("No optimizable criteria left after iteration %d", i - 1)
            break

        new_snapshot, new_state = snapshot, state
        applied = []
        for criterion_id in targets:
            new_snapshot, new_state = apply_suggestion(criterion_id, new_snapshot, new_state, engine)
            applied.append(criterion_id)

        # Fixes may interact across fields; settle the state against the final snapshot.
        new_state = engine.evaluate_all(new_snapshot)
        new_score = total_score(new_state)
        history.append({
            "iteration": i,
            "score": new_score,
            "improvement": new_score - score,
            "applied": applied,
            "changed": changed_criteria(state, new_state),
        })
        logger.info("Optimization iteration %d: %d -> %d (%s)", i, score, new_score, applied)

        if new_score > best.best_score:
            best.best_snapshot, best.best_state = new_snapshot, new_state
            best.best_score, best.best_iteration = new_score, i
            plateau_count = 0
        else:
            plateau_count += 1

        snapshot, state, score = new_snapshot, new_state, new_score

        if plateau_count >= ITERATIONS["plateau_patience"]:
            logger.info("Plateau detected after %d iterations without improvement", plateau_count)
            break

    return best
