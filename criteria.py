"""
Criteria registry and the input-field dependency index.

The registry is built once from ``config.CRITERIA`` and never mutated. Two
derived maps are computed at construction time:

    input_to_criteria:   input key -> criterion ids reading that field
    criteria_to_inputs:  criterion id -> input keys it reads

Both follow registry iteration order.
"""

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, NamedTuple, Optional

from config import CRITERIA, ENGINE

logger = logging.getLogger(ENGINE["logger_name"])

SUCCESS = "success"
WARNING = "warning"
ERROR = "error"
PENDING = "pending"

BINARY = "binary"
TERNARY = "ternary"

# error > warning > success > pending
SEVERITY = {PENDING: 0, SUCCESS: 1, WARNING: 2, ERROR: 3}

PENDING_MESSAGE = "seo.criteria.pending"


class RegistryError(ValueError):
    """Raised when the criteria catalogue or a function table is misconfigured."""


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class EvaluationResult:
    status: str
    message: str
    score: int

    def to_dict(self) -> dict:
        return {"status": self.status, "message": self.message, "score": self.score}


def pending_result(message: str = PENDING_MESSAGE) -> EvaluationResult:
    return EvaluationResult(status=PENDING, message=message, score=0)


@dataclass(frozen=True)
class Criterion:
    id: int
    description: str
    weight: int
    status_type: str
    evaluation_status: dict = field(hash=False)
    input_keys: tuple = ()
    warning_score: Optional[int] = None
    optimizable: bool = True

    @property
    def primary_input(self) -> str:
        return self.input_keys[0]

    @property
    def effective_warning_score(self) -> int:
        if self.warning_score is not None:
            return self.warning_score
        return round_half_up(self.weight * ENGINE["default_warning_ratio"])

    def success(self) -> EvaluationResult:
        return EvaluationResult(SUCCESS, self.evaluation_status[SUCCESS], self.weight)

    def warning(self) -> EvaluationResult:
        # A binary rule has no middle band; it degrades to its error outcome.
        if self.status_type != TERNARY:
            return self.error()
        return EvaluationResult(WARNING, self.evaluation_status[WARNING], self.effective_warning_score)

    def error(self) -> EvaluationResult:
        return EvaluationResult(ERROR, self.evaluation_status[ERROR], 0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "description": self.description,
            "weight": self.weight,
            "status_type": self.status_type,
            "evaluation_status": dict(self.evaluation_status),
            "input_keys": list(self.input_keys),
            "warning_score": self.warning_score,
            "optimizable": self.optimizable,
        }


@dataclass(frozen=True)
class CriteriaSection:
    id: int
    title: str
    criteria: tuple = ()

    @property
    def max_score(self) -> int:
        return sum(c.weight for c in self.criteria)


class DependencyIndex(NamedTuple):
    input_to_criteria: MappingProxyType
    criteria_to_inputs: MappingProxyType


def build_index(sections) -> DependencyIndex:
    input_to_criteria: dict[str, list[int]] = {}
    criteria_to_inputs: dict[int, list[str]] = {}
    for section in sections:
        for criterion in section.criteria:
            for input_key in criterion.input_keys:
                input_to_criteria.setdefault(input_key, []).append(criterion.id)
                criteria_to_inputs.setdefault(criterion.id, []).append(input_key)
    return DependencyIndex(
        input_to_criteria=MappingProxyType({k: tuple(v) for k, v in input_to_criteria.items()}),
        criteria_to_inputs=MappingProxyType({k: tuple(v) for k, v in criteria_to_inputs.items()}),
    )


def _validate_criterion(criterion: Criterion) -> None:
    cid = criterion.id
    if isinstance(criterion.weight, bool) or not isinstance(criterion.weight, int) or criterion.weight <= 0:
        raise RegistryError(f"Criterion {cid}: weight must be a positive integer, got {criterion.weight!r}")
    if criterion.status_type not in (BINARY, TERNARY):
        raise RegistryError(f"Criterion {cid}: unknown status type {criterion.status_type!r}")
    missing = [k for k in (SUCCESS, ERROR) if not criterion.evaluation_status.get(k)]
    if missing:
        raise RegistryError(f"Criterion {cid}: evaluation status lacks {', '.join(missing)} message")
    if criterion.status_type == TERNARY and not criterion.evaluation_status.get(WARNING):
        raise RegistryError(f"Criterion {cid}: ternary criterion lacks a warning message")
    if criterion.warning_score is not None:
        if criterion.status_type != TERNARY:
            raise RegistryError(f"Criterion {cid}: warning score set on a binary criterion")
        if not 0 < criterion.warning_score < criterion.weight:
            raise RegistryError(
                f"Criterion {cid}: warning score {criterion.warning_score} outside (0, {criterion.weight})"
            )
    if not criterion.input_keys:
        raise RegistryError(f"Criterion {cid}: no input keys declared")
    if len(set(criterion.input_keys)) != len(criterion.input_keys):
        raise RegistryError(f"Criterion {cid}: duplicate input keys {list(criterion.input_keys)}")


def criterion_from_dict(data: dict) -> Criterion:
    return Criterion(
        id=data["id"],
        description=data["description"],
        weight=data["weight"],
        status_type=data["status_type"],
        evaluation_status=MappingProxyType(dict(data["evaluation_status"])),
        input_keys=tuple(data["input_keys"]),
        warning_score=data.get("warning_score"),
        optimizable=data.get("optimizable", True),
    )


class CriteriaRegistry:
    """Ordered, immutable catalogue of criteria grouped into sections."""

    def __init__(self, sections):
        self._sections = tuple(sections)
        self._by_id: dict[int, Criterion] = {}
        self._section_of: dict[int, CriteriaSection] = {}
        section_ids = set()
        for section in self._sections:
            if section.id in section_ids:
                raise RegistryError(f"Duplicate section id {section.id}")
            section_ids.add(section.id)
            for criterion in section.criteria:
                if criterion.id in self._by_id:
                    raise RegistryError(f"Duplicate criterion id {criterion.id}")
                _validate_criterion(criterion)
                self._by_id[criterion.id] = criterion
                self._section_of[criterion.id] = section
        self._index = build_index(self._sections)
        self.max_score = sum(c.weight for c in self._by_id.values())
        logger.debug(
            "Registry built: %d sections, %d criteria, %d input keys, max score %d",
            len(self._sections), len(self._by_id), len(self._index.input_to_criteria), self.max_score,
        )

    @classmethod
    def from_config(cls, sections_config: list[dict]) -> "CriteriaRegistry":
        sections = [
            CriteriaSection(
                id=s["id"],
                title=s["title"],
                criteria=tuple(criterion_from_dict(c) for c in s["criteria"]),
            )
            for s in sections_config
        ]
        return cls(sections)

    @property
    def sections(self) -> tuple:
        return self._sections

    @property
    def index(self) -> DependencyIndex:
        return self._index

    @property
    def input_to_criteria(self) -> MappingProxyType:
        return self._index.input_to_criteria

    @property
    def criteria_to_inputs(self) -> MappingProxyType:
        return self._index.criteria_to_inputs

    def __iter__(self) -> Iterator[Criterion]:
        for section in self._sections:
            yield from section.criteria

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, criterion_id) -> bool:
        return criterion_id in self._by_id

    def get(self, criterion_id: int) -> Optional[Criterion]:
        return self._by_id.get(criterion_id)

    def __getitem__(self, criterion_id: int) -> Criterion:
        return self._by_id[criterion_id]

    def ids(self) -> list[int]:
        return [c.id for c in self]

    def section_of(self, criterion_id: int) -> CriteriaSection:
        return self._section_of[criterion_id]

    def affected_criteria(self, input_key: str) -> tuple:
        """Criterion ids reading ``input_key``; an unknown key yields an empty tuple."""
        return self._index.input_to_criteria.get(input_key, ())

    def input_fields(self, criterion_id: int) -> tuple:
        return self._index.criteria_to_inputs.get(criterion_id, ())

    def input_keys(self) -> list[str]:
        return list(self._index.input_to_criteria)

    def to_dict(self) -> list[dict]:
        return [
            {"id": s.id, "title": s.title, "criteria": [c.to_dict() for c in s.criteria]}
            for s in self._sections
        ]


REGISTRY = CriteriaRegistry.from_config(CRITERIA)
