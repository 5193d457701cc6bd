"""
SEO criteria evaluation functions and score aggregation.

Each rule is a pure function ``(criterion, value, snapshot) -> EvaluationResult``
registered under its criterion id with ``@rule``. ``bind_rules`` closes every
rule over its registry entry, producing the evaluation table of
``(value, snapshot)`` callables the engine dispatches to.

Missing input data yields ``pending``; ``error`` is reserved for data that is
present but does not conform.
"""

import re
from dataclasses import dataclass, field
from functools import partial
from typing import Callable

from config import RULES
from criteria import (
    ERROR, PENDING, REGISTRY, SEVERITY, SUCCESS, WARNING,
    CriteriaRegistry, Criterion, EvaluationResult, pending_result, round_half_up,
)
from snapshot import ContentSnapshot, is_blank, slugify

EvaluationFunction = Callable[[object, ContentSnapshot], EvaluationResult]

RULE_FUNCTIONS: dict[int, Callable] = {}


def rule(criterion_id: int):
    def register(fn):
        if criterion_id in RULE_FUNCTIONS:
            raise ValueError(f"Rule already registered for criterion {criterion_id}")
        RULE_FUNCTIONS[criterion_id] = fn
        return fn
    return register


def bind_rules(registry: CriteriaRegistry = REGISTRY, rules: dict | None = None) -> dict[int, EvaluationFunction]:
    rules = RULE_FUNCTIONS if rules is None else rules
    return {c.id: partial(rules[c.id], c) for c in registry if c.id in rules}


# ── Content helpers ──────────────────────────────────────────────────

def body_html(content: str) -> str:
    match = re.search(r'<body[^>]*>(.*?)</body>', content, re.I | re.S)
    return match.group(1) if match else content


def strip_html(markup: str) -> str:
    text = re.sub(r'<[^>]*>', ' ', markup)
    text = re.sub(r'&[^;\s]+;', ' ', text)
    return text


def content_text(snapshot: ContentSnapshot) -> str:
    return strip_html(body_html(snapshot.text("content")))


def count_words(text: str) -> int:
    return len(text.split())


def contains_keyword(text: str, keyword: str) -> bool:
    return keyword.strip().lower() in text.lower()


def extract_subheadings(content: str) -> list[str]:
    matches = re.findall(r'<h([2-6])[^>]*>(.*?)</h\1>', body_html(content), re.I | re.S)
    return [" ".join(strip_html(text).split()) for _, text in matches]


def extract_paragraphs(content: str) -> list[str]:
    return [strip_html(p) for p in re.findall(r'<p[^>]*>(.*?)</p>', body_html(content), re.I | re.S)]


def extract_anchors(content: str) -> list[dict]:
    anchors = []
    for tag in re.findall(r'<a\s[^>]*>', body_html(content), re.I):
        href = re.search(r'href\s*=\s*["\']([^"\']*)["\']', tag, re.I)
        rel = re.search(r'rel\s*=\s*["\']([^"\']*)["\']', tag, re.I)
        anchors.append({"url": href.group(1) if href else "", "rel": rel.group(1) if rel else ""})
    return anchors


def is_external_url(url: str) -> bool:
    return bool(re.match(r'^https?://', url.strip(), re.I))


def is_nofollow(rel: str) -> bool:
    return "nofollow" in rel.lower().split()


def link_entries(snapshot: ContentSnapshot, key: str) -> list[dict]:
    entries = []
    for item in snapshot.items_of(key):
        if isinstance(item, dict):
            entries.append({"url": str(item.get("url") or item.get("href") or ""), "rel": str(item.get("rel") or "")})
        else:
            entries.append({"url": str(item), "rel": ""})
    return entries


def keyword_density(text: str, keyword: str) -> float:
    words = count_words(text)
    kw = keyword.strip().lower()
    if words == 0 or not kw:
        return 0.0
    occurrences = len(re.findall(re.escape(kw), text.lower()))
    return occurrences * len(kw.split()) / words * 100


def _blank(snapshot: ContentSnapshot, *keys: str) -> bool:
    return any(snapshot.is_blank(k) for k in keys)


def _all_blank(snapshot: ContentSnapshot, *keys: str) -> bool:
    return all(snapshot.is_blank(k) for k in keys)


def _pending_if_no_content(snapshot: ContentSnapshot, *keys: str) -> bool:
    # Markup without any words counts as absent content.
    return _blank(snapshot, *keys) or not content_text(snapshot).strip()


# ── SEO Core Essentials ──────────────────────────────────────────────

@rule(101)
def keyword_in_title(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    """Success if the meta title contains the keyword; warning if it holds every keyword term."""
    if _blank(snapshot, "metaTitle", "primaryKeyword"):
        return pending_result()
    meta_title = snapshot.text("metaTitle").lower()
    keyword = snapshot.text("primaryKeyword")
    if contains_keyword(meta_title, keyword):
        return criterion.success()
    if all(term in meta_title for term in keyword.lower().split()):
        return criterion.warning()
    return criterion.error()


@rule(102)
def keyword_in_meta(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    if _blank(snapshot, "metaDescription", "primaryKeyword"):
        return pending_result()
    if contains_keyword(snapshot.text("metaDescription"), snapshot.text("primaryKeyword")):
        return criterion.success()
    return criterion.error()


@rule(103)
def keyword_in_url(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    """Compares against the slug form of the keyword ("best coffee" -> "best-coffee")."""
    if _blank(snapshot, "urlSlug", "primaryKeyword"):
        return pending_result()
    keyword_slug = slugify(snapshot.text("primaryKeyword"))
    if keyword_slug and contains_keyword(snapshot.text("urlSlug"), keyword_slug):
        return criterion.success()
    return criterion.error()


@rule(104)
def keyword_in_first_10(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    if _pending_if_no_content(snapshot, "content", "primaryKeyword"):
        return pending_result()
    words = content_text(snapshot).split()
    keyword = snapshot.text("primaryKeyword")
    # The window never gets shorter than the keyword itself.
    leading = max(len(keyword.split()), int(len(words) * RULES["keyword_in_first_10"]["leading_share"]))
    if contains_keyword(" ".join(words[:leading]), keyword):
        return criterion.success()
    return criterion.error()


@rule(105)
def keyword_in_content(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    if _pending_if_no_content(snapshot, "content", "primaryKeyword"):
        return pending_result()
    if contains_keyword(content_text(snapshot), snapshot.text("primaryKeyword")):
        return criterion.success()
    return criterion.error()


@rule(106)
def content_length(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    """Success if word count >= 2500; warning if >= 1000; else error."""
    if _pending_if_no_content(snapshot, "content"):
        return pending_result()
    cfg = RULES["content_length"]
    wc = count_words(content_text(snapshot))
    if wc >= cfg["success_min_words"]:
        return criterion.success()
    if wc >= cfg["warning_min_words"]:
        return criterion.warning()
    return criterion.error()


@rule(107)
def meta_description_length(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    """Success for 140-160 characters; warning for 100-200; else error."""
    if _blank(snapshot, "metaDescription"):
        return pending_result()
    cfg = RULES["meta_description_length"]
    length = len(snapshot.text("metaDescription").strip())
    if cfg["target_length_min"] <= length <= cfg["target_length_max"]:
        return criterion.success()
    if cfg["hard_min"] <= length <= cfg["hard_max"]:
        return criterion.warning()
    return criterion.error()


# ── SEO Boosters ─────────────────────────────────────────────────────

@rule(201)
def keyword_in_subheadings(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    if _pending_if_no_content(snapshot, "content", "primaryKeyword"):
        return pending_result()
    keyword = snapshot.text("primaryKeyword")
    if any(contains_keyword(h, keyword) for h in extract_subheadings(snapshot.text("content"))):
        return criterion.success()
    return criterion.error()


@rule(202)
def keyword_density_in_range(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    """Success for a density of 1-3 %; warning for any other non-zero density; error when absent."""
    if _pending_if_no_content(snapshot, "content", "primaryKeyword"):
        return pending_result()
    cfg = RULES["keyword_density"]
    density = keyword_density(content_text(snapshot), snapshot.text("primaryKeyword"))
    if cfg["target_density_min"] <= density <= cfg["target_density_max"]:
        return criterion.success()
    if density > 0:
        return criterion.warning()
    return criterion.error()


@rule(203)
def url_slug_length(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    """Success for 3-6 slug words; warning for 2-8; else error."""
    if _blank(snapshot, "urlSlug"):
        return pending_result()
    cfg = RULES["url_slug_length"]
    words = [w for w in snapshot.text("urlSlug").strip("/").split("-") if w]
    if cfg["target_words_min"] <= len(words) <= cfg["target_words_max"]:
        return criterion.success()
    if cfg["hard_min"] <= len(words) <= cfg["hard_max"]:
        return criterion.warning()
    return criterion.error()


def _external_links(snapshot: ContentSnapshot) -> list[dict]:
    anchors = [a for a in extract_anchors(snapshot.text("content")) if is_external_url(a["url"])]
    return anchors + link_entries(snapshot, "externalLinks")


@rule(204)
def external_links(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    if _all_blank(snapshot, "content", "externalLinks"):
        return pending_result()
    if _external_links(snapshot):
        return criterion.success()
    return criterion.error()


@rule(205)
def dofollow_links(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    if _all_blank(snapshot, "content", "externalLinks"):
        return pending_result()
    if any(not is_nofollow(link["rel"]) for link in _external_links(snapshot)):
        return criterion.success()
    return criterion.error()


@rule(206)
def internal_links(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    if _all_blank(snapshot, "content", "internalLinks"):
        return pending_result()
    anchors = [
        a for a in extract_anchors(snapshot.text("content"))
        if a["url"] and not is_external_url(a["url"]) and not a["url"].startswith(("mailto:", "tel:"))
    ]
    if anchors or link_entries(snapshot, "internalLinks"):
        return criterion.success()
    return criterion.error()


@rule(207)
def secondary_keywords(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    """Success if every secondary keyword occurs in the body; warning if some do."""
    keywords = [str(k) for k in snapshot.items_of("secondaryKeywords") if not is_blank(k)]
    if not keywords or _pending_if_no_content(snapshot, "content"):
        return pending_result()
    text = content_text(snapshot)
    found = sum(1 for k in keywords if contains_keyword(text, k))
    if found == len(keywords):
        return criterion.success()
    if found > 0:
        return criterion.warning()
    return criterion.error()


# ── Title Optimization ───────────────────────────────────────────────

@rule(301)
def keyword_at_start(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    if _blank(snapshot, "title", "primaryKeyword"):
        return pending_result()
    title = snapshot.text("title").strip().lower()
    if title.startswith(snapshot.text("primaryKeyword").strip().lower()):
        return criterion.success()
    return criterion.error()


@rule(302)
def title_sentiment(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    if _blank(snapshot, "title"):
        return pending_result()
    cfg = RULES["sentiment"]
    title = snapshot.text("title").lower()
    if any(w in title for w in cfg["positive_words"] + cfg["negative_words"]):
        return criterion.success()
    return criterion.error()


@rule(303)
def power_words(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    """Success for two or more power words in the title; warning for one."""
    if _blank(snapshot, "title"):
        return pending_result()
    cfg = RULES["power_words"]
    title = snapshot.text("title").lower()
    hits = sum(1 for w in cfg["words"] if w in title)
    if hits >= cfg["success_min"]:
        return criterion.success()
    if hits >= 1:
        return criterion.warning()
    return criterion.error()


@rule(304)
def meta_title_length(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    """Success for 50-60 characters; warning for 30-70; else error."""
    if _blank(snapshot, "metaTitle"):
        return pending_result()
    cfg = RULES["meta_title_length"]
    length = len(snapshot.text("metaTitle").strip())
    if cfg["target_length_min"] <= length <= cfg["target_length_max"]:
        return criterion.success()
    if cfg["hard_min"] <= length <= cfg["hard_max"]:
        return criterion.warning()
    return criterion.error()


# ── Content Clarity ──────────────────────────────────────────────────

@rule(401)
def table_of_contents(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    if _all_blank(snapshot, "content", "toc"):
        return pending_result()
    if not snapshot.is_blank("toc"):
        return criterion.success()
    if len(extract_subheadings(snapshot.text("content"))) >= RULES["table_of_contents"]["min_subheadings"]:
        return criterion.success()
    return criterion.error()


@rule(402)
def short_paragraphs(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    """Share of paragraphs with at most 150 words: >= 80 % success, >= 60 % warning."""
    if _blank(snapshot, "content"):
        return pending_result()
    cfg = RULES["short_paragraphs"]
    paragraphs = extract_paragraphs(snapshot.text("content"))
    if not paragraphs:
        return criterion.error()
    short = sum(1 for p in paragraphs if count_words(p) <= cfg["max_paragraph_words"])
    share = short / len(paragraphs) * 100
    if share >= cfg["success_share"]:
        return criterion.success()
    if share >= cfg["warning_share"]:
        return criterion.warning()
    return criterion.error()


@rule(403)
def media_content(criterion: Criterion, value, snapshot: ContentSnapshot) -> EvaluationResult:
    if _all_blank(snapshot, "content", "images"):
        return pending_result()
    if not snapshot.is_blank("images"):
        return criterion.success()
    if re.search(r'<img[^>]+>', body_html(snapshot.text("content")), re.I):
        return criterion.success()
    return criterion.error()


EVALUATION_FUNCTIONS: dict[int, EvaluationFunction] = bind_rules(REGISTRY)


# ── Aggregation ──────────────────────────────────────────────────────

def total_score(state: dict) -> int:
    return sum(result.score for result in state.values())


def percentage(state: dict, registry: CriteriaRegistry = REGISTRY) -> int:
    if registry.max_score <= 0:
        return 0
    return round_half_up(total_score(state) / registry.max_score * 100)


def worst_status(statuses) -> str:
    statuses = list(statuses)
    if not statuses:
        return PENDING
    worst = max(statuses, key=SEVERITY.__getitem__)
    return worst if worst in (ERROR, WARNING) else SUCCESS


def overall_status(results) -> str:
    """``error`` or ``warning`` if any entry has it, else ``success``; ``pending`` only when empty."""
    return worst_status(r.status for r in (results.values() if isinstance(results, dict) else results))


@dataclass
class SectionScore:
    section_id: int
    title: str
    score: int
    max_score: int
    percentage: float
    status: str
    results: dict = field(default_factory=dict)


def section_scores(state: dict, registry: CriteriaRegistry = REGISTRY) -> list[SectionScore]:
    scores = []
    for section in registry.sections:
        results = {c.id: state[c.id] for c in section.criteria if c.id in state}
        score = total_score(results)
        max_score = section.max_score
        scores.append(SectionScore(
            section_id=section.id, title=section.title, score=score, max_score=max_score,
            percentage=(score / max_score) * 100 if max_score > 0 else 0,
            status=overall_status(results), results=results,
        ))
    return scores


@dataclass
class ScoreReport:
    total_score: int
    max_possible: int
    percentage: int
    status: str
    sections: list[SectionScore] = field(default_factory=list)
    iteration: int = 0

    def to_dict(self) -> dict:
        return {
            "total_score": self.total_score,
            "max_possible": self.max_possible,
            "percentage": self.percentage,
            "status": self.status,
            "iteration": self.iteration,
            "sections": [
                {
                    "id": s.section_id,
                    "title": s.title,
                    "score": s.score,
                    "max_score": s.max_score,
                    "percentage": round(s.percentage, 1),
                    "status": s.status,
                    "criteria": {str(cid): r.to_dict() for cid, r in s.results.items()},
                }
                for s in self.sections
            ],
        }

    def summary(self, registry: CriteriaRegistry = REGISTRY) -> str:
        lines = [
            f"═══ ITERATION {self.iteration} — TOTAL: {self.total_score}/{self.max_possible} "
            f"({self.percentage}%) — {self.status.upper()} ═══",
            "",
        ]
        for s in self.sections:
            bar_len = int(s.percentage / 5)
            bar = "█" * bar_len + "░" * (20 - bar_len)
            lines.append(f"  {s.title:<34} {bar} {s.score}/{s.max_score} ({s.percentage:.0f}%)")
        lines.append("")
        lost = sorted(
            ((registry[cid].weight - r.score, cid, r) for s in self.sections for cid, r in s.results.items()
             if r.status in (ERROR, WARNING)),
            key=lambda x: (-x[0], x[1]),
        )[:3]
        if lost:
            lines.append("  TOP IMPROVEMENT AREAS:")
            for points, cid, r in lost:
                lines.append(f"    → {cid} {r.message} (-{points})")
        return "\n".join(lines)


def build_report(state: dict, registry: CriteriaRegistry = REGISTRY, iteration: int = 0) -> ScoreReport:
    return ScoreReport(
        total_score=total_score(state),
        max_possible=registry.max_score,
        percentage=percentage(state, registry),
        status=overall_status(state),
        sections=section_scores(state, registry),
        iteration=iteration,
    )
