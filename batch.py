#!/usr/bin/env python3
"""
Batch runner — score markdown posts against the SEO criteria.

Usage:
    python batch.py posts/westerville-guide.md
    python batch.py posts/*.md --json output/seo_report.json
    python batch.py posts/powell.md --optimize --iterations 3
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from config import ENGINE, ITERATIONS, OUTPUT
from engine import EvaluationEngine
from optimizer import run_optimization
from snapshot import load_post

logger = logging.getLogger(ENGINE["logger_name"])


def score_file(path: Path, engine: EvaluationEngine, optimize: bool = False,
               iterations: int | None = None, site_url: str | None = None, verbose: bool = True) -> dict:
    snapshot = load_post(path, site_url=site_url)
    state = engine.evaluate_all(snapshot)
    report = engine.report(state)
    if verbose:
        print(f"\n{'─'*70}")
        print(f"  {path}")
        print(f"{'─'*70}")
        print(report.summary(engine.registry))

    result = {"file": str(path), "report": report.to_dict()}

    if optimize:
        outcome = run_optimization(snapshot, engine, iterations=iterations)
        before = snapshot.to_dict()
        suggestions = {
            key: value for key, value in outcome.best_snapshot.to_dict().items()
            if before.get(key) != value
        }
        result["optimization"] = {
            "best_score": outcome.best_score,
            "best_iteration": outcome.best_iteration,
            "iterations_run": outcome.iterations_run,
            "history": outcome.history,
            "suggested_fields": suggestions,
        }
        if verbose:
            print(f"\n  Auto-fix: {report.total_score} → {outcome.best_score} "
                  f"({outcome.best_score - report.total_score:+d}) after {outcome.iterations_run} iteration(s)")
            for key, value in suggestions.items():
                print(f"    → {key}: {value}")
    return result


def run(argv=None) -> list[dict]:
    """Parse arguments, score every post and return the per-post results."""
    parser = argparse.ArgumentParser(description="Score markdown posts against the SEO criteria")
    parser.add_argument("posts", nargs="+", help="Markdown files with YAML frontmatter")
    parser.add_argument("--json", dest="json_path", default=None,
                        help=f"Write a JSON report (default: {OUTPUT['dir']}/{OUTPUT['report_name']} with --save)")
    parser.add_argument("--save", action="store_true", help="Write the JSON report to the default location")
    parser.add_argument("--optimize", action="store_true", help="Run the auto-fix loop and list suggested values")
    parser.add_argument("--iterations", type=int, default=None,
                        help=f"Auto-fix iterations (default: {ITERATIONS['default_count']})")
    parser.add_argument("--site-url", default=None, help="Treat links containing this URL as internal")
    parser.add_argument("--strict", action="store_true", help="Fail when a criterion has no evaluator")
    parser.add_argument("--quiet", action="store_true", help="Suppress per-post output")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    paths = [Path(p) for p in args.posts]
    missing = [p for p in paths if not p.is_file()]
    if missing:
        print(f"Not found: {', '.join(str(p) for p in missing)}")
        sys.exit(1)

    engine = EvaluationEngine(strict=args.strict)
    results = []
    for path in paths:
        results.append(score_file(
            path, engine, optimize=args.optimize, iterations=args.iterations,
            site_url=args.site_url, verbose=not args.quiet,
        ))

    if len(results) > 1 and not args.quiet:
        print(f"\n{'='*70}")
        print(f"  BATCH RESULTS")
        print(f"{'='*70}\n")
        for r in sorted(results, key=lambda x: x["report"]["percentage"], reverse=True):
            pct = r["report"]["percentage"]
            bar_len = int(pct / 2.5)
            bar = "█" * bar_len + "░" * (40 - bar_len)
            print(f"  {Path(r['file']).name:<30} {bar} {pct}%")

    json_path = args.json_path
    if json_path is None and args.save:
        json_path = str(Path(OUTPUT["dir"]) / OUTPUT["report_name"])
    if json_path:
        report_path = Path(json_path)
        report_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"generated_at": datetime.now().isoformat(), "posts": results}
        report_path.write_text(json.dumps(payload, indent=2, default=str))
        logger.info("Report written to %s", report_path)
        if not args.quiet:
            print(f"\n  Report: {report_path}")

    return results


def main(argv=None):
    run(argv)


if __name__ == "__main__":
    main()
