"""
Analyze a recorded workout session stored as JSON.

The session file uses the same schema as the body of
``POST /api/session/analyze``.

Usage:
    python -m liftcoach.scripts.analyze_session --session session.json
    python -m liftcoach.scripts.analyze_session --session session.json \
        --thresholds config/thresholds.yaml --out results/report.json
"""

import argparse
import json
import logging
import sys

from liftcoach.analytics import Session, WorkoutAnalyzer, load_thresholds
from liftcoach.utils.io_utils import load_json, save_json

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Analyze a recorded workout session.")
    ap.add_argument("--session", required=True, help="Path to the session JSON file")
    ap.add_argument("--thresholds", default=None, help="Optional YAML file with threshold overrides")
    ap.add_argument("--out", default=None, help="Where to write the report JSON")
    ap.add_argument("--verbose", action="store_true", help="Log per-rep details")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s | %(message)s",
    )

    session = Session.model_validate(load_json(args.session))
    logger.info(
        "Loaded session '%s' (%s): %d frames, %d reps",
        session.id, session.exercise.display_name, len(session.frames), session.total_reps,
    )

    analyzer = WorkoutAnalyzer(load_thresholds(args.thresholds))
    result = analyzer.analyze(session).to_dict()

    if args.out:
        save_json(result, args.out)

    print("\n✅ Analysis complete")
    print(f"   Score: {result['overall_score']:.1f}/100 (Grade: {result['grade']})")
    for i, rec in enumerate(result["recommendations"], start=1):
        print(f"   {i}. {rec}")
    if not args.out:
        print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
