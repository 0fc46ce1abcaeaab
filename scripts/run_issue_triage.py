"""Thin wrapper to train, evaluate and query the issue classifier.

Usage examples:
# Run with the default data/issues_train.tsv and data/issues_test.tsv
# python scripts/run_issue_triage.py

# Point at a different data directory
# python scripts/run_issue_triage.py --data-dir data/full --seed 1
"""
from __future__ import annotations

import sys
import argparse
import logging
import subprocess
from pathlib import Path

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


def build_cmd(data_dir: Path, model: Path | None, seed: int | None) -> list:
    cmd = [
        sys.executable,
        "-m",
        "github_issue_classification",
        "--train",
        str(data_dir / "issues_train.tsv"),
        "--test",
        str(data_dir / "issues_test.tsv"),
    ]
    if model is not None:
        cmd += ["--model", str(model)]
    if seed is not None:
        cmd += ["--seed", str(seed)]
    return cmd


def main(argv: list[str] | None = None) -> int:
    repo_root = Path(__file__).resolve().parents[1]
    parser = argparse.ArgumentParser(description="Run the issue classifier (thin wrapper).")
    parser.add_argument("--data-dir", type=Path, default=repo_root / "data", help="Directory holding issues_train.tsv and issues_test.tsv")
    parser.add_argument("--model", type=Path, help="Model output path")
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args(argv)

    data_dir = args.data_dir.resolve()
    if not (data_dir / "issues_train.tsv").exists():
        logger.error("No issues_train.tsv found in %s", data_dir)
        return 2

    cmd = build_cmd(data_dir, args.model, args.seed)
    logger.info("Running classifier: %s", " ".join(map(str, cmd)))
    res = subprocess.run(cmd, check=False, cwd=repo_root)
    return res.returncode


if __name__ == "__main__":
    raise SystemExit(main())
