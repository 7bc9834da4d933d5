#!/usr/bin/env python3
"""Executa uma passada de reconciliação de canais.

Uso (após `pip install -e .`):
    python scripts/reconcile_channels.py --deadline-seconds 300

Imprime um resumo JSON; código de saída 1 em caso de falha.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from app.bootstrap import initialize_app, validate_runtime_settings
from app.infra.secrets import apply_secret_references
from app.jobs import run_reconciliation


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--deadline-seconds",
        type=float,
        default=None,
        help="Prazo total da passada. Se omitido, executa sem prazo.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    apply_secret_references()
    initialize_app()
    validate_runtime_settings()

    try:
        report = asyncio.run(run_reconciliation(args.deadline_seconds))
    except Exception as exc:
        print(json.dumps({"status": "failed", "error": type(exc).__name__, "detail": str(exc)}))
        return 1

    print(json.dumps({"status": "ok", **report.to_dict()}))
    return 0


if __name__ == "__main__":
    sys.exit(main())
