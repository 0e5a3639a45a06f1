#!/usr/bin/env python3
"""Synthetic message history generator.

Produces a message export in the layout the loader expects (header row, then
one message per row) with a mix of payloads:
- flow responses with scalar answers and multi-select lists
- free-text "body" messages
- a configurable share of malformed JSON payloads

Useful for exercising the exporter end to end and for rough timing runs.
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

MULTI_SELECT_FIELDS = {
    "interests": ["sports", "music", "travel", "food", "tech", "books"],
    "channels": ["email", "sms", "whatsapp", "push"],
    "topics": ["billing", "delivery", "returns", "promotions"],
}
SCALAR_FIELDS = {
    "name": ["Ana", "Luis", "María", "José", "Carmen", "Iñaki"],
    "city": ["Madrid", "Bogotá", "Lima", "Sevilla", "Quito"],
    "rating": [1, 2, 3, 4, 5],
}
BODIES = ["Hola", "¿Cuándo llega mi pedido?", "Gracias!", "Necesito ayuda"]


def _flow_response(rng: np.random.Generator) -> dict[str, Any]:
    answers: dict[str, Any] = {}
    for field, options in SCALAR_FIELDS.items():
        if rng.random() < 0.8:
            answers[field] = options[int(rng.integers(len(options)))]
    for field, options in MULTI_SELECT_FIELDS.items():
        if rng.random() < 0.7:
            k = int(rng.integers(1, len(options) + 1))
            answers[field] = [str(o) for o in rng.choice(options, size=k, replace=False)]
    return answers


def generate_messages(rows: int, malformed_ratio: float = 0.02, seed: int = 42) -> pd.DataFrame:
    """Generate a message history DataFrame.

    Args:
        rows: Number of message rows
        malformed_ratio: Share of rows whose content is not valid JSON
        seed: Random seed for reproducible data
    """
    rng = np.random.default_rng(seed)
    start = pd.Timestamp("2024-01-01T00:00:00")
    records: list[dict[str, Any]] = []
    for i in range(rows):
        sent = start + pd.Timedelta(seconds=int(rng.integers(0, 365 * 24 * 3600)))
        roll = rng.random()
        if roll < malformed_ratio:
            content = '{"eventParameters": {"flowResponse": '
        elif roll < 0.8:
            content = json.dumps(
                {"eventParameters": {"flowResponse": _flow_response(rng)}}, ensure_ascii=False
            )
        else:
            content = json.dumps({"body": BODIES[int(rng.integers(len(BODIES)))]}, ensure_ascii=False)
        records.append(
            {
                "messageId": f"msg-{i + 1:06d}",
                "contactId": f"34{int(rng.integers(600000000, 699999999))}",
                "messageDate": sent.strftime("%Y-%m-%dT%H:%M:%S") + "+02:00",
                "sendType": "INBOUND" if rng.random() < 0.5 else "OUTBOUND",
                "content": content,
            }
        )
    return pd.DataFrame(records)


def write_dataset(df: pd.DataFrame, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if output_path.suffix.lower() == ".csv":
        df.to_csv(output_path, index=False, encoding="utf-8")
    else:
        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="messages", index=False)
    print(f"Created dataset: {output_path} rows={len(df)}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic message history export",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/messages.xlsx
  %(prog)s data/messages.csv --rows 20000 --malformed-ratio 0.05 --seed 7
        """,
    )
    parser.add_argument("output", type=Path, help="Output .xlsx or .csv path")
    parser.add_argument("--rows", type=int, default=1_000, help="Number of messages (default: 1,000)")
    parser.add_argument(
        "--malformed-ratio", type=float, default=0.02, help="Share of invalid JSON payloads (default: 0.02)"
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if not 0 <= args.malformed_ratio <= 1:
        print("Error: --malformed-ratio must be within [0, 1]", file=sys.stderr)
        return 1

    try:
        write_dataset(generate_messages(args.rows, args.malformed_ratio, args.seed), args.output)
    except OSError as e:
        print(f"Error generating dataset: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
