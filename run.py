#!/usr/bin/env python3
"""
Token shop - operations replay runner

Usage:
    python run.py ops.yaml                    # Replay with config/config.yaml
    python run.py ops.yaml --config my.yaml   # Use another config
    python run.py ops.yaml --events out.jsonl --stop-on-error

The operations file is a YAML list. Each entry names an operation and its
arguments, e.g.:

    - {op: mint, caller: admin, target: alice, amount: 100}
    - {op: add_item, caller: admin, name: Sword, cost: 10}
    - {op: redeem, caller: alice, item_id: 1}
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable

import yaml
from dotenv import load_dotenv

from tokenshop.config import get_validated_config, load_config, set_config_value
from tokenshop.core import Item, TokenShop, TokenShopError


logger = logging.getLogger("tokenshop.run")


# op name -> (TokenShop method, argument names, takes caller)
OPERATIONS: dict[str, tuple[str, tuple[str, ...], bool]] = {
    "mint": ("mint", ("target", "amount"), True),
    "transfer": ("transfer", ("receiver", "amount"), True),
    "burn": ("burn", ("amount",), True),
    "balance_of": ("balance_of", ("account",), False),
    "add_item": ("add_item", ("name", "cost"), True),
    "update_item": ("update_item", ("item_id", "name", "cost"), True),
    "retire_item": ("retire_item", ("item_id",), True),
    "get_item": ("get_item", ("item_id",), False),
    "list_available_items": ("list_available_items", (), False),
    "redeem": ("redeem", ("item_id",), True),
}


def load_operations(path: str | Path) -> list[dict[str, Any]]:
    """Load the operations list from a YAML file."""
    with open(path) as f:
        loaded: Any = yaml.safe_load(f)
    if loaded is None:
        return []
    if not isinstance(loaded, list) or not all(isinstance(op, dict) for op in loaded):
        raise ValueError(f"{path}: expected a list of operation mappings")
    return loaded


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, Item):
        return value.to_dict()
    if isinstance(value, list):
        return [_to_jsonable(v) for v in value]
    return value


def execute_operation(shop: TokenShop, entry: dict[str, Any]) -> dict[str, Any]:
    """Run one operation entry and return a result dict.

    Failures of the shop itself become error responses; a malformed entry
    raises ValueError.
    """
    op = entry.get("op")
    if op not in OPERATIONS:
        raise ValueError(f"Unknown operation {op!r}")
    method_name, arg_names, needs_caller = OPERATIONS[op]
    missing = [a for a in arg_names if a not in entry]
    if needs_caller and "caller" not in entry:
        missing.insert(0, "caller")
    if missing:
        raise ValueError(f"{op} requires {missing}")

    args: list[Any] = [entry["caller"]] if needs_caller else []
    args.extend(entry[a] for a in arg_names)
    method: Callable[..., Any] = getattr(shop, method_name)
    try:
        value = method(*args)
    except TokenShopError as e:
        return {"op": op, **e.to_response()}
    return {"op": op, "success": True, "result": _to_jsonable(value)}


def summarize(shop: TokenShop) -> dict[str, Any]:
    """Final state summary printed after the replay."""
    return {
        "token": {"name": shop.name, "symbol": shop.symbol, "decimals": shop.decimals},
        "administrator": shop.administrator,
        "total_supply": shop.total_supply(),
        "balances": dict(sorted(shop.get_all_balances().items())),
        "available_items": [i.to_dict() for i in shop.list_available_items()],
        "events": len(shop.events),
        "invariants_hold": shop.check_invariants(),
    }


def replay(
    shop: TokenShop,
    operations: list[dict[str, Any]],
    stop_on_error: bool = False,
    out: Any = None,
) -> int:
    """Replay operations, printing one JSON line per result.

    Returns:
        Number of failed operations
    """
    out = out or sys.stdout
    failures = 0
    for index, entry in enumerate(operations, start=1):
        result = execute_operation(shop, entry)
        print(json.dumps(result), file=out)
        if not result["success"]:
            failures += 1
            logger.warning("Operation %d (%s) failed: %s", index, result["op"], result["code"])
            if stop_on_error:
                break
    return failures


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Replay token shop operations")
    parser.add_argument("operations", help="YAML file with a list of operations")
    parser.add_argument("--config", default=None, help="Config file (default: config/config.yaml)")
    parser.add_argument("--events", default=None, help="Write event records to this JSONL file")
    parser.add_argument("--stop-on-error", action="store_true", help="Abort at the first failed operation")
    parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    args = parser.parse_args(argv)

    load_config(args.config)
    if args.events:
        set_config_value("logging.events_file", args.events)
    config = get_validated_config()

    level = logging.WARNING if args.quiet else getattr(logging, config.logging.level)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    shop = TokenShop.from_config(config)
    operations = load_operations(args.operations)
    failures = replay(shop, operations, stop_on_error=args.stop_on_error)

    print(json.dumps({"summary": summarize(shop)}, indent=2))
    if failures and args.stop_on_error:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
