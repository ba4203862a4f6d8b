"""Tests for the operations replay runner (run.py)."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

import run
from tokenshop.core import TokenShop

ADMIN = "admin"


def _write(path: Path, text: str) -> Path:
    path.write_text(text)
    return path


class TestExecuteOperation:
    """Tests for single operation dispatch."""

    def test_mutation_success(self, shop: TokenShop) -> None:
        result = run.execute_operation(
            shop, {"op": "mint", "caller": ADMIN, "target": "alice", "amount": 10}
        )
        assert result == {"op": "mint", "success": True, "result": None}
        assert shop.balance_of("alice") == 10

    def test_add_item_returns_id(self, shop: TokenShop) -> None:
        result = run.execute_operation(
            shop, {"op": "add_item", "caller": ADMIN, "name": "Sword", "cost": 3}
        )
        assert result["result"] == 1

    def test_query_without_caller(self, funded_shop: TokenShop) -> None:
        result = run.execute_operation(funded_shop, {"op": "balance_of", "account": "alice"})
        assert result["result"] == 100

    def test_item_results_are_dicts(self, shop: TokenShop) -> None:
        shop.add_item(ADMIN, "Sword", 3)
        result = run.execute_operation(shop, {"op": "list_available_items"})
        assert result["result"] == [{"item_id": 1, "name": "Sword", "cost": 3, "available": True}]

    def test_shop_error_becomes_response(self, shop: TokenShop) -> None:
        result = run.execute_operation(
            shop, {"op": "mint", "caller": "bob", "target": "bob", "amount": 10}
        )
        assert result["success"] is False
        assert result["code"] == "not_authorized"
        assert result["op"] == "mint"

    def test_unknown_op(self, shop: TokenShop) -> None:
        with pytest.raises(ValueError, match="Unknown operation"):
            run.execute_operation(shop, {"op": "approve"})

    def test_missing_arguments(self, shop: TokenShop) -> None:
        with pytest.raises(ValueError, match="caller"):
            run.execute_operation(shop, {"op": "burn", "amount": 1})


class TestReplay:
    """Tests for replaying an operations list."""

    def test_counts_failures(self, shop: TokenShop) -> None:
        out = io.StringIO()
        failures = run.replay(shop, [
            {"op": "mint", "caller": ADMIN, "target": "a", "amount": 5},
            {"op": "burn", "caller": "a", "amount": 9},
            {"op": "burn", "caller": "a", "amount": 5},
        ], out=out)

        lines = [json.loads(line) for line in out.getvalue().splitlines()]
        assert failures == 1
        assert [line["success"] for line in lines] == [True, False, True]
        assert shop.total_supply() == 0

    def test_stop_on_error(self, shop: TokenShop) -> None:
        out = io.StringIO()
        failures = run.replay(shop, [
            {"op": "burn", "caller": "a", "amount": 1},
            {"op": "mint", "caller": ADMIN, "target": "a", "amount": 5},
        ], stop_on_error=True, out=out)

        assert failures == 1
        assert len(out.getvalue().splitlines()) == 1
        assert shop.total_supply() == 0


class TestLoadOperations:
    """Tests for reading the operations file."""

    def test_empty_file(self, tmp_path: Path) -> None:
        assert run.load_operations(_write(tmp_path / "ops.yaml", "")) == []

    def test_rejects_mapping(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            run.load_operations(_write(tmp_path / "ops.yaml", "op: mint\n"))


class TestMain:
    """Tests for the CLI entry point."""

    def test_demo_replay(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        config = _write(tmp_path / "config.yaml", "administrator: admin\n")
        ops = _write(
            tmp_path / "ops.yaml",
            "- {op: mint, caller: admin, target: alice, amount: 100}\n"
            "- {op: add_item, caller: admin, name: Sword, cost: 20}\n"
            "- {op: redeem, caller: alice, item_id: 1}\n",
        )
        events_file = tmp_path / "events.jsonl"

        code = run.main([str(ops), "--config", str(config), "--events", str(events_file), "--quiet"])

        assert code == 0
        output = capsys.readouterr().out
        summary = json.loads(output[output.index('{\n  "summary"'):])["summary"]
        assert summary["total_supply"] == 80
        assert summary["balances"] == {"alice": 80}
        assert summary["invariants_hold"] is True
        kinds = [json.loads(line)["event_type"] for line in events_file.read_text().splitlines()]
        assert kinds == ["minted", "item_added", "burned", "item_redeemed"]

    def test_stop_on_error_exit_code(self, tmp_path: Path) -> None:
        config = _write(tmp_path / "config.yaml", "{}\n")
        ops = _write(tmp_path / "ops.yaml", "- {op: burn, caller: alice, amount: 1}\n")

        assert run.main([str(ops), "--config", str(config), "--stop-on-error", "--quiet"]) == 1

    def test_shipped_demo_ops(self, capsys: pytest.CaptureFixture[str]) -> None:
        root = Path(__file__).parent.parent
        code = run.main([
            str(root / "config" / "demo_ops.yaml"),
            "--config", str(root / "config" / "config.yaml"),
            "--quiet",
        ])
        assert code == 0
        assert '"invariants_hold": true' in capsys.readouterr().out
