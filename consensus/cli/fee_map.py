#!/usr/bin/env python3
"""
consensus.cli.fee_map
=====================

Inspect the fee map a node would run with, and the responder id it would
advertise.

Fees come from (highest precedence first) repeated `--fee ID=FEE` flags,
FEEMAP_MINIMUM_FEES, the `--config` file (or FEEMAP_CONFIG), and finally the
protocol default (MOB only).

Examples:
  python -m consensus.cli.fee_map show --fee 0=400000000 --fee 2=2000
  python -m consensus.cli.fee_map validate --config node.toml
  python -m consensus.cli.fee_map responder-id 1.2.3.4:5 --json
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from core import config as fee_config
from core import logging as clog
from core.errors import ConfigError
from core.types.token import token_for_id
from core.version import __version__
from consensus.errors import FeeMapError
from consensus.fee_map import FeeMap

# Exit codes
EXIT_INVALID = 1
EXIT_CONFIG = 2


def _die(msg: str, code: int) -> NoReturn:
    sys.stderr.write(msg.rstrip() + "\n")
    raise typer.Exit(code)


def _load_config(config: Optional[Path], fees: List[str]) -> fee_config.FeeConfig:
    overrides: Dict[str, Any] = {}
    if fees:
        overrides["minimum_fees"] = fee_config.parse_fee_pairs(",".join(fees), where="--fee")
    return fee_config.load(config, overrides=overrides)


def _fee_map_json(fee_map: FeeMap) -> Dict[str, Any]:
    return {
        "entries": [{"token_id": int(t), "fee": fee} for t, fee in fee_map.iter()],
        "digest": fee_map.cached_digest,
    }


def _print_table(console: Console, fee_map: FeeMap, title: str) -> None:
    t = Table(title=title, box=box.SIMPLE)
    t.add_column("Token id", justify="right")
    t.add_column("Token")
    t.add_column("Minimum fee", justify="right")
    for token_id, fee in fee_map.iter():
        known = token_for_id(token_id)
        t.add_row(str(token_id), known.__name__ if known else "-", str(fee))
    console.print(t)
    console.print(f"digest: {fee_map.cached_digest}")


def build_app() -> typer.Typer:
    app = typer.Typer(
        name="fee-map",
        help="Inspect and validate per-token minimum fee maps",
        no_args_is_help=True,
        add_completion=False,
    )

    def _print_version(value: bool) -> None:
        if value:
            typer.echo(f"fee-map {__version__}")
            raise typer.Exit(0)

    @app.callback()
    def _meta(
        version: bool = typer.Option(
            False,
            "--version",
            "-V",
            help="Print version and exit",
            is_eager=True,
            callback=_print_version,
        ),
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG to stderr"),
    ) -> None:
        clog.configure(json=False, level="DEBUG" if verbose else "WARNING", stream=sys.stderr)

    config_opt = typer.Option(None, "--config", "-c", help="TOML/JSON/YAML config file")
    fee_opt = typer.Option([], "--fee", "-f", help="Minimum fee as ID=FEE (repeatable)")
    json_opt = typer.Option(False, "--json", help="Print machine-readable JSON")

    @app.command("show")
    def show_cmd(
        config: Optional[Path] = config_opt,
        fee: List[str] = fee_opt,
        json_out: bool = json_opt,
    ) -> None:
        """Print the effective fee map and its digest."""
        try:
            cfg = _load_config(config, fee)
            fee_map = FeeMap.from_config(cfg)
        except ConfigError as e:
            _die(f"[show] config: {e}", EXIT_CONFIG)
        except FeeMapError as e:
            _die(f"[show] invalid fee map: {e}", EXIT_INVALID)

        if json_out:
            typer.echo(json.dumps({"ok": True, **_fee_map_json(fee_map)}, indent=2, sort_keys=True))
            return
        _print_table(Console(), fee_map, "Fee map")

    @app.command("validate")
    def validate_cmd(
        config: Optional[Path] = config_opt,
        fee: List[str] = fee_opt,
        json_out: bool = json_opt,
    ) -> None:
        """Validate a fee map; exit 1 with the error if it is rejected."""
        try:
            cfg = _load_config(config, fee)
        except ConfigError as e:
            _die(f"[validate] config: {e}", EXIT_CONFIG)

        candidate = cfg.minimum_fees if cfg.minimum_fees is not None else FeeMap.default_map()
        try:
            FeeMap.is_valid_map(candidate)
        except FeeMapError as e:
            if json_out:
                typer.echo(json.dumps({"ok": False, "error": e.to_dict()}, sort_keys=True))
                raise typer.Exit(EXIT_INVALID)
            _die(f"invalid: {e}", EXIT_INVALID)

        if json_out:
            typer.echo(json.dumps({"ok": True}, sort_keys=True))
        else:
            typer.echo("ok")

    @app.command("responder-id")
    def responder_id_cmd(
        base: Optional[str] = typer.Argument(
            None, help="Base responder id (host:port); defaults to config/FEEMAP_RESPONDER_ID"
        ),
        config: Optional[Path] = config_opt,
        fee: List[str] = fee_opt,
        json_out: bool = json_opt,
    ) -> None:
        """Print BASE-<digest>, the responder id for this fee configuration."""
        try:
            cfg = _load_config(config, fee)
            fee_map = FeeMap.from_config(cfg)
        except ConfigError as e:
            _die(f"[responder-id] config: {e}", EXIT_CONFIG)
        except FeeMapError as e:
            _die(f"[responder-id] invalid fee map: {e}", EXIT_INVALID)

        base = base if base is not None else cfg.responder_id
        if not base:
            _die("[responder-id] no base responder id given", EXIT_CONFIG)

        rid = fee_map.responder_id(base)
        if json_out:
            typer.echo(
                json.dumps({"responder_id": str(rid), "digest": fee_map.cached_digest}, sort_keys=True)
            )
        else:
            typer.echo(str(rid))

    return app


app = build_app()


def main(argv: Optional[List[str]] = None) -> None:
    app(args=argv)


if __name__ == "__main__":  # pragma: no cover
    main()
