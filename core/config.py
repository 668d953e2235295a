"""
Fee configuration loader.

Goals
-----
- Layered config with clear precedence:
    1) Explicit overrides passed to `load()` (highest)
    2) Environment variables (FEEMAP_*)
    3) Config file (TOML, JSON or YAML)
    4) Built-in defaults (lowest)
- Typed dataclass result.
- Syntax problems raise `core.errors.ConfigError`; whether a fee map is
  *semantically* valid (positive fees, MOB present) is decided by
  `consensus.fee_map.FeeMap`, not here.

File layout (TOML shown; JSON/YAML use the same shape):

    [fees]
    responder_id = "node1.example.com:8443"

    [fees.minimum_fees]
    0 = 400000000     # MOB, picoMOB
    2 = 2000

A missing `minimum_fees` means "use the protocol default".

Environment
-----------
FEEMAP_CONFIG         path to a config file (when `load()` gets no path)
FEEMAP_MINIMUM_FEES   "0=400000000,2=2000"
FEEMAP_RESPONDER_ID   "host:port"
"""

from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from core.constants import U64_MAX
from core.errors import ConfigError
from core.types.token import TokenId

ENV_CONFIG = "FEEMAP_CONFIG"
ENV_MINIMUM_FEES = "FEEMAP_MINIMUM_FEES"
ENV_RESPONDER_ID = "FEEMAP_RESPONDER_ID"


def _expand(p: str | Path) -> Path:
    return Path(p).expanduser().resolve()


# ------------------------------
# Typed configuration model
# ------------------------------

@dataclass
class FeeConfig:
    minimum_fees: Optional[Dict[TokenId, int]] = None
    responder_id: Optional[str] = None
    # Which layer each field came from, for diagnostics.
    sources: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "minimum_fees": (
                None
                if self.minimum_fees is None
                else {str(k): v for k, v in sorted(self.minimum_fees.items())}
            ),
            "responder_id": self.responder_id,
            "sources": dict(self.sources),
        }


# ------------------------------
# Parsing helpers
# ------------------------------

def _parse_token_id(raw: Any, *, where: str) -> TokenId:
    if isinstance(raw, str):
        raw = raw.strip()
        try:
            raw = int(raw, 0)
        except ValueError as e:
            raise ConfigError("token id must be an integer", where=where, value=raw) from e
    try:
        return TokenId.coerce(raw)
    except (TypeError, ValueError) as e:
        raise ConfigError(str(e), where=where, value=raw) from e


def _parse_fee(raw: Any, *, where: str) -> int:
    if isinstance(raw, str):
        try:
            raw = int(raw.strip().replace("_", ""), 0)
        except ValueError as e:
            raise ConfigError("fee must be an integer", where=where, value=raw) from e
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ConfigError("fee must be an integer", where=where, value=raw)
    # Zero is left for FeeMap to reject with InvalidFee; only enforce the wire width here.
    if not (0 <= raw <= U64_MAX):
        raise ConfigError("fee out of u64 range", where=where, value=raw)
    return raw


def parse_fee_pairs(text: str, *, where: str = ENV_MINIMUM_FEES) -> Dict[TokenId, int]:
    """Parse "ID=FEE[,ID=FEE...]". Later entries win on duplicate ids."""
    out: Dict[TokenId, int] = {}
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        if "=" not in part:
            raise ConfigError("expected ID=FEE", where=where, value=part)
        k, v = part.split("=", 1)
        out[_parse_token_id(k, where=where)] = _parse_fee(v, where=where)
    return out


def coerce_fee_table(obj: Any, *, where: str) -> Dict[TokenId, int]:
    """Accept {id: fee} mappings (keys int or str) or [[id, fee], ...] lists."""
    if isinstance(obj, Mapping):
        items = list(obj.items())
    elif isinstance(obj, (list, tuple)):
        items = []
        for i, pair in enumerate(obj):
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise ConfigError("expected [token_id, fee] pair", where=f"{where}[{i}]")
            items.append((pair[0], pair[1]))
    else:
        raise ConfigError("minimum_fees must be a table or a list of pairs", where=where)
    return {
        _parse_token_id(k, where=where): _parse_fee(v, where=f"{where}.{k}") for k, v in items
    }


def load_file(path: str | Path) -> Dict[str, Any]:
    """Read a TOML/JSON/YAML file and return its `fees` section (or the whole document)."""
    p = _expand(path)
    try:
        raw = p.read_bytes()
    except OSError as e:
        raise ConfigError("cannot read config file", path=str(p), reason=str(e)) from e

    suffix = p.suffix.lower()
    try:
        if suffix == ".toml":
            doc = tomllib.loads(raw.decode("utf-8"))
        elif suffix == ".json":
            doc = json.loads(raw.decode("utf-8"))
        elif suffix in (".yaml", ".yml"):
            doc = yaml.safe_load(raw) or {}
        else:
            raise ConfigError("unsupported config format", path=str(p), suffix=suffix)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
        raise ConfigError("malformed config file", path=str(p), reason=str(e)) from e

    if not isinstance(doc, Mapping):
        raise ConfigError("config root must be a table", path=str(p))
    section = doc.get("fees", doc)
    if not isinstance(section, Mapping):
        raise ConfigError("[fees] must be a table", path=str(p))
    return dict(section)


# ------------------------------
# Layered load
# ------------------------------

def load(
    path: Optional[str | Path] = None,
    *,
    overrides: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> FeeConfig:
    """
    Build a FeeConfig from defaults, file, environment and overrides (in
    increasing precedence). `env` defaults to `os.environ`.
    """
    env = os.environ if env is None else env
    cfg = FeeConfig(sources={"minimum_fees": "default", "responder_id": "default"})

    # 3) file
    if path is None and env.get(ENV_CONFIG):
        path = env[ENV_CONFIG]
    if path is not None:
        section = load_file(path)
        if section.get("minimum_fees") is not None:
            cfg.minimum_fees = coerce_fee_table(section["minimum_fees"], where="fees.minimum_fees")
            cfg.sources["minimum_fees"] = f"file:{path}"
        if section.get("responder_id") is not None:
            cfg.responder_id = str(section["responder_id"])
            cfg.sources["responder_id"] = f"file:{path}"

    # 2) environment
    if env.get(ENV_MINIMUM_FEES):
        cfg.minimum_fees = parse_fee_pairs(env[ENV_MINIMUM_FEES])
        cfg.sources["minimum_fees"] = f"env:{ENV_MINIMUM_FEES}"
    if env.get(ENV_RESPONDER_ID):
        cfg.responder_id = env[ENV_RESPONDER_ID]
        cfg.sources["responder_id"] = f"env:{ENV_RESPONDER_ID}"

    # 1) overrides
    if overrides:
        if "minimum_fees" in overrides:
            fees = overrides["minimum_fees"]
            cfg.minimum_fees = None if fees is None else coerce_fee_table(fees, where="overrides")
            cfg.sources["minimum_fees"] = "override"
        if "responder_id" in overrides:
            cfg.responder_id = overrides["responder_id"]
            cfg.sources["responder_id"] = "override"

    return cfg


__all__ = [
    "FeeConfig",
    "load",
    "load_file",
    "parse_fee_pairs",
    "coerce_fee_table",
    "ENV_CONFIG",
    "ENV_MINIMUM_FEES",
    "ENV_RESPONDER_ID",
]
