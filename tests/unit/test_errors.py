from __future__ import annotations

import pytest

from core.errors import ConfigError, CoreErrorCode, LedgerError
from core.types.token import Mob, TokenId
from consensus.errors import (ConsensusError, ErrorCode, FeeMapDigestMismatch,
                              FeeMapError, InvalidFee, MissingFee)


def test_invalid_fee_shape():
    e = InvalidFee(TokenId(2), 0)
    assert isinstance(e, FeeMapError) and isinstance(e, ConsensusError)
    assert e.code == ErrorCode.INVALID_FEE
    assert str(e) == "Token `2` has invalid fee `0`"
    assert e.to_dict() == {
        "code": 2101,
        "message": "Token `2` has invalid fee `0`",
        "context": {"token_id": 2, "fee": 0},
    }
    assert repr(e) == "InvalidFee(TokenId(2), 0)"


def test_missing_fee_shape():
    e = MissingFee(Mob.ID)
    assert e.code == ErrorCode.MISSING_FEE
    assert str(e) == "Token `0` is missing from the fee map"
    assert e.token_id == Mob.ID


def test_value_equality():
    assert InvalidFee(TokenId(2), 0) == InvalidFee(TokenId(2), 0)
    assert InvalidFee(TokenId(2), 0) != InvalidFee(TokenId(3), 0)
    assert MissingFee(Mob.ID) != InvalidFee(Mob.ID, 0)
    assert len({MissingFee(Mob.ID), MissingFee(Mob.ID)}) == 1


def test_digest_mismatch_carries_both_digests():
    e = FeeMapDigestMismatch(expected="aa", got="bb")
    assert e.code == ErrorCode.DIGEST_MISMATCH
    assert e.to_dict()["context"] == {"expected": "aa", "got": "bb"}


def test_core_error_to_dict_and_str():
    e = ConfigError("bad fee", where="env", value=b"\x01")
    d = e.to_dict()
    assert d["code"] == CoreErrorCode.CONFIG.value
    assert d["data"] == {"where": "env", "value": "01"}
    assert d["retryable"] is False
    assert "bad fee" in str(e)


def test_ledger_errors_raise_and_chain():
    with pytest.raises(LedgerError) as ei:
        try:
            raise ValueError("inner")
        except ValueError as e:
            raise ConfigError("outer").with_cause(e)
    assert isinstance(ei.value.__cause__, ValueError)
    assert ei.value.to_dict(include_cause=True)["cause"] == {"type": "ValueError", "message": "inner"}
    assert "cause" not in ei.value.to_dict()
