from __future__ import annotations

import logging

import pytest

from core.constants import U64_MAX
from core.types.responder_id import ResponderId
from core.types.token import Mob, TokenId
from consensus.errors import InvalidFee, MissingFee
from consensus.fee_map import FeeMap, calc_digest_for_map

from . import OTHER_TOKEN, SAMPLE_FEES, TEST_TOKEN


# ---- responder ids ------------------------------------------------------------

def test_different_fee_maps_result_in_different_responder_ids():
    fee_map1 = FeeMap.try_from_iter([(Mob.ID, 100), (TokenId(2), 2000)])
    fee_map2 = FeeMap.try_from_iter([(Mob.ID, 100), (TokenId(2), 300)])
    fee_map3 = FeeMap.try_from_iter([(Mob.ID, 100), (TokenId(30), 300)])

    responder_id1 = ResponderId("1.2.3.4:5")
    responder_id2 = ResponderId("3.1.3.3:7")

    assert fee_map1.responder_id(responder_id1) != fee_map2.responder_id(responder_id1)
    assert fee_map1.responder_id(responder_id1) != fee_map3.responder_id(responder_id1)
    assert fee_map2.responder_id(responder_id1) != fee_map3.responder_id(responder_id1)
    assert fee_map1.responder_id(responder_id1) != fee_map1.responder_id(responder_id2)


def test_responder_id_is_base_dash_digest():
    fee_map = FeeMap.try_from(SAMPLE_FEES)
    rid = fee_map.responder_id(ResponderId("1.2.3.4:5"))
    assert rid == ResponderId(f"1.2.3.4:5-{fee_map.cached_digest}")


def test_responder_id_accepts_plain_string_and_does_not_parse_it():
    fee_map = FeeMap()
    rid = fee_map.responder_id("not a host:port -- anything goes")
    assert isinstance(rid, ResponderId)
    assert str(rid) == f"not a host:port -- anything goes-{fee_map.cached_digest}"


# ---- validation ---------------------------------------------------------------

def test_invalid_fee_maps_are_rejected():
    # Missing MOB is not allowed
    with pytest.raises(MissingFee) as ei:
        FeeMap.is_valid_map({})
    assert ei.value == MissingFee(Mob.ID)

    with pytest.raises(MissingFee) as ei:
        FeeMap.is_valid_map({TEST_TOKEN: 100})
    assert ei.value.token_id == Mob.ID

    # All fees must be >0
    with pytest.raises(InvalidFee) as ei:
        FeeMap.is_valid_map({Mob.ID: 0})
    assert ei.value == InvalidFee(Mob.ID, 0)

    with pytest.raises(InvalidFee) as ei:
        FeeMap.is_valid_map({Mob.ID: 10, TEST_TOKEN: 0})
    assert ei.value == InvalidFee(TEST_TOKEN, 0)


def test_valid_map_passes():
    assert FeeMap.is_valid_map(SAMPLE_FEES) is None
    assert FeeMap.is_valid_map(FeeMap.default_map()) is None


def test_invalid_fee_reports_lowest_offending_token():
    fees = {TokenId(9): 0, Mob.ID: 5, TokenId(4): 0}
    with pytest.raises(InvalidFee) as ei:
        FeeMap.is_valid_map(fees)
    assert ei.value.token_id == TokenId(4)


def test_zero_fee_is_reported_before_missing_mob():
    with pytest.raises(InvalidFee):
        FeeMap.is_valid_map({TEST_TOKEN: 0})


@pytest.mark.parametrize("fee", [-1, U64_MAX + 1])
def test_fees_outside_u64_are_invalid(fee):
    with pytest.raises(InvalidFee):
        FeeMap.is_valid_map({Mob.ID: fee})


def test_u64_max_fee_is_accepted():
    fee_map = FeeMap.try_from({Mob.ID: U64_MAX})
    assert fee_map.get_fee_for_token(Mob.ID) == U64_MAX


def test_non_integer_fee_is_a_type_error():
    with pytest.raises(TypeError):
        FeeMap.is_valid_map({Mob.ID: "100"})
    with pytest.raises(TypeError):
        FeeMap.is_valid_map({Mob.ID: True})


def test_out_of_range_key_is_a_value_error():
    with pytest.raises(ValueError):
        FeeMap.is_valid_map({Mob.ID: 1, 2**32: 1})


def test_int_and_token_id_keys_for_the_same_token_collide():
    # 0 and TokenId(0) name the same token; merging them would hide the zero fee.
    with pytest.raises(ValueError, match="more than once"):
        FeeMap.is_valid_map({0: 0, Mob.ID: 5})
    with pytest.raises(ValueError):
        FeeMap.try_from({Mob.ID: 5, 2: 1, TEST_TOKEN: 7})


def test_validation_does_not_touch_input():
    fees = {TEST_TOKEN: 5, Mob.ID: 10}
    FeeMap.is_valid_map(fees)
    assert fees == {TEST_TOKEN: 5, Mob.ID: 10}
    assert list(fees) == [TEST_TOKEN, Mob.ID]


# ---- construction -------------------------------------------------------------

def test_default_contains_only_mob():
    fee_map = FeeMap.default()
    assert list(fee_map.iter()) == [(Mob.ID, Mob.MINIMUM_FEE)]
    assert fee_map.get_fee_for_token(Mob.ID) == 400_000_000
    assert fee_map.cached_digest == calc_digest_for_map({Mob.ID: Mob.MINIMUM_FEE})
    assert FeeMap() == FeeMap.default()


def test_default_map_is_a_fresh_dict():
    m = FeeMap.default_map()
    m[TEST_TOKEN] = 1
    assert FeeMap.default_map() == {Mob.ID: Mob.MINIMUM_FEE}


def test_try_from_rejects_invalid_without_building():
    with pytest.raises(MissingFee):
        FeeMap.try_from({TEST_TOKEN: 1})


def test_try_from_accepts_int_keys():
    fee_map = FeeMap.try_from({0: 100, 2: 2000})
    assert fee_map == FeeMap.try_from(SAMPLE_FEES)
    assert fee_map.get_fee_for_token(2) == 2000


def test_try_from_iter_last_write_wins():
    fee_map = FeeMap.try_from_iter([(TEST_TOKEN, 1), (Mob.ID, 100), (TEST_TOKEN, 2000)])
    assert fee_map == FeeMap.try_from(SAMPLE_FEES)


def test_try_from_iter_later_valid_fee_overrides_zero():
    fee_map = FeeMap.try_from_iter([(Mob.ID, 0), (Mob.ID, 7)])
    assert fee_map.get_fee_for_token(Mob.ID) == 7


def test_caller_mapping_is_copied():
    fees = dict(SAMPLE_FEES)
    fee_map = FeeMap.try_from(fees)
    digest = fee_map.cached_digest
    fees[TEST_TOKEN] = 1
    fees[OTHER_TOKEN] = 1
    assert fee_map.get_fee_for_token(TEST_TOKEN) == 2000
    assert OTHER_TOKEN not in fee_map
    assert fee_map.cached_digest == digest


# ---- queries ------------------------------------------------------------------

def test_get_fee_for_unknown_token_is_none():
    fee_map = FeeMap.try_from(SAMPLE_FEES)
    assert fee_map.get_fee_for_token(OTHER_TOKEN) is None
    assert fee_map.get_fee_for_token(TEST_TOKEN) == 2000


@pytest.mark.parametrize("key", [-1, 2**32, "0", None, True])
def test_contains_is_false_for_non_token_keys(key):
    assert key not in FeeMap.try_from(SAMPLE_FEES)


def test_contains_accepts_ints_and_token_ids():
    fee_map = FeeMap.try_from(SAMPLE_FEES)
    assert 0 in fee_map and TEST_TOKEN in fee_map
    assert int(OTHER_TOKEN) not in fee_map


def test_iter_is_ascending_and_restartable():
    fee_map = FeeMap.try_from({OTHER_TOKEN: 3, TEST_TOKEN: 2, Mob.ID: 1})
    first = list(fee_map.iter())
    assert first == [(Mob.ID, 1), (TEST_TOKEN, 2), (OTHER_TOKEN, 3)]
    assert list(fee_map.iter()) == first
    assert list(fee_map) == first
    assert len(fee_map) == 3


def test_digest_is_64_lowercase_hex():
    digest = FeeMap().cached_digest
    assert len(digest) == 64
    assert digest == digest.lower()
    int(digest, 16)


# ---- update_or_default --------------------------------------------------------

def test_update_with_valid_map_is_visible_immediately():
    fee_map = FeeMap()
    old_digest = fee_map.cached_digest
    fee_map.update_or_default(SAMPLE_FEES)
    assert fee_map.get_fee_for_token(Mob.ID) == 100
    assert fee_map.get_fee_for_token(TEST_TOKEN) == 2000
    assert fee_map.cached_digest != old_digest
    assert fee_map.cached_digest == calc_digest_for_map(SAMPLE_FEES)


def test_update_with_same_contents_keeps_digest():
    fee_map = FeeMap.try_from(SAMPLE_FEES)
    digest = fee_map.cached_digest
    fee_map.update_or_default({TEST_TOKEN: 2000, Mob.ID: 100})
    assert fee_map.cached_digest == digest


def test_update_with_none_resets_to_default():
    fee_map = FeeMap.try_from(SAMPLE_FEES)
    fee_map.update_or_default(None)
    assert fee_map == FeeMap.default()
    assert fee_map.cached_digest == FeeMap.default().cached_digest
    assert fee_map.get_fee_for_token(TEST_TOKEN) is None


@pytest.mark.parametrize(
    "bad, err",
    [
        ({}, MissingFee),
        ({TEST_TOKEN: 5}, MissingFee),
        ({Mob.ID: 0}, InvalidFee),
        ({Mob.ID: 10, TEST_TOKEN: 0}, InvalidFee),
    ],
)
def test_failed_update_leaves_state_unchanged(bad, err):
    fee_map = FeeMap.try_from(SAMPLE_FEES)
    before = fee_map.copy()
    with pytest.raises(err):
        fee_map.update_or_default(bad)
    assert fee_map == before
    assert list(fee_map.iter()) == list(before.iter())
    assert fee_map.cached_digest == calc_digest_for_map(SAMPLE_FEES)


def test_update_logs_digest(caplog):
    fee_map = FeeMap()
    with caplog.at_level(logging.INFO, logger="consensus.fee_map"):
        fee_map.update_or_default(SAMPLE_FEES)
    rec = next(r for r in caplog.records if r.name == "consensus.fee_map")
    assert rec.digest == fee_map.cached_digest
    assert rec.changed is True


def test_rejected_update_logs_warning(caplog):
    fee_map = FeeMap()
    with caplog.at_level(logging.WARNING, logger="consensus.fee_map"):
        with pytest.raises(MissingFee):
            fee_map.update_or_default({TEST_TOKEN: 1})
    assert any(r.levelno == logging.WARNING for r in caplog.records)


# ---- value semantics ----------------------------------------------------------

def test_copy_is_independent():
    fee_map = FeeMap.try_from(SAMPLE_FEES)
    other = fee_map.copy()
    other.update_or_default(None)
    assert fee_map.get_fee_for_token(TEST_TOKEN) == 2000
    assert other == FeeMap()


def test_fee_map_is_unhashable():
    with pytest.raises(TypeError):
        hash(FeeMap())
