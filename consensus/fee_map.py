"""
Fee map: minimum transaction fee per token, plus its fingerprint.

`FeeMap` holds a validated mapping `TokenId -> fee` and a cached digest of
that mapping. The digest is appended to the node's responder id so that peers
running with different fee configurations end up with different ids and can
tell they disagree without exchanging the whole map.

Invariants (hold after every public call returns, including failed ones):
  - every fee is a u64 strictly greater than zero
  - TokenId.MOB has an entry
  - `cached_digest == calc_digest_for_map(map)`

Map and digest live together in one immutable `_FeeMapState`; the only
mutator, `update_or_default`, builds the next state completely and then swaps
it in with a single assignment. A failed update leaves the previous state in
place.

FeeMap itself does no locking. `SharedFeeMap` wraps one for read-mostly use
across threads.
"""

from __future__ import annotations

import threading
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, NamedTuple, Optional, Tuple

from core import logging as clog
from core.config import FeeConfig
from core.constants import U64_MAX
from core.encoding.codec import cbor_dumps, cbor_loads, json_dumps, json_loads
from core.encoding.transcript import DigestTranscript
from core.errors import DeserializationError
from core.types.responder_id import ResponderId
from core.types.token import Mob, TokenId

from .errors import FeeMapDigestMismatch, InvalidFee, MissingFee

log = clog.get_logger(__name__)

FeeMapping = Mapping["TokenId | int", int]

# Transcript labels. Changing any of these changes every digest on the network.
_DOMAIN = b"fee_map"
_LABEL_TOKEN_ID = b"token_id"
_LABEL_FEE = b"fee"


def calc_digest_for_map(minimum_fees: Mapping[TokenId, int]) -> str:
    """
    Digest of a fee map as 64 lowercase hex chars.

    Entries are absorbed in ascending token id order regardless of the
    mapping's own iteration order, so equal contents give equal digests.
    """
    entries = sorted(minimum_fees.items())
    transcript = DigestTranscript(_DOMAIN)
    # Each entry contributes two labeled elements (token id, fee).
    transcript.append_seq_header(_DOMAIN, len(entries) * 2)
    for token_id, fee in entries:
        transcript.append_u32(_LABEL_TOKEN_ID, int(token_id))
        transcript.append_u64(_LABEL_FEE, fee)
    return transcript.hexdigest()


def _normalize(minimum_fees: FeeMapping) -> Dict[TokenId, int]:
    """Coerce keys to TokenId, type-check fees and return a dict sorted by token id."""
    out: Dict[TokenId, int] = {}
    for k, fee in minimum_fees.items():
        token_id = TokenId.coerce(k)
        if token_id in out:
            raise ValueError(f"token id {token_id} appears more than once")
        if isinstance(fee, bool) or not isinstance(fee, int):
            raise TypeError(f"fee for token {token_id} must be int, got {type(fee).__name__}")
        out[token_id] = fee
    return dict(sorted(out.items()))


class _FeeMapState(NamedTuple):
    fees: Mapping[TokenId, int]
    digest: str


def _make_state(sorted_fees: Dict[TokenId, int]) -> _FeeMapState:
    return _FeeMapState(MappingProxyType(sorted_fees), calc_digest_for_map(sorted_fees))


class FeeMap:
    """A map of minimum fee by token id, with a cached digest of its contents."""

    __slots__ = ("_state",)

    def __init__(self) -> None:
        self._state = _make_state(self.default_map())

    # ---- construction ----

    @classmethod
    def default(cls) -> "FeeMap":
        return cls()

    @staticmethod
    def default_map() -> Dict[TokenId, int]:
        """The default fee map: only MOB, at its protocol minimum fee."""
        return {Mob.ID: Mob.MINIMUM_FEE}

    @classmethod
    def try_from(cls, minimum_fees: FeeMapping) -> "FeeMap":
        """Validate `minimum_fees` and build a FeeMap from it. Raises FeeMapError if invalid."""
        fees = _normalize(minimum_fees)
        cls._check(fees)
        fee_map = cls.__new__(cls)
        fee_map._state = _make_state(fees)
        return fee_map

    @classmethod
    def try_from_iter(cls, pairs: Iterable[Tuple["TokenId | int", int]]) -> "FeeMap":
        """Build from unordered (token_id, fee) pairs; for duplicate ids the last pair wins."""
        fees: Dict[TokenId, int] = {}
        for token_id, fee in pairs:
            fees[TokenId.coerce(token_id)] = fee
        return cls.try_from(fees)

    @classmethod
    def from_config(cls, cfg: FeeConfig) -> "FeeMap":
        """Default map, then `update_or_default(cfg.minimum_fees)`, as a node does at startup."""
        fee_map = cls()
        fee_map.update_or_default(cfg.minimum_fees)
        return fee_map

    # ---- validation ----

    @staticmethod
    def is_valid_map(minimum_fees: FeeMapping) -> None:
        """
        Check a candidate fee map without building anything.

        Raises
        ------
        InvalidFee
            For the lowest token id whose fee is zero (or doesn't fit a u64).
        MissingFee
            If every fee is fine but MOB has no entry.
        TypeError / ValueError
            If a key isn't a u32 token id or a fee isn't an int.
        """
        FeeMap._check(_normalize(minimum_fees))

    @staticmethod
    def _check(fees: Mapping[TokenId, int]) -> None:
        # All fees must be greater than 0 and fit in a u64.
        for token_id, fee in fees.items():
            if not (0 < fee <= U64_MAX):
                raise InvalidFee(token_id, fee)

        # Must have a minimum fee for MOB.
        if Mob.ID not in fees:
            raise MissingFee(Mob.ID)

    # ---- queries ----

    @property
    def cached_digest(self) -> str:
        return self._state.digest

    def get_fee_for_token(self, token_id: "TokenId | int") -> Optional[int]:
        """Get the fee for a given token id, or None if no fee is set for that token."""
        return self._state.fees.get(TokenId.coerce(token_id))

    def responder_id(self, responder_id: "ResponderId | str") -> ResponderId:
        """
        Append the fee map digest to an existing responder id, producing a
        responder id that is unique to the current fee configuration.
        """
        if not isinstance(responder_id, ResponderId):
            responder_id = ResponderId(responder_id)
        return responder_id.with_suffix(self._state.digest)

    def iter(self) -> Iterator[Tuple[TokenId, int]]:
        """Iterate over all (token_id, fee) entries in ascending token id order."""
        return iter(tuple(self._state.fees.items()))

    __iter__ = iter

    def items(self) -> Iterator[Tuple[TokenId, int]]:
        return self.iter()

    def as_dict(self) -> Dict[TokenId, int]:
        return dict(self._state.fees)

    def __len__(self) -> int:
        return len(self._state.fees)

    def __contains__(self, token_id: object) -> bool:
        if isinstance(token_id, int) and not isinstance(token_id, bool):
            try:
                token_id = TokenId.coerce(token_id)
            except (TypeError, ValueError):
                return False
        return token_id in self._state.fees

    # ---- mutation ----

    def update_or_default(self, minimum_fees: Optional[FeeMapping]) -> None:
        """
        Replace the fee map with `minimum_fees` if given, or reset it to the
        default when None. The digest is recomputed before returning. On a
        validation error nothing changes and the error is re-raised.
        """
        if minimum_fees is not None:
            try:
                fees = _normalize(minimum_fees)
                self._check(fees)
            except (InvalidFee, MissingFee) as e:
                log.warning("rejected fee map update", extra={"error": e.to_dict()})
                raise
        else:
            fees = self.default_map()

        prev_digest = self._state.digest
        self._state = _make_state(fees)
        log.info(
            "fee map %s",
            "reset to default" if minimum_fees is None else "updated",
            extra={
                "digest": self._state.digest,
                "entries": len(fees),
                "changed": prev_digest != self._state.digest,
            },
        )

    def copy(self) -> "FeeMap":
        # State is immutable; sharing it is safe.
        new = type(self).__new__(type(self))
        new._state = self._state
        return new

    # ---- persisted form ----

    def to_obj(self) -> Dict[str, Any]:
        """Plain-object form: ordered [id, fee] pairs plus the digest."""
        return {
            "map": [[int(token_id), fee] for token_id, fee in self._state.fees.items()],
            "cached_digest": self._state.digest,
        }

    @classmethod
    def from_obj(cls, obj: Mapping[str, Any]) -> "FeeMap":
        """
        Rebuild from `to_obj()` output. Pairs must be in strictly ascending
        token id order. The map is re-validated and, if a `cached_digest` is
        present, it must match the recomputed digest.
        """
        if not isinstance(obj, Mapping) or "map" not in obj:
            raise DeserializationError("fee map object must be a mapping with a 'map' field")
        pairs = obj["map"]
        if not isinstance(pairs, (list, tuple)):
            raise DeserializationError("fee map 'map' must be a list of [token_id, fee] pairs")

        fees: Dict[TokenId, int] = {}
        last: Optional[TokenId] = None
        for i, pair in enumerate(pairs):
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise DeserializationError("malformed fee map entry", index=i)
            try:
                token_id = TokenId.coerce(pair[0])
            except (TypeError, ValueError) as e:
                raise DeserializationError("bad token id", index=i, reason=str(e)) from e
            if last is not None and token_id <= last:
                raise DeserializationError("fee map entries not in ascending token id order", index=i)
            if isinstance(pair[1], bool) or not isinstance(pair[1], int):
                raise DeserializationError("fee must be an integer", index=i)
            fees[token_id] = pair[1]
            last = token_id

        fee_map = cls.try_from(fees)
        stored = obj.get("cached_digest")
        if stored is not None and stored != fee_map.cached_digest:
            raise FeeMapDigestMismatch(expected=fee_map.cached_digest, got=str(stored))
        return fee_map

    def to_json(self) -> str:
        return json_dumps(self.to_obj())

    @classmethod
    def from_json(cls, text: "str | bytes") -> "FeeMap":
        return cls.from_obj(json_loads(text))

    def to_cbor(self) -> bytes:
        return cbor_dumps(self.to_obj())

    @classmethod
    def from_cbor(cls, data: bytes) -> "FeeMap":
        return cls.from_obj(cbor_loads(data))

    # ---- dunder ----

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FeeMap):
            return NotImplemented
        return self._state == other._state

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        entries = ", ".join(f"{int(k)}: {v}" for k, v in self._state.fees.items())
        return f"FeeMap({{{entries}}}, digest={self._state.digest[:16]}…)"


class SharedFeeMap:
    """
    Read-mostly holder for a FeeMap shared between threads.

    Writers are serialised by a lock and publish a fresh FeeMap by swapping a
    single reference; readers take `snapshot()` (no lock) and always see a map
    and digest from the same generation.
    """

    def __init__(self, initial: Optional[FeeMap] = None) -> None:
        self._lock = threading.Lock()
        self._current: FeeMap = initial.copy() if initial is not None else FeeMap()
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def snapshot(self) -> FeeMap:
        """A private copy of the current map; updating it does not touch the shared one."""
        return self._current.copy()

    def get_fee_for_token(self, token_id: "TokenId | int") -> Optional[int]:
        return self._current.get_fee_for_token(token_id)

    def responder_id(self, responder_id: "ResponderId | str") -> ResponderId:
        return self._current.responder_id(responder_id)

    def update_or_default(self, minimum_fees: Optional[FeeMapping]) -> FeeMap:
        """Apply `FeeMap.update_or_default` copy-on-write and return the published map."""
        with self._lock:
            nxt = self._current.copy()
            nxt.update_or_default(minimum_fees)
            self._current = nxt
            self._generation += 1
            log.debug(
                "published fee map",
                extra={"generation": self._generation, "digest": nxt.cached_digest},
            )
            return nxt


__all__ = ["FeeMap", "SharedFeeMap", "calc_digest_for_map"]
