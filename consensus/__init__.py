"""
Consensus-side fee configuration.

- fee_map : FeeMap (validated minimum fee per token + cached digest),
            SharedFeeMap (copy-on-write holder for threaded readers)
- errors  : FeeMapError, InvalidFee, MissingFee, FeeMapDigestMismatch

All submodules are deterministic and pure (no network I/O).
"""

from . import errors, fee_map
from .errors import FeeMapDigestMismatch, FeeMapError, InvalidFee, MissingFee
from .fee_map import FeeMap, SharedFeeMap, calc_digest_for_map
from .version import __version__

__all__ = [
    "__version__",
    "errors",
    "fee_map",
    "FeeMap",
    "SharedFeeMap",
    "calc_digest_for_map",
    "FeeMapError",
    "InvalidFee",
    "MissingFee",
    "FeeMapDigestMismatch",
]
