import os
from typing import Final

######################################
# Solana general settings:
ONE_BLOCK_SEC: Final[float] = float(os.environ.get("SOLANA_BLOCK_SEC", "0.4"))
MIN_FINALIZE_SEC: Final[float] = ONE_BLOCK_SEC * 32
# the ledger stops accepting a blockhash after this number of blocks
MAX_BLOCKHASH_AGE: Final[int] = 150

_MAJOR_VER = 0
_MINOR_VER = 1
_BUILD_VER = 0
TOKEN_ISSUER_VER = f"v{_MAJOR_VER}.{_MINOR_VER}.{_BUILD_VER}"

TOKEN_ISSUER_PKG_VER = f"Token-Issuer/{TOKEN_ISSUER_VER}"
