from dextvl.domain.enums.chain import Chain
from dextvl.domain.enums.combine_mode import CombineMode

__all__ = [
    "Chain",
    "CombineMode",
]
