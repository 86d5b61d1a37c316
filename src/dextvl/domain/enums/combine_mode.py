from enum import Enum


class CombineMode(str, Enum):
    """How per-chunk outputs are folded into one result."""

    CONCAT = "CONCAT"  # ordered list concatenation
    SUM_BY_KEY = "SUM_BY_KEY"  # additive merge of address -> balance maps
