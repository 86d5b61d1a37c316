"""Pair discovery records for Uniswap-V2-style factories."""

from pydantic import BaseModel


class PairRecord(BaseModel):
    """A pair and whichever of its tokens are supported. Either side may be None."""

    pair_address: str
    token0_address: str | None = None
    token1_address: str | None = None

    def retained_tokens(self) -> list[str]:
        """Supported tokens of this pair, token0 first."""
        return [t for t in (self.token0_address, self.token1_address) if t is not None]
