from enum import Enum


class Chain(str, Enum):
    """Chains the SDK accepts. Values lowercase to match the SDK `chain` parameter."""

    ETHEREUM = "ethereum"
    POLYGON = "polygon"
    BSC = "bsc"

    @property
    def platform_id(self) -> str:
        """Key used in the supported-token list `platforms` mapping."""
        return {
            Chain.ETHEREUM: "ethereum",
            Chain.POLYGON: "polygon-pos",
            Chain.BSC: "binance-smart-chain",
        }[self]
