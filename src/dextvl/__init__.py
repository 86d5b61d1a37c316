"""dextvl: batched on-chain balance aggregation for DEX TVL adapters."""

__version__ = "0.1.0"
