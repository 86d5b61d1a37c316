"""Value types flowing through the batch aggregation engine."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# token address (lower-case) -> balance in the token's native integer unit
BalanceMapping = dict[str, int]


class CallDescriptor(BaseModel):
    """One logical on-chain read: call `target` with `params`."""

    model_config = ConfigDict(frozen=True)

    target: str
    params: Any = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"target": self.target}
        if self.params is not None:
            payload["params"] = self.params
        return payload


class Chunk(BaseModel):
    """Contiguous slice of the submitted calls, tagged with its position."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    calls: tuple[CallDescriptor, ...]

    def __len__(self) -> int:
        return len(self.calls)


class ChunkResult(BaseModel):
    """Outcome of one round-trip: decoded outputs or a partial balance map."""

    call_count: int = Field(ge=0)
    output: list[Any] | BalanceMapping


class CombinedResult(BaseModel):
    call_count: int = Field(ge=0)
    output: list[Any] | BalanceMapping
