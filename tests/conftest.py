import pytest

from fakes import FakeSdkClient

from dextvl.engine.aggregator import BatchAggregator
from dextvl.sdk.api import SdkApi


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def aggregator() -> BatchAggregator:
    return BatchAggregator()


@pytest.fixture()
def make_api(aggregator):
    """Build an SdkApi over a FakeSdkClient."""

    def _make(client: FakeSdkClient, **kwargs) -> SdkApi:
        return SdkApi(client=client, aggregator=aggregator, **kwargs)  # type: ignore[arg-type]

    return _make
