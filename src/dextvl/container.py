import sys
from collections.abc import Callable

from dependency_injector import containers, providers

from dextvl.config import Settings
from dextvl.engine.aggregator import BatchAggregator
from dextvl.engine.progress import LoggingProgress, ProgressObserver, TqdmProgress
from dextvl.infra.http.rate_limited_client import RateLimitedClient
from dextvl.infra.sdk.client import SdkClient
from dextvl.projects.dfyn import DfynAdapter
from dextvl.sdk.api import SdkApi


def build_progress_factory(
    log_progress: bool, interactive: bool | None = None
) -> Callable[[str], ProgressObserver] | None:
    """Bar on a terminal, INFO log lines otherwise (CI, redirected stderr)."""
    if not log_progress:
        return None
    if interactive is None:
        interactive = sys.stderr.isatty()
    return TqdmProgress if interactive else LoggingProgress


class Container(containers.DeclarativeContainer):
    settings = providers.Singleton(Settings)

    http_client = providers.Singleton(
        RateLimitedClient,
        rate_per_second=settings.provided.rate_per_second,
        timeout=settings.provided.http_timeout,
    )

    sdk_client = providers.Singleton(
        SdkClient,
        api_url=settings.provided.defipulse_api_url,
        api_key=settings.provided.defipulse_key,
        http_client=http_client,
        infura_key=settings.provided.infura_key,
        indexer_host=settings.provided.indexer_host,
    )

    aggregator = providers.Singleton(
        BatchAggregator,
        concurrency_limit=settings.provided.adapter_concurrency,
        progress_factory=providers.Callable(build_progress_factory, settings.provided.log_progress),
    )

    sdk_api = providers.Singleton(
        SdkApi,
        client=sdk_client,
        aggregator=aggregator,
        multicall_chunk_size=settings.provided.multicall_chunk_size,
        balance_chunk_size=settings.provided.balance_chunk_size,
        assets_locked_chunk_size=settings.provided.assets_locked_chunk_size,
    )

    dfyn = providers.Factory(
        DfynAdapter,
        api=sdk_api,
        balance_chunk_size=settings.provided.balance_chunk_size,
    )
