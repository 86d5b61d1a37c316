from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    defipulse_api_url: str = ""
    defipulse_key: str = ""
    infura_key: str = ""  # Forwarded as ?infura-key= when set
    indexer_host: str = "https://dfp-indexer-sync-staging.defipulse.com"
    adapter_concurrency: int = 1  # Max chunks in flight per batched request
    log_progress: bool = False
    log_level: str = "INFO"
    rate_per_second: float = 5.0
    http_timeout: float = 60.0
    multicall_chunk_size: int = 5000
    balance_chunk_size: int = 2500
    assets_locked_chunk_size: int = 1000

    class Config:
        env_file = ".env"


settings = Settings()
