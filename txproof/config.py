from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # Core
    env: str = Field(default="prod", alias="TXPROOF_ENV")
    database_url: str = Field(alias="DATABASE_URL")

    # Block source (Ethereum JSON-RPC endpoint)
    rpc_url: str = Field(default="http://localhost:8545", alias="TXPROOF_RPC_URL")
    rpc_timeout_seconds: float = Field(default=10.0, alias="TXPROOF_RPC_TIMEOUT_SECONDS")

    # keccak256 matches the on-chain verifier; sha256 for non-EVM consumers
    hash_alg: str = Field(default="keccak256", alias="TXPROOF_HASH_ALG")

    # Optional
    redis_url: str | None = Field(default=None, alias="REDIS_URL")
    allowed_origins: str = Field(default="*", alias="TXPROOF_ALLOWED_ORIGINS")
    log_level: str = Field(default="INFO", alias="TXPROOF_LOG_LEVEL")

    # Tunables
    default_rps_limit: int = 20  # per client address
    max_block_transactions: int = 20_000

    @property
    def allowed_origins_list(self):
        v = (self.allowed_origins or "*").strip()
        if v == "*" or v == "":
            return ["*"]
        return [x.strip() for x in v.split(",") if x.strip()]


settings = Settings()
