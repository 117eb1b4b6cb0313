"""Runtime configuration loaded from the environment / .env file."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # === Chain ===
    PREDICT_CHAIN_ID: int = 81_457  # Blast mainnet

    # === Signing identity ===
    PREDICT_PRIVATE_KEY: str = ""
    PREDICT_ACCOUNT_ADDRESS: str = ""  # Kernel smart account, empty for plain EOA
    PREDICT_ECDSA_VALIDATOR: str = "0x845ADb2C711129d4f3966735eD98a9F09fC4cE57"

    # === Orders ===
    PREDICT_FEE_RATE_BPS: int = 0
    PREDICT_PRECISION_DECIMALS: int = 18
    PREDICT_BOOK_STALE_SECONDS: float = 300.0  # 5 minutes

    model_config = {"env_file": ".env"}


settings = Settings()
