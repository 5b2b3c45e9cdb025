from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENVIRONMENT: str = "local"
    LOG_LEVEL: str = "INFO"

    HOST: str = "127.0.0.1"
    PORT: int = 3000

    # Document store
    MONGODB_CONNECTION_STRING: str = (
        "mongodb://127.0.0.1:27017/?directConnection=true&serverSelectionTimeoutMS=2000"
    )
    MONGODB_DATABASE: str = "fabdev"
    MONGODB_COLLECTION: str = "Weights"

    # Upper bound for any single store operation
    MONGODB_TIMEOUT_MS: int = 5000
    MONGODB_MAX_RETRIES: int = 3
    MONGODB_RETRY_DELAY: float = 0.1

    # Fill the *_diff fields from the previous measurement instead of 0.0
    MEASUREMENT_DIFFS_ENABLED: bool = False


def get_settings() -> Settings:
    return Settings()
