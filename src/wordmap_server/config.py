from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Directory or http(s):// URL holding the static assets
    asset_base: str = "./model"
    coords_file: str = "coords.csv"
    vocab_file: str = "vocab.json"
    vectors_file: str = "vec50.bin"

    # Embedding width shared by every vector in vectors_file
    embedding_dim: int = 50
    similar_top_k: int = 10
    min_plot_words: int = 2

    tokenizer_timeout: float = 60.0  # seconds
    fetch_timeout: float = 30.0

    max_sessions: int = 1000

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

settings = Settings()
