from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "docflow"
    db_username: str = "docflow"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 4
    db_connect_timeout_seconds: int = 10

    max_job_attempts: int = 3
    job_poll_interval_seconds: int = 5

    pdf_engine: str = "pymupdf"

    extraction_provider: str = "openai"
    extraction_openai_api_key: str = ""
    extraction_openai_model_name: str = "gpt-4o"
    extraction_openai_base_url: str | None = None
    extraction_timeout_seconds: int = 60
    extraction_max_tokens: int = 4096
    extraction_image_detail: str = "high"
    extraction_max_retries: int = 0

    max_split_pages: int = 10
    max_extraction_pages: int = 20
    max_page_bytes: int = 15 * 1024 * 1024
    circuit_breaker_threshold: int = 3
    rasterize_dpi: int = 150

    footer_font_size: float = 8
    footer_margin: float = 50

    r2_account_id: str = ""
    r2_endpoint: str = ""
    r2_access_key_id: str = ""
    r2_secret_access_key: str = ""
    r2_bucket: str = "pdf"
