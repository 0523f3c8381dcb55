from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Loads keys from process env, and also from a local .env file.
    model_config = SettingsConfigDict(env_prefix="", extra="ignore", env_file=".env", env_file_encoding="utf-8")

    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "info"

    # Comma separated; empty means any origin.
    allowed_origins: str = ""

    uploads_dir: str = "uploads"
    generated_dir: str = "generated"

    # Keys
    openai_api_key: str | None = None
    gemini_api_key: str | None = None
    cloudinary_cloud_name: str | None = None
    cloudinary_api_key: str | None = None
    cloudinary_api_secret: str | None = None

    # Content generation
    content_provider: str = "openai"
    openai_text_model: str = "gpt-3.5-turbo"
    openai_temperature: float = 0.7
    gemini_text_model: str = "gemini-2.0-flash"

    # Images
    openai_image_model: str = "dall-e-3"
    openai_image_size: str = "1024x1024"
    cloudinary_folder: str = "gpt-site-gen"
    http_timeout: float = 60.0

    # Uploads
    max_upload_files: int = 5
    upload_max_bytes: int = 5 * 1024 * 1024
    hosted_upload_max_bytes: int = 10 * 1024 * 1024
    hosted_upload_types: tuple[str, ...] = ("image/jpeg", "image/png", "image/webp")

    # Packaging: fail the request when a referenced upload is missing.
    strict_image_copy: bool = False

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def origins(self) -> list[str]:
        parsed = [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        return parsed or ["*"]


settings = Settings()
