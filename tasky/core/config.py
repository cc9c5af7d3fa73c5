# tasky/core/config.py
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    # 기본 앱 설정
    app_env: str = Field("dev", alias="APP_ENV")
    app_version: str = Field("0.1.0", alias="APP_VERSION")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    cors_allow_origins: str = Field(
        "http://localhost:3000,http://localhost:5173",
        alias="CORS_ALLOW_ORIGINS",
    )

    # DB
    database_url: str = Field("", alias="DATABASE_URL")

    # JWT / 비밀번호
    jwt_secret_key: str = Field("tasky-secret-key", alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_days: int = Field(7, alias="ACCESS_TOKEN_EXPIRE_DAYS")
    bcrypt_rounds: int = Field(12, alias="BCRYPT_ROUNDS")

    # 아바타 / 외부 에셋 호스트
    avatar_max_bytes: int = Field(5 * 1024 * 1024, alias="AVATAR_MAX_BYTES")
    avatar_folder: str = Field("tasky-avatars", alias="AVATAR_FOLDER")
    cloudinary_cloud_name: str = Field("", alias="CLOUDINARY_CLOUD_NAME")
    cloudinary_api_key: str = Field("", alias="CLOUDINARY_API_KEY")
    cloudinary_api_secret: str = Field("", alias="CLOUDINARY_API_SECRET")
    asset_host_timeout_seconds: float = Field(10.0, alias="ASSET_HOST_TIMEOUT_SECONDS")

    @property
    def is_development(self) -> bool:
        return self.app_env.strip().lower() == "dev"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]


settings = Settings()
