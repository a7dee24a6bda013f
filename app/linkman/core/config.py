from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    APP_NAME: str = "LINKMAN"
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    DATABASE_URL: str = "sqlite+aiosqlite:///./linkman.db"
    STORE_BACKEND: str = "sql"
    ADMIN_ROLE: str = "ROLE_ADMIN"
    MAX_OWNED_GROUPS: int = -1
    EXCLUDED_ROLES: set[str] = set()
    EXCLUDED_GROUPS: set[str] = set()
    AVAILABLE_ROLES: list[str] = ["ROLE_USER", "ROLE_ADMIN"]
    AVAILABLE_LANGUAGES: list[str] = ["en", "de"]
    PUBLIC_CATEGORY_NAME: str = "Public"
    PUBLIC_CATEGORY_TRANSLATIONS: dict[str, str] = {"de": "Öffentlich"}
    MENU_APPLY_LINK_ACL: bool = False
    MENU_TIMEOUT_SECONDS: float | None = None
    METRICS_ENABLED: bool = True
    LINKMAN_S3_ACCESS_KEY: str = ""
    LINKMAN_S3_SECRET_KEY: str = ""
    LINKMAN_S3_BUCKET: str = "linkman"
    LINKMAN_S3_REGION: str = ""
    LINKMAN_S3_ENDPOINT: str = ""
    PRESIGNED_URL_TTL_SECONDS: int = 86400


settings = Settings()
