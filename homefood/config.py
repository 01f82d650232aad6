from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_ENV: str = "dev"
    APP_SECRET: str
    DB_URL: str = "sqlite:///./homefood.db"
    JWT_ISS: str = "homefood"
    JWT_EXP_MIN: int = 12*60
    LOG_LEVEL: str = "INFO"

    BUSINESS_NAME: str = "Maa Inti Vanta"
    DEFAULT_DELIVERY_CHARGE: float = 30.0
    DELIVERY_CHARGE_PRESETS: list[float] = [0.0, 30.0, 60.0]

    # Order builder / dashboard variants
    ALLOW_CUSTOM_ITEMS: bool = True
    INCREMENT_ON_RESELECT: bool = False
    INCLUDE_BAKERY: bool = True

    # None disables the PNG bill export after confirmation
    BILL_EXPORT_DIR: str | None = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
