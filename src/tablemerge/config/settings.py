from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    NET_LABEL: str = "NET"
    DISAMBIGUATION_SEPARATOR: str = " - "
    UNNAMED_TABLE_TEMPLATE: str = "T{index}"
    TRIM_ROW_LABELS: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TABLEMERGE_",
        extra="ignore",
    )


settings = Settings()
