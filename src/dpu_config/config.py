from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DPU_CONFIG_", env_file=".env", extra="ignore")

    app_name: str = "dpu-config"

    # Logging
    log_level: str = "INFO"
    log_json: bool = Field(default=False)
    log_colors: bool = Field(default=True)

    # Serialization
    xml_indent: bool = Field(default=True)
    master_type_name: str = Field(default="MasterConfigObject")


settings = Settings()
