from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "production", "test"]


class EnvironmentVariables(BaseSettings):
    """The two values needed before ``config.yaml`` can be read."""

    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore")

    environment: Environment = Field(default="development", validation_alias="APP_ENVIRONMENT")
    config_file: str = Field(default="config.yaml", validation_alias="MUSLIMHUNT_CONFIG")
