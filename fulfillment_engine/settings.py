"""
Robot link configuration.

Values come from FULFILLMENT_ROBOT_* environment variables or a local .env
file, falling back to the defaults of a URSim container on localhost.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RobotSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FULFILLMENT_ROBOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = True
    host: str = "127.0.0.1"
    control_port: int = Field(default=29999, gt=0, lt=65536)  # dashboard server
    program_port: int = Field(default=30002, gt=0, lt=65536)  # secondary interface (script)
    timeout: float = Field(default=5.0, gt=0)  # seconds, connect and send
