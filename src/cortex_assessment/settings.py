"""Service settings for the CORTEX assessment engine.

Settings use the CORTEX_ env prefix. Scoring thresholds are not configurable
here; they belong to the rule semantics and live next to the rules in
``core``.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for cortex-assessment.

    Environment variable prefix: CORTEX_
    """

    service_name: str = "cortex-assessment"
    api_prefix: str = "/api/v1"

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    # Result caps; insights and priorities can only be lowered from 3
    insight_limit: int = Field(default=3, ge=1, le=3)
    priority_limit: int = Field(default=3, ge=1, le=3)
    priority_move_limit: int = Field(default=6, ge=1)
    guide_limit: int = Field(default=5, ge=1)

    model_config = SettingsConfigDict(env_prefix="CORTEX_")
