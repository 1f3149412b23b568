"""Runtime configuration for mud-mapper."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.context import ParserConfig


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="MUD_MAPPER_", env_file=".env", extra="ignore")

    database_url: str = Field(
        default="sqlite+pysqlite:///mud_map.db",
        description="SQLAlchemy URL of the map database.",
    )
    log_level: str = "INFO"
    include_unexplored_exits: bool = False
    similarity_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    lookahead_lines: int = Field(default=30, ge=1)

    def parser_config(self, **overrides) -> ParserConfig:
        values = {
            "include_unexplored_exits": self.include_unexplored_exits,
            "similarity_threshold": self.similarity_threshold,
            "lookahead_lines": self.lookahead_lines,
        }
        values.update(overrides)
        return ParserConfig(**values)


settings = Settings()
