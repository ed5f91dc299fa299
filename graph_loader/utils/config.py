"""
Configuration management for the graph loader.

Uses Pydantic Settings for type-safe configuration with YAML file support
and environment variable overrides.
"""

from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from ..graph.strategies import WriteMode

NEO4J_SCHEMES = ("bolt", "bolt+s", "bolt+ssc", "neo4j", "neo4j+s", "neo4j+ssc")


class Neo4jConfig(BaseModel):
    """Neo4j connection configuration."""
    uri: str = Field(default="bolt://localhost:7687")
    username: str = Field(default="neo4j")
    password: str = Field(default="verysecret")
    database: str = Field(default="neo4j")

    @field_validator("uri")
    @classmethod
    def _check_uri(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in NEO4J_SCHEMES or not parsed.hostname:
            raise ValueError(
                f"Malformed Neo4j address {value!r}; expected "
                f"<scheme>://<host>[:<port>] with scheme one of {', '.join(NEO4J_SCHEMES)}"
            )
        return value


class BatchConfig(BaseModel):
    """Batching configuration."""
    batch_size: int = Field(default=50_000, ge=1)
    mode: WriteMode = Field(default=WriteMode.SERVER_SIDE_BATCHING)
    read_chunk_size: int = Field(
        default=10_000,
        ge=1,
        description="Rows read from the source per chunk"
    )

    @field_validator("mode", mode="before")
    @classmethod
    def _parse_mode(cls, value):
        if isinstance(value, str):
            return WriteMode.parse(value)
        return value


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default="INFO")
    format: Optional[str] = Field(default=None)
    console: bool = Field(default=True)
    file: bool = Field(default=False)
    log_dir: Path = Field(default=Path("./logs"))


class LoaderConfig(BaseSettings):
    """
    Main loader configuration.

    Configuration is loaded from, lowest priority first:
    1. Default values
    2. YAML config file (if provided) or keyword arguments
    3. Environment variables (prefix: GRAPH_LOADER_, nested with __)

    Environment values are merged into the sections they name, so
    GRAPH_LOADER_BATCH__BATCH_SIZE only replaces batch.batch_size.
    """
    name: str = Field(default="graph_batch_loader")
    version: str = Field(default="1.0.0")

    neo4j: Neo4jConfig = Field(default_factory=Neo4jConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    class Config:
        env_prefix = "GRAPH_LOADER_"
        env_nested_delimiter = "__"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment first: it overrides values read from the YAML file
        return env_settings, init_settings, dotenv_settings, file_secret_settings


def load_config(config_path: Optional[Path] = None) -> LoaderConfig:
    """
    Load loader configuration from a YAML file.

    Args:
        config_path: Path to YAML config file. If None, uses
            config/loader_config.yaml when it exists, defaults otherwise.

    Returns:
        LoaderConfig instance with loaded settings.
    """
    if config_path is None:
        default_path = Path("config/loader_config.yaml")
        if default_path.exists():
            config_path = default_path

    if config_path and config_path.exists():
        with open(config_path, "r") as f:
            yaml_config = yaml.safe_load(f) or {}

        loader_config = yaml_config.get("loader", {})

        return LoaderConfig(
            name=loader_config.get("name", "graph_batch_loader"),
            version=loader_config.get("version", "1.0.0"),
            # Plain dicts, so environment values merge into each section
            neo4j=yaml_config.get("neo4j") or {},
            batch=yaml_config.get("batch") or {},
            logging=yaml_config.get("logging") or {},
        )

    return LoaderConfig()
