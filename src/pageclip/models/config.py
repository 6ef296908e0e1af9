"""Pydantic configuration models for pageclip."""

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from ..exceptions import ConfigError


class ByteSize(int):
    """
    Custom type that parses human-readable byte sizes.

    Accepts:
        - Integers (bytes)
        - Strings like '200kb', '1mb', '5gb'

    Examples:
        >>> ByteSize._parse('200kb')
        204800
        >>> ByteSize._parse('1mb')
        1048576
        >>> ByteSize._parse(1024)
        1024
    """

    @classmethod
    def __get_pydantic_core_schema__(cls, source: Any, handler: Any) -> Any:
        from pydantic_core import core_schema

        return core_schema.no_info_plain_validator_function(cls._parse)

    @classmethod
    def _parse(cls, v: Any) -> int:
        if isinstance(v, int):
            return v
        if isinstance(v, str):
            v = v.lower().strip()
            # Order matters: check longer suffixes first
            units = [("gb", 1024**3), ("mb", 1024**2), ("kb", 1024), ("b", 1)]
            for unit, mult in units:
                if v.endswith(unit):
                    num_str = v[: -len(unit)].strip()
                    try:
                        return int(float(num_str) * mult)
                    except ValueError as err:
                        raise ValueError(f"Invalid number in byte size: {v}") from err
            try:
                return int(v)
            except ValueError:
                pass
        raise ValueError(f"Invalid byte size: {v}. Use format like '200kb', '1mb', or integer bytes.")


class NetworkConfig(BaseModel):
    """Configuration for the HTTP client."""

    user_agent: Optional[str] = Field(None, description="Custom User-Agent header")
    proxy: Optional[str] = Field(None, description="HTTP/HTTPS proxy URL")
    connect_timeout: float = Field(30.0, gt=0, description="Connection timeout in seconds")
    read_timeout: float = Field(30.0, gt=0, description="Read timeout in seconds")
    write_timeout: float = Field(30.0, gt=0, description="Write timeout in seconds")
    max_download_size: ByteSize = Field(
        ByteSize(50 * 1024 * 1024),
        description="Maximum raw response size (e.g., '50mb')",
    )

    model_config = {"extra": "forbid"}


class ContentConfig(BaseModel):
    """Configuration for page decoding and Markdown conversion."""

    max_page_chars: int = Field(
        10_000_000,
        ge=1,
        description="Maximum decoded page length in characters",
    )
    paragraph_markup: bool = Field(
        False,
        description="Wrap converted Markdown paragraphs in <p> markup",
    )

    model_config = {"extra": "forbid"}


class StorageConfig(BaseModel):
    """Configuration for where notes and Markdown files are kept."""

    directory: Path = Field(Path("./offline-notes"), description="Root directory for stored notes")
    database_name: str = Field("notes.db", description="SQLite database file name")
    pages_folder: str = Field("pages", description="Sub-folder holding Markdown files")

    model_config = {"extra": "forbid"}

    @property
    def database_path(self) -> Path:
        return self.directory / self.database_name

    @property
    def pages_path(self) -> Path:
        return self.directory / self.pages_folder


class SecurityConfig(BaseModel):
    """Configuration for URL policy checks."""

    block_private_ips: bool = Field(
        False,
        description="Reject URLs pointing at private, loopback or link-local addresses",
    )

    model_config = {"extra": "forbid"}


class ClipperConfig(BaseModel):
    """
    Root configuration model for pageclip.

    Example:
        config = ClipperConfig(
            storage=StorageConfig(directory=Path("./my-notes")),
            network={"read_timeout": 10},
        )

    YAML format:
        network:
          read_timeout: 10
          max_download_size: 20mb
        storage:
          directory: ./my-notes
        log_level: DEBUG
    """

    network: NetworkConfig = Field(default_factory=NetworkConfig)
    content: ContentConfig = Field(default_factory=ContentConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ClipperConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "ClipperConfig":
        """
        Load config from YAML file.

        Raises:
            ConfigError: If the file is missing, unreadable or invalid
        """
        import yaml

        try:
            return cls.from_yaml(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except (ValueError, yaml.YAMLError) as e:
            # ValueError covers pydantic.ValidationError
            raise ConfigError(f"Invalid config file {path}: {e}") from e
