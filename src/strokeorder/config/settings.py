"""StrokeSettings: CLI flags, env vars, and TOML config in one object.

Precedence, highest first:

1. keyword arguments (the CLI flags passed by click)
2. ``STROKEORDER_*`` environment variables (``__`` separates sections,
   e.g. ``STROKEORDER_ENGINE__MAX_DEPTH=8``)
3. ``strokeorder.toml`` (explicit ``--config`` or walk-up discovery)
4. defaults baked into the section models

Relative data paths in the TOML file resolve against the directory that
holds it; see :attr:`StrokeSettings.data_paths`.
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from strokeorder.config.discovery import find_config
from strokeorder.config.models import DataConfig, EngineConfig, OutputConfig
from strokeorder.domain.errors import ConfigurationError

# TOML file for the settings object under construction; read by
# settings_customise_sources, which cannot take arguments of its own.
_toml_file: ContextVar[Path | None] = ContextVar("strokeorder_toml_file", default=None)


class StrokeSettings(BaseSettings):
    """Frozen settings shared by the CLI, the workspace, and the services.

    Attributes:
        root: Directory that relative data paths resolve against: the
            parent of the TOML file, or the cwd when there is none.
        config_path: The TOML file in effect, if any.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        env_prefix="STROKEORDER_",
        env_nested_delimiter="__",
    )

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    data: DataConfig = Field(default_factory=DataConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [init_settings, env_settings]
        toml_file = _toml_file.get()
        if toml_file is not None:
            sources.append(TomlConfigSettingsSource(settings_cls, toml_file=toml_file))
        return tuple(sources)

    @property
    def data_paths(self) -> DataConfig:
        """The ``[data]`` section with relative paths anchored at :attr:`root`."""
        return self.data.resolved(self.root)

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> StrokeSettings:
        """Build settings for one CLI invocation.

        An explicit *config_path* that does not exist is ignored, as is a
        missing ``strokeorder.toml``.

        Raises:
            ConfigurationError: If the TOML file is not valid TOML or a
                value fails validation.
        """
        if config_path:
            candidate = Path(config_path)
            toml_file = candidate if candidate.is_file() else None
        else:
            toml_file = find_config(root)
        if root is None:
            root = toml_file.parent if toml_file else Path.cwd()

        source = str(toml_file) if toml_file else "<settings>"
        token = _toml_file.set(toml_file)
        try:
            return cls(root=root, config_path=toml_file, **cli_flags)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"Invalid TOML: {exc}", source=source) from exc
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
            )
            raise ConfigurationError(f"Invalid settings: {problems}", source=source) from exc
        finally:
            _toml_file.reset(token)
