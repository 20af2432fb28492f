"""
Configuration loading for forge-extract

Settings are collected once at startup into an ExtractConfig and handed to
every pipeline component. Sources, lowest to highest precedence:

- dataclass defaults
- an optional YAML file (forge-extract.yaml in the working directory, or --config)
- FORGE_EXTRACT_<KEY> environment variables
- command-line flags (applied by the caller via ExtractConfig.apply)
"""

import json
import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .exceptions import ConfigurationError

LOG = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "forge-extract.yaml"
ENV_PREFIX = "FORGE_EXTRACT_"

# Keys that may come from a config file or environment. Project directory,
# contract and output path are per-run input, not configuration.
FILE_KEYS = ("forge_binary", "out_dir", "auto_install", "build_all",
             "interactive", "log_level", "log_file")

_BOOL_KEYS = ("auto_install", "build_all", "interactive")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class ExtractConfig:
    """Everything a run needs to know, resolved once"""
    home: Path = field(default_factory=Path.home)
    cwd: Path = field(default_factory=Path.cwd)
    project_dir: Optional[str] = None
    contract_file: Optional[str] = None
    output_path: Optional[str] = None
    forge_binary: Optional[str] = None
    out_dir: str = "out"
    auto_install: bool = False
    build_all: bool = False
    interactive: bool = True
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    @property
    def foundry_bin_dir(self) -> Path:
        return self.home / ".foundry" / "bin"

    def apply(self, overrides: Mapping[str, Any]) -> "ExtractConfig":
        """Return a copy with every non-None override applied"""
        known = {f.name for f in fields(self)}
        changes = {k: v for k, v in overrides.items() if k in known and v is not None}
        return replace(self, **changes)


def _to_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("1", "true", "yes", "on"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("0", "false", "no", "off", ""):
        return False
    if isinstance(value, int):
        return bool(value)
    raise ConfigurationError(f"'{key}' must be a boolean, got {value!r}", field=key)


def _coerce(values: Dict[str, Any]) -> Dict[str, Any]:
    result = {}
    for key, value in values.items():
        if value is None:
            continue
        if key in _BOOL_KEYS:
            result[key] = _to_bool(key, value)
        elif key == "log_level":
            level = str(value).upper()
            if level not in LOG_LEVELS:
                raise ConfigurationError(f"Unknown log level {value!r}", field=key)
            result[key] = level
        else:
            result[key] = str(value)
    return result


class ConfigManager:
    """
    Builds an ExtractConfig from a YAML file and the environment.

    The environment mapping is injected so nothing reads os.environ after
    startup.
    """

    def __init__(self, environ: Mapping[str, str] = None, cwd: Path = None):
        self.environ = dict(os.environ if environ is None else environ)
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()

    def _home(self) -> Path:
        home = self.environ.get("HOME")
        return Path(home) if home else Path.home()

    def load_file(self, config_file: Optional[str] = None) -> Dict[str, Any]:
        """Load settings from a YAML file

        Args:
            config_file: Explicit path. When None, forge-extract.yaml in the
                working directory is used if it exists.

        Returns:
            Mapping of recognised keys to raw values
        """
        if config_file is None:
            path = self.cwd / DEFAULT_CONFIG_FILE
            if not path.exists():
                return {}
        else:
            path = Path(config_file)
            if config_file == "~" or config_file.startswith("~/"):
                path = self._home() / config_file[2:]
            if not path.is_absolute():
                path = self.cwd / path
            if not path.exists():
                raise ConfigurationError(f"Config file not found: {path}",
                                         config_file=str(path))

        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}", config_file=str(path))
        except OSError as e:
            raise ConfigurationError(f"Could not read {path}: {e}", config_file=str(path))

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file {path} must contain a mapping, got {type(data).__name__}",
                config_file=str(path)
            )

        settings = {}
        for key, value in data.items():
            if key in FILE_KEYS:
                settings[key] = value
            else:
                LOG.warning(f"Ignoring unknown config key '{key}' in {path}")
        LOG.debug(f"Loaded config from {path}: {settings}")
        return settings

    def env_overrides(self) -> Dict[str, Any]:
        """Collect FORGE_EXTRACT_<KEY> overrides"""
        overrides = {}
        for key in FILE_KEYS:
            env_value = self.environ.get(f"{ENV_PREFIX}{key.upper()}")
            if env_value is None:
                continue
            try:
                overrides[key] = json.loads(env_value)
            except json.JSONDecodeError:
                overrides[key] = env_value
        return overrides

    def load(self, config_file: Optional[str] = None,
             overrides: Mapping[str, Any] = None) -> ExtractConfig:
        """Build the run configuration

        Args:
            config_file: Optional YAML file path
            overrides: Values from command-line flags; None entries are ignored

        Returns:
            Frozen ExtractConfig
        """
        config = ExtractConfig(home=self._home(), cwd=self.cwd)
        config = config.apply(_coerce(self.load_file(config_file)))
        config = config.apply(_coerce(self.env_overrides()))
        if overrides:
            config = config.apply(overrides)
        return config
