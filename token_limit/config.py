"""Configuration discovery and loading for token limit checks."""

import importlib.util
import json
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import yaml

from .budget import LimitExpression
from .data import DEFAULT_MODEL

SEARCH_PLACES = [
    "pyproject.toml",
    ".token-limit.json",
    ".token-limit",
    ".token-limit.yaml",
    ".token-limit.yml",
    ".token-limit.toml",
    ".token-limit.py",
    "token-limit.config.py",
    "token-limit.config.json",
    "token-limit.config.yaml",
    "token-limit.config.yml",
    "token-limit.config.toml",
]

PYPROJECT_SECTION = "token-limit"


class ConfigError(ValueError):
    """Raised when a configuration file cannot be loaded."""


class ConfigNotFoundError(ConfigError):
    """Raised when no configuration file is found."""


@dataclass
class TokenCheck:
    """One check: which files, which model, which limit."""

    path: Union[str, List[str]]
    name: Optional[str] = None
    model: str = DEFAULT_MODEL
    limit: Optional[LimitExpression] = None
    warn_threshold: float = 0.8
    show_cost: bool = False

    def __post_init__(self) -> None:
        """Validate check after initialization."""
        if not (0.0 <= self.warn_threshold <= 1.0):
            raise ValueError("warnThreshold must be in range [0.0, 1.0]")

    @property
    def patterns(self) -> List[str]:
        return [self.path] if isinstance(self.path, str) else list(self.path)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TokenCheck":
        """Build a check from a raw config entry (camelCase or snake_case keys)."""
        warn_threshold = data.get("warnThreshold", data.get("warn_threshold", 0.8))
        show_cost = data.get("showCost", data.get("show_cost", False))
        return cls(
            path=data["path"],
            name=data.get("name"),
            model=data.get("model") or DEFAULT_MODEL,
            limit=data.get("limit"),
            warn_threshold=warn_threshold,
            show_cost=bool(show_cost),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"path": self.path, "model": self.model}
        if self.name is not None:
            data["name"] = self.name
        if self.limit is not None:
            data["limit"] = self.limit
        data["warnThreshold"] = self.warn_threshold
        if self.show_cost:
            data["showCost"] = True
        return data


@dataclass
class ConfigResult:
    """Loaded configuration with its location."""

    config: List[Dict[str, Any]]
    config_directory: str
    config_path: str  # relative to the search directory


def define_config(config: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Declare checks in a Python config file.

    Example .token-limit.py:

        from token_limit import define_config

        config = define_config([
            {"name": "docs", "path": "docs/**/*.md", "limit": "10k"},
        ])
    """
    return config


class ConfigLoader:
    """Finds and reads token limit configuration files."""

    def __init__(self, search_places: Sequence[str] = SEARCH_PLACES):
        self.search_places = list(search_places)

    def load_config(
        self, config_path: Optional[str] = None, search_from: Optional[str] = None
    ) -> ConfigResult:
        """Load configuration from an explicit path or by searching a directory.

        Args:
            config_path: Path to a specific config file
            search_from: Directory to search and resolve relative paths against
                (defaults to the current working directory)

        Returns:
            ConfigResult with check paths resolved against the config directory

        Raises:
            ConfigNotFoundError: If no configuration is found
            ConfigError: If the file cannot be parsed
        """
        base = Path(search_from or os.getcwd()).resolve()

        if config_path and config_path.strip():
            path = Path(config_path.strip())
            if not path.is_absolute():
                path = base / path
            if not path.is_file():
                raise ConfigNotFoundError(f"Config file not found: {path}")
            raw = self._load_file(path)
            if raw is None:
                raise ConfigError(f"No token limit configuration in {path}")
        else:
            path, raw = self._search(base)

        config_directory = path.parent
        return ConfigResult(
            config=process_config(raw, config_directory),
            config_directory=str(config_directory),
            config_path=os.path.relpath(path, base),
        )

    def _search(self, directory: Path) -> Tuple[Path, Any]:
        for place in self.search_places:
            candidate = directory / place
            if not candidate.is_file():
                continue
            raw = self._load_file(candidate)
            if raw is not None:
                return candidate, raw
        raise ConfigNotFoundError("Token limit configuration not found")

    def _load_file(self, path: Path) -> Optional[Any]:
        """Read a config file; None means it holds no token limit config."""
        if path.name == "pyproject.toml":
            data = self._read_toml(path)
            section = data.get("tool", {}).get(PYPROJECT_SECTION)
            if section is None:
                return None
            return section.get("checks") if isinstance(section, dict) else section

        suffix = path.suffix.lower()
        if suffix in (".json", ""):
            return self._read_json(path)
        if suffix in (".yaml", ".yml"):
            return self._read_yaml(path)
        if suffix == ".toml":
            data = self._read_toml(path)
            return data.get("checks", data)
        if suffix == ".py":
            return self._read_python(path)
        raise ConfigError(f"Unsupported config file format: {path}")

    def _read_json(self, path: Path) -> Any:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in config file {path}: {e}") from e

    def _read_yaml(self, path: Path) -> Any:
        try:
            return yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e

    def _read_toml(self, path: Path) -> Dict[str, Any]:
        try:
            return tomllib.loads(path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in config file {path}: {e}") from e

    def _read_python(self, path: Path) -> Any:
        spec = importlib.util.spec_from_file_location("_token_limit_config", path)
        if spec is None or spec.loader is None:
            raise ConfigError(f"Cannot import config file {path}")
        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            raise ConfigError(f"Failed to execute config file {path}: {e}") from e

        for attribute in ("config", "CONFIG"):
            if hasattr(module, attribute):
                return getattr(module, attribute)
        return None


def process_config(raw: Any, config_directory: Path) -> Any:
    """Resolve check paths against the config directory and fill in names.

    Anything that is not a list of mappings is returned unchanged so that
    validation can report it.
    """
    if not isinstance(raw, list):
        return raw

    processed = []
    for check in raw:
        if not isinstance(check, dict):
            processed.append(check)
            continue

        entry = dict(check)
        path = entry.get("path")
        if isinstance(path, str):
            entry["path"] = _resolve_pattern(path, config_directory)
        elif isinstance(path, list):
            entry["path"] = [
                _resolve_pattern(p, config_directory) if isinstance(p, str) else p
                for p in path
            ]

        if not entry.get("name") and entry.get("path"):
            paths = entry["path"] if isinstance(entry["path"], list) else [entry["path"]]
            entry["name"] = ", ".join(
                _relative_pattern(p, config_directory)
                for p in paths
                if isinstance(p, str) and p.strip()
            )
        processed.append(entry)
    return processed


def _resolve_pattern(pattern: str, directory: Path) -> str:
    # Blank patterns stay blank so validation reports them.
    if not pattern.strip():
        return pattern
    negated = pattern.startswith("!")
    body = pattern[1:] if negated else pattern
    if not os.path.isabs(body):
        body = (directory / body).as_posix()
    return f"!{body}" if negated else body


def _relative_pattern(pattern: str, directory: Path) -> str:
    negated = pattern.startswith("!")
    body = pattern[1:] if negated else pattern
    relative = Path(os.path.relpath(body, directory)).as_posix()
    return f"!{relative}" if negated else relative


def load_config(
    config_path: Optional[str] = None, search_from: Optional[str] = None
) -> ConfigResult:
    """Load token limit configuration.

    This is a convenience function that creates a ConfigLoader instance
    and calls the load_config method.
    """
    loader = ConfigLoader()
    return loader.load_config(config_path, search_from)
