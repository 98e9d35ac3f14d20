"""Configuration management for svnrev.

The configuration lives in ``svnrev.yaml`` next to the build that inspects the
working copy. Relative entry paths in that file are resolved against the
file's directory, so the same file works regardless of the caller's cwd.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from .exceptions import ConfigError
from .models import EntryConfig, SvnRevConfig
from .resolver import flatten_for_env, parse_env_overrides, resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("svnrev.yaml")
_HEADER_LINES = (
    "# svnrev configuration file",
    "# Edit with `svnrev config edit` or `svnrev config set KEY --value VALUE`.",
)


class ConfigManager:
    """Read, resolve and persist the svnrev configuration file.

    Args:
        config_path: Location of the YAML file. Defaults to ``svnrev.yaml`` in
            the current directory.
        env: Environment consulted for ``SVNREV__`` overrides. Defaults to
            ``os.environ``.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = Path(config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = os.environ if env is None else env

    @property
    def config_path(self) -> Path:
        """Return the configuration file location."""
        return self._config_path

    @property
    def base_dir(self) -> Path:
        """Return the directory that relative entry paths are resolved against."""
        return self._config_path.resolve().parent

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        ensure_file: bool = False,
        env_overrides: Mapping[str, str] | None = None,
    ) -> SvnRevConfig:
        """Return the effective configuration.

        Args:
            cli_overrides: Highest-priority values, keyed by dotted path.
            include_env: Whether ``SVNREV__`` environment variables apply.
            ensure_file: Whether to create a default file first.
            env_overrides: Environment to use instead of the manager's own.

        Returns:
            SvnRevConfig: Defaults overlaid with file, environment and CLI values.

        Raises:
            ConfigError: If the file cannot be parsed or a value is invalid.
        """
        if ensure_file:
            self.ensure_exists()

        env_layer = None
        if include_env:
            env_layer = parse_env_overrides(
                self._env if env_overrides is None else env_overrides
            )

        return resolve_with_precedence(
            defaults=SvnRevConfig(),
            file_overrides=self.load_file_overrides(),
            env_overrides=env_layer or None,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return the raw mapping stored in the configuration file.

        Raises:
            ConfigError: If the file is not valid YAML or not a mapping.
        """
        text = self.read_text()
        if not text:
            return {}
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse {self._config_path}: {exc}") from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"{self._config_path} must contain a mapping at the top level.")
        return data

    def resolve_entries(
        self,
        config: SvnRevConfig,
        paths: Iterable[Path] = (),
        overrides: Mapping[str, Any] | None = None,
        *,
        default: EntryConfig | None = None,
    ) -> list[EntryConfig]:
        """Return the entries to inspect.

        Explicit ``paths`` replace the configured entries. Without either,
        ``default`` is inspected, or the current directory when it is not
        given. ``overrides`` are applied to every entry and validated.

        Raises:
            ConfigError: If an override produces an invalid entry.
        """
        explicit = [EntryConfig(path=path) for path in paths]
        if explicit:
            entries = explicit
        elif config.entries:
            entries = [self._anchor(entry) for entry in config.entries]
        else:
            entries = [default or EntryConfig(path=Path.cwd())]

        if not overrides:
            return entries
        try:
            return [
                EntryConfig.model_validate({**entry.model_dump(), **overrides})
                for entry in entries
            ]
        except ValueError as exc:
            raise ConfigError(f"Invalid entry options: {exc}") from exc

    def save(self, config: SvnRevConfig | Mapping[str, Any]) -> None:
        """Write ``config`` to the configuration file with a fresh header."""
        if isinstance(config, SvnRevConfig):
            config = config.model_dump(mode="json")
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        self._config_path.write_text(self._render(config), encoding="utf-8")

    def ensure_exists(self) -> Path:
        """Write the default configuration unless the file already exists."""
        if not self._config_path.exists():
            self.save(SvnRevConfig())
        return self._config_path

    def read_text(self) -> str:
        """Return the file contents, or an empty string when it does not exist."""
        try:
            return self._config_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""

    def _anchor(self, entry: EntryConfig) -> EntryConfig:
        path = entry.path.expanduser()
        if path.is_absolute():
            return entry
        return entry.model_copy(update={"path": self.base_dir / path})

    @staticmethod
    def _render(data: Mapping[str, Any]) -> str:
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        body = yaml.safe_dump(dict(data), sort_keys=False)
        return "\n".join([*_HEADER_LINES, f"# Last updated: {stamp}", body])


__all__ = [
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "EntryConfig",
    "SvnRevConfig",
    "flatten_for_env",
    "parse_env_overrides",
    "resolve_with_precedence",
]
