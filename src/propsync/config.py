"""Configuration management for propsync."""

import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from propsync.exceptions import ConfigError

DEFAULT_TIMEOUT = 60.0
DEFAULT_EXTENSIONS = (".js",)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def load_env_file(path: Optional[Path] = None) -> bool:
    """Load a .env file into os.environ without overriding real variables.

    Args:
        path: Explicit .env path (default: nearest .env from the working directory up)

    Returns:
        True if a file was found and loaded
    """
    if path is not None:
        return load_dotenv(path, override=False)
    return load_dotenv(find_dotenv(usecwd=True), override=False)


def parse_bool(value: str, name: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")


def parse_timeout(value: str, name: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigError(f"Invalid number for {name}: {value!r}") from exc


def parse_extensions(value: str) -> tuple[str, ...]:
    """Parse a comma-separated extension list like ".js,.mjs"."""
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass
class Config:
    """Configuration for propsync."""

    scripts_dir: str = "scripts"
    root_dir: str = "."
    manifest_path: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    interpreter: str = "node"
    extensions: tuple[str, ...] = field(default_factory=lambda: DEFAULT_EXTENSIONS)
    self_name: Optional[str] = "sync-db.js"
    tls_insecure: bool = True

    @classmethod
    def from_env(
        cls,
        *,
        scripts_dir: Optional[str] = None,
        root_dir: Optional[str] = None,
        manifest_path: Optional[str] = None,
        timeout: Optional[float] = None,
        interpreter: Optional[str] = None,
        extensions: Optional[tuple[str, ...]] = None,
        self_name: Optional[str] = None,
        tls_insecure: Optional[bool] = None,
        env_file: Optional[Path] = None,
    ) -> "Config":
        """Load configuration from env vars and .env, with CLI overrides.

        Priority (highest to lowest):
        1. Explicit parameters (CLI args)
        2. Environment variables
        3. .env file
        4. Defaults
        """
        load_env_file(env_file)

        def resolve(explicit, env_key, default=None):
            if explicit is not None:
                return explicit
            return os.environ.get(env_key, default)

        raw_timeout = resolve(timeout, "PROPSYNC_TIMEOUT")
        if isinstance(raw_timeout, str):
            raw_timeout = parse_timeout(raw_timeout, "PROPSYNC_TIMEOUT")

        raw_extensions = resolve(extensions, "PROPSYNC_EXTENSIONS")
        if isinstance(raw_extensions, str):
            raw_extensions = parse_extensions(raw_extensions)

        raw_tls = resolve(tls_insecure, "PROPSYNC_TLS_INSECURE")
        if isinstance(raw_tls, str):
            raw_tls = parse_bool(raw_tls, "PROPSYNC_TLS_INSECURE")

        return cls(
            scripts_dir=resolve(scripts_dir, "PROPSYNC_SCRIPTS_DIR", "scripts"),
            root_dir=resolve(root_dir, "PROPSYNC_ROOT_DIR", "."),
            manifest_path=resolve(manifest_path, "PROPSYNC_MANIFEST"),
            timeout=raw_timeout if raw_timeout is not None else DEFAULT_TIMEOUT,
            interpreter=resolve(interpreter, "PROPSYNC_INTERPRETER", "node"),
            extensions=raw_extensions
            if raw_extensions is not None
            else DEFAULT_EXTENSIONS,
            self_name=resolve(self_name, "PROPSYNC_SELF_NAME", "sync-db.js"),
            tls_insecure=raw_tls if raw_tls is not None else True,
        )

    def validate(self) -> None:
        """Validate values that would otherwise fail halfway through a run.

        Raises:
            ConfigError: If timeout, interpreter, or extensions are invalid.
        """
        problems = []
        if not math.isfinite(self.timeout) or self.timeout <= 0:
            problems.append(f"timeout must be a positive number, got {self.timeout:g}")
        if not self.interpreter or not self.interpreter.strip():
            problems.append("interpreter (use --interpreter or PROPSYNC_INTERPRETER)")
        if not self.extensions:
            problems.append("extensions (use PROPSYNC_EXTENSIONS, e.g. '.js')")
        for ext in self.extensions:
            if not ext.startswith("."):
                problems.append(f"extension must start with '.': {ext!r}")

        if problems:
            raise ConfigError(
                "Invalid configuration:\n  - " + "\n  - ".join(problems)
            )

    @property
    def scripts_path(self) -> Path:
        return Path(self.scripts_dir)

    @property
    def root_path(self) -> Path:
        return Path(self.root_dir)
