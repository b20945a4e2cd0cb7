"""Configuration loading from YAML files with environment variable support."""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from dotenv import dotenv_values

from .core.backend import (
    DEFAULT_API_BASES,
    DEFAULT_MODELS,
    PROVIDER_GEMINI,
    PROVIDER_OPENAI,
    SUPPORTED_PROVIDERS,
    Backend,
)
from .core.exceptions import ConfigurationError

logger = logging.getLogger("chatbridge")

# Default path to the config file (relative to project root)
DEFAULT_CONFIG_PATH = "configs/config_default.yaml"

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000

# Provider-specific key variables, checked after CHATBRIDGE_API_KEY
PROVIDER_KEY_ENV = {
    PROVIDER_GEMINI: "GEMINI_API_KEY",
    PROVIDER_OPENAI: "OPENAI_API_KEY",
}

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


@dataclass(frozen=True)
class ProxySettings:
    """Everything the proxy needs, resolved once and injected into the app."""

    provider: str = PROVIDER_GEMINI
    api_key: Optional[str] = None
    api_base: Optional[str] = None
    model: Optional[str] = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    timeout: Optional[float] = None
    cors_origins: tuple[str, ...] = ("*",)
    static_dir: Optional[str] = None
    log_level: str = "INFO"

    def require_api_key(self) -> str:
        """Return the configured API key, raising if it is missing."""
        if not self.api_key:
            raise ConfigurationError("API key not configured on the server.")
        return self.api_key

    @property
    def model_name(self) -> str:
        return self.model or DEFAULT_MODELS[self.provider]

    def backend(self) -> Backend:
        """Build the upstream description; requires the API key."""
        return Backend(
            provider=self.provider,
            base_url=self.api_base or DEFAULT_API_BASES[self.provider],
            api_key=self.require_api_key(),
            model=self.model_name,
            timeout=self.timeout,
        )


def resolve_config_path(path: str) -> Path:
    """Resolve config path relative to project root if needed."""
    if Path(path).is_absolute():
        return Path(path)
    project_root = Path(__file__).parent.parent
    return project_root / path


def resolve_env_path(config_path: Path) -> Path:
    """Return the ``.env`` file that sits next to a config file."""
    return config_path.with_name(".env")


def load_env_values(env_path: Path) -> dict[str, str]:
    """Load environment values from a .env file without mutating os.environ."""
    if not env_path.exists():
        return {}
    raw_values = dotenv_values(env_path)
    return {key: value for key, value in raw_values.items() if value is not None}


def load_config(path: Optional[str] = None, substitute_env: bool = True) -> dict:
    """Load configuration from a YAML file.

    Args:
        path: Path to the config file. Defaults to CHATBRIDGE_CONFIG, or
              configs/config_default.yaml in the project root. A missing
              default file yields an empty config; a missing explicit file
              is an error.
        substitute_env: Whether to substitute environment variables in the config.

    Returns:
        Parsed configuration dictionary.
    """
    explicit = path is not None or bool(os.getenv("CHATBRIDGE_CONFIG"))
    if path is None:
        path = os.getenv("CHATBRIDGE_CONFIG") or DEFAULT_CONFIG_PATH

    config_path = resolve_config_path(path)

    if not config_path.exists():
        if explicit:
            logger.error(f"Config file not found: {config_path}")
            raise RuntimeError(f"Config file not found: {config_path}")
        logger.info(f"No config file at {config_path}; using environment only")
        return {}

    logger.info(f"Loading configuration from {config_path}")

    env_values: dict[str, str] = {}
    if substitute_env:
        env_file = resolve_env_path(config_path)
        if env_file.exists():
            logger.info(f"Loading environment variables from {env_file}")
            env_values = load_env_values(env_file)

    with config_path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}

    if not isinstance(data, dict):
        raise RuntimeError(f"Config file must contain a mapping: {config_path}")

    if substitute_env:
        data = _substitute_env_vars(data, env_values)

    logger.info(f"Configuration loaded successfully from {config_path}")
    return data


def _substitute_env_vars(
    obj: Any, env_values: Mapping[str, str] | None = None
) -> Any:
    """Recursively substitute environment variables in configuration values.

    Supports two formats:
    - ${VAR_NAME}: Braced format
    - $VAR_NAME: Simple format

    Unset variables are left as the literal placeholder and logged.
    """
    env_values = env_values or {}

    if isinstance(obj, dict):
        return {k: _substitute_env_vars(v, env_values) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_substitute_env_vars(item, env_values) for item in obj]
    if isinstance(obj, str):

        def replace_var(match):
            var_name = match.group(1) or match.group(2)
            value = env_values.get(var_name)
            if value is None:
                value = os.getenv(var_name)
            if value is None:
                logger.warning(
                    f"CONFIG ERROR: Environment variable '${var_name}' is not set! "
                    f"Check your .env file or export it in your shell."
                )
                return match.group(0)
            return value

        return _ENV_PATTERN.sub(replace_var, obj)
    return obj


def _to_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid timeout value %r", value)
        return None


def _to_int(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid port value %r; using %d", value, default)
        return default


def _clean_key(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    # An unresolved ${VAR} placeholder is not a key
    if not value or _ENV_PATTERN.fullmatch(value):
        return None
    return value


def build_settings(
    config: Mapping[str, Any], environ: Mapping[str, str] | None = None
) -> ProxySettings:
    """Merge a loaded config mapping with environment overrides.

    Environment variables take priority over the config file.
    """
    env = os.environ if environ is None else environ

    provider = str(env.get("CHATBRIDGE_PROVIDER") or config.get("provider") or PROVIDER_GEMINI)
    provider = provider.strip().lower()
    if provider not in SUPPORTED_PROVIDERS:
        raise ConfigurationError(
            f"Unsupported provider '{provider}'. Expected one of: {', '.join(SUPPORTED_PROVIDERS)}"
        )

    api_key = (
        _clean_key(env.get("CHATBRIDGE_API_KEY"))
        or _clean_key(env.get(PROVIDER_KEY_ENV[provider]))
        or _clean_key(config.get("api_key"))
    )

    server_cfg = config.get("server") or {}
    if not isinstance(server_cfg, Mapping):
        raise ConfigurationError(
            "Config key 'server' must be a mapping with 'host' and 'port' entries"
        )
    host = env.get("CHATBRIDGE_HOST") or server_cfg.get("host") or DEFAULT_HOST
    port = _to_int(env.get("CHATBRIDGE_PORT") or server_cfg.get("port"), DEFAULT_PORT)

    origins = config.get("cors_origins") or ["*"]
    if isinstance(origins, str):
        origins = [origins]

    return ProxySettings(
        provider=provider,
        api_key=api_key,
        api_base=env.get("CHATBRIDGE_API_BASE") or config.get("api_base"),
        model=env.get("CHATBRIDGE_MODEL") or config.get("model"),
        host=str(host),
        port=port,
        timeout=_to_float(env.get("CHATBRIDGE_TIMEOUT") or config.get("timeout")),
        cors_origins=tuple(str(origin) for origin in origins),
        static_dir=env.get("CHATBRIDGE_STATIC_DIR") or config.get("static_dir"),
        log_level=str(env.get("CHATBRIDGE_LOG_LEVEL") or config.get("log_level") or "INFO").upper(),
    )


def load_settings(path: Optional[str] = None) -> ProxySettings:
    """Load the config file (if any) and resolve ``ProxySettings``.

    A ``.env`` file in the working directory is read as well, the way the
    browser-facing server is usually started; its values never override
    variables already exported in the shell.
    """
    config = load_config(path)
    environ = {**load_env_values(Path.cwd() / ".env"), **os.environ}
    settings = build_settings(config, environ)
    if not settings.api_key:
        logger.warning(
            "No API key configured for provider %s; chat requests will fail with 500",
            settings.provider,
        )
    return settings
