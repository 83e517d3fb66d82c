"""
Configuration for rsatkit.

Values are read from environment variables. A .env file in the working
directory (or the path given in RSAT_ENV_FILE) is loaded first, without
overriding variables that are already set.
"""
import os
import sys
from dataclasses import dataclass
from dotenv import find_dotenv, load_dotenv
from .errors import ConfigError

DEFAULT_FILTER = "Rsat"
DEFAULT_CANCEL_TOKEN = "c"
DEFAULT_QUERY_TIMEOUT = 120
DEFAULT_INSTALL_TIMEOUT = 1800
DEFAULT_CONNECTIVITY_HOST = "www.microsoft.com"
DEFAULT_CONNECTIVITY_PORT = 443

TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class Settings:
    filter_pattern: str = DEFAULT_FILTER
    cancel_token: str = DEFAULT_CANCEL_TOKEN
    fallback_enabled: bool = True
    query_timeout: float = DEFAULT_QUERY_TIMEOUT
    install_timeout: float = DEFAULT_INSTALL_TIMEOUT
    connectivity_host: str = DEFAULT_CONNECTIVITY_HOST
    connectivity_port: int = DEFAULT_CONNECTIVITY_PORT
    skip_connectivity: bool = False


def _get_bool(env, name, default):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be true or false, got {raw!r}")


def _get_timeout(env, name, default):
    """Parse a timeout in seconds. 0 disables the timeout (returns None)."""
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number of seconds, got {raw!r}")
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {raw!r}")
    return value or None


def _get_port(env, name, default):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        port = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a port number, got {raw!r}")
    if not 0 < port < 65536:
        raise ConfigError(f"{name} out of range: {port}")
    return port


def load_settings(env=None, env_file=None):
    """
    Build Settings from the environment.

    Args:
        env: Mapping to read from (defaults to os.environ after loading .env)
        env_file: Explicit .env path to load before reading os.environ

    Returns:
        A Settings instance
    """
    if env is None:
        dotenv_path = env_file or os.environ.get("RSAT_ENV_FILE")
        loaded = load_dotenv(dotenv_path or find_dotenv(usecwd=True), override=False)
        if loaded:
            print("Loaded settings from .env file", file=sys.stderr)
        env = os.environ

    cancel_token = env.get("RSAT_CANCEL_TOKEN", DEFAULT_CANCEL_TOKEN).strip()
    if not cancel_token:
        raise ConfigError("RSAT_CANCEL_TOKEN must not be empty")
    if cancel_token.isdigit():
        raise ConfigError("RSAT_CANCEL_TOKEN must not be a number, it would shadow a selection")

    return Settings(
        filter_pattern=env.get("RSAT_FILTER", DEFAULT_FILTER).strip(),
        cancel_token=cancel_token,
        fallback_enabled=_get_bool(env, "RSAT_FALLBACK_ENABLED", True),
        query_timeout=_get_timeout(env, "RSAT_QUERY_TIMEOUT", DEFAULT_QUERY_TIMEOUT),
        install_timeout=_get_timeout(env, "RSAT_INSTALL_TIMEOUT", DEFAULT_INSTALL_TIMEOUT),
        connectivity_host=env.get("RSAT_CONNECTIVITY_HOST", DEFAULT_CONNECTIVITY_HOST).strip(),
        connectivity_port=_get_port(env, "RSAT_CONNECTIVITY_PORT", DEFAULT_CONNECTIVITY_PORT),
        skip_connectivity=_get_bool(env, "RSAT_SKIP_CONNECTIVITY", False),
    )
