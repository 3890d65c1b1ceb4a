"""Configuration management for prompt-refiner"""

import os
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

import yaml

DEFAULTS = MappingProxyType({
    'webhook_url': 'http://localhost:5678/webhook/refine-prompt',
    'timeout_ms': 15000,
    'max_retries': 3,
    'base_delay_ms': 500,
    'socket_path': '/tmp/prompt-refiner.sock',
    'cache_ttl_ms': 60000,
    'cache_max_entries': 200,
    'use_daemon': False,
})

ENV_VARS = MappingProxyType({
    'webhook_url': 'REFINER_WEBHOOK_URL',
    'timeout_ms': 'REFINER_TIMEOUT_MS',
    'max_retries': 'REFINER_MAX_RETRIES',
    'base_delay_ms': 'REFINER_BASE_DELAY_MS',
    'socket_path': 'REFINER_DAEMON_SOCKET',
    'cache_ttl_ms': 'REFINER_CACHE_TTL_MS',
    'cache_max_entries': 'REFINER_CACHE_MAX',
    'use_daemon': 'REFINER_DAEMON',
})


@dataclass(frozen=True)
class RefinerConfig:
    webhook_url: str = DEFAULTS['webhook_url']
    timeout_ms: int = DEFAULTS['timeout_ms']
    max_retries: int = DEFAULTS['max_retries']
    base_delay_ms: int = DEFAULTS['base_delay_ms']


@dataclass(frozen=True)
class DaemonConfig:
    socket_path: str = DEFAULTS['socket_path']
    cache_ttl_ms: int = DEFAULTS['cache_ttl_ms']
    cache_max_entries: int = DEFAULTS['cache_max_entries']


@dataclass(frozen=True)
class CliConfig:
    use_daemon: bool = DEFAULTS['use_daemon']
    socket_path: str = DEFAULTS['socket_path']
    timeout_ms: int = DEFAULTS['timeout_ms']


def _parse_int(value: Any) -> Optional[int]:
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def _parse_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if value is None:
        return None
    return str(value).strip().lower() in ('1', 'true', 'yes')


def _parse_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


_PARSERS: Dict[str, Callable[[Any], Any]] = {
    'webhook_url': _parse_str,
    'timeout_ms': _parse_int,
    'max_retries': _parse_int,
    'base_delay_ms': _parse_int,
    'socket_path': _parse_str,
    'cache_ttl_ms': _parse_int,
    'cache_max_entries': _parse_int,
    'use_daemon': _parse_bool,
}


def _resolve(
    name: str,
    overrides: Optional[Mapping[str, Any]],
    environ: Mapping[str, str],
    file_data: Optional[Mapping[str, Any]]
) -> Any:
    """Resolve one setting: override > environment > config file > default."""
    if overrides and overrides.get(name) is not None:
        return overrides[name]

    parse = _PARSERS[name]
    env_value = environ.get(ENV_VARS[name])
    if env_value is not None:
        parsed = parse(env_value)
        if parsed is not None:
            return parsed

    if file_data and file_data.get(name) is not None:
        parsed = parse(file_data[name])
        if parsed is not None:
            return parsed

    return DEFAULTS[name]


def load_refiner_config(
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    file_data: Optional[Mapping[str, Any]] = None
) -> RefinerConfig:
    """Build the webhook client configuration."""
    env = os.environ if environ is None else environ
    return RefinerConfig(
        webhook_url=_resolve('webhook_url', overrides, env, file_data),
        timeout_ms=_resolve('timeout_ms', overrides, env, file_data),
        max_retries=_resolve('max_retries', overrides, env, file_data),
        base_delay_ms=_resolve('base_delay_ms', overrides, env, file_data),
    )


def load_daemon_config(
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    file_data: Optional[Mapping[str, Any]] = None
) -> DaemonConfig:
    """Build the daemon process configuration."""
    env = os.environ if environ is None else environ
    return DaemonConfig(
        socket_path=_resolve('socket_path', overrides, env, file_data),
        cache_ttl_ms=_resolve('cache_ttl_ms', overrides, env, file_data),
        cache_max_entries=_resolve('cache_max_entries', overrides, env, file_data),
    )


def load_cli_config(
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    file_data: Optional[Mapping[str, Any]] = None
) -> CliConfig:
    """Build the caller-side configuration (daemon flag, socket, timeout)."""
    env = os.environ if environ is None else environ
    return CliConfig(
        use_daemon=_resolve('use_daemon', overrides, env, file_data),
        socket_path=_resolve('socket_path', overrides, env, file_data),
        timeout_ms=_resolve('timeout_ms', overrides, env, file_data),
    )


def load_config(config_path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Load configuration from YAML file"""
    env = os.environ if environ is None else environ

    # Check environment variable first
    env_config = env.get('REFINER_CONFIG')
    if env_config and Path(env_config).exists():
        config_file = Path(env_config)
    elif config_path and Path(config_path).exists():
        config_file = Path(config_path)
    else:
        default_file = Path.home() / ".config" / "prompt-refiner" / "config.yaml"
        if not default_file.exists():
            # Return empty dict to use defaults
            return {}
        config_file = default_file

    with open(config_file) as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_file} must contain a mapping")
    return data
