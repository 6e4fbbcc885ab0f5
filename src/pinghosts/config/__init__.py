from __future__ import annotations

from .hosts import (
    MAX_HOSTS,
    HostParseResult,
    RejectedHost,
    check_host_limit,
    parse_host,
    parse_hosts,
)
from .paths import (
    APP_NAME,
    CONFIG_FILENAME,
    default_config_path,
    default_data_dir,
    expand_path,
)
from .settings import (
    CONFIG_ENV_VAR,
    DatabaseConfig,
    Settings,
    data_dir_from_settings,
    get_settings,
    load_settings,
    render_settings_toml,
    resolve_config_path,
    write_settings,
)

__all__ = [
    "APP_NAME",
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "MAX_HOSTS",
    "DatabaseConfig",
    "HostParseResult",
    "RejectedHost",
    "Settings",
    "check_host_limit",
    "data_dir_from_settings",
    "default_config_path",
    "default_data_dir",
    "expand_path",
    "get_settings",
    "load_settings",
    "parse_host",
    "parse_hosts",
    "render_settings_toml",
    "resolve_config_path",
    "write_settings",
]
