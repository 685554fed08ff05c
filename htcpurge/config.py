"""
Purger Configuration

Handles loading and validation of purger configuration from a TOML file.

Example file:

    multicast_ttl = 8

    [[routes]]
    pattern = "/^https?:\\\\/\\\\/upload\\\\.example\\\\.org/"
    host = "239.128.0.113"
    port = 4827

    [[routes]]
    host = "239.128.0.112"
    port = 4827
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml


# Default configuration path
DEFAULT_CONFIG_PATH = Path("/etc/htcp-purge/config.toml")

# Default multicast TTL
DEFAULT_MULTICAST_TTL = 8

# Outbound socket binds to any address, ephemeral port
DEFAULT_BIND_HOST = "0.0.0.0"
DEFAULT_BIND_PORT = 0

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    """Raised for invalid or unreadable purger configuration."""
    pass


def _is_int(value: Any) -> bool:
    """True for ints, excluding bool."""
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class RouteConfig:
    """One route entry: URLs matching pattern go to host:port."""
    host: str = ""
    port: int = 0
    pattern: Optional[str] = None  # "/regex/" or None for catch-all


@dataclass
class PurgerConfig:
    """
    Complete purger configuration.
    """
    routes: List[RouteConfig] = field(default_factory=list)

    # Socket options
    multicast_ttl: int = DEFAULT_MULTICAST_TTL
    bind_host: str = DEFAULT_BIND_HOST
    bind_port: int = DEFAULT_BIND_PORT

    # Logging
    log_level: str = "INFO"

    config_path: Optional[Path] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'PurgerConfig':
        """
        Load configuration from file.

        Args:
            config_path: Path to config file (default: /etc/htcp-purge/config.toml)

        Returns:
            Loaded configuration (not yet validated)

        Raises:
            ConfigError: If the file is missing or is not valid TOML
        """
        path = Path(config_path or DEFAULT_CONFIG_PATH)

        try:
            data = toml.load(path)
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {path}") from e
        except (toml.TomlDecodeError, OSError) as e:
            raise ConfigError(f"Failed to read config {path}: {e}") from e

        config = cls.from_dict(data)
        config.config_path = path
        return config

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PurgerConfig':
        """Build configuration from an already-parsed mapping."""
        config = cls()
        config._apply_dict(data)
        return config

    def _apply_dict(self, data: Dict[str, Any]) -> None:
        """Apply dictionary data to config."""
        try:
            if "multicast_ttl" in data:
                self.multicast_ttl = int(data["multicast_ttl"])
            if "bind_host" in data:
                self.bind_host = str(data["bind_host"])
            if "bind_port" in data:
                self.bind_port = int(data["bind_port"])
            if "log_level" in data:
                self.log_level = str(data["log_level"]).upper()

            if "routes" in data:
                self.routes = []
                for r in data["routes"]:
                    pattern = r.get("pattern")
                    self.routes.append(RouteConfig(
                        host=str(r.get("host", "")),
                        port=int(r.get("port", 0)),
                        pattern=str(pattern) if pattern is not None else None,
                    ))
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigError(f"Malformed configuration: {e}") from e

    def validate(self) -> None:
        """
        Validate configuration.

        Route patterns are compiled (and checked) by the RouteResolver.

        Raises:
            ConfigError: If configuration is invalid
        """
        if not self.routes:
            raise ConfigError("Config error. At least one route must be specified")

        for i, route in enumerate(self.routes):
            if not route.host or not isinstance(route.host, str):
                raise ConfigError(f"Route {i}: host is required")
            try:
                route.host.encode("idna")
            except UnicodeError as e:
                raise ConfigError(f"Route {i}: invalid host {route.host!r}: {e}") from e
            if not _is_int(route.port) or route.port < 1 or route.port > 65535:
                raise ConfigError(f"Route {i}: invalid port: {route.port!r}")

        if not _is_int(self.multicast_ttl) or self.multicast_ttl < 0 or self.multicast_ttl > 255:
            raise ConfigError(f"Invalid multicast TTL: {self.multicast_ttl!r}")

        if not _is_int(self.bind_port) or self.bind_port < 0 or self.bind_port > 65535:
            raise ConfigError(f"Invalid bind port: {self.bind_port!r}")

        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"Invalid log level: {self.log_level}")
