"""Configuration for the NIC sample.

Two sources feed a run:
- SampleConfig: every constant of the sample (names, address space, VM
  image, ...). Defaults are built in; a TOML file (``[sample]`` table) and
  CLI options may override them.
- AzureEnvironment: service principal identity and subscription, read from
  environment variables only. Secrets never come from the config file.

Security:
- Client secret comes from the environment only
- Secrets are registered with LogSanitizer as soon as they are read
"""

import ipaddress
import logging
import os
import re
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

try:
    import tomli  # type: ignore[import]
except ImportError:
    # Fallback for newer Python versions
    try:
        import tomllib as tomli  # type: ignore[import]
    except ImportError as e:
        raise ImportError("toml library not available. Install with: pip install tomli") from e

from aznic.exceptions import ConfigError
from aznic.log_sanitizer import LogSanitizer

logger = logging.getLogger(__name__)

REQUIRED_ENV_VARS = [
    "AZURE_TENANT_ID",
    "AZURE_CLIENT_ID",
    "AZURE_CLIENT_SECRET",
    "AZURE_SUBSCRIPTION_ID",
]

STORAGE_NAME_PATTERN = re.compile(r"^[a-z0-9]{3,24}$")


@dataclass
class SampleConfig:
    """Names and settings of every resource the sample creates."""

    location: str = "westus"
    resource_group: str = "aznic-sample-group"
    vnet_name: str = "vNet"
    address_space: str = "172.16.0.0/16"
    subnet_prefix_length: int = 24
    subnet_names: tuple[str, ...] = ("Front-end", "Mid-tier", "Back-end")
    nic_names: tuple[str, ...] = ("nic1", "nic2", "nic3")
    dns_label_prefix: str = "azuresample"
    storage_account_name: str = "aznicsamplestorage"
    storage_endpoint_suffix: str = "core.windows.net"
    vhd_container: str = "vhds"
    vm_name: str = "vm"
    vm_size: str = "Standard_D3_v2"
    image_publisher: str = "Canonical"
    image_offer: str = "UbuntuServer"
    image_sku: str = "16.04.0-LTS"
    image_version: str = "latest"
    # Demo credentials baked into the sample; override them in the config file
    admin_username: str = "notadmin"
    admin_password: str = field(default="Pa$$w0rd1975", repr=False)
    cleanup_on_failure: bool = True

    def __post_init__(self):
        self._check_types()
        self.subnet_names = tuple(self.subnet_names)
        self.nic_names = tuple(self.nic_names)

        if len(self.subnet_names) != 3:
            raise ConfigError(
                f"Exactly three subnet names are required, got {len(self.subnet_names)}"
            )
        if len(self.nic_names) != len(self.subnet_names):
            raise ConfigError(
                f"Need one NIC name per subnet: {len(self.subnet_names)} subnets, "
                f"{len(self.nic_names)} NIC names"
            )
        if len(set(self.nic_names)) != len(self.nic_names):
            raise ConfigError(f"NIC names must be unique: {', '.join(self.nic_names)}")
        if not STORAGE_NAME_PATTERN.match(self.storage_account_name):
            raise ConfigError(
                f"Invalid storage account name: {self.storage_account_name}. "
                "Must be 3-24 characters, lowercase letters and numbers only."
            )
        self._check_address_space()

        LogSanitizer.register_secret(self.admin_password)

    def _check_types(self) -> None:
        """Reject values of the wrong type, e.g. ``cleanup_on_failure = "false"``."""
        for name in ("subnet_names", "nic_names"):
            value = getattr(self, name)
            if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
                raise ConfigError(f"{name} must be a list of strings, got {type(value).__name__}")
        for f in fields(self):
            value = getattr(self, f.name)
            if f.type is bool and not isinstance(value, bool):
                raise ConfigError(f"{f.name} must be true or false, got {type(value).__name__}")
            if f.type is int and (isinstance(value, bool) or not isinstance(value, int)):
                raise ConfigError(f"{f.name} must be an integer, got {type(value).__name__}")
            if f.type is str and not isinstance(value, str):
                raise ConfigError(f"{f.name} must be a string, got {type(value).__name__}")

    def _check_address_space(self) -> None:
        """The address space must hold block 0 (left unused) plus one block per subnet."""
        try:
            network = ipaddress.ip_network(self.address_space)
        except ValueError as e:
            raise ConfigError(f"Invalid address space: {self.address_space}") from e
        if not network.prefixlen < self.subnet_prefix_length <= network.max_prefixlen:
            raise ConfigError(
                f"Subnet prefix /{self.subnet_prefix_length} does not fit inside "
                f"{self.address_space}"
            )
        blocks = 2 ** (self.subnet_prefix_length - network.prefixlen)
        if blocks < len(self.subnet_names) + 1:
            raise ConfigError(
                f"{self.address_space} has room for {blocks - 1} /{self.subnet_prefix_length} "
                f"subnet(s) after the unused first block, {len(self.subnet_names)} needed"
            )

    @property
    def front_end_nic(self) -> str:
        """NIC that gets IP forwarding, the public IP and the primary flag."""
        return self.nic_names[0]

    @property
    def mid_tier_nic(self) -> str:
        """NIC deleted half way through the sample."""
        return self.nic_names[1]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, without the admin password."""
        data = asdict(self)
        data.pop("admin_password", None)
        data["subnet_names"] = list(self.subnet_names)
        data["nic_names"] = list(self.nic_names)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SampleConfig":
        """Create from dictionary, ignoring unknown keys."""
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")
        return cls(**{k: v for k, v in data.items() if k in known})

    def with_overrides(self, **overrides: Any) -> "SampleConfig":
        """Return a copy with the non-None overrides applied."""
        data = asdict(self)
        data.update({k: v for k, v in overrides.items() if v is not None})
        return SampleConfig(**data)


def missing_env(env: Mapping[str, str], keys: list[str]) -> list[str]:
    """Return the list of keys missing (or empty) in the provided environment mapping."""
    return [k for k in keys if not env.get(k)]


def format_missing_env_message(missing: list[str]) -> str:
    """Format a friendly, actionable message for missing env vars."""
    if not missing:
        return ""
    lines: list[str] = []
    lines.append("Missing required environment variables:")
    for k in missing:
        lines.append(f"  - {k}")
    lines.append("")
    lines.append("Set them for a service principal with access to the subscription, e.g.:")
    for k in missing:
        lines.append(f'  export {k}="<value>"')
    return "\n".join(lines)


@dataclass(frozen=True)
class AzureEnvironment:
    """Service principal identity and target subscription."""

    tenant_id: str
    client_id: str
    client_secret: str = field(repr=False)
    subscription_id: str

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "AzureEnvironment":
        """Read the identity from environment variables.

        Raises:
            ConfigError: If any required variable is missing or empty
        """
        if env is None:
            env = os.environ
        missing = missing_env(env, REQUIRED_ENV_VARS)
        if missing:
            raise ConfigError(format_missing_env_message(missing))

        LogSanitizer.register_secret(env["AZURE_CLIENT_SECRET"])
        return cls(
            tenant_id=env["AZURE_TENANT_ID"],
            client_id=env["AZURE_CLIENT_ID"],
            client_secret=env["AZURE_CLIENT_SECRET"],
            subscription_id=env["AZURE_SUBSCRIPTION_ID"],
        )


class ConfigManager:
    """Load SampleConfig from a TOML file.

    Configuration lives at ~/.aznic/config.toml by default:

        [sample]
        location = "eastus"
        resource_group = "my-nic-sample"
    """

    DEFAULT_CONFIG_DIR = Path.home() / ".aznic"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

    @classmethod
    def get_config_path(cls, custom_path: str | None = None) -> Path:
        if custom_path:
            return Path(custom_path).expanduser()
        return cls.DEFAULT_CONFIG_FILE

    @classmethod
    def load_config(cls, custom_path: str | None = None) -> SampleConfig:
        """Load configuration from file.

        Args:
            custom_path: Custom config file path (optional)

        Returns:
            SampleConfig object (defaults if the default file does not exist)

        Raises:
            ConfigError: If a custom file is missing, or loading fails
        """
        config_path = cls.get_config_path(custom_path)

        if not config_path.exists():
            if custom_path:
                raise ConfigError(f"Config file not found: {config_path}")
            logger.debug("Config file not found, using defaults")
            return SampleConfig()

        try:
            with open(config_path, "rb") as f:
                data = tomli.load(f)  # type: ignore[attr-defined]
        except (OSError, tomli.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to load config {config_path}: {e}") from e

        section = data.get("sample", {})
        if not isinstance(section, dict):
            raise ConfigError(f"[sample] in {config_path} must be a table")

        logger.debug(f"Loaded config from: {config_path}")
        try:
            return SampleConfig.from_dict(section)
        except TypeError as e:
            raise ConfigError(f"Invalid config in {config_path}: {e}") from e


__all__ = [
    "REQUIRED_ENV_VARS",
    "AzureEnvironment",
    "ConfigManager",
    "SampleConfig",
    "format_missing_env_message",
    "missing_env",
]
