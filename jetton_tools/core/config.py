"""Configuration for networks and the initial allocation.

Configuration is loaded from a YAML file into immutable records that are
passed explicitly to whatever needs them. The bundled file mirrors the
deployed tokenomics; a different file can be selected with the
JETTON_TOOLS_CONFIG environment variable and a network with
JETTON_TOOLS_NETWORK.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .exceptions import ConfigurationError, JettonToolsError
from .models import WeightedBucket
from .types import NANO_DECIMALS
from .units import to_nano

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "data" / "networks.yaml"

CONFIG_PATH_ENV = "JETTON_TOOLS_CONFIG"
NETWORK_ENV = "JETTON_TOOLS_NETWORK"


@dataclass(frozen=True)
class NetworkConfig:
    """Addresses and metadata location for one network."""

    name: str
    master_address: Optional[str] = None
    owner_address: Optional[str] = None
    metadata_uri: Optional[str] = None

    # Allocation bucket label -> destination wallet
    wallets: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> "NetworkConfig":
        """Build a network record from its YAML mapping."""
        wallets = data.get("wallets") or {}
        if not isinstance(wallets, dict):
            raise ConfigurationError(f"networks.{name}.wallets", "must be a mapping")
        return cls(
            name=name,
            master_address=data.get("master_address"),
            owner_address=data.get("owner_address"),
            metadata_uri=data.get("metadata_uri"),
            wallets={str(label): str(address) for label, address in wallets.items()},
        )

    def wallet_for(self, label: str) -> str:
        """Return the destination wallet for an allocation bucket."""
        try:
            return self.wallets[label]
        except KeyError:
            raise ConfigurationError(
                f"networks.{self.name}.wallets.{label}",
                "no wallet configured for this bucket",
            ) from None

    def require_master(self) -> str:
        """Return the master contract address, failing if it is unset."""
        if not self.master_address:
            raise ConfigurationError(
                f"networks.{self.name}.master_address", "master address is not set"
            )
        return self.master_address


@dataclass(frozen=True)
class AllocationConfig:
    """Supply parameters of the one-time initial allocation."""

    max_supply: int  # nano units
    reserved: int  # nano units
    weights: tuple[WeightedBucket, ...]
    reserved_label: str = "burn_reserve"
    decimals: int = NANO_DECIMALS

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AllocationConfig":
        """
        Build the allocation record from its YAML mapping.

        Supply amounts are given in display units (strings or integers) and
        converted to nano units with the configured decimals.
        """
        try:
            decimals = int(data.get("decimals", NANO_DECIMALS))
            max_supply = to_nano(data["max_supply"], decimals)
            reserved = to_nano(data.get("reserved", 0), decimals)
            weights = tuple(
                WeightedBucket(label=item["label"], weight=item["weight"])
                for item in data.get("weights", [])
            )
        except KeyError as e:
            raise ConfigurationError(f"allocation.{e.args[0]}", "missing key") from e
        except (JettonToolsError, ValueError, TypeError) as e:
            raise ConfigurationError("allocation", str(e)) from e

        return cls(
            max_supply=max_supply,
            reserved=reserved,
            weights=weights,
            reserved_label=data.get("reserved_label", "burn_reserve"),
            decimals=decimals,
        )

    def weight_map(self) -> dict[str, int]:
        """Label -> weight, in configured order."""
        return {bucket.label: bucket.weight for bucket in self.weights}


@dataclass(frozen=True)
class ToolConfig:
    """Complete configuration for one network."""

    network: NetworkConfig
    allocation: AllocationConfig
    source_path: Optional[Path] = None

    @classmethod
    def load(
        cls,
        config_path: Optional[Path] = None,
        network: Optional[str] = None,
    ) -> "ToolConfig":
        """
        Load configuration from YAML.

        Args:
            config_path: Path to a YAML file. Falls back to JETTON_TOOLS_CONFIG,
                then to the bundled defaults.
            network: Network name. Falls back to JETTON_TOOLS_NETWORK, then to
                the file's default_network.

        Returns:
            ToolConfig for the selected network
        """
        env_path = os.getenv(CONFIG_PATH_ENV)
        path = Path(config_path or env_path or DEFAULT_CONFIG_PATH)

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError as e:
            raise ConfigurationError(str(path), "config file not found") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(str(path), f"invalid YAML: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(str(path), "top level must be a mapping")

        networks = data.get("networks") or {}
        selected = network or os.getenv(NETWORK_ENV) or data.get("default_network")
        if not selected:
            raise ConfigurationError("default_network", "no network selected")
        if selected not in networks:
            raise ConfigurationError(
                f"networks.{selected}",
                f"unknown network (available: {', '.join(sorted(networks)) or 'none'})",
            )

        if "allocation" not in data:
            raise ConfigurationError("allocation", "missing section")

        config = cls(
            network=NetworkConfig.from_dict(selected, networks[selected] or {}),
            allocation=AllocationConfig.from_dict(data["allocation"] or {}),
            source_path=path,
        )
        logger.info(f"Loaded {selected} configuration from {path}")
        return config
