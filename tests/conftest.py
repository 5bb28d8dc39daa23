"""Pytest configuration and fixtures for jetton toolkit tests."""

import json
from pathlib import Path
from typing import Any

import pytest
import yaml

from jetton_tools.core.models import MetadataRecord, OnchainFields, SupplyState, WeightedBucket

NANO = 10**9


@pytest.fixture
def sample_fields() -> OnchainFields:
    """On-chain metadata for the KWT jetton."""
    return OnchainFields(
        name="Kiwi Token",
        symbol="KWT",
        description="Utility token of the Kiwi ecosystem",
        image="https://kiwi.eu.com/kwt/logo.png",
        decimals=9,
    )


@pytest.fixture
def sample_uri() -> str:
    return "https://kiwi.eu.com/kwt/metadata.json"


@pytest.fixture
def offchain_record(sample_uri: str) -> MetadataRecord:
    return MetadataRecord.offchain(sample_uri)


@pytest.fixture
def onchain_record(sample_fields: OnchainFields) -> MetadataRecord:
    return MetadataRecord.onchain(sample_fields)


@pytest.fixture
def kwt_weights() -> list[WeightedBucket]:
    """Deployed weights: treasury 50%, team 30%, airdrop 20%."""
    return [
        WeightedBucket(label="treasury", weight=50),
        WeightedBucket(label="team", weight=30),
        WeightedBucket(label="airdrop", weight=20),
    ]


@pytest.fixture
def fresh_supply_state() -> SupplyState:
    """Configured, mintable contract with nothing minted yet."""
    return SupplyState(
        configured=True,
        mintable=True,
        total_supply=0,
        max_supply=66_000_000_000 * NANO,
        reserved_total=6_600_000_000 * NANO,
    )


@pytest.fixture
def metadata_document() -> dict[str, Any]:
    """metadata.json as published at the off-chain URI."""
    return {
        "name": "Kiwi Token",
        "symbol": "KWT",
        "description": "Utility token of the Kiwi ecosystem",
        "image": "https://kiwi.eu.com/kwt/logo.png",
        "decimals": "9",
        "social": ["https://t.me/kiwi"],
    }


@pytest.fixture
def metadata_json_file(tmp_path: Path, metadata_document: dict[str, Any]) -> Path:
    path = tmp_path / "metadata.json"
    path.write_text(json.dumps(metadata_document), encoding="utf-8")
    return path


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Small two-network config with a 1000-unit supply."""
    data = {
        "default_network": "testnet",
        "networks": {
            "testnet": {
                "master_address": "EQ-test-master",
                "metadata_uri": "https://example.com/meta.json",
                "wallets": {"ops": "0Q-ops", "burn_reserve": "0Q-burn"},
            },
            "mainnet": {"wallets": {}},
        },
        "allocation": {
            "decimals": 9,
            "max_supply": "1000",
            "reserved": "100",
            "weights": [
                {"label": "ops", "weight": 60},
                {"label": "growth", "weight": 40},
            ],
        },
    }
    path = tmp_path / "networks.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path
