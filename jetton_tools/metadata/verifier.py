"""Read-back verification of content cells and metadata document loading."""

import json
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError as PydanticValidationError

from ..cell import Cell
from ..core.exceptions import ConfigurationError
from ..core.models import FieldCheck, MetadataCheck, MetadataRecord, OnchainFields
from ..core.types import MetadataVariant
from .codec import decode_metadata

logger = logging.getLogger(__name__)


def verify_metadata(cell: Cell, expected: MetadataRecord) -> MetadataCheck:
    """
    Compare a content cell read back from the ledger with the expected record.

    Decoding errors propagate; a cell that decodes to the other variant is
    reported as a variant mismatch with no field checks.

    Args:
        cell: Content cell returned by the ledger
        expected: Record that was submitted

    Returns:
        MetadataCheck with one FieldCheck per compared field
    """
    actual = decode_metadata(cell)
    checks: list[FieldCheck] = []

    if actual.variant is expected.variant:
        if expected.variant is MetadataVariant.OFFCHAIN:
            checks.append(FieldCheck(field="uri", expected=expected.uri, actual=actual.uri))
        else:
            actual_values = actual.content.as_strings()
            for field, value in expected.content.as_strings().items():
                checks.append(
                    FieldCheck(field=field.value, expected=value, actual=actual_values[field])
                )

    result = MetadataCheck(
        expected_variant=expected.variant,
        actual_variant=actual.variant,
        cell_hash=cell.hash_hex,
        checks=checks,
    )

    if result.ok:
        logger.info(f"Metadata verified ({expected.variant.value}, {len(checks)} fields)")
    else:
        mismatched = ", ".join(check.field for check in result.mismatches) or "variant"
        logger.warning(f"Metadata mismatch: {mismatched}")
    return result


def load_metadata_file(path: Path | str) -> OnchainFields:
    """
    Load a metadata document (JSON or YAML) into the on-chain field set.

    Extra keys in the document are ignored.

    Args:
        path: Path to a metadata.json / metadata.yaml file

    Returns:
        OnchainFields
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(str(path), "metadata file not found") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(str(path), f"unparseable metadata file: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "metadata document must be an object")

    try:
        fields = OnchainFields.model_validate(
            {key: data.get(key) for key in OnchainFields.model_fields}
        )
    except PydanticValidationError as e:
        raise ConfigurationError(str(path), f"invalid metadata: {e}") from e

    logger.info(f"Loaded metadata for {fields.symbol} from {path}")
    return fields
