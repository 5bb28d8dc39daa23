"""Jetton content metadata: encoding, decoding and read-back verification."""

from .codec import (
    decode_metadata,
    decode_offchain,
    decode_onchain,
    encode_metadata,
    encode_offchain,
    encode_onchain,
    read_variant,
)
from .verifier import load_metadata_file, verify_metadata

__all__ = [
    "decode_metadata",
    "decode_offchain",
    "decode_onchain",
    "encode_metadata",
    "encode_offchain",
    "encode_onchain",
    "read_variant",
    "load_metadata_file",
    "verify_metadata",
]
