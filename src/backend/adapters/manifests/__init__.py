"""Manifest decoding adapters (text -> Resource; no rule evaluation)."""

from .documents import ManifestDecodeError, decode_documents, load_manifest_file

__all__ = [
    "ManifestDecodeError",
    "decode_documents",
    "load_manifest_file",
]
