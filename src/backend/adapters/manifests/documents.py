from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, List, Union

import yaml

from common.rules_engine.models import Resource
from common.rules_engine.values import as_mapping, as_sequence, as_str

logger = logging.getLogger(__name__)


class ManifestDecodeError(ValueError):
    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source


def decode_documents(text: str, *, source: str = "<string>") -> List[Resource]:
    """
    Decode a manifest stream into resources.

    Supports:
    - multi-document YAML separated by `---`
    - JSON (a YAML subset)
    - `kind: List` wrappers with an `items` list (kubectl get -o yaml)

    Documents that are not mappings or have an empty `kind` (e.g. blank
    fragments between separators) are dropped.
    """
    try:
        raw_docs = list(yaml.safe_load_all(text))
    except yaml.YAMLError as exc:
        raise ManifestDecodeError(source, f"failed to decode YAML: {exc}") from exc
    return list(_to_resources(raw_docs, source=source))


def _to_resources(raw_docs: Iterable[Any], *, source: str) -> Iterable[Resource]:
    for index, doc in enumerate(raw_docs):
        body = as_mapping(doc)
        if body is None:
            if doc is not None:
                logger.debug("%s: skipping non-mapping document #%d", source, index)
            continue
        kind = as_str(body.get("kind"))
        if not kind:
            continue
        items = as_sequence(body.get("items"))
        if kind == "List" and items is not None:
            yield from _to_resources(items, source=source)
            continue
        yield Resource.from_document(body)


def load_manifest_file(path: Union[str, Path]) -> List[Resource]:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestDecodeError(str(path), f"failed to read file: {exc}") from exc
    return decode_documents(text, source=str(path))
