from __future__ import annotations

import logging
import sys
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, TextIO

from connectors.helm import HelmConfig, is_helm_chart, render_chart

logger = logging.getLogger(__name__)

STDIN_TARGET = "-"
STDIN_LABEL = "<stdin>"


class InputError(RuntimeError):
    pass


@dataclass(frozen=True)
class ManifestInput:
    path: Path
    label: str


@dataclass(frozen=True)
class InputSet:
    target: str
    files: tuple[ManifestInput, ...]
    # Directory mode: compact per-document lines instead of detailed boxes.
    directory_mode: bool = False
    helm_chart: bool = False


def is_yaml_file(path: Path | str) -> bool:
    return Path(path).suffix.lower() in (".yaml", ".yml")


def find_yaml_files(root: Path) -> List[Path]:
    return sorted(p for p in root.rglob("*") if p.is_file() and is_yaml_file(p))


@contextmanager
def discover_inputs(
    target: str,
    *,
    stdin: Optional[TextIO] = None,
    helm_config: Optional[HelmConfig] = None,
) -> Iterator[InputSet]:
    """
    Resolve a CLI target into manifest files.

    - "-"          -> stdin, spooled to a temporary file
    - chart dir    -> `helm template` output (dir containing Chart.yaml)
    - directory    -> every *.yaml / *.yml below it, recursively
    - anything else-> that single file

    Temporary files (stdin spool, rendered charts) are removed on exit.
    """
    if target == STDIN_TARGET:
        with tempfile.TemporaryDirectory(prefix="kubecheck-") as tmp:
            spool = Path(tmp) / "stdin.yaml"
            spool.write_text((stdin or sys.stdin).read(), encoding="utf-8")
            yield InputSet(target=target, files=(ManifestInput(spool, STDIN_LABEL),))
        return

    path = Path(target)
    if not path.exists():
        raise InputError(f"{target}: no such file or directory")

    if path.is_dir() and is_helm_chart(path):
        with tempfile.TemporaryDirectory(prefix="kubecheck-helm-") as tmp:
            rendered = render_chart(path, tmp, config=helm_config)
            files = tuple(ManifestInput(p, str(p.relative_to(tmp))) for p in rendered)
            yield InputSet(target=target, files=files, directory_mode=len(files) > 1, helm_chart=True)
        return

    if path.is_dir():
        found = find_yaml_files(path)
        logger.debug("Found %d YAML files under %s", len(found), path)
        yield InputSet(
            target=target,
            files=tuple(ManifestInput(p, str(p)) for p in found),
            directory_mode=True,
        )
        return

    yield InputSet(target=target, files=(ManifestInput(path, str(path)),))
