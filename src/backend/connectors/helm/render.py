from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Union

from .config import HelmConfig, get_helm_config

logger = logging.getLogger(__name__)

CHART_MARKER = "Chart.yaml"


class HelmRenderError(RuntimeError):
    pass


def is_helm_chart(path: Union[str, Path]) -> bool:
    return (Path(path) / CHART_MARKER).is_file()


def render_chart(
    chart_path: Union[str, Path],
    output_dir: Union[str, Path],
    *,
    config: Optional[HelmConfig] = None,
) -> List[Path]:
    """
    Materialize a chart with `helm template <chart> --output-dir <dir>`.

    Returns the rendered YAML files (sorted). The caller owns `output_dir`.
    """
    config = config or get_helm_config()
    binary = shutil.which(config.binary)
    if binary is None:
        raise HelmRenderError(
            f"helm is not installed (looked for {config.binary!r}). Please install Helm to validate charts."
        )

    cmd = [binary, "template", str(chart_path), "--output-dir", str(output_dir)]
    logger.info("Rendering Helm chart: %s", chart_path)
    try:
        proc = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=config.timeout_seconds,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        raise HelmRenderError(f"helm template timed out after {config.timeout_seconds:g}s") from exc
    except OSError as exc:
        raise HelmRenderError(f"failed to run helm: {exc}") from exc

    if proc.returncode != 0:
        output = (proc.stderr or proc.stdout or "").strip()
        raise HelmRenderError(f"helm template failed (exit {proc.returncode}): {output}")

    files = sorted(p for p in Path(output_dir).rglob("*") if p.is_file() and _is_yaml(p))
    if not files:
        raise HelmRenderError("no YAML files found in rendered chart")
    logger.debug("Rendered %d files from %s", len(files), chart_path)
    return files


def _is_yaml(path: Path) -> bool:
    return path.suffix.lower() in (".yaml", ".yml")
