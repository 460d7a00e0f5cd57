from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()

DEFAULT_HELM_BIN = "helm"
DEFAULT_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True)
class HelmConfig:
    binary: str = DEFAULT_HELM_BIN
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


def get_helm_config() -> HelmConfig:
    """
    Load helm connector configuration from environment variables.

    Reads:
      KUBECHECK_HELM_BIN      (default: helm, resolved on PATH)
      KUBECHECK_HELM_TIMEOUT  (seconds, default: 60)
    """
    binary = os.getenv("KUBECHECK_HELM_BIN", "").strip() or DEFAULT_HELM_BIN
    return HelmConfig(
        binary=binary,
        timeout_seconds=_timeout_from_env("KUBECHECK_HELM_TIMEOUT"),
    )


def _timeout_from_env(name: str) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}.") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}.")
    return value
