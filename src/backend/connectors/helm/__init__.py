"""Helm connector (shells out to `helm template`; decoding lives in src/backend/adapters/manifests)."""

from .config import HelmConfig, get_helm_config
from .render import HelmRenderError, is_helm_chart, render_chart

__all__ = ["HelmConfig", "HelmRenderError", "get_helm_config", "is_helm_chart", "render_chart"]
