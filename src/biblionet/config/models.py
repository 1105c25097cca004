"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, biblionet.toml only contains
overrides.  An empty file is a valid configuration.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from biblionet.domain.options import PlotOptions


class RenderConfig(BaseModel):
    """[render] section."""

    model_config = {"frozen": True}

    output: Path = Path("network.png")
    figsize: tuple[float, float] = (10.0, 10.0)
    dpi: int = Field(default=150, gt=0)


class VosviewerConfig(BaseModel):
    """[vosviewer] section.

    The jar directory itself is ``[plot] vos_path``.
    """

    model_config = {"frozen": True}

    java: str = "java"
    timeout: float | None = Field(default=None, gt=0)


class BiblionetConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    plot: PlotOptions = Field(default_factory=PlotOptions)
    render: RenderConfig = Field(default_factory=RenderConfig)
    vosviewer: VosviewerConfig = Field(default_factory=VosviewerConfig)
