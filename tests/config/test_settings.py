"""Tests for BiblionetSettings — unified settings with TOML source."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from biblionet.config.settings import BiblionetSettings
from biblionet.domain.types import ClusterMethod, LayoutType


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BIBLIONET_CONFIG", raising=False)
    monkeypatch.delenv("BIBLIONET_PLOT__N", raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = BiblionetSettings.from_cli(start=tmp_path)
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.verbose is False
        assert settings.plot.n == 20
        assert settings.plot.type is LayoutType.KAMADA
        assert settings.render.dpi == 150

    def test_frozen(self, tmp_path: Path) -> None:
        settings = BiblionetSettings.from_cli(start=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        toml = tmp_path / "biblionet.toml"
        toml.write_text('[plot]\nn = 40\ncluster = "louvain"\n\n[vosviewer]\ntimeout = 60\n')
        settings = BiblionetSettings.from_cli(start=tmp_path)
        assert settings.config_path == toml
        assert settings.plot.n == 40
        assert settings.plot.cluster is ClusterMethod.LOUVAIN
        assert settings.plot.size is False
        assert settings.vosviewer.timeout == 60

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "conf" / "maps.toml"
        custom.parent.mkdir()
        custom.write_text('[render]\noutput = "out/map.svg"\n')
        settings = BiblionetSettings.from_cli(config_path=str(custom))
        assert settings.render.output == Path("out/map.svg")

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException, match="not found"):
            BiblionetSettings.from_cli(config_path=str(tmp_path / "nope.toml"))

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "biblionet.toml").write_text("[plot\nn = ")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            BiblionetSettings.from_cli(start=tmp_path)


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "biblionet.toml").write_text("[plot]\nn = 40\n")
        monkeypatch.setenv("BIBLIONET_PLOT__N", "7")
        settings = BiblionetSettings.from_cli(start=tmp_path)
        assert settings.plot.n == 7

    def test_cli_flags_override(self, tmp_path: Path) -> None:
        settings = BiblionetSettings.from_cli(start=tmp_path, json_output=True, verbose=True)
        assert settings.json_output is True
        assert settings.verbose is True
