"""Tests for the FastJet adapter against a stand-in ``fastjet`` module."""

import sys
from types import SimpleNamespace

import pytest

from jetfinder.engine import PLUGIN_CLASSES, FastJetEngine, _plugin_class, make_jet_definition
from jetfinder.errors import ConfigError
from jetfinder.selector import AlgorithmDefinition


class _FakeJetDefinition:

    def __init__(self, *args):
        self.args = args

    def description(self):
        return "fake jet definition"


class _FakePlugin:

    def __init__(self, *params):
        self.params = params


def _fake_fastjet(**attrs):
    base = dict(
        JetDefinition=_FakeJetDefinition,
        kt_algorithm=0, genkt_algorithm=3, ee_kt_algorithm=50,
        E_scheme=0, pt_scheme=1, Et_scheme=3, Best=1,
    )
    base.update(attrs)
    return SimpleNamespace(**base)


@pytest.fixture
def fake_fastjet(monkeypatch):
    def install(**attrs):
        module = _fake_fastjet(**attrs)
        monkeypatch.setitem(sys.modules, "fastjet", module)
        return module
    return install


class TestNativeDefinition:

    def test_one_parameter_passes_nparameters(self, fake_fastjet) -> None:
        fake_fastjet()
        jet_def, plugin = make_jet_definition(AlgorithmDefinition("kt_algorithm", "native", (0.7,), "Et_scheme"))
        assert plugin is None
        assert jet_def.args == (0, 0.7, 3, 1, 1)

    def test_zero_parameters(self, fake_fastjet) -> None:
        fake_fastjet()
        jet_def, _ = make_jet_definition(AlgorithmDefinition("ee_kt_algorithm", "native", (), "E_scheme"))
        assert jet_def.args == (50, 1.0, 0, 1, 0)

    def test_two_parameters_use_extra_param(self, fake_fastjet) -> None:
        fake_fastjet()
        jet_def, _ = make_jet_definition(AlgorithmDefinition("genkt_algorithm", "native", (0.4, -1.0), "pt_scheme"))
        assert jet_def.args == (3, 0.4, -1.0, 1, 1)


class TestPluginDefinition:

    def test_plugin_kinds(self) -> None:
        assert PLUGIN_CLASSES == {
            "siscone": "SISConePlugin",
            "siscone_spherical": "SISConeSphericalPlugin",
            "valencia": "ValenciaPlugin",
        }

    def test_top_level_class(self) -> None:
        assert _plugin_class(_fake_fastjet(SISConePlugin=_FakePlugin), "SISConePlugin") is _FakePlugin

    def test_contrib_class(self) -> None:
        module = _fake_fastjet(contrib=SimpleNamespace(ValenciaPlugin=_FakePlugin))
        assert _plugin_class(module, "ValenciaPlugin") is _FakePlugin

    def test_missing_class(self) -> None:
        with pytest.raises(ConfigError, match="SISConeSphericalPlugin is not available"):
            _plugin_class(_fake_fastjet(), "SISConeSphericalPlugin")

    def test_plugin_definition(self, fake_fastjet) -> None:
        fake_fastjet(SISConePlugin=_FakePlugin)
        jet_def, plugin = make_jet_definition(AlgorithmDefinition("SISConePlugin", "siscone", (0.7, 0.75)))
        assert isinstance(plugin, _FakePlugin)
        assert plugin.params == (0.7, 0.75)
        assert jet_def.args == (plugin,)

    def test_unknown_kind(self, fake_fastjet) -> None:
        fake_fastjet()
        with pytest.raises(ConfigError, match="Unknown algorithm kind"):
            make_jet_definition(AlgorithmDefinition("SomePlugin", "mystery", (1.0,)))


class TestValidate:

    def test_missing_plugin_is_config_error(self, fake_fastjet) -> None:
        fake_fastjet()
        with pytest.raises(ConfigError, match="ValenciaPlugin"):
            FastJetEngine().validate(AlgorithmDefinition("ValenciaPlugin", "valencia", (1.0, 1.0, 1.0)))

    def test_construction_error_is_config_error(self, fake_fastjet) -> None:
        def refuse(*args):
            raise RuntimeError("should be constructed with 0 parameter(s)")

        fake_fastjet(JetDefinition=refuse)
        with pytest.raises(ConfigError, match="Cannot build jet definition") as excinfo:
            FastJetEngine().validate(AlgorithmDefinition("ee_kt_algorithm", "native"))
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    def test_logs_description(self, fake_fastjet, caplog) -> None:
        fake_fastjet()
        with caplog.at_level("INFO", logger="jetfinder.engine"):
            FastJetEngine().validate(AlgorithmDefinition("kt_algorithm", "native", (0.7,)))
        assert "fake jet definition" in caplog.text
