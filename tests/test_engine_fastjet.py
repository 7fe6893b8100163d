"""Integration tests against the real FastJet bindings."""

import math

import pytest

fastjet = pytest.importorskip("fastjet")

from jetfinder.dispatch import JetClusterer, cluster  # noqa: E402
from jetfinder.engine import FastJetEngine, make_jet_definition  # noqa: E402
from jetfinder.fourvectors import fourvectors_from_arrays  # noqa: E402
from jetfinder.selector import RECOMBINATION_SCHEMES, SUPPORT_TABLE, Mode, build_from_steering  # noqa: E402

NATIVE_FAMILIES = [name for name, spec in SUPPORT_TABLE.items() if spec.kind == "native"]
FAMILY_PARAMS = {0: (), 1: (0.6,), 2: (0.6, -1.0)}


def _massless(px, py, pz):
    return math.sqrt(px * px + py * py + pz * pz)


@pytest.fixture
def back_to_back():
    """Two tight sprays of particles along +x and -x."""
    momenta = [
        (40.0, 1.0, 0.5), (25.0, -1.0, 0.0), (10.0, 0.5, -0.5),
        (-35.0, 0.5, 0.0), (-20.0, -0.5, 1.0), (-8.0, 0.0, -0.3),
    ]
    px, py, pz = zip(*momenta)
    E = [_massless(*p) for p in momenta]
    return fourvectors_from_arrays(px, py, pz, E)


@pytest.mark.parametrize("scheme", RECOMBINATION_SCHEMES)
@pytest.mark.parametrize("family", NATIVE_FAMILIES)
def test_native_definition(family, scheme):
    spec = SUPPORT_TABLE[family]
    params = FAMILY_PARAMS[spec.n_params]
    mode = "Inclusive 0" if spec.modes & Mode.INCLUSIVE else "ExclusiveNJets 2"
    definition, _ = build_from_steering([family, *params], mode, scheme)

    jet_def, plugin = make_jet_definition(definition)

    assert plugin is None
    assert jet_def.jet_algorithm() == getattr(fastjet, family)
    assert jet_def.recombination_scheme() == getattr(fastjet, scheme)
    assert jet_def.strategy() == fastjet.Best
    if params:
        assert jet_def.R() == pytest.approx(params[0])
    if len(params) == 2:
        assert jet_def.extra_param() == pytest.approx(params[1])


def test_inclusive_kt_conserves_energy(back_to_back):
    definition, mode = build_from_steering("kt_algorithm 0.7", "Inclusive 0")
    jets = cluster(back_to_back, definition, mode, engine=FastJetEngine())
    assert sum(j.E for j in jets) == pytest.approx(sum(fv.E for fv in back_to_back))


def test_ee_kt_validates_at_job_start():
    clusterer = JetClusterer.from_config({"algorithm": "ee_kt_algorithm", "clusteringMode": "ExclusiveYCut 0.5"})
    assert clusterer.definition.params == ()


def test_inclusive_kt(back_to_back):
    definition, mode = build_from_steering("kt_algorithm 0.7", "Inclusive 5.0")
    jets = cluster(back_to_back, definition, mode, engine=FastJetEngine())

    assert len(jets) == 2
    assert jets[0].pt >= jets[1].pt
    assert sorted(jets[0].constituents + jets[1].constituents) == list(range(6))
    assert set(jets[0].constituents) == {0, 1, 2}


def test_exclusive_ee_kt(back_to_back):
    definition, mode = build_from_steering("ee_kt_algorithm", "ExclusiveNJets 2")
    jets = cluster(back_to_back, definition, mode, engine=FastJetEngine())
    assert len(jets) == 2
    assert {frozenset(j.constituents) for j in jets} == {frozenset({0, 1, 2}), frozenset({3, 4, 5})}


def test_iterative_antikt(back_to_back):
    clusterer = JetClusterer.from_config(
        {"algorithm": "antikt_algorithm 0.4", "clusteringMode": "InclusiveIterativeNJets 2 5.0"},
    )
    jets = clusterer.cluster_event(back_to_back)
    assert len(jets) == 2
    assert all(j.E > 5.0 for j in jets)
    total_E = sum(fv.E for fv in back_to_back)
    assert sum(j.E for j in jets) == pytest.approx(total_E)
