"""Shared fixtures: a recording stand-in for the FastJet engine."""

import contextlib
from typing import Callable, List, Optional

import pytest

from jetfinder.fourvectors import FourVector, Jet


def make_jets(energies, start_index=0) -> List[Jet]:
    """Jets along z with the given energies, one constituent each."""
    return [
        Jet(0.0, 0.0, float(e), float(e), (start_index + i,))
        for i, e in enumerate(energies)
    ]


def make_fourvectors(n) -> List[FourVector]:
    return [FourVector(1.0 + i, 0.5, 0.0, 2.0 + i, i) for i in range(n)]


class _RecordingResult:

    def __init__(self, engine, fourvectors, definition):
        self.engine = engine
        self.fourvectors = fourvectors
        self.definition = definition

    def inclusive_jets(self, ptmin=0.0):
        self.engine.calls.append(("inclusive", self.definition, ptmin))
        return list(self.engine.inclusive(self.definition, self.fourvectors))

    def exclusive_jets(self, n_jets):
        self.engine.calls.append(("exclusive", self.definition, n_jets))
        return list(self.engine.exclusive(self.definition, self.fourvectors, n_jets))

    def exclusive_jets_ycut(self, y_cut):
        self.engine.calls.append(("ycut", self.definition, y_cut))
        return list(self.engine.ycut(self.definition, self.fourvectors, y_cut))


class RecordingEngine:
    """Implements the engine interface (validate + sequence) and records every use."""

    def __init__(
        self,
        inclusive: Optional[Callable] = None,
        exclusive: Optional[Callable] = None,
        ycut: Optional[Callable] = None,
    ):
        self.inclusive = inclusive or (lambda definition, fvs: [])
        self.exclusive = exclusive or (lambda definition, fvs, n: make_jets([10.0] * n))
        self.ycut = ycut or (lambda definition, fvs, y: [])
        self.calls = []
        self.validated = []
        self.opened = 0
        self.released = 0

    def validate(self, definition):
        self.validated.append(definition)

    @contextlib.contextmanager
    def sequence(self, fourvectors, definition):
        self.opened += 1
        try:
            yield _RecordingResult(self, fourvectors, definition)
        finally:
            self.released += 1

    @property
    def radii(self):
        return [definition.radius for _, definition, _ in self.calls]


@pytest.fixture
def recording_engine():
    return RecordingEngine()
