# jetfinder/dispatch.py
import logging

from jetfinder.engine import FastJetEngine
from jetfinder.errors import InsufficientParticlesError, SkippedEventError
from jetfinder.search import MAX_ITERATIONS, iterative_inclusive_search
from jetfinder.selector import (
    ExclusiveNJets,
    ExclusiveYCut,
    Inclusive,
    InclusiveIterativeNJets,
    build_from_steering,
)

logger = logging.getLogger(__name__)

DEFAULT_STEERING = {
    "algorithm": "kt_algorithm 0.7",
    "recombinationScheme": "E_scheme",
    "clusteringMode": "Inclusive",
}


def _require_particles(particle_count, n_jets):
    # FastJet asserts on exclusive/fixed-n requests with too few inputs
    if particle_count < n_jets:
        logger.warning("Not enough elements in the input collection to create %d jets.", n_jets)
        raise InsufficientParticlesError(particle_count, n_jets)


def cluster(fourvectors, definition, mode, particle_count=None, engine=None,
            max_iterations=MAX_ITERATIONS):
    """
    Run the clustering requested by ``mode`` on one event's four-vectors.

    Returns a pT-ordered list of Jet. Fixed-n modes raise
    InsufficientParticlesError (before any engine call) when the event has
    fewer particles than requested jets; the iterative mode may also raise
    SearchNotConvergedError.
    """
    if engine is None:
        engine = FastJetEngine()
    if particle_count is None:
        particle_count = len(fourvectors)

    if isinstance(mode, Inclusive):
        with engine.sequence(fourvectors, definition) as cs:
            return cs.inclusive_jets(mode.min_pt)

    if isinstance(mode, ExclusiveYCut):
        with engine.sequence(fourvectors, definition) as cs:
            return cs.exclusive_jets_ycut(mode.y_cut)

    if isinstance(mode, ExclusiveNJets):
        _require_particles(particle_count, mode.n_jets)
        with engine.sequence(fourvectors, definition) as cs:
            return cs.exclusive_jets(mode.n_jets)

    if isinstance(mode, InclusiveIterativeNJets):
        _require_particles(particle_count, mode.n_jets)
        return iterative_inclusive_search(
            fourvectors, definition, mode.n_jets, mode.min_e, engine,
            max_iterations=max_iterations,
        )

    raise TypeError(f"Unsupported clustering mode: {mode!r}")


class JetClusterer:
    """
    One clustering job: steering is validated once on construction, then
    ``cluster_event`` / ``process_events`` run per event.
    """

    def __init__(self, definition, mode, engine=None):
        self.definition = definition
        self.mode = mode
        self.engine = engine if engine is not None else FastJetEngine()
        self.engine.validate(definition)

    @classmethod
    def from_config(cls, steering=None, engine=None):
        st = dict(DEFAULT_STEERING)
        st.update(steering or {})
        definition, mode = build_from_steering(
            st["algorithm"], st["clusteringMode"], recombination_scheme=st["recombinationScheme"],
        )
        return cls(definition, mode, engine=engine)

    def cluster_event(self, fourvectors, particle_count=None):
        return cluster(fourvectors, self.definition, self.mode,
                       particle_count=particle_count, engine=self.engine)

    def process_events(self, events):
        """
        events: iterable of (event_index, fourvectors) or (event_index, fourvectors, particle_count)

        Yields (event_index, jets, None) or, for a skipped event,
        (event_index, None, SkippedEventError).
        """
        for item in events:
            ievt, fourvectors = item[0], item[1]
            particle_count = item[2] if len(item) > 2 else None
            try:
                jets = self.cluster_event(fourvectors, particle_count=particle_count)
            except SkippedEventError as err:
                logger.warning("Skipping event %s: %s", ievt, err)
                yield ievt, None, err
                continue
            yield ievt, jets, None
