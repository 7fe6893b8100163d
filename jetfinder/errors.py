# jetfinder/errors.py


class JetFinderError(Exception):
    pass


# -------------------------
# job level (fatal)
# -------------------------
class ConfigError(JetFinderError, ValueError):
    """Bad steering: unknown algorithm/scheme/mode, wrong arity, unsupported mode."""


# -------------------------
# event level (recoverable, skip the event)
# -------------------------
class SkippedEventError(JetFinderError, RuntimeError):
    reason = "skipped"


class InsufficientParticlesError(SkippedEventError):
    reason = "insufficient_particles"

    def __init__(self, n_particles, n_jets):
        self.n_particles = int(n_particles)
        self.n_jets = int(n_jets)
        super().__init__(
            f"Not enough elements in the input collection to create {self.n_jets} jets "
            f"(have {self.n_particles})"
        )


class SearchNotConvergedError(SkippedEventError):
    reason = "not_converged"

    def __init__(self, n_jets, iterations, last_count=None):
        self.n_jets = int(n_jets)
        self.iterations = int(iterations)
        self.last_count = last_count
        super().__init__(
            f"Maximum number of iterations ({self.iterations}) reached without finding "
            f"{self.n_jets} jets (last count: {last_count})"
        )


SKIP_REASON_CODES = {
    InsufficientParticlesError.reason: 1,
    SearchNotConvergedError.reason: 2,
}
