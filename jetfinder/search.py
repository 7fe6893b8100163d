# jetfinder/search.py
"""
Iterative inclusive clustering for a fixed number of jets.

Inclusive algorithms return however many jets the radius gives them. To get
exactly ``n_jets`` jets above an energy threshold, the radius R is varied in
a damped bisection: start at R = pi/4 (the usable range is (0, pi/2]) and step
by pi/8, pi/16, pi/32, ... shrinking R when there are too few jets and growing
it when there are too many, e.g.

    R = pi/4
    R = pi/4 + pi/8
    R = pi/4 + pi/8 - pi/16
    R = pi/4 + pi/8 - pi/16 + pi/32
    ...

The count response to R is only roughly monotonic, so this is a heuristic
with a hard iteration cap rather than a root finder.
"""
import enum
import logging
import math
from typing import List, Optional

from jetfinder.errors import SearchNotConvergedError
from jetfinder.fourvectors import Jet

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 20
R_START = math.pi / 4


class SearchStatus(enum.Enum):
    SEARCHING = "searching"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"


class SearchState:

    def __init__(self, n_jets, radius=R_START):
        self.n_jets = int(n_jets)
        self.radius = float(radius)
        self.step = self.radius / 2
        self.iteration = 0
        self.status = SearchStatus.SEARCHING
        self.radii: List[float] = []
        self.jets: List[Jet] = []
        self.last_count: Optional[int] = None

    def update(self, survivors):
        """Record one iteration's survivors at the current radius and move R."""
        k = len(survivors)
        self.radii.append(self.radius)
        self.iteration += 1
        self.jets = list(survivors)
        self.last_count = k

        if k == self.n_jets:
            self.status = SearchStatus.CONVERGED
            return self.status

        if k < self.n_jets:
            # too few jets: smaller radius per jet
            self.radius -= self.step
        else:
            self.radius += self.step
        self.step /= 2
        return self.status

    def exhaust(self):
        self.status = SearchStatus.EXHAUSTED


def iterative_inclusive_search(fourvectors, definition, n_jets, min_e, engine,
                               max_iterations=MAX_ITERATIONS, state=None):
    """
    Returns the jets with E > min_e from the first radius that yields exactly
    n_jets of them. Raises SearchNotConvergedError after max_iterations tries.

    ``state`` may be passed in to inspect the trajectory afterwards.
    """
    if state is None:
        state = SearchState(n_jets)

    for _ in range(int(max_iterations)):
        step_definition = definition.with_radius(state.radius)

        with engine.sequence(fourvectors, step_definition) as cs:
            jets = cs.inclusive_jets(0.0)   # no pt cut, the energy cut is applied below

        survivors = [j for j in jets if j.E > min_e]
        logger.debug("iteration %d: R=%.6f total=%d above E>%g: %d",
                     state.iteration, state.radius, len(jets), min_e, len(survivors))

        if state.update(survivors) is SearchStatus.CONVERGED:
            return state.jets

    state.exhaust()
    logger.warning("Maximum number of iterations (%d) reached for %d jets. Canceling",
                   max_iterations, n_jets)
    raise SearchNotConvergedError(n_jets, max_iterations, state.last_count)
