# jetfinder/selector.py
"""
Steering -> (AlgorithmDefinition, ClusteringMode).

The steering follows the usual FastJet processor convention: a list of tokens
whose first entry is a name and whose remaining entries are positional
numeric parameters, e.g. ``kt_algorithm 0.7`` or ``InclusiveIterativeNJets 4 5.0``.
"""
import enum
import logging
import math
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import ClassVar, NamedTuple, Optional, Tuple, Union

from jetfinder.errors import ConfigError

logger = logging.getLogger(__name__)


# -------------------------
# Clustering modes
# -------------------------
class Mode(enum.IntFlag):
    INCLUSIVE = 1
    EXCLUSIVE_NJETS = 2
    EXCLUSIVE_YCUT = 4
    INCLUSIVE_ITERATIVE = 8


@dataclass(frozen=True)
class Inclusive:
    min_pt: float
    flag: ClassVar[Mode] = Mode.INCLUSIVE
    usage: ClassVar[str] = "Inclusive <minPt>"


@dataclass(frozen=True)
class InclusiveIterativeNJets:
    n_jets: int
    min_e: float
    flag: ClassVar[Mode] = Mode.INCLUSIVE_ITERATIVE
    usage: ClassVar[str] = "InclusiveIterativeNJets <NJets> <minE>"


@dataclass(frozen=True)
class ExclusiveNJets:
    n_jets: int
    flag: ClassVar[Mode] = Mode.EXCLUSIVE_NJETS
    usage: ClassVar[str] = "ExclusiveNJets <NJets>"


@dataclass(frozen=True)
class ExclusiveYCut:
    y_cut: float
    flag: ClassVar[Mode] = Mode.EXCLUSIVE_YCUT
    usage: ClassVar[str] = "ExclusiveYCut <yCut>"


ClusteringMode = Union[Inclusive, InclusiveIterativeNJets, ExclusiveNJets, ExclusiveYCut]

# mode name -> (variant, parameter kinds)
MODES = MappingProxyType({
    "Inclusive": (Inclusive, ("float",)),
    "InclusiveIterativeNJets": (InclusiveIterativeNJets, ("count", "float")),
    "ExclusiveNJets": (ExclusiveNJets, ("count",)),
    "ExclusiveYCut": (ExclusiveYCut, ("float",)),
})


# -------------------------
# Recombination schemes / strategy
# -------------------------
RECOMBINATION_SCHEMES = (
    "E_scheme",
    "pt_scheme",
    "pt2_scheme",
    "Et_scheme",
    "Et2_scheme",
    "BIpt_scheme",
    "BIpt2_scheme",
)

# FastJet picks the fastest strategy itself; this only changes speed, never the jets
STRATEGY = "Best"


# -------------------------
# Support table
# -------------------------
class AlgorithmSpec(NamedTuple):
    n_params: int
    modes: Mode
    kind: str                         # "native" | "siscone" | "siscone_spherical" | "valencia"
    fastjet_name: Optional[str] = None


_ALL_MODES = Mode.INCLUSIVE | Mode.EXCLUSIVE_NJETS | Mode.EXCLUSIVE_YCUT | Mode.INCLUSIVE_ITERATIVE
_INCLUSIVE_ONLY = Mode.INCLUSIVE | Mode.INCLUSIVE_ITERATIVE
_EXCLUSIVE_ONLY = Mode.EXCLUSIVE_NJETS | Mode.EXCLUSIVE_YCUT

SUPPORT_TABLE = MappingProxyType({
    "kt_algorithm":                    AlgorithmSpec(1, _ALL_MODES,       "native", "kt_algorithm"),
    "cambridge_algorithm":             AlgorithmSpec(1, _ALL_MODES,       "native", "cambridge_algorithm"),
    "antikt_algorithm":                AlgorithmSpec(1, _INCLUSIVE_ONLY,  "native", "antikt_algorithm"),
    "genkt_algorithm":                 AlgorithmSpec(2, _ALL_MODES,       "native", "genkt_algorithm"),
    "cambridge_for_passive_algorithm": AlgorithmSpec(1, _ALL_MODES,       "native", "cambridge_for_passive_algorithm"),
    "genkt_for_passive_algorithm":     AlgorithmSpec(2, _INCLUSIVE_ONLY,  "native", "genkt_for_passive_algorithm"),
    "ee_kt_algorithm":                 AlgorithmSpec(0, _EXCLUSIVE_ONLY,  "native", "ee_kt_algorithm"),
    "ee_genkt_algorithm":              AlgorithmSpec(2, _EXCLUSIVE_ONLY,  "native", "ee_genkt_algorithm"),
    "SISConePlugin":                   AlgorithmSpec(2, _INCLUSIVE_ONLY,  "siscone"),
    "SISConeSphericalPlugin":          AlgorithmSpec(2, _INCLUSIVE_ONLY,  "siscone_spherical"),
    "ValenciaPlugin":                  AlgorithmSpec(3, _EXCLUSIVE_ONLY,  "valencia"),
})


@dataclass(frozen=True)
class AlgorithmDefinition:
    name: str
    kind: str
    params: Tuple[float, ...] = ()
    scheme: str = "E_scheme"
    strategy: str = STRATEGY

    @property
    def radius(self) -> Optional[float]:
        return self.params[0] if self.params else None

    def with_radius(self, R: float) -> "AlgorithmDefinition":
        """Same family, scheme and remaining parameters; only the radius-like parameter replaced."""
        if not self.params:
            raise ValueError(f"{self.name} has no radius-like parameter")
        return replace(self, params=(float(R),) + tuple(self.params[1:]))

    def description(self) -> str:
        ps = ", ".join(f"{p:g}" for p in self.params)
        return f"{self.name}({ps}) with {self.scheme}, strategy {self.strategy}"


# -------------------------
# Token parsing
# -------------------------
def _to_float(token, what):
    try:
        value = float(token)
    except (TypeError, ValueError):
        raise ConfigError(f"{what}: expected a number, got {token!r}") from None
    if not math.isfinite(value):
        raise ConfigError(f"{what}: expected a finite number, got {token!r}")
    return value


def _to_count(token, what):
    value = _to_float(token, what)
    if not value.is_integer() or value < 1:
        raise ConfigError(f"{what}: expected a positive integer, got {token!r}")
    return int(value)


def split_steering(value, what="steering"):
    """'kt_algorithm 0.7' or ['kt_algorithm', '0.7'] -> ('kt_algorithm', ['0.7'])."""
    if value is None:
        raise ConfigError(f"No {what} provided!")
    if isinstance(value, str):
        tokens = value.split()
    else:
        tokens = [str(t) for t in value]
    if len(tokens) == 0:
        raise ConfigError(f"No {what} provided!")
    return tokens[0], list(tokens[1:])


def parse_mode(mode_name, mode_params=()) -> ClusteringMode:
    if mode_name not in MODES:
        raise ConfigError(f"Unknown cluster mode: {mode_name!r}. Expected one of {', '.join(MODES)}")

    variant, kinds = MODES[mode_name]
    mode_params = list(mode_params)
    if len(mode_params) != len(kinds):
        raise ConfigError(f"Wrong Parameter(s) for Clustering Mode. Expected: {variant.usage}")

    values = []
    for token, kind in zip(mode_params, kinds):
        what = f"clustering mode {mode_name}"
        values.append(_to_count(token, what) if kind == "count" else _to_float(token, what))
    return variant(*values)


def parse_recombination_scheme(name):
    if name not in RECOMBINATION_SCHEMES:
        raise ConfigError(f"Unknown recombination scheme: {name!r}")
    return name


def supported_algorithms():
    """Human-readable list of the support table, one line per family."""
    lines = []
    for name, spec in SUPPORT_TABLE.items():
        modes = [mname for mname, (variant, _) in MODES.items() if variant.flag & spec.modes]
        lines.append(f"{name} ({spec.n_params} params): {', '.join(modes)}")
    return lines


# -------------------------
# Main entry
# -------------------------
def build(family_name, params, mode_name, mode_params=(), recombination_scheme="E_scheme"):
    """
    Validate a steering tuple against SUPPORT_TABLE and build the job's
    (AlgorithmDefinition, ClusteringMode). Raises ConfigError on any mismatch.
    """
    logger.info("Strategy: %s", STRATEGY)
    scheme = parse_recombination_scheme(recombination_scheme)
    logger.info("recombination scheme: %s", scheme)

    mode = parse_mode(mode_name, mode_params)
    logger.info("cluster mode: %s", mode)

    listing = " ".join(f"{name}*" if name == family_name else name for name in SUPPORT_TABLE)
    logger.info("Algorithms: %s", listing)

    spec = SUPPORT_TABLE.get(family_name)
    if spec is None:
        raise ConfigError(f"The given algorithm {family_name!r} is unknown. Supported: {', '.join(SUPPORT_TABLE)}")

    params = list(params)
    if len(params) != spec.n_params:
        raise ConfigError(
            f"Wrong numbers of parameters for algorithm: {family_name}. "
            f"We need {spec.n_params} params, but we got {len(params)}"
        )
    values = tuple(_to_float(p, f"algorithm {family_name}") for p in params)

    if (spec.modes & mode.flag) != mode.flag:
        raise ConfigError(
            f"Algorithm {family_name} is not capable of running in clustering mode {mode_name}"
        )

    definition = AlgorithmDefinition(
        name=family_name, kind=spec.kind, params=values, scheme=scheme, strategy=STRATEGY,
    )
    logger.info("jet algorithm: %s", definition.description())
    return definition, mode


def build_from_steering(algorithm, clustering_mode, recombination_scheme="E_scheme"):
    family_name, params = split_steering(algorithm, "jet algorithm")
    mode_name, mode_params = split_steering(clustering_mode, "cluster mode")
    return build(family_name, params, mode_name, mode_params, recombination_scheme=recombination_scheme)
