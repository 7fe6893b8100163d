# jetfinder/engine.py
"""
Thin adapter around the FastJet python bindings.

Every cluster sequence lives inside ``FastJetEngine.sequence(...)``: the
JetDefinition (and plugin, if any) and the ClusterSequence are created on
entry and dropped on exit, whatever way the ``with`` block is left. Jets are
converted to plain ``Jet`` tuples inside the block, while the sequence that
owns their constituents is still alive.
"""
import contextlib
import logging

from jetfinder.errors import ConfigError
from jetfinder.fourvectors import Jet
from jetfinder.selector import SUPPORT_TABLE

logger = logging.getLogger(__name__)

# kind -> plugin class name in the fastjet bindings
PLUGIN_CLASSES = {
    "siscone": "SISConePlugin",
    "siscone_spherical": "SISConeSphericalPlugin",
    "valencia": "ValenciaPlugin",
}


def _plugin_class(fastjet, class_name):
    cls = getattr(fastjet, class_name, None)
    if cls is None:
        contrib = getattr(fastjet, "contrib", None)
        cls = getattr(contrib, class_name, None)
    if cls is None:
        raise ConfigError(f"{class_name} is not available in the installed fastjet bindings")
    return cls


def make_jet_definition(definition):
    """
    Build a fastjet.JetDefinition for an AlgorithmDefinition.

    Returns (jet_def, plugin); plugin is None for native algorithms and must be
    kept referenced for as long as jet_def is in use otherwise.
    """
    import fastjet

    if definition.kind == "native":
        algo = getattr(fastjet, SUPPORT_TABLE[definition.name].fastjet_name)
        scheme = getattr(fastjet, definition.scheme)
        strategy = getattr(fastjet, definition.strategy)
        params = [float(p) for p in definition.params]
        if len(params) == 2:
            jet_def = fastjet.JetDefinition(algo, params[0], params[1], scheme, strategy)
        else:
            # enums are plain ints in the bindings: pass nparameters explicitly so
            # (R, scheme, strategy) is not read as (R, extra_param, scheme)
            R = params[0] if params else 1.0
            jet_def = fastjet.JetDefinition(algo, R, scheme, strategy, len(params))
        return jet_def, None

    class_name = PLUGIN_CLASSES.get(definition.kind)
    if class_name is None:
        raise ConfigError(f"Unknown algorithm kind {definition.kind!r} for {definition.name}")
    plugin = _plugin_class(fastjet, class_name)(*[float(p) for p in definition.params])
    return fastjet.JetDefinition(plugin), plugin


def to_jet(pseudojet):
    constituents = tuple(sorted(int(c.user_index()) for c in pseudojet.constituents()))
    return Jet(float(pseudojet.px()), float(pseudojet.py()), float(pseudojet.pz()), float(pseudojet.E()),
               constituents)


class ClusterResult:
    """Query side of one live ClusterSequence."""

    def __init__(self, cs):
        self._cs = cs

    def _convert(self, pseudojets):
        import fastjet
        return [to_jet(j) for j in fastjet.sorted_by_pt(pseudojets)]

    def _sequence(self):
        if self._cs is None:
            raise RuntimeError("cluster sequence already released")
        return self._cs

    def inclusive_jets(self, ptmin=0.0):
        return self._convert(self._sequence().inclusive_jets(float(ptmin)))

    def exclusive_jets(self, n_jets):
        return self._convert(self._sequence().exclusive_jets(int(n_jets)))

    def exclusive_jets_ycut(self, y_cut):
        return self._convert(self._sequence().exclusive_jets_ycut(float(y_cut)))

    def release(self):
        self._cs = None


class FastJetEngine:

    def validate(self, definition):
        """Fail at job start, with a ConfigError, if the bindings cannot build this definition."""
        try:
            jet_def, _plugin = make_jet_definition(definition)
        except ConfigError:
            raise
        except Exception as err:
            raise ConfigError(f"Cannot build jet definition {definition.description()}: {err}") from err
        logger.info("jet definition: %s", jet_def.description())

    @contextlib.contextmanager
    def sequence(self, fourvectors, definition):
        import fastjet

        jet_def, plugin = make_jet_definition(definition)
        constituents = []
        for fv in fourvectors:
            pj = fastjet.PseudoJet(float(fv.px), float(fv.py), float(fv.pz), float(fv.E))
            pj.set_user_index(int(fv.index))
            constituents.append(pj)

        result = ClusterResult(fastjet.ClusterSequence(constituents, jet_def))
        try:
            yield result
        finally:
            result.release()
            del jet_def, plugin, constituents
