# jetfinder/utils.py
import os
import numpy as np
import awkward as ak
import uproot

from jetfinder.errors import SKIP_REASON_CODES
from jetfinder.fourvectors import fourvectors_from_arrays, fourvectors_from_ptetaphim

JET_DTYPES = {
    "event": np.int32,
    "jet_idx": np.int32,
    "px": np.float32,
    "py": np.float32,
    "pz": np.float32,
    "E": np.float32,
    "pt": np.float32,
    "eta": np.float32,
    "phi": np.float32,
    "m": np.float32,
    "n_const": np.int32,
}

CONSTITUENT_DTYPES = {
    "event": np.int32,
    "jet_idx": np.int32,
    "particle_idx": np.int32,
}

EVENT_DTYPES = {
    "event": np.int32,
    "n_particles": np.int32,
    "n_jets": np.int32,
    "skipped": np.int32,
}

SKIP_DTYPES = {
    "event": np.int32,
    "reason": np.int32,
}


# -------------------------
# Jet bookkeeping
# -------------------------
def empty_columns(dtypes):
    return {k: [] for k in dtypes}


def append_jets(jet_cols, const_cols, ievt, jets):
    for ij, jet in enumerate(jets):
        jet_cols["event"].append(ievt)
        jet_cols["jet_idx"].append(ij)
        jet_cols["px"].append(jet.px)
        jet_cols["py"].append(jet.py)
        jet_cols["pz"].append(jet.pz)
        jet_cols["E"].append(jet.E)
        jet_cols["pt"].append(jet.pt)
        jet_cols["eta"].append(jet.eta)
        jet_cols["phi"].append(jet.phi)
        jet_cols["m"].append(jet.m)
        jet_cols["n_const"].append(len(jet.constituents))

        for ip in jet.constituents:
            const_cols["event"].append(ievt)
            const_cols["jet_idx"].append(ij)
            const_cols["particle_idx"].append(int(ip))


def skip_reason_code(err) -> int:
    return int(SKIP_REASON_CODES.get(getattr(err, "reason", None), 0))


def event_fourvectors(cand, ievt):
    """
    cand: dict of per-event awkward arrays keyed by component name, either
    px/py/pz/E or pt/eta/phi[/mass].
    """
    if "px" in cand:
        return fourvectors_from_arrays(
            *(ak.to_numpy(cand[k][ievt]) for k in ("px", "py", "pz", "E"))
        )
    mass = ak.to_numpy(cand["mass"][ievt]) if "mass" in cand else None
    return fourvectors_from_ptetaphim(
        ak.to_numpy(cand["pt"][ievt]),
        ak.to_numpy(cand["eta"][ievt]),
        ak.to_numpy(cand["phi"][ievt]),
        mass,
    )


# -------------------------
# IO helpers
# -------------------------
def ensure_dir(path):
    os.makedirs(path, exist_ok=True)

def load_arrays(root_path, tree_name, branch_list, library="ak"):
    with uproot.open(root_path) as f:
        return f[tree_name].arrays(branch_list, library=library)

def save_columnar_npz(outpath: str, cols: dict, dtypes: dict):
    """
    cols: dict key -> python list
    dtypes: dict key -> numpy dtype
    """
    out = {}
    for k, v in cols.items():
        out[k] = np.asarray(v, dtype=dtypes[k])
    np.savez_compressed(outpath, **out)
