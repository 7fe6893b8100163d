# example_config.py

# -----------------------------
# Processes (samples)
# -----------------------------
PROCESSES = {
    "eeqq": {
        "path": "data/ee_qq_250GeV/reco_particles.root",
        "label": r"$e^{+}e^{-}\rightarrow q\bar{q}$",
    },
}

TREE_NAME = "Events"

# -----------------------------
# Runtime control
# -----------------------------
RUNTIME = {
    "max_events": None,
    "event_sampling": "head",
    "stride": 1,
    "use_tqdm": True,
    "log_level": "INFO",
}

# -----------------------------
# Branch mapping (reconstructed particles)
#   either px/py/pz/E or pt/eta/phi/mass
# -----------------------------
BRANCHES = {
    "particles": {
        "px": "PFO_px",
        "py": "PFO_py",
        "pz": "PFO_pz",
        "E": "PFO_E",
    },
}

# -----------------------------
# Clustering steering
#   algorithm:            "<name> <params...>", e.g. "kt_algorithm 0.7", "ee_kt_algorithm",
#                         "SISConePlugin 0.7 0.75", "ValenciaPlugin 1.2 1.0 0.7"
#   recombinationScheme:  E_scheme | pt_scheme | pt2_scheme | Et_scheme | Et2_scheme | BIpt_scheme | BIpt2_scheme
#   clusteringMode:       "Inclusive <minPt>" | "InclusiveIterativeNJets <nrJets> <minE>" |
#                         "ExclusiveNJets <nrJets>" | "ExclusiveYCut <yCut>"
#   Not all modes are available for all algorithms (see jetfinder.selector.SUPPORT_TABLE).
# -----------------------------
CLUSTERING = {
    "algorithm": "kt_algorithm 0.7",
    "recombinationScheme": "E_scheme",
    "clusteringMode": "InclusiveIterativeNJets 2 5.0",
}

# -----------------------------
# Output directories
# -----------------------------
OUTDIR = "outputs"

PLOT_LABELS = {
    "llabel": "Simulation Preliminary",
    "rlabel": "250 GeV",
}

PLOTS = {
    "max_njets": 12,
    "pt_bins": 40,
}
