# run_clustering.py
import os
import argparse
import importlib.util
import logging
import numpy as np

from jetfinder.dispatch import JetClusterer
from jetfinder.utils import (
    load_arrays, ensure_dir, save_columnar_npz, empty_columns, append_jets,
    event_fourvectors, skip_reason_code,
    JET_DTYPES, CONSTITUENT_DTYPES, EVENT_DTYPES, SKIP_DTYPES,
)

try:
    from tqdm import tqdm
except ImportError:
    tqdm = None


# -----------------------------
# Config loading
# -----------------------------
def load_cfg_from_path(cfg_path: str):
    cfg_path = os.path.abspath(cfg_path)
    if not os.path.exists(cfg_path):
        raise FileNotFoundError(f"Config not found: {cfg_path}")
    spec = importlib.util.spec_from_file_location("user_cfg", cfg_path)
    if spec is None or spec.loader is None:
        raise RuntimeError(f"Could not load config: {cfg_path}")
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


def config_tag_from_path(cfg_path: str) -> str:
    base = os.path.basename(cfg_path)
    if base.endswith(".py"):
        base = base[:-3]
    return base


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Cluster reconstructed particles into jets and write caches.")
    ap.add_argument("--config", "-c", default="config.py",
                    help="Path to config file, e.g. configs/example_config.py (default: config.py)")
    return ap.parse_args(argv)


def maybe_tqdm(cfg, it, total=None, desc=None):
    if cfg.RUNTIME.get("use_tqdm", True) and (tqdm is not None):
        return tqdm(it, total=total, desc=desc)
    return it


def select_event_indices(cfg, n_total: int) -> np.ndarray:
    max_events = cfg.RUNTIME.get("max_events", None)
    sampling = cfg.RUNTIME.get("event_sampling", "head")
    stride = int(cfg.RUNTIME.get("stride", 1))

    if (max_events is None) or (max_events <= 0) or (max_events >= n_total):
        return np.arange(n_total, dtype=int)

    if sampling == "stride":
        idx = np.arange(0, n_total, stride, dtype=int)
        return idx[:max_events]

    return np.arange(int(max_events), dtype=int)


def branch_list(cfg):
    return sorted(set(cfg.BRANCHES["particles"].values()))


# -----------------------------
# Main
# -----------------------------
def run(cfg, cfg_tag: str, engine=None):
    out_root = os.path.join(getattr(cfg, "OUTDIR", "outputs"), cfg_tag)
    ensure_dir(out_root)

    # steering errors stop the job here, before any event is read
    clusterer = JetClusterer.from_config(getattr(cfg, "CLUSTERING", {}), engine=engine)
    print(f"Clustering with {clusterer.definition.description()} | mode: {clusterer.mode}")

    pmap = cfg.BRANCHES["particles"]

    for proc, pinfo in cfg.PROCESSES.items():
        path = pinfo["path"]
        print(f"\n=== PROCESS: {proc} | file: {path} | config: {cfg_tag} ===")

        data = load_arrays(path, cfg.TREE_NAME, branch_list(cfg), library="ak")
        cand = {comp: data[br] for comp, br in pmap.items()}
        n_total = len(next(iter(cand.values())))
        ev_idx = select_event_indices(cfg, n_total)
        print(f"Loaded {n_total} events (processing {len(ev_idx)})")

        out_cache = os.path.join(out_root, proc, "cache")
        ensure_dir(out_cache)

        jet_cols = empty_columns(JET_DTYPES)
        const_cols = empty_columns(CONSTITUENT_DTYPES)
        evt_cols = empty_columns(EVENT_DTYPES)
        skip_cols = empty_columns(SKIP_DTYPES)

        n_particles = {}

        def events():
            for ievt in ev_idx:
                ievt = int(ievt)
                fvs = event_fourvectors(cand, ievt)
                n_particles[ievt] = len(fvs)
                yield ievt, fvs

        # -----------------------------
        # Event loop
        # -----------------------------
        results = clusterer.process_events(events())
        for ievt, jets, err in maybe_tqdm(cfg, results, total=len(ev_idx), desc=f"{proc}: events"):
            evt_cols["event"].append(ievt)
            evt_cols["n_particles"].append(n_particles.pop(ievt))

            if err is not None:
                evt_cols["n_jets"].append(0)
                evt_cols["skipped"].append(1)
                skip_cols["event"].append(ievt)
                skip_cols["reason"].append(skip_reason_code(err))
                continue

            evt_cols["n_jets"].append(len(jets))
            evt_cols["skipped"].append(0)
            append_jets(jet_cols, const_cols, ievt, jets)

        print("Writing cache files...")
        save_columnar_npz(os.path.join(out_cache, "jets.npz"), jet_cols, JET_DTYPES)
        save_columnar_npz(os.path.join(out_cache, "constituents.npz"), const_cols, CONSTITUENT_DTYPES)
        save_columnar_npz(os.path.join(out_cache, "events.npz"), evt_cols, EVENT_DTYPES)
        save_columnar_npz(os.path.join(out_cache, "skipped.npz"), skip_cols, SKIP_DTYPES)

        n_skipped = int(np.sum(evt_cols["skipped"])) if evt_cols["skipped"] else 0
        print(f"Done processing {proc}: {len(jet_cols['event'])} jets, {n_skipped} events skipped. "
              f"Cache in: {out_cache}")

    print("\nAll processing done.")


if __name__ == "__main__":
    args = parse_args()
    cfg = load_cfg_from_path(args.config)
    logging.basicConfig(
        level=getattr(logging, str(cfg.RUNTIME.get("log_level", "INFO")).upper(), logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )
    tag = config_tag_from_path(args.config)
    run(cfg, tag)
