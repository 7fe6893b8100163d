# run_plots.py
import os
import argparse
import numpy as np

from jetfinder.errors import SKIP_REASON_CODES
from jetfinder.utils import ensure_dir
from jetfinder.plotting_utils import (
    plot_multiplicity_hist,
    plot_jet_pt_hist,
    plot_skip_summary,
)
from run_clustering import load_cfg_from_path, config_tag_from_path


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Make plots from cached clustering outputs.")
    ap.add_argument("--config", "-c", default="config.py",
                    help="Path to config file, e.g. configs/example_config.py (default: config.py)")
    return ap.parse_args(argv)


def load_cache(cache_dir, name):
    f = os.path.join(cache_dir, f"{name}.npz")
    if not os.path.exists(f):
        raise RuntimeError(f"Missing {name} cache: {f} (run run_clustering.py first)")
    return np.load(f)


def run(cfg, cfg_tag: str):
    out_root = os.path.join(getattr(cfg, "OUTDIR", "outputs"), cfg_tag)
    labels = getattr(cfg, "PLOT_LABELS", {})
    llabel = labels.get("llabel", "Simulation Preliminary")
    rlabel = labels.get("rlabel", "")
    plots = getattr(cfg, "PLOTS", {})

    for proc, pinfo in cfg.PROCESSES.items():
        plabel = pinfo.get("label", proc)

        out_proc = os.path.join(out_root, proc)
        cache_dir = os.path.join(out_proc, "cache")
        if not os.path.isdir(cache_dir):
            raise RuntimeError(f"Cache directory not found: {cache_dir}. Run run_clustering.py with the same --config.")

        out_plots = os.path.join(out_proc, "plots")
        ensure_dir(out_plots)

        events = load_cache(cache_dir, "events")
        jets = load_cache(cache_dir, "jets")
        skipped = load_cache(cache_dir, "skipped")

        clustered = events["skipped"] == 0
        plot_multiplicity_hist(
            events["n_jets"][clustered],
            outputfile=os.path.join(out_plots, "njets.png"),
            xlabel=r"$N_{\mathrm{jets}}$",
            title=plabel, llabel=llabel, rlabel=rlabel,
            max_n=int(plots.get("max_njets", 25)),
        )

        plot_jet_pt_hist(
            jets["pt"],
            outputfile=os.path.join(out_plots, "jet_pt.png"),
            title=plabel, llabel=llabel, rlabel=rlabel,
            bins=int(plots.get("pt_bins", 40)),
        )

        plot_multiplicity_hist(
            jets["n_const"],
            outputfile=os.path.join(out_plots, "jet_nconst.png"),
            xlabel=r"$N_{\mathrm{constituents}}$",
            title=plabel, llabel=llabel, rlabel=rlabel,
            max_n=int(plots.get("max_nconst", 100)),
        )

        codes = skipped["reason"]
        reason_counts = {"clustered": int(np.sum(clustered))}
        for reason, code in SKIP_REASON_CODES.items():
            reason_counts[reason] = int(np.sum(codes == code))
        plot_skip_summary(
            reason_counts,
            outputfile=os.path.join(out_plots, "event_status.png"),
            title=plabel, llabel=llabel, rlabel=rlabel,
        )

        print(f"Plots for {proc} in: {out_plots}")

    print("All plots done.")


if __name__ == "__main__":
    args = parse_args()
    cfg = load_cfg_from_path(args.config)
    tag = config_tag_from_path(args.config)
    run(cfg, tag)
