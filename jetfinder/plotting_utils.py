# jetfinder/plotting_utils.py
import numpy as np
import matplotlib.pyplot as plt
import mplhep as hep


def _finish(fig, ax, outputfile, xlabel, ylabel, title, llabel, rlabel):
    ax.set_xlabel(xlabel, fontsize=13)
    ax.set_ylabel(ylabel, fontsize=13)
    ax.grid(alpha=0.22)

    hep.cms.label(ax=ax, llabel=llabel, rlabel=rlabel, loc=0, fontsize=12)
    if title:
        ax.text(0.05, 0.92, title, transform=ax.transAxes, ha="left", va="top",
                fontsize=12, fontweight="bold")

    plt.tight_layout()
    plt.savefig(outputfile, dpi=300)
    plt.close(fig)


def plot_multiplicity_hist(
    njet_values,
    outputfile,
    xlabel,
    title=None,
    llabel="Simulation Preliminary",
    rlabel="",
    max_n=25
):
    hep.style.use("CMS")
    fig, ax = plt.subplots(figsize=(7.0, 5.2), dpi=300)

    njet_values = np.asarray(njet_values, dtype=int)
    njet_values = njet_values[(njet_values >= 0) & (njet_values <= max_n)]
    bins = np.arange(-0.5, max(int(njet_values.max()) if njet_values.size else 0, 1) + 1.5)

    ax.hist(njet_values, bins=bins, histtype="step", linewidth=2.0)
    _finish(fig, ax, outputfile, xlabel, "Events", title, llabel, rlabel)


def plot_jet_pt_hist(
    pt_values,
    outputfile,
    xlabel=r"$p_{\mathrm{T}}^{\mathrm{jet}}$ [GeV]",
    title=None,
    llabel="Simulation Preliminary",
    rlabel="",
    bins=40,
):
    hep.style.use("CMS")
    fig, ax = plt.subplots(figsize=(7.0, 5.2), dpi=300)

    pt_values = np.asarray(pt_values, dtype=float)
    pt_values = pt_values[np.isfinite(pt_values)]

    ax.hist(pt_values, bins=bins, histtype="step", linewidth=2.0)
    ax.set_yscale("log")
    _finish(fig, ax, outputfile, xlabel, "Jets", title, llabel, rlabel)


def plot_skip_summary(
    reason_counts,
    outputfile,
    title=None,
    llabel="Simulation Preliminary",
    rlabel="",
):
    """reason_counts: dict label -> number of events."""
    hep.style.use("CMS")
    fig, ax = plt.subplots(figsize=(7.0, 5.2), dpi=300)

    labels = list(reason_counts.keys())
    counts = [int(reason_counts[k]) for k in labels]
    ax.bar(np.arange(len(labels)), counts, color="none", edgecolor="black", linewidth=2.0)
    ax.set_xticks(np.arange(len(labels)))
    ax.set_xticklabels(labels, fontsize=11)
    _finish(fig, ax, outputfile, "", "Events", title, llabel, rlabel)
