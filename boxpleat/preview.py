"""
Matplotlib preview of crease patterns.

Draws the paper outline, mountain folds (red dash-dot) and valley folds (blue
dashed), optionally with the footprint polygon and the decomposition
rectangles, and saves the figure in any format matplotlib writes (svg, png,
pdf).
"""

from pathlib import Path
from typing import Optional, Sequence

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np

from .crease import CreasePattern
from .pipeline import PipelineResult

MOUNTAIN_STYLE = {"color": "red", "linestyle": "-.", "linewidth": 1.5}
VALLEY_STYLE = {"color": "blue", "linestyle": "--", "linewidth": 1.5}


def plot_polygon(ax, polygon, color='lightgray', alpha=0.3, edgecolor='black', linewidth=1):
    """Plot a polygon."""
    if not polygon:
        return
    poly = plt.Polygon(polygon, closed=True, facecolor=color, alpha=alpha,
                       edgecolor=edgecolor, linewidth=linewidth)
    ax.add_patch(poly)


def plot_folds(ax, folds, style: dict, label: Optional[str] = None):
    """Plot fold runs; only the first run carries the legend label."""
    for i, (a, b) in enumerate(folds):
        ax.plot([a[0], b[0]], [a[1], b[1]], label=label if i == 0 else None, **style)


def plot_pattern(ax, pattern: CreasePattern,
                 footprint: Optional[Sequence[Sequence[float]]] = None):
    """Draw a crease pattern onto an existing axes."""
    plot_polygon(ax, list(pattern.paper), color='white', alpha=1.0, linewidth=2)
    if footprint:
        plot_polygon(ax, [tuple(p) for p in footprint], color='lightblue', alpha=0.4,
                     edgecolor='steelblue', linewidth=1)

    plot_folds(ax, pattern.mountainfold, MOUNTAIN_STYLE, label='Mountain')
    plot_folds(ax, pattern.valleyfold, VALLEY_STYLE, label='Valley')

    xs = [p[0] for p in pattern.paper]
    ys = [p[1] for p in pattern.paper]
    margin = max(max(xs) - min(xs), max(ys) - min(ys), 1) * 0.05
    ax.set_xlim(min(xs) - margin, max(xs) + margin)
    ax.set_ylim(min(ys) - margin, max(ys) + margin)
    ax.set_aspect('equal')
    ax.grid(True, alpha=0.3)
    if pattern.fold_count:
        ax.legend(loc='upper right', fontsize=8)


def plot_decomposition(ax, result: PipelineResult):
    """Draw the canonical polygon with each node's inscribed rectangle."""
    polygon = result.polygon
    outline = [polygon.to_input_frame(p) for p in polygon.points]
    plot_polygon(ax, outline, color='lightblue', alpha=0.5, edgecolor='blue', linewidth=2)

    colors = plt.cm.Set3(np.linspace(0, 1, max(len(result.nodes), 1)))
    for node, color in zip(result.nodes, colors):
        corners = [polygon.to_input_frame(c) for c in node.rectangle.corners()]
        plot_polygon(ax, corners, color=color, alpha=0.7, edgecolor='black', linewidth=1)
        cx, cy = polygon.to_input_frame(node.rectangle.center)
        ax.text(cx, cy, f'N{node.index}', ha='center', va='center', fontsize=9)

    bbox = polygon.bounding_box
    lo = polygon.to_input_frame((bbox.min_x, bbox.min_y))
    hi = polygon.to_input_frame((bbox.max_x, bbox.max_y))
    ax.set_xlim(lo[0] - 10, hi[0] + 10)
    ax.set_ylim(lo[1] - 10, hi[1] + 10)
    ax.set_aspect('equal')
    ax.grid(True, alpha=0.3)


def save_pattern(pattern: CreasePattern, filepath: Path | str,
                 footprint: Optional[Sequence[Sequence[float]]] = None,
                 title: Optional[str] = None, dpi: int = 150) -> Path:
    """
    Render a crease pattern to an image file.

    The format follows the file suffix (.svg, .png, .pdf, ...).

    Returns:
        Path of the written file
    """
    filepath = Path(filepath)
    fig, ax = plt.subplots(figsize=(8, 8))
    try:
        ax.set_title(title or f'Crease pattern ({pattern.fold_count} folds)')
        plot_pattern(ax, pattern, footprint)
        fig.tight_layout()
        fig.savefig(filepath, dpi=dpi)
    finally:
        plt.close(fig)
    return filepath


def save_overview(result: PipelineResult, filepath: Path | str, dpi: int = 150) -> Path:
    """Render decomposition and crease pattern side by side."""
    filepath = Path(filepath)
    fig, axes = plt.subplots(1, 2, figsize=(14, 7))
    try:
        axes[0].set_title(f'Decomposition ({len(result.nodes)} nodes)')
        plot_decomposition(axes[0], result)

        outline = [result.polygon.to_input_frame(p) for p in result.polygon.points]
        axes[1].set_title(f'Crease pattern ({result.pattern.fold_count} folds)')
        plot_pattern(axes[1], result.pattern, footprint=outline)

        fig.tight_layout()
        fig.savefig(filepath, dpi=dpi)
    finally:
        plt.close(fig)
    return filepath
