"""Per-day commit activity across local git repositories, as a terminal heatmap."""

__version__ = "0.1.0"
