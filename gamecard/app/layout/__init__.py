"""Layout engine for GameCard."""

from .engine import LayoutEngine, solve_vertical_layout
from .fit import fit, fit_marquee

__all__ = ["LayoutEngine", "fit", "fit_marquee", "solve_vertical_layout"]
