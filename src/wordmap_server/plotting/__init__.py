from .selection import PlotPoint, PlotSelection, select_plottable, MIN_PLOT_WORDS

__all__ = ["PlotPoint", "PlotSelection", "select_plottable", "MIN_PLOT_WORDS"]
