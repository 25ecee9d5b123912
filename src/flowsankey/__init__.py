"""flowsankey: Sankey flow-diagram layout for weighted directed graphs."""

__version__ = "0.3.0"
