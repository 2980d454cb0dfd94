"""Symbol analysis and the parallel summary pipeline."""

from volatility.analysis.analyzer import SymbolAnalyzer
from volatility.analysis.pipeline import (BoundedParallelPipeline, Outcome,
                                          analyze_exchange)
from volatility.analysis.summary import SummaryWriter

__all__ = [
    "SymbolAnalyzer",
    "SummaryWriter",
    "BoundedParallelPipeline",
    "Outcome",
    "analyze_exchange",
]
