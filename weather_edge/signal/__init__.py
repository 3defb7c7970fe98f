"""
Signal generation: EV filter, recommended price and size.
"""

from weather_edge.signal.generator import SignalEvaluation, SignalGenerator

__all__ = ["SignalGenerator", "SignalEvaluation"]
