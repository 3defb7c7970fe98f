"""
weather_edge — decision core for binary weather-threshold contracts.

Time model, time-decaying normal probability model, EV signal filter with
position sizing, and a kill-switch risk manager.
"""

__version__ = "0.1.0"
