"""
Test suite for weather_edge

Contains:
- tests/unit/          : Unit tests for individual modules
"""
