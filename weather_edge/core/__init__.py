"""
Core domain models, mathematical primitives, contracts and configuration.

This module contains the foundational building blocks that are independent
of external systems (weather feeds, exchanges, notification channels).
"""
