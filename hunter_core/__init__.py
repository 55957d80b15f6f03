"""
hunter-core: Android device dump normalization, identity and risk analysis.
"""

__version__ = "1.0.0"
