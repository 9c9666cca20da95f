"""
launcher-store: resolves verified download plans for a multi-channel game content store.
"""

__version__ = "0.1.0"
