"""
ModelRelay

Provider negotiation and request assembly for a chat client that talks to
many interchangeable language-model backends.
"""

__version__ = "1.0.0"
