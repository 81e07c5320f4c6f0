"""
Emocore - state of mind logging.

This package validates and normalizes state of mind observations (momentary
emotions and daily moods), classifies their valence, and persists them to a
health record store through a narrow adapter.
"""

__version__ = "0.1.0"
