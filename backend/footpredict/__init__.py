"""
Football Predictions API.

Serves football match predictions for a date, favouring matches where the
home side is the likely winner, with a short-lived cache in front of the
Betminer prediction feed.
"""

__version__ = "1.0.0"
