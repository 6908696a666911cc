"""
Fetchers Package

Data collection modules for the predictions service:
- Betminer predictions feed (RapidAPI), with a built-in sample set for offline mode
- Odds to win-probability conversion used while normalizing upstream matches
"""
