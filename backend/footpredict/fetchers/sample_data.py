"""
Built-in sample predictions served in offline mode and when the live feed fails.

Chances are the implied probabilities of the listed odds.
"""

from typing import List

from footpredict.models.predictions import PredictionRecord

SAMPLE_MATCHES = [
    {
        "home_team": "Real Soacha",
        "away_team": "Deportes Tolima",
        "home_win_chance": 21,  # 4.75
        "away_win_chance": 62,  # 1.60
        "draw_chance": 26,  # 3.90
        "match_time": "00:00",
        "competition": "Colombia Copa Colombia",
        "country": "Colombia",
        "home_win_odds": 4.75,
        "away_win_odds": 1.60,
        "draw_odds": 3.90,
    },
    {
        "home_team": "Deportivo Cali",
        "away_team": "Union Magdalena",
        "home_win_chance": 56,  # 1.80
        "away_win_chance": 18,  # 5.50
        "draw_chance": 32,  # 3.10
        "match_time": "00:30",
        "competition": "Colombia Primera A",
        "country": "Colombia",
        "home_win_odds": 1.80,
        "away_win_odds": 5.50,
        "draw_odds": 3.10,
    },
    {
        "home_team": "América W",
        "away_team": "Puebla W",
        "home_win_chance": 99,  # 1.01
        "away_win_chance": 1,  # 67.00
        "draw_chance": 3,  # 29.00
        "match_time": "01:00",
        "competition": "Mexico Liga MX Femenil",
        "country": "Mexico",
        "home_win_odds": 1.01,
        "away_win_odds": 67.00,
        "draw_odds": 29.00,
    },
    {
        "home_team": "Toluca W",
        "away_team": "Guadalajara W",
        "home_win_chance": 40,  # 2.50
        "away_win_chance": 38,  # 2.60
        "draw_chance": 31,  # 3.25
        "match_time": "01:00",
        "competition": "Mexico Liga MX Femenil",
        "country": "Mexico",
        "home_win_odds": 2.50,
        "away_win_odds": 2.60,
        "draw_odds": 3.25,
    },
    {
        "home_team": "Santa Fe",
        "away_team": "Millonarios",
        "home_win_chance": 36,  # 2.80
        "away_win_chance": 36,  # 2.75
        "draw_chance": 34,  # 2.90
        "match_time": "01:30",
        "competition": "Colombia Primera A",
        "country": "Colombia",
        "home_win_odds": 2.80,
        "away_win_odds": 2.75,
        "draw_odds": 2.90,
    },
]


def sample_predictions(date: str) -> List[PredictionRecord]:
    """The sample set, dated for the requested day."""
    return [PredictionRecord(date=date, **match) for match in SAMPLE_MATCHES]
