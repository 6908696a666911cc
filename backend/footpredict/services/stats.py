"""
Summary statistics over a set of predictions.
"""

from collections import Counter
from typing import Sequence

from footpredict.fetchers.odds import round_half_up, round_half_up_2dp
from footpredict.models.predictions import OddsRange, Prediction, PredictionStats


def summarize(predictions: Sequence[Prediction]) -> PredictionStats:
    total = len(predictions)

    competitions = Counter(p.competition for p in predictions)
    countries = Counter(p.country for p in predictions if p.country)

    average = round_half_up(sum(p.home_win_chance for p in predictions) / total) if total else 0

    home_odds = [p.home_win_odds for p in predictions if p.home_win_odds and p.home_win_odds > 0]
    odds_range = OddsRange()
    if home_odds:
        odds_range = OddsRange(
            min_home_win_odds=min(home_odds),
            max_home_win_odds=max(home_odds),
            avg_home_win_odds=round_half_up_2dp(sum(home_odds) / len(home_odds)),
        )

    return PredictionStats(
        total_matches=total,
        high_confidence_matches=sum(1 for p in predictions if p.home_win_chance > 70),
        medium_confidence_matches=sum(1 for p in predictions if 50 <= p.home_win_chance <= 70),
        competition_breakdown=dict(competitions),
        country_breakdown=dict(countries),
        average_home_win_chance=average,
        odds_range=odds_range,
    )
