import math


def calculate_score(attempts: int, completion_time_ms: float) -> int:
    """Leaderboard score: mean of an attempts component and a time component.

    Each component starts at 1000 and floors at 0; attempts cost 10 points
    each and every elapsed second costs 1 point. Halves round up.
    """
    attempts_score = max(0, 1000 - 10 * attempts)
    time_score = max(0, 1000 - completion_time_ms / 1000)
    return int(math.floor((attempts_score + time_score) / 2 + 0.5))
