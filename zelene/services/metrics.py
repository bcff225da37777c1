"""Aggregates over an already fetched page of rows (not full-table statistics)."""

from typing import Iterable


def feedback_metrics(rows: Iterable) -> dict:
    rows = list(rows)
    if not rows:
        return {"averageSatisfaction": 0.0, "averageUsability": 0.0, "recommendationPercentage": 0.0}

    n = len(rows)
    satisfaction = sum(r.satisfaction for r in rows) / n
    usability = sum(r.usability for r in rows) / n
    recommended = sum(1 for r in rows if r.recommendation) / n * 100
    return {
        "averageSatisfaction": round(satisfaction, 1),
        "averageUsability": round(usability, 1),
        "recommendationPercentage": round(recommended),
    }
