"""
Cohort analysis over stratified patient profiles.

Summarizes a population of ``PatientRiskProfile`` objects for the clinician
dashboard: stratification distribution, average risk, age bands, condition
prevalence and a per-day risk trend.

Notes
-----
- Risk scores are on the 0-100 stratification scale.
- Age bands are right-inclusive: ``18-30`` holds every age up to 30
  (including under-18s), ``51-65`` includes 65 and ``65+`` starts above it.
- Trend rows are grouped by the UTC calendar date of the assessment; naive
  timestamps are taken as UTC.
"""

from typing import Any, Dict, Sequence

import numpy as np
import pandas as pd

from .stratification import PatientRiskProfile, StratificationLevel

AGE_BANDS = ["18-30", "31-50", "51-65", "65+"]
_AGE_BINS = [-np.inf, 30, 50, 65, np.inf]


def _empty_analysis() -> Dict[str, Any]:
    return {
        "total_patients": 0,
        "risk_distribution": {level.value: 0 for level in StratificationLevel},
        "average_risk_score": 0.0,
        "age_distribution": {band: 0 for band in AGE_BANDS},
        "condition_prevalence": {},
        "trend_data": [],
    }


def cohort_analysis(profiles: Sequence[PatientRiskProfile]) -> Dict[str, Any]:
    """Summarize a cohort of patient risk profiles.

    Args
    ----
    profiles:
        One profile per patient (typically each patient's latest).

    Returns
    -------
    dict
        Keys ``total_patients``, ``risk_distribution`` (count per
        stratification level), ``average_risk_score`` (2 decimals),
        ``age_distribution`` (count per age band), ``condition_prevalence``
        (count per tag, alphabetical) and ``trend_data`` (list of
        ``{"date", "average_risk", "patient_count"}`` sorted by date).
    """
    if not profiles:
        return _empty_analysis()

    df = pd.DataFrame(
        {
            "user_id": [p.user_id for p in profiles],
            "risk_score": [p.risk_score for p in profiles],
            "level": [p.stratification_level.value for p in profiles],
            "age": [p.age for p in profiles],
            "assessed_at": pd.to_datetime([p.last_assessment_date for p in profiles], utc=True),
        }
    )

    levels = [level.value for level in StratificationLevel]
    distribution = df["level"].value_counts().reindex(levels, fill_value=0)

    bands = pd.cut(df["age"], bins=_AGE_BINS, labels=AGE_BANDS, right=True)
    ages = bands.value_counts().reindex(AGE_BANDS, fill_value=0)

    conditions = pd.Series([tag for p in profiles for tag in p.conditions], dtype=object)
    prevalence = conditions.value_counts().sort_index() if len(conditions) else pd.Series(dtype=int)

    df["day"] = df["assessed_at"].dt.date
    trend = (
        df.groupby("day")
        .agg(average_risk=("risk_score", "mean"), patient_count=("user_id", "nunique"))
        .sort_index()
    )

    return {
        "total_patients": int(len(df)),
        "risk_distribution": {k: int(v) for k, v in distribution.items()},
        "average_risk_score": round(float(df["risk_score"].mean()), 2),
        "age_distribution": {str(k): int(v) for k, v in ages.items()},
        "condition_prevalence": {str(k): int(v) for k, v in prevalence.items()},
        "trend_data": [
            {
                "date": day.isoformat(),
                "average_risk": round(float(row.average_risk), 2),
                "patient_count": int(row.patient_count),
            }
            for day, row in trend.iterrows()
        ],
    }
