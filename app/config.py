"""
app/config.py

Threshold configuration for the insight and kaizen pipelines.

Every numeric rule threshold is a named field with a built-in default.
Deployments may override any of them through environment variables
(``INSIGHT_*`` / ``KAIZEN_*``) or a project ``.env`` file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def load_env_files(project_root: Path | None = None) -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.

    ``project_root`` defaults to the repository root.
    """

    if project_root is None:
        project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


@dataclass(frozen=True)
class InsightThresholds:
    """
    Risk classification and summary limits for machine insights.
    """

    red_not_performed: int = 2
    red_problem_rate: float = 0.25
    red_stops: int = 3
    yellow_not_performed: int = 1
    yellow_problem_rate: float = 0.10
    yellow_stops: int = 2
    min_checklists_for_rate: int = 4
    max_top_issues: int = 5
    max_last_events: int = 3
    summary_stops_threshold: int = 2


@dataclass(frozen=True)
class KaizenThresholds:
    """
    Rule battery and operator difficulty thresholds.
    """

    adherence_min_not_performed: int = 2
    adherence_alert_not_performed: int = 3
    recurrent_problem_min: int = 3
    recurrent_problem_critical: int = 5
    repeated_stop_min: int = 2
    logbook_overload_min: int = 10
    logbook_evidence_cap: int = 5
    difficulty_high_not_performed: int = 2
    difficulty_high_rate_not_performed: float = 0.20
    difficulty_high_rate_problem: float = 0.30
    difficulty_medium_not_performed: int = 1
    difficulty_medium_rate_problem: float = 0.15
    difficulty_min_checklists_for_rate: int = 6


@lru_cache(maxsize=1)
def get_insight_thresholds() -> InsightThresholds:
    """
    Return cached insight thresholds from environment variables.
    """

    defaults = InsightThresholds()
    return InsightThresholds(
        red_not_performed=max(1, _get_int_env("INSIGHT_RED_NOT_PERFORMED", defaults.red_not_performed)),
        red_problem_rate=_get_float_env("INSIGHT_RED_PROBLEM_RATE", defaults.red_problem_rate),
        red_stops=max(1, _get_int_env("INSIGHT_RED_STOPS", defaults.red_stops)),
        yellow_not_performed=max(1, _get_int_env("INSIGHT_YELLOW_NOT_PERFORMED", defaults.yellow_not_performed)),
        yellow_problem_rate=_get_float_env("INSIGHT_YELLOW_PROBLEM_RATE", defaults.yellow_problem_rate),
        yellow_stops=max(1, _get_int_env("INSIGHT_YELLOW_STOPS", defaults.yellow_stops)),
        min_checklists_for_rate=max(1, _get_int_env("INSIGHT_MIN_CHECKLISTS_FOR_RATE", defaults.min_checklists_for_rate)),
        max_top_issues=max(0, _get_int_env("INSIGHT_MAX_TOP_ISSUES", defaults.max_top_issues)),
        max_last_events=max(0, _get_int_env("INSIGHT_MAX_LAST_EVENTS", defaults.max_last_events)),
        summary_stops_threshold=max(0, _get_int_env("INSIGHT_SUMMARY_STOPS_THRESHOLD", defaults.summary_stops_threshold)),
    )


@lru_cache(maxsize=1)
def get_kaizen_thresholds() -> KaizenThresholds:
    """
    Return cached kaizen thresholds from environment variables.
    """

    defaults = KaizenThresholds()
    return KaizenThresholds(
        adherence_min_not_performed=max(
            1, _get_int_env("KAIZEN_ADHERENCE_MIN_NOT_PERFORMED", defaults.adherence_min_not_performed)
        ),
        adherence_alert_not_performed=max(
            1, _get_int_env("KAIZEN_ADHERENCE_ALERT_NOT_PERFORMED", defaults.adherence_alert_not_performed)
        ),
        recurrent_problem_min=max(1, _get_int_env("KAIZEN_RECURRENT_PROBLEM_MIN", defaults.recurrent_problem_min)),
        recurrent_problem_critical=max(
            1, _get_int_env("KAIZEN_RECURRENT_PROBLEM_CRITICAL", defaults.recurrent_problem_critical)
        ),
        repeated_stop_min=max(1, _get_int_env("KAIZEN_REPEATED_STOP_MIN", defaults.repeated_stop_min)),
        logbook_overload_min=max(1, _get_int_env("KAIZEN_LOGBOOK_OVERLOAD_MIN", defaults.logbook_overload_min)),
        logbook_evidence_cap=max(0, _get_int_env("KAIZEN_LOGBOOK_EVIDENCE_CAP", defaults.logbook_evidence_cap)),
        difficulty_high_not_performed=max(
            1, _get_int_env("KAIZEN_DIFFICULTY_HIGH_NOT_PERFORMED", defaults.difficulty_high_not_performed)
        ),
        difficulty_high_rate_not_performed=_get_float_env(
            "KAIZEN_DIFFICULTY_HIGH_RATE_NOT_PERFORMED", defaults.difficulty_high_rate_not_performed
        ),
        difficulty_high_rate_problem=_get_float_env(
            "KAIZEN_DIFFICULTY_HIGH_RATE_PROBLEM", defaults.difficulty_high_rate_problem
        ),
        difficulty_medium_not_performed=max(
            1, _get_int_env("KAIZEN_DIFFICULTY_MEDIUM_NOT_PERFORMED", defaults.difficulty_medium_not_performed)
        ),
        difficulty_medium_rate_problem=_get_float_env(
            "KAIZEN_DIFFICULTY_MEDIUM_RATE_PROBLEM", defaults.difficulty_medium_rate_problem
        ),
        difficulty_min_checklists_for_rate=max(
            1, _get_int_env("KAIZEN_DIFFICULTY_MIN_CHECKLISTS_FOR_RATE", defaults.difficulty_min_checklists_for_rate)
        ),
    )
