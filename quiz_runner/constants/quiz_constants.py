"""Quiz-related constants shared across core and server layers."""

EXCELLENT_SCORE_THRESHOLD: int = 80
FAIR_SCORE_THRESHOLD: int = 60
MIN_OPTIONS_PER_QUESTION: int = 2
