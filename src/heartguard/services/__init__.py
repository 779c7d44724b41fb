"""Scoring, explanation, advice and stratification services."""
