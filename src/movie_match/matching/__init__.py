"""Preference-matching engine -- pure functions over in-memory swipes."""
