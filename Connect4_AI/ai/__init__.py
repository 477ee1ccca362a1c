"""Evaluation, tactical analysis, search, and move-selection pipeline."""
