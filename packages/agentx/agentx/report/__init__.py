"""Reporting helpers: console summary, CSV export and plots."""
