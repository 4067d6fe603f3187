"""Validation of raw lesson and schedule records."""
