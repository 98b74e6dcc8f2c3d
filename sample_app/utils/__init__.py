"""Shared helpers for the sample app."""
