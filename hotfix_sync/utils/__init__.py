"""Utility helpers for hotfix-sync."""
