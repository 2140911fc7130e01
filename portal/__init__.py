"""Proctored technical assessment portal."""
