"""Pytest plugins shared by the Engine API client test sessions."""
