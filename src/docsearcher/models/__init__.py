"""Canonical data shapes shared by every backend and the HTTP layer."""
