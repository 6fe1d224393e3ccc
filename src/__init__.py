"""Takuzu solver packages."""
