"""Molecular dynamics of a confined argon cluster."""
