"""Identifier generators."""
