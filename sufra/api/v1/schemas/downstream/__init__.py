"""Schemas for responses from downstream services."""
