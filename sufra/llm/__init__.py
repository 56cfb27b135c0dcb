"""Prompt definitions for the completion API."""
