"""Clients for services outside this application."""
