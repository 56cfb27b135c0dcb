"""Enumerations shared by models, services and schemas."""
