"""Adapters – integrations with persistence frameworks."""
