"""Credential handling and outbound HTTP."""
