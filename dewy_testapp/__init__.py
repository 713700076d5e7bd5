"""Diagnostic HTTP test server for supervisor socket handoff and graceful shutdown."""
