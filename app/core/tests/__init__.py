"""Tests for core infrastructure (service results, helpers, health check)."""
