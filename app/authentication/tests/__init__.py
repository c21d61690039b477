"""Tests for the custom User model and its manager."""
