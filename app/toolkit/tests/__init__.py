"""Tests for toolkit services (EmailService)."""
