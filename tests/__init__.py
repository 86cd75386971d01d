"""Tests for desksetup."""
