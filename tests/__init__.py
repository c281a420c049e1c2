"""Tests for the TaDa List integration."""
