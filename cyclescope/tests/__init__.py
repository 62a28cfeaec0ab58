"""Test package for the Cycle Scope service."""
