"""Adapters shipped with Trifonius."""
