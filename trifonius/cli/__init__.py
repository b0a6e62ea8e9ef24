"""Trifonius command line interface."""
