"""Standard library of adapters."""
