"""Drivers that connect the engine ports to real platforms."""
