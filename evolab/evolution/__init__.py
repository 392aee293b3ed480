"""Genetic contracts, sampling primitives, operators and stop conditions."""
