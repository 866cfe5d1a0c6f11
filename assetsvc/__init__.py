"""
Chart catalog asset service.

Resolves package charts by identifier and namespace from a relational store,
optionally narrowed to a single chart version.
"""
