"""Domain layer for the governance engine.

Frozen models, closed enumerations, the error hierarchy and the pure
policy evaluator. Nothing in this package performs I/O.
"""
