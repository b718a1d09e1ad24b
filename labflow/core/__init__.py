"""
Core domain: models, error taxonomy, validators and the quality gate.
"""
