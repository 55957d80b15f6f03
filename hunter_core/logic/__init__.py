"""
Domain layer: models and services.
"""
