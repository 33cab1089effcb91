"""
Domain layer: entities, value objects, enums and business errors.
"""
