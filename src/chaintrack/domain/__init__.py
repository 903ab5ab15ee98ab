"""Domain layer for chaintrack: entities, classification and services."""
