"""
Entity Factory Package.
"""

from admin_generator.entity_factory.factory import DefaultEntityFactory, EntityFactory

__all__ = ["DefaultEntityFactory", "EntityFactory"]
