"""
Data Mapping Package.
"""

from admin_generator.data_mapping.mapper import DataMapper, DefaultDataMapper

__all__ = ["DataMapper", "DefaultDataMapper"]
