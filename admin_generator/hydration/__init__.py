"""
Hydration Package.

Turns entities into client-facing data according to named profiles
and groups.
"""

from admin_generator.hydration.profile import HydrationConfig, HydrationProfile
from admin_generator.hydration.property_access import (
    PropertyAccessError,
    PropertyAccessor,
    parse_property_path,
)
from admin_generator.hydration.service import (
    FlatFields,
    HydrationService,
    Transform,
    classify_group_result,
)

__all__ = [
    "HydrationConfig",
    "HydrationProfile",
    "HydrationService",
    "FlatFields",
    "Transform",
    "classify_group_result",
    "PropertyAccessor",
    "PropertyAccessError",
    "parse_property_path",
]
