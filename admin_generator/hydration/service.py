"""
Hydration Service.

Converts entities into plain data structures that are sent back to the
client, according to named hydration profiles and groups.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from admin_generator.exceptions import HydrationError
from admin_generator.hydration.profile import (
    GroupHydrator,
    HydrationConfig,
    HydrationProfile,
)
from admin_generator.hydration.property_access import PropertyAccessError, PropertyAccessor

logger = logging.getLogger(__name__)


# =============================================================================
# Group Result Variants
# =============================================================================


@dataclass(frozen=True)
class FlatFields:
    """Group result that is merged key by key into the accumulated result."""

    fields: Mapping


@dataclass(frozen=True)
class Transform:
    """Group result that post-processes the accumulated result."""

    fn: Callable[[Dict[str, Any]], Dict[str, Any]]


def classify_group_result(group_name: str, value: Any) -> Union[FlatFields, Transform]:
    """
    Resolve a raw hydrator result into a merge variant.

    Raises:
        HydrationError: If the result is neither a mapping nor a callable.
    """
    if isinstance(value, Mapping):
        return FlatFields(value)
    if callable(value):
        return Transform(value)
    raise HydrationError(
        f"Group '{group_name}' produced a {type(value).__name__}, but only mappings and "
        "callables can be merged when grouping is disabled."
    )


# =============================================================================
# Hydration Service
# =============================================================================


class HydrationService:
    """
    Service responsible for converting entities to client-side data.

    Usage:
        service = HydrationService()
        data = service.hydrate(article, config["hydration"], "main")
        form = service.hydrate(article, config["hydration"], "main", "form")
    """

    def __init__(
        self,
        context: Any = None,
        accessor: Optional[PropertyAccessor] = None,
    ) -> None:
        """
        Args:
            context: Passed as second argument to callable group hydrators.
            accessor: Property path accessor for path-based groups.
        """
        self._context = context
        self._accessor = accessor or PropertyAccessor()

    def hydrate(
        self,
        obj: Any,
        config: Union[HydrationConfig, Mapping],
        profile: str,
        groups: Union[str, List[str], None] = None,
    ) -> Any:
        """
        Hydrate an object using a profile, optionally restricted to groups.

        Args:
            obj: Object to hydrate.
            config: Hydration configuration (model or raw mapping).
            profile: Name of the profile to use.
            groups: One group name or a list of names. When exactly one group
                is requested its hydrator result is returned as is.

        Returns:
            Hydrated data.

        Raises:
            HydrationError: On unknown profiles/groups or failing hydrators.
        """
        hydration_config = HydrationConfig.coerce(config)
        hydration_profile = hydration_config.get_profile(profile)

        if groups is None:
            return self._hydrate_groups(obj, hydration_config, hydration_profile, list(hydration_profile.groups))

        groups_to_use = [groups] if isinstance(groups, str) else list(groups)

        # if there's only one group given then no grouping is going to be used
        if len(groups_to_use) == 1:
            return self._invoke_hydrator(hydration_config.get_group(groups_to_use[0]), obj)

        return self._hydrate_groups(obj, hydration_config, hydration_profile, groups_to_use)

    def _hydrate_groups(
        self,
        obj: Any,
        config: HydrationConfig,
        profile: HydrationProfile,
        group_names: List[str],
    ) -> Dict[str, Any]:
        result: Dict[str, Any] = {}

        for group_name in group_names:
            hydrator_result = self._invoke_hydrator(config.get_group(group_name), obj)
            result = self._merge_hydration_result(result, hydrator_result, profile, group_name)

        return result

    def _merge_hydration_result(
        self,
        current_result: Dict[str, Any],
        hydrator_result: Any,
        profile: HydrationProfile,
        group_name: str,
    ) -> Dict[str, Any]:
        if profile.is_grouping_needed:
            current_result[group_name] = hydrator_result
            return current_result

        variant = classify_group_result(group_name, hydrator_result)
        if isinstance(variant, Transform):
            return variant.fn(current_result)

        merged = dict(current_result)
        merged.update(variant.fields)
        return merged

    def _invoke_hydrator(self, hydrator: GroupHydrator, obj: Any) -> Any:
        if callable(hydrator):
            return hydrator(obj, self._context)

        if isinstance(hydrator, Mapping):
            items = hydrator.items()
        else:
            items = ((path, path) for path in hydrator)

        result: Dict[str, Any] = {}
        for key, property_path in items:
            # positional keys reuse the expression as output key
            if isinstance(key, int):
                key = property_path

            try:
                result[key] = self._accessor.get_value(obj, property_path)
            except PropertyAccessError as e:
                raise HydrationError(
                    f"Unable to resolve expression '{property_path}' on {type(obj).__name__}"
                ) from e

        return result
