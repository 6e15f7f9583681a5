from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from vitalalert.domain.models import DEFAULT_VITAL_LIMITS, VitalLimits, VitalType


@dataclass
class VitalLimitsRegistry:
    """
    Registry of classification limits for the monitored vital types.

    A vital type is "monitored" exactly when the registry holds limits for
    it; readings of any other type are ignored by the classifier.

    Notes
    -----
    - The registry performs simple replacement on load: limits for a vital
      type that is already registered are overwritten.
    - Limits are validated when loaded.

    Attributes
    ----------
    _limits
        Internal mapping of vital type to VitalLimits.
    """

    _limits: Dict[VitalType, VitalLimits] = field(default_factory=dict)

    @classmethod
    def with_defaults(cls) -> "VitalLimitsRegistry":
        """Registry populated with the built-in limits for every vital type."""
        registry = cls()
        registry.load(DEFAULT_VITAL_LIMITS)
        return registry

    def load(self, limits: Iterable[VitalLimits]) -> None:
        """
        Load or update limits.

        Parameters
        ----------
        limits
            Iterable of VitalLimits, indexed by their vital type.

        Raises
        ------
        ValueError
            If any limits fail validation.
        """
        for lim in limits:
            lim.validate()
            self._limits[lim.vital_type] = lim

    def get(self, vital_type: VitalType) -> Optional[VitalLimits]:
        """
        Retrieve the limits for a vital type.

        Returns
        -------
        VitalLimits or None
            None when the vital type is not monitored.
        """
        return self._limits.get(vital_type)

    def monitored(self) -> List[VitalType]:
        return list(self._limits.keys())

    def all(self) -> List[VitalLimits]:
        """
        Return all registered limits.

        Returns
        -------
        list of VitalLimits
            Limits in registration order.
        """
        return list(self._limits.values())
