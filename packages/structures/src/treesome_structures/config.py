"""Tree engine configuration."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping

from treesome_common import ConfigurationError

from treesome_structures.traversal import TraversalOrder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeConfig:
    """Options controlling how a Tree manages its storage and traversals.

    Attributes:
        reuse_slots: Recycle storage slots of removed nodes. Stale handles are
            still rejected because each reuse bumps the slot's generation.
        guard_traversals: Reject structural mutations while a traversal over
            the tree is being consumed.
        default_order: Order used by ``Tree.traverse`` and ``iter(tree)``
            when none is given.
        copy_payloads: Deep-copy payloads when cloning subtrees. When False,
            clones share payload objects with the original.

    Example:
        ```python
        config = TreeConfig.from_dict({"default_order": "level", "reuse_slots": False})
        tree = Tree("root", config=config)
        ```
    """

    reuse_slots: bool = True
    guard_traversals: bool = True
    default_order: TraversalOrder = TraversalOrder.PRE
    copy_payloads: bool = True

    def __post_init__(self) -> None:
        try:
            order = TraversalOrder.parse(self.default_order)
        except ValueError as e:
            raise ConfigurationError(
                str(e), context={"key": "default_order", "value": self.default_order}
            ) from e
        object.__setattr__(self, "default_order", order)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TreeConfig:
        """Build a configuration from a plain mapping.

        Args:
            data: Mapping of option names to values. Missing options keep
                their defaults.

        Returns:
            The validated configuration.

        Raises:
            ConfigurationError: If a key is unknown or a value has the wrong type.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown tree configuration keys: {', '.join(unknown)}",
                context={"unknown_keys": unknown, "known_keys": sorted(known)},
            )

        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key == "default_order":
                try:
                    values[key] = TraversalOrder.parse(value)
                except ValueError as e:
                    raise ConfigurationError(
                        str(e), context={"key": key, "value": value}
                    ) from e
            elif isinstance(value, bool):
                values[key] = value
            else:
                raise ConfigurationError(
                    f"Tree configuration '{key}' must be a boolean",
                    context={"key": key, "value": value},
                )
        config = cls(**values)
        logger.debug("Loaded tree configuration: %s", config)
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Get this configuration as a plain dictionary."""
        result = asdict(self)
        result["default_order"] = self.default_order.value
        return result
