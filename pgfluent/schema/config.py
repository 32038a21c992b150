"""Builder configuration.

``BuilderConfig`` is an immutable value created once and shared read-only
by every builder and compiler that receives it.  Explicitly passed values
always take precedence over the defaults; nothing overwrites a field after
construction::

    config = BuilderConfig(default_primary_key="uuid")
    config = BuilderConfig.from_options({"casing": {"db": "snake"}, "defaultPrimaryKey": "uuid"})
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pgfluent.schema.casing import Casing, IdentifierCaser

# Loosely structured option keys accepted by ``from_options``.
_OPTION_ALIASES: dict[str, str] = {
    "defaultPrimaryKey": "default_primary_key",
    "js": "external",
}


class CasingConfig(BaseModel):
    """Naming conventions on either side of the builder.

    Attributes:
        db: Convention of identifiers stored in the database.
        external: Convention of keys used by callers and returned rows.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    db: Casing = "snake"
    external: Casing = "camel"


class BuilderConfig(BaseModel):
    """Configuration shared by builders, compilers and executors.

    Attributes:
        casing: Database and external naming conventions.
        default_primary_key: Key used to synthesize join conditions when a
            join specifies neither ``conditions`` nor ``local``/``foreign``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    casing: CasingConfig = Field(default_factory=CasingConfig)
    default_primary_key: str = "id"

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> BuilderConfig:
        """Build a config from a plain options mapping.

        Accepts camelCase aliases (``defaultPrimaryKey``, ``casing.js``) next
        to the canonical field names.  Keys that are absent fall back to the
        defaults.

        Args:
            options: Options mapping, or ``None`` for all defaults.

        Returns:
            A frozen :class:`BuilderConfig`.
        """
        if not options:
            return cls()
        data = {_OPTION_ALIASES.get(key, key): value for key, value in options.items()}
        casing = data.get("casing")
        if isinstance(casing, Mapping):
            data["casing"] = {
                _OPTION_ALIASES.get(key, key): value for key, value in casing.items()
            }
        return cls.model_validate(data)

    def db_caser(self) -> IdentifierCaser:
        """Return the caser that converts identifiers to the database convention."""
        return IdentifierCaser(self.casing.db)
