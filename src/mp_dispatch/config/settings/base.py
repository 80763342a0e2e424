"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses
from typing import Any, ClassVar, Mapping, TypeVar

S = TypeVar("S", bound="Settings")


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings.

    Subclasses are dataclasses whose fields map to ``<_prefix>_<FIELD>``
    environment variables.  ``_validate`` runs after every construction,
    whether from code or from the environment.
    """

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""

    @classmethod
    def load(cls: type[S], environ: Mapping[str, str] | None = None) -> S:
        """Shortcut for ``EnvSettingsLoader(environ).load(cls)``."""
        from mp_dispatch.config.settings.loaders import EnvSettingsLoader

        return EnvSettingsLoader(environ).load(cls)

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


__all__ = ["Settings"]
