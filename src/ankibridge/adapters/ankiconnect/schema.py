"""AnkiConnect response schemas."""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from ankibridge.domain.types import PermissionStatus

log = logging.getLogger(__name__)


class AnkiConnectBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow")
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.warning(
            "AnkiConnect %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class ActionResponse(AnkiConnectBaseModel):
    """Version 6 response envelope: exactly one of ``result`` and ``error`` is set."""

    result: object = None
    error: str | None = None


class PermissionResult(AnkiConnectBaseModel):
    permission: PermissionStatus
    require_api_key: bool = Field(default=False, alias="requireApiKey")
    version: int | None = None


class AnkiModelField(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    ord: int | None = None


class AnkiModel(BaseModel):
    """Subset of a note type definition as returned by ``findModelsById``.

    Full definitions carry templates, CSS and scheduling data we never read,
    so extra keys are ignored instead of logged.
    """

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    note_fields: list[AnkiModelField] = Field(default_factory=list[AnkiModelField], alias="flds")


NAMES_AND_IDS: TypeAdapter[dict[str, int]] = TypeAdapter(dict[str, int])
NAME_LIST: TypeAdapter[list[str]] = TypeAdapter(list[str])
ID_LIST: TypeAdapter[list[int]] = TypeAdapter(list[int])
MODEL_LIST: TypeAdapter[list[AnkiModel]] = TypeAdapter(list[AnkiModel])
