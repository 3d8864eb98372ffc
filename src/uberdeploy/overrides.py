# overrides.py
from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


class EnvOverrides(BaseModel):
    """
    Environment-variable overrides, read once at process start.

    Every field is the raw string (or None when unset); defaults and
    coercion happen in the recipes that consume them.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    # db:dump
    remote_dump_env: Optional[str] = Field(default=None, alias="REMOTE_DUMP_ENV")
    remote_dump_file: Optional[str] = Field(default=None, alias="REMOTE_DUMP_FILE")
    rails_env: Optional[str] = Field(default=None, alias="RAILS_ENV")
    load_env: Optional[str] = Field(default=None, alias="LOAD_ENV")
    load: Optional[str] = Field(default=None, alias="LOAD")
    dump_file: Optional[str] = Field(default=None, alias="DUMP_FILE")
    backup: Optional[str] = Field(default=None, alias="BACKUP")
    keep_remote_dump: Optional[str] = Field(default=None, alias="KEEP_REMOTE_DUMP")

    # files:dump
    data_dir: Optional[str] = Field(default=None, alias="DATA_DIR")
    via: Optional[str] = Field(default=None, alias="VIA")

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> "EnvOverrides":
        source = os.environ if environ is None else environ
        names = {f.alias for f in cls.model_fields.values()}
        return cls.model_validate({k: v for k, v in source.items() if k in names})
