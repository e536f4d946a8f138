from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from field_migrator.exceptions import ConfigurationError

Backend = Literal["mongodb", "firestore"]

DEFAULT_BATCH_SIZE = 400


class EnvConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FMIGRATE_", case_sensitive=False)

    backend: Optional[str] = None
    mongodb_uri: Optional[str] = None
    default_db: Optional[str] = None
    firestore_project: Optional[str] = None
    firestore_database: Optional[str] = None
    batch_size: Optional[int] = None


class FileConfig(BaseModel):
    backend: Optional[str] = None
    mongodb_uri: Optional[str] = None
    default_db: Optional[str] = None
    firestore_project: Optional[str] = None
    firestore_database: Optional[str] = None
    collection: Optional[str] = None
    old_field: Optional[str] = None
    new_field: Optional[str] = None
    batch_size: Optional[int] = None


class RuntimeConfig(BaseModel):
    backend: Backend = Field("mongodb", description="Document store backend")
    mongodb_uri: Optional[str] = Field(None, description="MongoDB connection string")
    default_db: Optional[str] = Field(None, description="MongoDB database")
    firestore_project: Optional[str] = Field(None, description="Google Cloud project")
    firestore_database: Optional[str] = Field(None, description="Firestore database id")
    collection: Optional[str] = None
    old_field: Optional[str] = None
    new_field: Optional[str] = None
    batch_size: int = DEFAULT_BATCH_SIZE


DEFAULT_CONFIG_PATH = Path.cwd() / ".fmigrate.yml"
LOCAL_CONFIG_PATH = Path.cwd() / ".fmigrate.local.yml"

_BACKENDS = ("mongodb", "firestore")


def load_file_config(path: Path = DEFAULT_CONFIG_PATH) -> FileConfig:
    if not path.exists():
        return FileConfig()

    try:
        data = yaml.safe_load(path.read_text()) or {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Invalid configuration in {path}: expected a mapping of settings.")
        return FileConfig(**data)
    except (yaml.YAMLError, ValidationError) as exc:
        raise ConfigurationError(f"Invalid configuration in {path}: {exc}") from exc


def _first(*values):
    for value in values:
        if value is not None and value != "":
            return value
    return None


def load_runtime_config(path: Path = DEFAULT_CONFIG_PATH, **overrides) -> RuntimeConfig:
    """Load configuration with priority: overrides > env vars > local file > main file.

    ``overrides`` are the values given on the command line; ``None`` means unset.
    """
    file_config = load_file_config(path)

    # Local override file (gitignored, for safe local testing)
    local_path = path.parent / ".fmigrate.local.yml" if path != DEFAULT_CONFIG_PATH else LOCAL_CONFIG_PATH
    local_config = load_file_config(local_path)

    try:
        env_config = EnvConfig()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid FMIGRATE_ environment variable: {exc}") from exc

    def pick(key: str):
        return _first(
            overrides.get(key),
            getattr(env_config, key, None),
            getattr(local_config, key),
            getattr(file_config, key),
        )

    backend = pick("backend") or "mongodb"
    if backend not in _BACKENDS:
        raise ConfigurationError(f"Unknown backend '{backend}'. Expected one of: {', '.join(_BACKENDS)}.")

    mongodb_uri = pick("mongodb_uri")
    default_db = pick("default_db")
    firestore_project = pick("firestore_project")

    if backend == "mongodb":
        if not mongodb_uri:
            raise ConfigurationError("Missing MongoDB URI. Set in .fmigrate.yml, .fmigrate.local.yml, or FMIGRATE_MONGODB_URI.")
        if not default_db:
            raise ConfigurationError("Missing default DB. Set in .fmigrate.yml, .fmigrate.local.yml, or FMIGRATE_DEFAULT_DB.")

    batch_size = pick("batch_size")

    return RuntimeConfig(
        backend=backend,
        mongodb_uri=mongodb_uri,
        default_db=default_db,
        firestore_project=firestore_project,
        firestore_database=pick("firestore_database"),
        collection=pick("collection"),
        old_field=pick("old_field"),
        new_field=pick("new_field"),
        batch_size=DEFAULT_BATCH_SIZE if batch_size is None else batch_size,
    )


def write_default_config(path: Path = DEFAULT_CONFIG_PATH) -> Path:
    if path.exists():
        return path

    content = {
        "backend": "mongodb",
        "mongodb_uri": "mongodb://localhost:27017",
        "default_db": "myapp",
        "firestore_project": "",
        "firestore_database": "",
        "collection": "photos",
        "old_field": "createdAt",
        "new_field": "uploadedAt",
        "batch_size": DEFAULT_BATCH_SIZE,
    }
    path.write_text(yaml.safe_dump(content, sort_keys=False))
    return path
