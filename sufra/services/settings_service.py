"""Platform settings.

Runtime-editable settings are stored as key/value rows and read through the typed
``PlatformSettings`` model, so callers never handle raw strings.
"""

import orjson
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from sufra.core.config.config import settings as app_settings
from sufra.core.logging import get_logger
from sufra.db.models.setting_models.setting import Setting
from sufra.db.models.taxonomy_models.city import City
from sufra.db.models.taxonomy_models.tag import Tag
from sufra.exceptions.custom_exceptions import ValidationError

_log = get_logger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"


class PlatformSettings(BaseModel):
    """Typed view over the settings table."""

    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    default_city_id: int | None = None
    randomizer_tags: list[int] = Field(default_factory=list)

    @property
    def has_ai_credentials(self) -> bool:
        return bool(self.gemini_api_key and self.gemini_model)


_JSON_KEYS = frozenset({"randomizer_tags"})


def _decode(key: str, raw: str | None) -> object:
    if raw is None or raw == "":
        return None
    if key in _JSON_KEYS:
        return orjson.loads(raw)
    return raw


def _encode(key: str, value: object) -> str | None:
    if value is None:
        return None
    if key in _JSON_KEYS:
        return orjson.dumps(value).decode()
    return str(value)


class SettingsService:
    """Loads and updates ``PlatformSettings``."""

    def __init__(self, db: Session) -> None:
        """Initialize the service with a database session."""
        self.db = db

    def load(self) -> PlatformSettings:
        """Read every known key, falling back to environment configuration."""
        rows = (
            self.db.query(Setting)
            .filter(Setting.key.in_(PlatformSettings.model_fields))
            .all()
        )
        values: dict[str, object] = {}
        for row in rows:
            try:
                decoded = _decode(row.key, row.value)
            except orjson.JSONDecodeError:
                _log.warning("Ignoring malformed setting {}: {!r}", row.key, row.value)
                continue
            if decoded is not None:
                values[row.key] = decoded
        values.setdefault("gemini_api_key", app_settings.gemini_api_key)
        if app_settings.gemini_model:
            values.setdefault("gemini_model", app_settings.gemini_model)
        try:
            return PlatformSettings.model_validate(
                {k: v for k, v in values.items() if v is not None}
            )
        except PydanticValidationError as e:
            _log.error("Stored platform settings are invalid: {}", e)
            raise ValidationError("Stored platform settings are invalid.") from e

    def update(self, changes: dict[str, object]) -> PlatformSettings:
        """Upsert the given keys.

        Only keys present in ``changes`` are written; a None value clears the key.

        Raises:
            ValidationError: For unknown keys, a default city that does not exist or
                randomizer tags that do not exist.
        """
        unknown = set(changes) - set(PlatformSettings.model_fields)
        if unknown:
            raise ValidationError(
                "Unknown settings.",
                {key: ["Unknown setting."] for key in sorted(unknown)},
            )
        typed = self._coerce(changes)
        self._validate(typed)
        for key, value in typed.items():
            row = self.db.get(Setting, key)
            if row is None:
                row = Setting(key=key)
                self.db.add(row)
            row.value = _encode(key, value)
        self.db.commit()
        _log.info("Updated platform settings: {}", sorted(changes))
        return self.load()

    def _coerce(self, changes: dict[str, object]) -> dict[str, object]:
        provided = {key: value for key, value in changes.items() if value is not None}
        try:
            merged = PlatformSettings.model_validate(provided)
        except PydanticValidationError as e:
            errors: dict[str, list[str]] = {}
            for error in e.errors():
                field = str(error["loc"][0]) if error["loc"] else "settings"
                errors.setdefault(field, []).append(error["msg"])
            raise ValidationError("Invalid settings.", errors) from e
        return {
            key: getattr(merged, key) if key in provided else None for key in changes
        }

    def _validate(self, changes: dict[str, object]) -> None:
        city_id = changes.get("default_city_id")
        if city_id is not None and self.db.get(City, city_id) is None:
            raise ValidationError.for_field(
                "default_city_id", "The selected city does not exist."
            )
        tag_ids = changes.get("randomizer_tags")
        if isinstance(tag_ids, list) and tag_ids:
            wanted = set(tag_ids)
            found = {
                tag_id
                for (tag_id,) in self.db.query(Tag.id).filter(Tag.id.in_(wanted)).all()
            }
            if found != wanted:
                raise ValidationError.for_field(
                    "randomizer_tags", "Some selected tags do not exist."
                )
        model = changes.get("gemini_model")
        if isinstance(model, str) and not model.strip():
            raise ValidationError.for_field(
                "gemini_model", "The model name cannot be empty."
            )
