import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class Settings:
    BASE_DIR: Path = field(default_factory=lambda: Path(__file__).resolve().parent.parent)

    DICTIONARY_PATH: Path = field(init=False)

    MIN_WORD_LENGTH: int = 1
    MAX_RESULTS: int = 50
    SOLVE_TIMEOUT_SECONDS: float = 0.0
    ALLOW_FIXED_POINTS: bool = False

    NOTIFY_ENABLED: bool = False
    NTFY_TOPIC: str = "cryptogram-solver"
    NTFY_URL: str = "https://ntfy.sh"
    NOTIFY_SOLUTIONS_LIMIT: int = 10

    DEBUG: bool = False

    def __post_init__(self):
        # Override from environment
        for fld in self.__dataclass_fields__:
            if fld == "DICTIONARY_PATH":
                continue
            env_val = os.environ.get(fld)
            if env_val is not None:
                setattr(self, fld, _coerce(type(getattr(self, fld)), env_val))

        # Derived after overrides so an overridden BASE_DIR moves it too
        dict_env = os.environ.get("DICTIONARY_PATH")
        self.DICTIONARY_PATH = Path(dict_env) if dict_env else self.BASE_DIR / "dictionary.txt"


# Fields that may be changed at runtime through /api/settings
EDITABLE_FIELDS: dict[str, type] = {
    "MAX_RESULTS": int,
    "SOLVE_TIMEOUT_SECONDS": float,
    "ALLOW_FIXED_POINTS": bool,
    "NOTIFY_ENABLED": bool,
    "NTFY_TOPIC": str,
    "NOTIFY_SOLUTIONS_LIMIT": int,
    "DEBUG": bool,
}

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def _coerce(kind: type, value):
    if issubclass(kind, bool):
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ValueError(f"not a boolean: {value!r}")
    if issubclass(kind, Path):
        return Path(value)
    if kind is int and isinstance(value, float) and not value.is_integer():
        raise ValueError(f"not an integer: {value!r}")
    return kind(value)


def get_editable_settings(cfg: Settings) -> dict:
    return {name: getattr(cfg, name) for name in EDITABLE_FIELDS}


def update_settings(cfg: Settings, **values) -> dict[str, str]:
    """Apply editable values to cfg. Returns {field: error} for the ones rejected."""
    errors: dict[str, str] = {}
    for name, value in values.items():
        kind = EDITABLE_FIELDS.get(name)
        if kind is None:
            if hasattr(cfg, name):
                errors[name] = "field is not editable"
            else:
                errors[name] = "unknown field"
            continue
        try:
            setattr(cfg, name, _coerce(kind, value))
        except (TypeError, ValueError) as e:
            errors[name] = str(e)
    return errors


settings = Settings()
