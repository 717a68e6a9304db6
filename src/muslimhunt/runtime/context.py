"""Process-wide configuration with scoped overrides.

``get_config()`` returns the configuration loaded from ``config.yaml`` unless a
``with_context`` block is active in the current context.
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from typing import Any

from pydantic import BaseModel

from src.muslimhunt.runtime.config.config_data import ConfigData
from src.muslimhunt.runtime.config.config_template import load_default_config


@dataclass
class AppContext:
    config: ConfigData


_app_context: ContextVar[AppContext] = ContextVar(
    "app_context", default=AppContext(config=load_default_config())
)

# Derived values that cannot be fed back through validation.
_COMPUTED = {"database": {"password", "connection_string"}, "redis": {"connection_string"}}


def get_context() -> AppContext:
    return _app_context.get()


def set_context(context: AppContext) -> Token[AppContext]:
    return _app_context.set(context)


def _explicit(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, dict):
        return {k: _explicit(v) for k, v in value.items()}
    return value


def _set_fields(model: BaseModel) -> dict:
    """The fields a caller actually passed, nested models included.

    A nested model counts when it was passed itself or when any of its own
    fields were.
    """
    out = {}
    for name in type(model).model_fields:
        value = getattr(model, name)
        if isinstance(value, BaseModel):
            nested = _set_fields(value)
            if nested:
                out[name] = nested
            elif name in model.model_fields_set:
                out[name] = value.model_dump()
        elif name in model.model_fields_set:
            out[name] = _explicit(value)
    return out


def _deep_update(base: dict, changes: dict) -> dict:
    merged = dict(base)
    for key, value in changes.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_update(merged[key], value)
        else:
            merged[key] = value
    return merged


def _overlay(base: ConfigData, override: ConfigData) -> ConfigData:
    merged = _deep_update(base.model_dump(exclude=_COMPUTED), _set_fields(override))
    return ConfigData.model_validate(merged)


@contextmanager
def with_context(config_override: ConfigData | None = None):
    """Run a block with ``config_override`` laid over the current configuration.

    Only explicitly passed fields change::

        with with_context(ConfigData(app=AppConfig(environment="production"))):
            assert get_config().app.environment == "production"
    """
    if config_override is None:
        yield
        return
    if not isinstance(config_override, ConfigData):
        raise ValueError(f"config_override must be ConfigData or None, got {type(config_override).__name__}")

    current = get_context()
    token = set_context(replace(current, config=_overlay(current.config, config_override)))
    try:
        yield
    finally:
        _app_context.reset(token)


def set_config(config: ConfigData) -> None:
    set_context(replace(get_context(), config=config))


def get_config() -> ConfigData:
    return get_context().config
