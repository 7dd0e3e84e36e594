"""Canonical Pydantic models shared across all reqguard modules.

The models fall into two groups:

**Pipeline models** -- created once per call and threaded through the
pipeline:
    :class:`RequestOptions` (the effective options of one call),
    :class:`TransportResponse`, and :class:`TimingRecord`.

**Configuration models** -- serialised as JSON in the user's config
directory:
    :class:`RequestConfig`, :class:`NetworkConfig`, :class:`CacheConfig`,
    :class:`PluginsConfig`, and :class:`GlobalConfig`.

This module also owns :func:`merge_options`, the shallow merge that turns
caller-supplied options into the effective options of a call.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Pipeline models ---


class RequestOptions(BaseModel):
    """Effective options for a single pipeline run.

    Exactly one instance exists per
    :meth:`~reqguard.pipeline.runner.TaskRunner.run_task` call and every
    guard, the transport, the timing probe and every after-hook see that
    same instance. The model is frozen so no stage can change what a later
    stage observes.

    Keys that are not declared below are kept as extras, readable both as
    attributes and through :meth:`get`, so callers can attach their own
    fields for custom guards and hooks.

    Example::

        RequestOptions(method="POST", url="/orders", data={"sku": "A1"})
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    method: str = Field(default="GET", description="HTTP method")
    show_loading: bool = Field(
        default=False, description="Show the loading indicator while the call runs"
    )
    show_err_msg: bool = Field(
        default=False, description="Show a toast when the network is unreachable"
    )
    need_token: bool = Field(
        default=True, description="Require a cached user token before calling"
    )
    delay: float = Field(
        default=0, description="Milliseconds to wait before the request is sent"
    )
    # Transport fields
    url: Optional[str] = None
    data: Any = None
    header: dict[str, str] = Field(default_factory=dict)
    timeout: Optional[float] = Field(
        default=None, description="Per-call timeout in seconds (None = configured default)"
    )

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value of *key*, whether declared or caller-supplied.

        Args:
            key: Option name.
            default: Returned when the option is not present.
        """
        if key in type(self).model_fields:
            return getattr(self, key)
        return (self.model_extra or {}).get(key, default)

    def to_dict(self) -> dict[str, Any]:
        """Return every option, declared and extra, as a plain dict."""
        return _option_items(self)


DEFAULT_OPTIONS = RequestOptions()
"""The fixed baseline every call's options are merged over."""


OptionsLike = Union[RequestOptions, Mapping[str, Any]]


def _option_items(options: OptionsLike, only_set: bool = False) -> dict[str, Any]:
    """Flatten *options* into a dict without validating or copying values."""
    if not isinstance(options, RequestOptions):
        return {str(key): value for key, value in options.items()}

    fields = type(options).model_fields
    names = options.model_fields_set if only_set else fields.keys()
    items = {name: getattr(options, name) for name in names if name in fields}
    items.update(options.model_extra or {})
    return items


def merge_options(
    base: OptionsLike,
    override: Optional[OptionsLike] = None,
) -> RequestOptions:
    """Shallow-merge *override* over *base* into a fresh :class:`RequestOptions`.

    Every key present in *override* replaces the key in *base*; keys absent
    from *override* keep the base value. There is no deep merge and no
    validation of option values, so unknown keys pass through untouched and
    the merge never fails. When *override* is itself a
    :class:`RequestOptions`, only the keys that were explicitly set on it
    count as present.

    Args:
        base: The baseline options (usually :data:`DEFAULT_OPTIONS` layered
            with the configured defaults).
        override: Caller-supplied partial options, or ``None``.

    Returns:
        A new, frozen :class:`RequestOptions` instance.
    """
    merged = _option_items(base)
    if override is not None:
        merged.update(_option_items(override, only_set=True))
    return RequestOptions.model_construct(**merged)


class TransportResponse(BaseModel):
    """What a transport call resolves to.

    ``data`` holds the decoded body: parsed JSON when possible, raw text
    otherwise, ``None`` for an empty body. Transports may attach extra
    fields; they are carried into the :class:`TimingRecord`.
    """

    model_config = ConfigDict(extra="allow")

    status_code: int = 0
    headers: dict[str, str] = Field(default_factory=dict)
    data: Any = None


class TimingRecord(BaseModel):
    """Response fields plus the elapsed time of the transport call.

    Built once per call by :class:`~reqguard.pipeline.timing.TimingProbe`
    and handed to the logging sink. Not retained afterwards. Response
    fields are copied without validation, so a field may hold whatever
    the transport returned (e.g. ``status_code=None``).
    """

    model_config = ConfigDict(extra="allow")

    status_code: int = 0
    headers: dict[str, str] = Field(default_factory=dict)
    data: Any = None
    delta: float = Field(description="Elapsed milliseconds between probe start and stop")


# --- Configuration models ---


class RequestConfig(BaseModel):
    """Default HTTP settings applied by the httpx transport."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class NetworkConfig(BaseModel):
    """Where the console platform probes to decide if the network is reachable."""

    probe_host: str = Field(default="1.1.1.1", description="Host to open a TCP connection to")
    probe_port: int = Field(default=53, description="Port on the probe host")
    probe_timeout: float = Field(default=3.0, description="Seconds before the probe gives up")


class CacheConfig(BaseModel):
    """Settings for the on-disk user-info cache holding the token."""

    enabled: bool = Field(default=True, description="Persist user info to disk")
    ttl_seconds: int = Field(
        default=0, description="Expire stored user info after N seconds (0 = never)"
    )


class PluginsConfig(BaseModel):
    """Explicit plugin allow/deny lists stored in :class:`GlobalConfig`."""

    enabled: list[str] = Field(default_factory=list)
    disabled: list[str] = Field(default_factory=list)


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/reqguard/config.json``.

    Loaded and saved by :func:`~reqguard.config.load_global_config` and
    :func:`~reqguard.config.save_global_config`. See
    :func:`~reqguard.config.resolve_config` for the precedence chain.

    ``defaults`` is layered over :data:`DEFAULT_OPTIONS` to form the
    baseline options of every call made through
    :func:`~reqguard.factory.create_runner`.
    """

    base_url: Optional[str] = Field(
        default=None, description="Prefix joined onto relative request URLs"
    )
    login_path: Optional[str] = Field(
        default="/login", description="Where the token guard redirects (None = no redirect)"
    )
    defaults: dict[str, Any] = Field(
        default_factory=dict, description="Option overrides applied to every call"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
