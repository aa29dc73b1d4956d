"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, udpcomm.toml only contains overrides.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

MAXIMUM_PORT_NUMBER = 65535

LineEnding = Literal["none", "cr", "lf", "crlf"]


class ChannelConfig(BaseModel):
    """[channel] section."""

    model_config = {"frozen": True}

    host: str = "127.0.0.1"
    port: int = Field(default=8887, ge=0, le=MAXIMUM_PORT_NUMBER)
    server_port: int = Field(default=8888, ge=0, le=MAXIMUM_PORT_NUMBER)
    return_port: int | None = Field(default=None, ge=0, le=MAXIMUM_PORT_NUMBER)
    line_ending: LineEnding = "none"
    read_timeout_ms: int = Field(default=25, gt=0)
    buffer_size: int = Field(default=65535, gt=0)


class SessionConfig(BaseModel):
    """[session] section."""

    model_config = {"frozen": True}

    open_settle_ms: int = Field(default=500, ge=0)
    post_script_settle_ms: int = Field(default=250, ge=0)


class UdpcommConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    channel: ChannelConfig = Field(default_factory=ChannelConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
