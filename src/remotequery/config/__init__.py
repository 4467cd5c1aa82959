"""Configuration for remote API consumers."""

from __future__ import annotations

from remotequery.config.models import ConsumerConfig, load_config

__all__ = ["ConsumerConfig", "load_config"]
