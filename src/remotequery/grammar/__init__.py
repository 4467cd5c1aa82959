"""Grammars compiling query state into wire parameters."""

from __future__ import annotations

from remotequery.grammar.base import Grammar, WireParameters, compile_orders
from remotequery.grammar.rest import RestGrammar
from remotequery.grammar.search import SearchGrammar

__all__ = ["Grammar", "RestGrammar", "SearchGrammar", "WireParameters", "compile_orders"]
