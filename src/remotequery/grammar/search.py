"""Grammar producing search-engine style request bodies."""

from __future__ import annotations

import copy

from remotequery.grammar.base import WireParameters, compile_orders
from remotequery.query.state import QueryState


class SearchGrammar:
    """Compile query state into a ``query``/``from``/``size``/``aggs`` body."""

    def compile_parameters(self, state: QueryState) -> WireParameters:
        """
        Translate query state into a search request body.

        Parameters
        ----------
        state:
            Accumulated query intent; not mutated.

        Returns
        -------
        WireParameters
            Search body for the transport consumer.
        """
        body: WireParameters = {}
        query = self._compile_query(state)
        if query:
            body["query"] = query
        if state.offset:
            body["from"] = state.offset
        if state.limit is not None:
            body["size"] = state.limit
        if state.orders:
            body["sort"] = compile_orders(state.orders)
        if not state.wants_all_columns() and state.columns is not None:
            body["_source"] = [*state.columns, *state.include]
        if state.aggregations:
            body["aggs"] = copy.deepcopy(state.aggregations)
        return body

    @staticmethod
    def _compile_query(state: QueryState) -> dict[str, object]:
        # A raw query replaces the generated clauses entirely.
        if state.raw_query:
            return copy.deepcopy(state.raw_query)
        clauses: list[dict[str, object]] = []
        if state.ids:
            clauses.append({"ids": {"values": [str(value) for value in state.ids]}})
        if state.search_text:
            clauses.append({"query_string": {"query": state.search_text}})
        if not clauses:
            return {}
        return {"bool": {"must": clauses}}
