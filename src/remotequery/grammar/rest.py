"""Grammar for REST APIs that take filters as top-level parameters."""

from __future__ import annotations

import copy

from remotequery.grammar.base import WireParameters, compile_orders, join_values
from remotequery.query.merge import merge_recursive
from remotequery.query.state import QueryState


class RestGrammar:
    """
    Compile query state into top-level REST parameters.

    Emits ``ids``, ``include`` and ``fields`` as comma lists, ``sort`` as a list
    of direction objects, ``limit`` and a non-zero ``offset`` (pages are sent as
    offset and limit), ``q`` for free-text search and ``aggregations``. The raw
    query fragment is merged recursively at top level last, so it can extend
    any generated key.
    """

    def compile_parameters(self, state: QueryState) -> WireParameters:
        """
        Translate query state into wire parameters.

        Parameters
        ----------
        state:
            Accumulated query intent; not mutated.

        Returns
        -------
        WireParameters
            Parameter mapping for the transport consumer.
        """
        params: WireParameters = {}
        if state.ids:
            params["ids"] = join_values(state.ids)
        if state.include:
            params["include"] = join_values(state.include)
        if not state.wants_all_columns() and state.columns is not None:
            params["fields"] = join_values(state.columns)
        if state.orders:
            params["sort"] = compile_orders(state.orders)
        if state.limit is not None:
            params["limit"] = state.limit
        if state.offset:
            params["offset"] = state.offset
        if state.search_text:
            params["q"] = state.search_text
        if state.aggregations:
            params["aggregations"] = copy.deepcopy(state.aggregations)
        if state.raw_query:
            params = merge_recursive(params, state.raw_query)
        return params
