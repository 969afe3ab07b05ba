"""Incremental picker filtering."""

from clipdeck.filtering.incremental import IncrementalFilter, compile_query, filter_items

__all__ = ["IncrementalFilter", "compile_query", "filter_items"]
