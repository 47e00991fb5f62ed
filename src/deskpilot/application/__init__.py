"""Application layer - the suggestion pipeline and the composer session.

This layer orchestrates domain types and stores: source adapters, the query
dispatcher, ranking, debounce and staleness control, palette selection,
inline continuation, and the Claude-backed assistant service.
"""
