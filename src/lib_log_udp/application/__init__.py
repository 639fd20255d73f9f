"""Application layer: ports consumed by the writer façade."""
