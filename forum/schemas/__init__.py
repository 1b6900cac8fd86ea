"""Forum — Pydantic form schemas."""
