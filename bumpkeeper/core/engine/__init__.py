"""Core eligibility evaluation and request building.

Responsibilities:
  - Provide pure decision functions, result types, and the batcher.
  - Must not perform chain I/O; consumes typed records only.
"""
