"""Cache, key encoding and the ambient pieces (errors, logging, stats)."""
