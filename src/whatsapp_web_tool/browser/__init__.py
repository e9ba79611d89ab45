"""Browser engine adapters."""
