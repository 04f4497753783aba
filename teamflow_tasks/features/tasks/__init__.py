"""Task listing: query normalization, SQL and in-memory backends, keyset pages."""
