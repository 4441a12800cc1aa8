"""Runtime: concurrency strategies and observability."""
