"""
Repo-level database operations.

Runtime DB access lives in the portfolio service. This package holds the
baseline portfolio content and the idempotent startup seeder that loads it.
"""
