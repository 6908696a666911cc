"""
Services Package

- Prediction cache stores (in-memory, Redis, Supabase)
- Prediction query service (cache-or-fetch, filtering)
- Summary statistics over prediction sets
"""
