"""
Data models for the Football Predictions API.

This module contains Pydantic models defining the data structures used
for validation, serialization, and documentation. Models serialize with
camelCase field names to match the public JSON contract.
"""
