"""Persistence layer for operational data.

Provides the DynamoDB storage backend for notification history.
"""
