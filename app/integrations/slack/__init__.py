"""Slack Integration Package.

Incoming webhook transport and Block Kit helpers:

- webhook: URL validation and the SlackWebhook transport.
- blocks: Block Kit construction and validation helpers.
"""
