"""Messaging module.

Channel management primitives and the message dispatch engine: channels
(typed delivery endpoints), templates with ``{placeholder}`` variables, and
messages that fan out across channels with per-channel overrides.

Layout:
  - domain/: records, enums and errors
  - channel_types/: channel type definitions and the registry
  - transports/: SMTP, Slack webhook and Twilio delivery
  - rendering.py: template rendering
  - repositories/: storage interfaces and in-memory implementations
  - validation.py: channel validation
  - core/: the dispatch engine and its service facade
  - api/: FastAPI routes
"""
