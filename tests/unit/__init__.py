"""Unit tests for individual components in isolation.

Coverage:
    - models: record validation and the text-or-attachment rule
    - session: token persistence and the authentication state machine
    - api: backend client error classification
    - compose: staging, previews and the send transaction
    - conversations: ordering, selection and unread counters

The backend is replaced by httpx.MockTransport handlers; no network access.
"""
