"""Integration tests for components working together as a system.

Coverage:
    - Local FastAPI app through httpx.ASGITransport
    - Sign-in, conversation loading, sending and sign-out through ChatContext

The chat backend is simulated with httpx.MockTransport.
"""
