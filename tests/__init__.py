"""Test package for the WindChat client.

Structure:
    - unit/: Individual component tests
    - integration/: Local app and end-to-end client flows

Uses pytest with pytest-asyncio (auto mode) and pytest-check for soft
assertions.
"""
