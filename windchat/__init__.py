"""WindChat - client for the WindGo chat backend.

Combines httpx for the REST API, Pydantic for records and validation,
NiceGUI for the chat pages, and FastAPI for the local preview server.

Components:
    - session: token persistence and the authentication state machine
    - compose: attachment staging, previews and message composition
    - conversations: chat list and per-conversation timelines
    - api: backend client and local FastAPI app
    - ui: NiceGUI login and chat pages
"""

__version__ = "0.1.0"
