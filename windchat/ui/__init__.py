"""NiceGUI interface - thin visualization layer for the chat client.

Responsibilities:
    - Login form with actionable error messages
    - Chat list with unread badges and presence dots
    - Transcript display with attachment cards
    - Attachment tray with previews and the composer

Contains minimal business logic. Delegates all state changes to the
ChatContext components.
"""
