"""Message composition pipeline.

Responsibilities:
    - Staging picked files in arrival order
    - Classifying files and formatting their sizes
    - Issuing and revoking local preview URLs for images
    - Assembling draft text and staged files into a sent Message
"""

from windchat.compose.compositor import Compositor, Draft
from windchat.compose.previews import PreviewHandle, PreviewRegistry
from windchat.compose.stager import AttachmentStager, StagedAttachment, classify, human_size

__all__ = [
    "AttachmentStager",
    "Compositor",
    "Draft",
    "PreviewHandle",
    "PreviewRegistry",
    "StagedAttachment",
    "classify",
    "human_size",
]
