from __future__ import annotations  # Transcript package exports

from .models import TranscriptRecord
from .pdf import generate_transcript_pdf
from .store import TranscriptStore

__all__ = ["TranscriptRecord", "TranscriptStore", "generate_transcript_pdf"]
