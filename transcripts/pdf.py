from __future__ import annotations  # PDF rendering for voice interview transcripts

import os
from datetime import datetime
from typing import Any, List, Tuple

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from conversation.models import TranscriptMessage

from .models import TranscriptRecord

DEJAVU_SANS = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"  # System font
DEJAVU_SANS_BOLD = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"  # System font

ACCENT = (45, 115, 245)  # Palette accent
TEXT = (34, 34, 34)  # Primary text color
MUTED = (100, 100, 100)  # Secondary text color
RULE = (230, 230, 230)  # Divider color
AI_BG = (243, 248, 255)  # Interviewer bubble background
CANDIDATE_BG = (248, 248, 248)  # Candidate bubble background


def _format_datetime(value: datetime | None) -> str:  # Format timestamp for display
    if not value:
        return "-"
    return value.strftime("%d %b %Y, %H:%M UTC")


def _effective_width(pdf: FPDF) -> float:  # Compute effective page width
    return float(pdf.w) - float(pdf.l_margin) - float(pdf.r_margin)


class TranscriptPDF(FPDF):  # PDF with header banner and page footer
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.header_title = "Interview Transcript"
        self._font_regular = "Helvetica"
        self._font_bold = "Helvetica"
        self._supports_unicode = False

    def use_unicode_fonts(self) -> None:  # Switch to DejaVu when it is installed
        if not (os.path.exists(DEJAVU_SANS) and os.path.exists(DEJAVU_SANS_BOLD)):
            return
        self.add_font("DejaVu", "", DEJAVU_SANS)
        self.add_font("DejaVu", "B", DEJAVU_SANS_BOLD)
        self._font_regular = "DejaVu"
        self._font_bold = "DejaVu"
        self._supports_unicode = True

    def prepare_text(self, text: Any) -> str:  # Core fonts only cover latin-1
        value = "" if text is None else str(text)
        if self._supports_unicode:
            return value
        return value.encode("latin-1", "replace").decode("latin-1")

    def header(self) -> None:  # Render header banner
        usable = _effective_width(self)
        if self.page_no() == 1:
            self.set_fill_color(*ACCENT)
            self.rect(0, 0, self.w, 20, style="F")
            self.set_text_color(255, 255, 255)
            self.set_font(self._font_bold, "B", 16)
            self.set_xy(self.l_margin, 6)
            self.multi_cell(usable, 8, self.prepare_text(self.header_title))
            self.set_text_color(*TEXT)
            self.set_y(26)
        else:
            self.set_text_color(80, 80, 80)
            self.set_xy(self.l_margin, 8)
            self.set_font(self._font_bold, "B", 12)
            self.multi_cell(usable, 6, self.prepare_text(self.header_title))
            mark = self.get_y()
            self.set_draw_color(*ACCENT)
            self.set_line_width(0.4)
            self.line(self.l_margin, mark + 1, self.w - self.r_margin, mark + 1)
            self.set_text_color(*TEXT)
            self.ln(4)

    def footer(self) -> None:  # Render footer with pagination
        self.set_y(-12)
        self.set_draw_color(*RULE)
        self.set_line_width(0.2)
        self.line(self.l_margin, self.get_y(), self.w - self.r_margin, self.get_y())
        self.set_text_color(120, 120, 120)
        self.set_font(self._font_regular, "", 9)
        self.cell(0, 10, f"Page {self.page_no()}/{{nb}}", align="R")


def _section_title(pdf: TranscriptPDF, title: str) -> None:  # Render styled section title
    pdf.set_text_color(*TEXT)
    pdf.set_x(pdf.l_margin)
    pdf.set_font(pdf._font_bold, "B", 13)
    pdf.cell(0, 9, pdf.prepare_text(title), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_draw_color(*RULE)
    pdf.set_line_width(0.2)
    y = pdf.get_y()
    pdf.line(pdf.l_margin, y, pdf.l_margin + _effective_width(pdf), y)
    pdf.ln(2)


def _meta_block(pdf: TranscriptPDF, rows: List[Tuple[str, str]]) -> None:  # Draw label/value rows
    label_width = _effective_width(pdf) * 0.3
    value_width = _effective_width(pdf) - label_width
    for label, value in rows:
        pdf.set_x(pdf.l_margin)
        pdf.set_text_color(*MUTED)
        pdf.set_font(pdf._font_regular, "", 10)
        pdf.cell(label_width, 6, pdf.prepare_text(label), new_x=XPos.RIGHT, new_y=YPos.TOP)
        pdf.set_text_color(*TEXT)
        pdf.set_font(pdf._font_bold, "B", 10)
        pdf.cell(value_width, 6, pdf.prepare_text(value), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(3)


def _render_message(pdf: TranscriptPDF, message: TranscriptMessage) -> None:  # Render one utterance
    width = _effective_width(pdf)
    speaker = "Interviewer" if message.role == "ai" else "Candidate"
    stamp = message.timestamp.strftime("%H:%M:%S")
    if message.duration is not None:
        stamp = f"{stamp} ({message.duration:.0f}s)"
    pdf.set_x(pdf.l_margin)
    pdf.set_text_color(*(ACCENT if message.role == "ai" else MUTED))
    pdf.set_font(pdf._font_bold, "B", 10)
    pdf.cell(width, 6, pdf.prepare_text(f"{speaker} - {stamp}"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_fill_color(*(AI_BG if message.role == "ai" else CANDIDATE_BG))
    pdf.set_text_color(*TEXT)
    pdf.set_font(pdf._font_regular, "", 10)
    pdf.multi_cell(width, 5.5, pdf.prepare_text(message.text or "-"), fill=True, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(3)


def generate_transcript_pdf(record: TranscriptRecord) -> bytes:  # Build PDF payload for a transcript
    pdf = TranscriptPDF()
    pdf.use_unicode_fonts()
    pdf.alias_nb_pages()
    pdf.header_title = f"{record.role} - {record.candidate_name} - Interview Transcript"
    pdf.set_margins(15, 22, 15)
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    _section_title(pdf, "Session Overview")
    _meta_block(
        pdf,
        [
            ("Interview ID", record.interview_id),
            ("Session ID", record.session_id),
            ("Candidate", record.candidate_name),
            ("Role", record.role),
            ("Started", _format_datetime(record.started_at)),
            ("Last saved", _format_datetime(record.completed_at)),
            ("Questions answered", f"{record.questions_answered}/{record.total_questions}"),
        ],
    )

    _section_title(pdf, "Conversation")
    if not record.messages:
        pdf.set_x(pdf.l_margin)
        pdf.set_text_color(*MUTED)
        pdf.set_font(pdf._font_regular, "", 10)
        pdf.multi_cell(_effective_width(pdf), 6, "No messages recorded for this session.")
    for message in record.messages:
        _render_message(pdf, message)

    return bytes(pdf.output())


__all__ = ["TranscriptPDF", "generate_transcript_pdf"]
