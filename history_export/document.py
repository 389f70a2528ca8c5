"""Build the printable chat history document and its HTML rendering."""

from __future__ import annotations

from typing import Any, Sequence

try:
    from bs4 import BeautifulSoup  # type: ignore[import-not-found]
except ImportError as exc:
    raise SystemExit(
        "Missing dependency 'beautifulsoup4'. Install with pip install"
        " beautifulsoup4 lxml"
    ) from exc

from .models import ConversationTurn, DocumentSection, ExportDocument

DEFAULT_BOT_NAME = "ReflectoBot"
EXPORT_ROOT_ID = "export-root"

INTRO_LINES = (
    "This document contains your conversations with {bot}.",
    "Think of it as your personal journal of thoughts, feelings,"
    " and insights.",
    "You can look back anytime to see how you've grown, what's been on"
    " your mind, or even to remember a good piece of advice from your"
    " AI buddy.",
)
CLOSING_LINE = "Let's take a stroll down memory lane!"
PLACEHOLDER_TEXT = "No messages yet. Start chatting with {bot}!"

STYLESHEET = """
html, body { margin: 0; padding: 0; background: #ffffff; }
#export-root {
  width: 210mm;
  box-sizing: border-box;
  padding: 20px;
  background: #ffffff;
  color: #000000;
  font-family: Arial, sans-serif;
  font-size: 12px;
  line-height: 1.6;
}
.export-header {
  text-align: center;
  margin-bottom: 30px;
  border-bottom: 2px solid #333;
  padding-bottom: 20px;
}
.export-header h1 { font-size: 24px; margin: 0 0 10px 0; color: #333; }
.export-header h2 {
  font-size: 18px; font-weight: normal; margin: 0 0 15px 0; color: #666;
}
.export-intro { font-size: 14px; line-height: 1.5; color: #555; }
.export-intro p { margin: 5px 0; }
.export-intro p.closing { margin: 15px 0 5px 0; font-weight: bold; }
.turn { margin-bottom: 25px; page-break-inside: avoid; }
.turn-card {
  background: #f8f9fa;
  padding: 15px;
  border-radius: 8px;
  border: 1px solid #e9ecef;
}
.turn-block { margin-bottom: 10px; }
.turn-block:last-child { margin-bottom: 0; }
.label { font-weight: bold; margin-bottom: 5px; }
.label.bot { color: #007bff; }
.label.user { color: #28a745; }
.text { margin-left: 20px; white-space: pre-wrap; }
.text.prompt { font-style: italic; }
.timestamp { font-size: 10px; color: #6c757d; margin-top: 5px; }
.placeholder { text-align: center; font-style: italic; color: #6c757d; }
"""


class ExportDocumentBuilder:
    """Turn a snapshot of conversation turns into an ``ExportDocument``."""

    def __init__(self, bot_name: str = DEFAULT_BOT_NAME) -> None:
        self.bot_name = bot_name

    def build(self, turns: Sequence[ConversationTurn]) -> ExportDocument:
        """Return the document for ``turns``; same input, same document."""

        sections: list[DocumentSection] = []
        for number, turn in enumerate(turns, start=1):
            sections.append(
                DocumentSection(
                    kind="turn",
                    number=number,
                    turn_id=turn.id,
                    prompt_text=turn.prompt_text,
                    user_message=turn.user_message,
                    bot_response=turn.bot_response,
                    timestamp=turn.timestamp,
                )
            )
        if not sections:
            sections.append(
                DocumentSection(
                    kind="placeholder",
                    text=PLACEHOLDER_TEXT.format(bot=self.bot_name),
                )
            )

        return ExportDocument(
            title=f"{self.bot_name} Chat History",
            subtitle="Your Conversation Journal",
            intro=tuple(
                line.format(bot=self.bot_name) for line in INTRO_LINES
            ),
            closing=CLOSING_LINE,
            bot_name=self.bot_name,
            sections=tuple(sections),
        )


def render_document_html(document: ExportDocument) -> str:
    """Render ``document`` as a standalone HTML page for staging."""

    soup: Any = BeautifulSoup(
        "<!DOCTYPE html><html><head></head><body></body></html>", "lxml"
    )
    soup.head.append(soup.new_tag("meta", charset="utf-8"))
    title = soup.new_tag("title")
    title.string = document.title
    soup.head.append(title)
    style = soup.new_tag("style")
    style.string = STYLESHEET
    soup.head.append(style)

    root = soup.new_tag("div", id=EXPORT_ROOT_ID)
    soup.body.append(root)
    root.append(_render_header(soup, document))

    body = soup.new_tag("div", attrs={"class": "export-body"})
    root.append(body)
    for section in document.sections:
        if section.kind == "turn":
            body.append(_render_turn(soup, section, document.bot_name))
        else:
            placeholder = soup.new_tag("p", attrs={"class": "placeholder"})
            placeholder.string = section.text
            body.append(placeholder)

    return str(soup)


def _render_header(soup: Any, document: ExportDocument) -> Any:
    header = soup.new_tag("div", attrs={"class": "export-header"})
    heading = soup.new_tag("h1")
    heading.string = f"💬 {document.title}"
    header.append(heading)
    subtitle = soup.new_tag("h2")
    subtitle.string = document.subtitle
    header.append(subtitle)

    intro = soup.new_tag("div", attrs={"class": "export-intro"})
    for line in document.intro:
        paragraph = soup.new_tag("p")
        paragraph.string = line
        intro.append(paragraph)
    closing = soup.new_tag("p", attrs={"class": "closing"})
    closing.string = document.closing
    intro.append(closing)
    header.append(intro)
    return header


def _render_turn(soup: Any, section: DocumentSection, bot_name: str) -> Any:
    turn = soup.new_tag(
        "div",
        attrs={
            "class": "turn",
            "data-turn-id": section.turn_id,
            "data-number": str(section.number),
        },
    )
    card = soup.new_tag("div", attrs={"class": "turn-card"})
    turn.append(card)

    prompt = _render_block(
        soup,
        "🤖 Prompt",
        "bot",
        section.prompt_text,
        text_class="text prompt",
    )
    stamp = soup.new_tag("div", attrs={"class": "timestamp"})
    stamp.string = section.timestamp
    prompt.append(stamp)
    card.append(prompt)

    card.append(_render_block(soup, "👤 You", "user", section.user_message))
    card.append(
        _render_block(soup, f"🤖 {bot_name}", "bot", section.bot_response)
    )
    return turn


def _render_block(
    soup: Any, label: str, role: str, text: str, text_class: str = "text"
) -> Any:
    block = soup.new_tag("div", attrs={"class": "turn-block"})
    heading = soup.new_tag("div", attrs={"class": f"label {role}"})
    heading.string = label
    block.append(heading)
    content = soup.new_tag("div", attrs={"class": text_class})
    content.string = text
    block.append(content)
    return block


__all__ = [
    "DEFAULT_BOT_NAME",
    "EXPORT_ROOT_ID",
    "ExportDocumentBuilder",
    "render_document_html",
]
