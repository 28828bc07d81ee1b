from __future__ import annotations
import re
from pathlib import Path

TEXT_EXTENSIONS = ("txt", "md", "rtf")

_RTF_RULES = [
    (re.compile(r"\\\*[^;{}]*;?"), ""),     # ignorable destinations
    (re.compile(r"\\[a-z]+-?\d* ?"), " "),  # control words
    (re.compile(r"\\[^a-z]"), ""),          # control symbols
    (re.compile(r"[{}]"), ""),
]

_MD_RULES = [
    (re.compile(r"```.*?```", re.DOTALL), ""),           # fenced code
    (re.compile(r"^#{1,6}\s+", re.MULTILINE), ""),        # headers
    (re.compile(r"^[ \t]*[-*+][ \t]+", re.MULTILINE), ""),  # bullets
    (re.compile(r"^-{3,}[ \t]*$", re.MULTILINE), ""),       # horizontal rules
    (re.compile(r"!?\[([^\]]+)\]\([^)]+\)"), r"\1"),      # links and images
    (re.compile(r"\*{1,2}(.*?)\*{1,2}"), r"\1"),          # bold / italic
    (re.compile(r"(?<!\w)_{1,2}(.*?)_{1,2}(?!\w)"), r"\1"),
    (re.compile(r"`([^`]+)`"), r"\1"),
]

def extract_rtf_text(content: str) -> str:
    """Plain text from RTF markup."""
    for pattern, repl in _RTF_RULES:
        content = pattern.sub(repl, content)
    return re.sub(r"\s+", " ", content).strip()

def extract_markdown_text(content: str) -> str:
    """Plain text from Markdown; paragraph breaks are kept."""
    for pattern, repl in _MD_RULES:
        content = pattern.sub(repl, content)
    return re.sub(r"\n\s*\n", "\n\n", content).strip()

def extract_text(content: str, extension: str) -> str:
    extension = extension.lower().lstrip(".")
    if extension == "rtf":
        return extract_rtf_text(content)
    if extension == "md":
        return extract_markdown_text(content)
    return content

def load_text(path) -> str:
    path = Path(path)
    return extract_text(path.read_text(encoding="utf-8"), path.suffix)
