from __future__ import annotations
import logging
import re
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional
from .datatypes import Document, Sentence, TermVector

logger = logging.getLogger(__name__)

# Sentence boundary: terminal punctuation, optionally closed by a quote or
# bracket, followed by whitespace. Blank lines separate paragraphs.
_SENT_BOUNDARY = re.compile(r"""(?<=[.!?])\s+|(?<=[.!?]["'\)\]])\s+""")
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")

# Titles always precede a name. The other abbreviations can also end a
# sentence, so they only continue one when the next fragment is not capitalised.
_TITLES = {"mr.", "mrs.", "ms.", "dr.", "prof."}
_ABBREVIATIONS = {
    "sr.", "jr.", "st.", "vs.", "e.g.", "i.e.", "cf.", "fig.", "approx.",
}

_WORD_RE = re.compile(r"""[A-Za-z0-9_]+(?:'[A-Za-z0-9_]+)?""")  # simple token rule

STOPWORDS = {
    # minimal English stopword set (extend as needed)
    'the','a','an','and','or','but','if','then','else','for','to','of','in','on','at','by','with','as',
    'is','are','was','were','be','been','being','this','that','these','those','it','its','from','into',
    'we','you','they','he','she','i','me','my','your','our','their','his','her','them','us','do','does',
    'did','not','no','so','than','too','very','can','could','should','would','will','shall'
}

@dataclass(frozen=True)
class PreprocessConfig:
    lowercase: bool = True
    # Off by default: tokens must match the embedding vocabulary verbatim.
    remove_stopwords: bool = False
    stemming: bool = False

def _simple_stem(token: str) -> str:
    t = token.lower()
    if len(t) > 4 and t.endswith("ies"):
        return t[:-3] + "y"     # stories -> story
    if len(t) > 3 and t.endswith("ing"):
        return t[:-3]           # playing -> play
    if len(t) > 2 and t.endswith("ed"):
        return t[:-2]           # worked -> work
    if len(t) > 3 and t.endswith("s") and not t.endswith("ss"):
        return t[:-1]           # books -> book
    return t

def _continues(fragment: str, following: str) -> bool:
    last = fragment.rsplit(None, 1)[-1].lower()
    if last in _TITLES:
        return True
    return last in _ABBREVIATIONS and not following[0].isupper()

def split_sentences(text: str) -> List[str]:
    """Split text into sentences, keeping their original order.

    A fragment that ends in a known abbreviation ("Dr.", "e.g.") is glued to
    the following fragment of the same paragraph instead of standing alone.
    Paragraph breaks always end a sentence.
    """
    sentences: List[str] = []
    for paragraph in _PARAGRAPH_BREAK.split(text.strip()):
        merged: List[str] = []
        for part in _SENT_BOUNDARY.split(paragraph):
            part = part.strip()
            if not part:
                continue
            if merged and _continues(merged[-1], part):
                merged[-1] = merged[-1] + " " + part
            else:
                merged.append(part)
        sentences.extend(merged)
    return sentences

def tokenize(text: str, cfg: Optional[PreprocessConfig] = None) -> List[str]:
    cfg = cfg or PreprocessConfig()
    if cfg.lowercase:
        text = text.lower()
    toks = [m.group(0) for m in _WORD_RE.finditer(text)]
    if cfg.remove_stopwords:
        toks = [t for t in toks if t.lower() not in STOPWORDS]
    if cfg.stemming:
        toks = [_simple_stem(t) for t in toks]
    return toks

def term_vector(tokens: List[str]) -> TermVector:
    """Bag-of-words counts for one sentence."""
    return dict(Counter(tokens))

def preprocess_text(text: str, cfg: Optional[PreprocessConfig] = None) -> Document:
    cfg = cfg or PreprocessConfig()
    sentences = []
    for i, s in enumerate(split_sentences(text), start=1):
        tokens = tokenize(s, cfg)
        sentences.append(Sentence(idx=i, text=s, tokens=tokens, term_vector=term_vector(tokens)))
    logger.debug("segmented document into %d sentences", len(sentences))
    return Document(raw_text=text, sentences=sentences)
