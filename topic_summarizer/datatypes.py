from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Optional

import numpy as np

TermVector = Dict[str, int]  # term -> count within one sentence

@dataclass(frozen=True)
class Sentence:
    idx: int  # 1-based position in the source document
    text: str
    tokens: List[str] = field(default_factory=list)
    term_vector: TermVector = field(default_factory=dict)
    embedded_vector: Optional[np.ndarray] = field(default=None, compare=False)

    @property
    def total_terms(self) -> int:
        return sum(self.term_vector.values())

@dataclass
class Document:
    raw_text: str
    sentences: List[Sentence]

@dataclass(frozen=True)
class Edge:
    i: int
    j: int
    weight: float  # similarity in (0, 100]

@dataclass
class Graph:
    nodes: List[Sentence]
    edges: List[Edge]  # undirected weighted edges, i < j

class SummaryStatus(str, Enum):
    OK = "ok"
    EMPTY_DOCUMENT = "empty_document"
    ALL_SENTENCES_FILTERED = "all_sentences_filtered"

@dataclass
class SummaryResult:
    """Outcome of summarizing one document.

    Besides the summary text it keeps every intermediate of the pipeline so
    callers (the web app, tests) can inspect how the selection was made.
    """
    text: str
    status: SummaryStatus
    document: Optional[Document] = None
    kept: List[Sentence] = field(default_factory=list)
    distances: Optional[np.ndarray] = None
    graph: Optional[Graph] = None
    scores: Optional[np.ndarray] = None
    selected: List[Sentence] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is SummaryStatus.OK

    def __str__(self) -> str:
        return self.text
