from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Union

import numpy as np

from .config import SummarizerConfig
from .datatypes import Sentence, SummaryResult, SummaryStatus
from .distance import pairwise_distances
from .embedding import EmbeddingMatrix, embed_sentences
from .errors import MalformedEmbeddingMatrix, SummarizerError
from .graphing import build_similarity_graph
from .preprocessing import preprocess_text
from .scoring import score_sentences

logger = logging.getLogger(__name__)

BatchItem = Union[SummaryResult, SummarizerError]

def generate_summary(sentences: List[Sentence], scores: np.ndarray, top_k: int = 3) -> List[Sentence]:
    """Top-k sentences by score (ties to the earlier sentence), back in reading order."""
    n = len(sentences)
    order = sorted(range(n), key=lambda i: (-scores[i], sentences[i].idx))
    selected = [sentences[i] for i in order[:min(top_k, n)]]
    selected.sort(key=lambda s: s.idx)  # restore original order
    return selected

def _check_inputs(embedding: EmbeddingMatrix, cfg: SummarizerConfig) -> None:
    if not isinstance(embedding, EmbeddingMatrix):
        raise TypeError(f"embedding must be an EmbeddingMatrix, got {type(embedding).__name__}")
    if cfg.metric == "hellinger" and not embedding.is_nonnegative:
        raise MalformedEmbeddingMatrix(
            "embedding matrix has negative entries, which the hellinger metric "
            "cannot handle; use metric='cosine'")

def _summarize_one(text: str, embedding: EmbeddingMatrix, cfg: SummarizerConfig) -> SummaryResult:
    doc = preprocess_text(text, cfg.preprocess)
    if not doc.sentences:
        return SummaryResult(text="", status=SummaryStatus.EMPTY_DOCUMENT, document=doc)

    kept = embed_sentences(doc, embedding, min_terms=cfg.min_terms,
                           normalize=cfg.metric == "hellinger")
    if not kept:
        logger.warning("all %d sentences were filtered out", len(doc.sentences))
        return SummaryResult(text="", status=SummaryStatus.ALL_SENTENCES_FILTERED, document=doc)

    dist = pairwise_distances([s.embedded_vector for s in kept], metric=cfg.metric)
    graph = build_similarity_graph(kept, dist, neighbor_k=cfg.neighbor_k, scale=cfg.similarity_scale)
    scores = score_sentences(graph, max_iter=cfg.max_iter, tol=cfg.tol)
    selected = generate_summary(kept, scores, top_k=cfg.top_k)

    return SummaryResult(
        text=cfg.separator.join(s.text for s in selected),
        status=SummaryStatus.OK,
        document=doc,
        kept=kept,
        distances=dist,
        graph=graph,
        scores=scores,
        selected=selected,
    )

def summarize_document(text: str, embedding: EmbeddingMatrix,
                       cfg: Optional[SummarizerConfig] = None) -> SummaryResult:
    """
    Summarize one document.

    Empty documents and documents whose sentences are all filtered out give
    an empty summary with the matching status. VocabularyMismatch propagates.
    """
    cfg = cfg or SummarizerConfig()
    if not isinstance(text, str):
        raise TypeError(f"document must be a string, got {type(text).__name__}")
    _check_inputs(embedding, cfg)
    return _summarize_one(text, embedding, cfg)

def _summarize_item(position: int, text: str, embedding: EmbeddingMatrix,
                    cfg: SummarizerConfig) -> BatchItem:
    try:
        return _summarize_one(text, embedding, cfg)
    except SummarizerError as e:
        logger.warning("document %d failed: %s", position, e)
        return e

def summarize_batch(texts: Sequence[str], embedding: EmbeddingMatrix,
                    cfg: Optional[SummarizerConfig] = None, workers: int = 1) -> List[BatchItem]:
    """
    Summarize each document independently.

    Returns one entry per input, in input order: a SummaryResult, or the
    SummarizerError that document raised. Type errors and a malformed
    embedding matrix are raised before any document is processed.
    """
    cfg = cfg or SummarizerConfig()
    texts = list(texts)
    for k, t in enumerate(texts):
        if not isinstance(t, str):
            raise TypeError(f"document {k} must be a string, got {type(t).__name__}")
    _check_inputs(embedding, cfg)

    logger.info("summarizing %d documents with %d worker(s)", len(texts), workers)
    if workers > 1 and len(texts) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(
                lambda item: _summarize_item(item[0], item[1], embedding, cfg),
                enumerate(texts),
            ))
    return [_summarize_item(k, t, embedding, cfg) for k, t in enumerate(texts)]

def summarize(document_or_batch: Union[str, Sequence[str]],
              embedding: EmbeddingMatrix,
              top_k: int = 3,
              neighbor_k: int = 3,
              min_terms: int = 2,
              metric: str = "hellinger",
              workers: int = 1) -> Union[str, List[BatchItem]]:
    """
    Extractive summary of one document or of a batch.

    A single string returns the summary string. A sequence returns one item
    per document, in input order, and the items are not strings: each is a
    SummaryResult, or the SummarizerError (e.g. VocabularyMismatch) that
    document raised. Use `str(result)` or `result.text` for the summary text
    and `result.status` to tell an empty document or an all-filtered one from
    a real summary; comparing a result to a string with `==` is always False.
    """
    cfg = SummarizerConfig(top_k=top_k, neighbor_k=neighbor_k, min_terms=min_terms, metric=metric)
    if isinstance(document_or_batch, str):
        return summarize_document(document_or_batch, embedding, cfg).text
    return summarize_batch(document_or_batch, embedding, cfg, workers=workers)
