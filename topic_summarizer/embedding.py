"""
Term-embedding projection matrix (phi_prime) and sentence projection.

The matrix is produced elsewhere, by whatever topic model was fitted on the
corpus, and is only ever read here. Rows are embedding dimensions ("topics"),
columns are vocabulary terms.
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .datatypes import Document, Sentence
from .errors import MalformedEmbeddingMatrix, VocabularyMismatch

logger = logging.getLogger(__name__)

@dataclass(frozen=True, eq=False)
class EmbeddingMatrix:
    phi: np.ndarray
    vocabulary: Tuple[str, ...]
    _index: Dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        try:
            phi = np.array(self.phi, dtype=float, copy=True)
        except (TypeError, ValueError) as e:
            raise MalformedEmbeddingMatrix(f"embedding matrix is not numeric: {e}") from e
        vocabulary = tuple(str(t) for t in self.vocabulary)

        if phi.ndim != 2:
            raise MalformedEmbeddingMatrix(f"embedding matrix must be 2-D, got {phi.ndim}-D")
        n_dims, n_terms = phi.shape
        if n_dims == 0 or n_terms == 0:
            raise MalformedEmbeddingMatrix(f"embedding matrix has an empty axis: shape {phi.shape}")
        if len(vocabulary) != n_terms:
            raise MalformedEmbeddingMatrix(
                f"vocabulary has {len(vocabulary)} terms but the matrix has {n_terms} columns")
        if len(set(vocabulary)) != len(vocabulary):
            raise MalformedEmbeddingMatrix("vocabulary contains duplicate terms")
        if not np.isfinite(phi).all():
            raise MalformedEmbeddingMatrix("embedding matrix contains NaN or infinite values")

        phi.setflags(write=False)
        object.__setattr__(self, "phi", phi)
        object.__setattr__(self, "vocabulary", vocabulary)
        object.__setattr__(self, "_index", {t: i for i, t in enumerate(vocabulary)})

    @property
    def n_dimensions(self) -> int:
        return self.phi.shape[0]

    @property
    def is_nonnegative(self) -> bool:
        return bool((self.phi >= 0).all())

    def __contains__(self, term: str) -> bool:
        return term in self._index

    def columns(self, terms: Sequence[str]) -> List[int]:
        return [self._index[t] for t in terms]

    @classmethod
    def from_frame(cls, frame: pd.DataFrame) -> "EmbeddingMatrix":
        """Rows are dimensions, column labels are the vocabulary."""
        try:
            values = frame.to_numpy(dtype=float)
        except (TypeError, ValueError) as e:
            raise MalformedEmbeddingMatrix(f"embedding table is not numeric: {e}") from e
        return cls(phi=values, vocabulary=tuple(str(c) for c in frame.columns))

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            self.phi,
            index=[f"t_{k + 1}" for k in range(self.n_dimensions)],
            columns=list(self.vocabulary),
        )

def load_embedding_matrix(source, fmt: Optional[str] = None) -> EmbeddingMatrix:
    """
    Load phi_prime from disk or from an uploaded file object.

    Supported formats (picked from `fmt` or the file extension):
      - csv / tsv: first column holds dimension labels, header row is the vocabulary
      - npz: arrays `phi` (dims x terms) and `vocabulary`
    """
    name = getattr(source, "name", source)
    if fmt is None:
        fmt = os.path.splitext(str(name))[1].lstrip(".").lower()
    logger.debug("loading embedding matrix from %s as %s", name, fmt)

    if fmt in ("csv", "tsv"):
        sep = "\t" if fmt == "tsv" else ","
        try:
            # header=None: pandas would otherwise rename a repeated term to "term.1"
            raw = pd.read_csv(source, sep=sep, header=None, index_col=0,
                              dtype=str, keep_default_na=False)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise MalformedEmbeddingMatrix(f"cannot parse {name}: {e}") from e
        vocabulary = tuple(raw.iloc[0])
        values = raw.iloc[1:].replace("", np.nan).to_numpy()
        matrix = EmbeddingMatrix(phi=values, vocabulary=vocabulary)
    elif fmt == "npz":
        try:
            with np.load(source, allow_pickle=False) as data:
                phi = data["phi"]
                vocabulary = [str(t) for t in data["vocabulary"]]
        except KeyError as e:
            raise MalformedEmbeddingMatrix(f"{name} is missing array {e}") from e
        except ValueError as e:
            raise MalformedEmbeddingMatrix(f"cannot read {name}: {e}") from e
        matrix = EmbeddingMatrix(phi=phi, vocabulary=tuple(vocabulary))
    else:
        raise MalformedEmbeddingMatrix(f"unsupported embedding format: {fmt!r}")

    logger.info("loaded embedding matrix: %d dimensions x %d terms",
                matrix.n_dimensions, len(matrix.vocabulary))
    return matrix

def save_embedding_matrix(matrix: EmbeddingMatrix, path) -> None:
    fmt = os.path.splitext(str(path))[1].lstrip(".").lower()
    if fmt == "npz":
        np.savez(path, phi=matrix.phi, vocabulary=np.array(matrix.vocabulary))
    elif fmt in ("csv", "tsv"):
        matrix.to_frame().to_csv(path, sep="\t" if fmt == "tsv" else ",")
    else:
        raise ValueError(f"unsupported embedding format: {fmt!r}")

def embed_sentences(doc: Document,
                    matrix: EmbeddingMatrix,
                    min_terms: int = 2,
                    normalize: bool = True) -> List[Sentence]:
    """
    Project the sentences of `doc` into the embedding space.

    A sentence is dropped when it has `min_terms` terms or fewer, when none of
    its terms are in the matrix vocabulary, or when its projection has no
    mass. With `normalize` the projection is rescaled to sum to 1 so it can
    be compared as a probability distribution.

    Raises VocabularyMismatch when the document has terms but none of them
    are known to the matrix.
    """
    doc_terms = {t for s in doc.sentences for t in s.term_vector}
    shared = sorted(t for t in doc_terms if t in matrix)
    if doc_terms and not shared:
        raise VocabularyMismatch(len(doc_terms), len(matrix.vocabulary))

    candidates = [s for s in doc.sentences if s.total_terms > min_terms]
    dropped_short = len(doc.sentences) - len(candidates)
    if not candidates or not shared:
        logger.debug("no sentence has more than %d terms", min_terms)
        return []

    col = {t: k for k, t in enumerate(shared)}
    # W[i, t] = relative frequency of term t in sentence i, over all its terms
    W = np.zeros((len(candidates), len(shared)))
    for i, s in enumerate(candidates):
        total = s.total_terms
        for t, c in s.term_vector.items():
            if t in col:
                W[i, col[t]] = c / total

    E = W @ matrix.phi[:, matrix.columns(shared)].T

    kept: List[Sentence] = []
    for s, vec in zip(candidates, E):
        if normalize:
            mass = vec.sum()
            if mass <= 0:
                continue
            vec = vec / mass
        elif not np.any(vec):
            continue
        vec.setflags(write=False)
        kept.append(replace(s, embedded_vector=vec))

    dropped_vocab = len(candidates) - len(kept)
    if dropped_short or dropped_vocab:
        logger.debug("dropped %d short and %d unembeddable sentences", dropped_short, dropped_vocab)
    return kept
