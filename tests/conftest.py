"""
Shared fixtures: a small three-topic embedding matrix and documents written
against its vocabulary.
"""
import numpy as np
import pytest

from topic_summarizer.embedding import EmbeddingMatrix

TOPICS = {
    "pets": ["cat", "cats", "dog", "dogs", "pet", "fur", "bark", "purr", "vet", "loyal"],
    "weather": ["weather", "rain", "sun", "cloud", "nice", "outside", "storm", "wind", "cold"],
    "money": ["market", "stock", "stocks", "prices", "bank", "money", "rates", "calm"],
}
SHARED = ["the", "a", "and", "was", "is"]

PETS_DOC = (
    "The cat and the dog slept. "
    "A dog is a loyal pet. "
    "The market was calm and stock prices rose. "
    "Cats purr and dogs bark at the vet. "
    "The weather was nice outside. "
    "My pet cat has soft fur."
)
PETS_SENTENCES = {1, 2, 4, 6}


def make_matrix(topics=TOPICS, shared=SHARED, shared_weight=0.2):
    vocab = sorted({t for terms in topics.values() for t in terms} | set(shared))
    col = {t: k for k, t in enumerate(vocab)}
    phi = np.zeros((len(topics), len(vocab)))
    for k, terms in enumerate(topics.values()):
        for t in terms:
            phi[k, col[t]] = 1.0
        for t in shared:
            phi[k, col[t]] = shared_weight
    phi /= phi.sum(axis=1, keepdims=True)
    return EmbeddingMatrix(phi=phi, vocabulary=tuple(vocab))


@pytest.fixture
def matrix():
    return make_matrix()


@pytest.fixture
def pets_doc():
    return PETS_DOC


@pytest.fixture
def matrix_csv(tmp_path, matrix):
    path = tmp_path / "phi.csv"
    matrix.to_frame().to_csv(path)
    return path


@pytest.fixture
def doc_file(tmp_path):
    path = tmp_path / "pets.txt"
    path.write_text(PETS_DOC, encoding="utf-8")
    return path
