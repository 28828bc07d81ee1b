import numpy as np
import pandas as pd
import pytest

from topic_summarizer.embedding import (
    EmbeddingMatrix, embed_sentences, load_embedding_matrix, save_embedding_matrix,
)
from topic_summarizer.errors import MalformedEmbeddingMatrix, VocabularyMismatch
from topic_summarizer.preprocessing import preprocess_text


def test_matrix_is_a_read_only_copy():
    phi = np.array([[0.5, 0.5], [0.1, 0.9]])
    m = EmbeddingMatrix(phi=phi, vocabulary=("cat", "dog"))
    phi[0, 0] = 99.0

    assert m.phi[0, 0] == 0.5
    assert not m.phi.flags.writeable
    with pytest.raises(ValueError):
        m.phi[0, 0] = 1.0


def test_matrix_properties():
    m = EmbeddingMatrix(phi=[[0.2, 0.8, 0.0]], vocabulary=["a", "b", "c"])
    assert m.n_dimensions == 1
    assert m.vocabulary == ("a", "b", "c")
    assert "b" in m and "z" not in m
    assert m.columns(["c", "a"]) == [2, 0]
    assert m.is_nonnegative


@pytest.mark.parametrize("phi, vocab", [
    ([0.1, 0.2], ("a", "b")),                    # 1-D
    (np.zeros((0, 2)), ("a", "b")),              # no dimensions
    ([[0.1, 0.2]], ("a",)),                      # vocabulary length
    ([[0.1, 0.2]], ("a", "a")),                  # duplicate terms
    ([[0.1, float("nan")]], ("a", "b")),         # NaN
    ([[0.1, float("inf")]], ("a", "b")),
    ([["x", "y"]], ("a", "b")),                  # not numeric
])
def test_malformed_matrices_are_rejected(phi, vocab):
    with pytest.raises(MalformedEmbeddingMatrix):
        EmbeddingMatrix(phi=phi, vocabulary=vocab)


def test_frame_conversion(matrix):
    frame = matrix.to_frame()
    assert list(frame.columns) == list(matrix.vocabulary)
    assert list(frame.index) == ["t_1", "t_2", "t_3"]

    again = EmbeddingMatrix.from_frame(frame)
    np.testing.assert_array_equal(again.phi, matrix.phi)


def test_load_csv(matrix_csv, matrix):
    loaded = load_embedding_matrix(matrix_csv)
    assert loaded.vocabulary == matrix.vocabulary
    np.testing.assert_allclose(loaded.phi, matrix.phi)


def test_load_npz_and_file_object(tmp_path, matrix):
    path = tmp_path / "phi.npz"
    save_embedding_matrix(matrix, path)

    with open(path, "rb") as fh:
        loaded = load_embedding_matrix(fh)
    assert loaded.vocabulary == matrix.vocabulary
    np.testing.assert_allclose(loaded.phi, matrix.phi)


def test_load_npz_missing_array(tmp_path):
    path = tmp_path / "phi.npz"
    np.savez(path, phi=np.ones((2, 2)))
    with pytest.raises(MalformedEmbeddingMatrix, match="vocabulary"):
        load_embedding_matrix(path)


def test_load_csv_with_missing_values(tmp_path):
    path = tmp_path / "phi.csv"
    pd.DataFrame({"cat": [0.5, None], "dog": [0.5, 1.0]}, index=["t_1", "t_2"]).to_csv(path)
    with pytest.raises(MalformedEmbeddingMatrix):
        load_embedding_matrix(path)


def test_load_csv_with_duplicate_header_term(tmp_path):
    path = tmp_path / "phi.csv"
    path.write_text(",cat,dog,cat\nt_1,0.5,0.2,0.3\nt_2,0.1,0.6,0.3\n")
    with pytest.raises(MalformedEmbeddingMatrix, match="duplicate"):
        load_embedding_matrix(path)


def test_load_tsv_keeps_header_terms_verbatim(tmp_path):
    path = tmp_path / "phi.tsv"
    path.write_text("\tnull\tna\nt_1\t0.5\t0.5\n")
    loaded = load_embedding_matrix(path)
    assert loaded.vocabulary == ("null", "na")


def test_load_unknown_format(tmp_path):
    path = tmp_path / "phi.json"
    path.write_text("{}")
    with pytest.raises(MalformedEmbeddingMatrix, match="unsupported"):
        load_embedding_matrix(path)


def test_embed_drops_short_and_unknown_sentences(matrix):
    doc = preprocess_text(
        "Cat slept. "                               # 2 terms: too short
        "Lorem ipsum dolor sit amet. "              # nothing in the vocabulary
        "The dog and the cat slept."
    )
    kept = embed_sentences(doc, matrix, min_terms=2)

    assert [s.idx for s in kept] == [3]
    vec = kept[0].embedded_vector
    assert vec.shape == (matrix.n_dimensions,)
    assert vec.sum() == pytest.approx(1.0)
    assert (vec >= 0).all()
    assert np.argmax(vec) == 0  # pets topic


def test_embed_min_terms_is_configurable(matrix):
    doc = preprocess_text("Cat slept. Dog barked.")
    assert embed_sentences(doc, matrix, min_terms=2) == []
    assert [s.idx for s in embed_sentences(doc, matrix, min_terms=1)] == [1, 2]


def test_embed_vocabulary_mismatch(matrix):
    doc = preprocess_text("Lorem ipsum dolor sit amet. Consectetur adipiscing elit sed.")
    with pytest.raises(VocabularyMismatch):
        embed_sentences(doc, matrix)


def test_embed_does_not_touch_original_sentences(matrix, pets_doc):
    doc = preprocess_text(pets_doc)
    embed_sentences(doc, matrix)
    assert all(s.embedded_vector is None for s in doc.sentences)


def test_embed_without_normalization_keeps_signed_projection():
    m = EmbeddingMatrix(phi=[[1.0, -1.0, 0.0], [0.0, 0.5, 0.5]], vocabulary=("x", "y", "z"))
    doc = preprocess_text("x y z y.")
    kept = embed_sentences(doc, m, min_terms=2, normalize=False)

    np.testing.assert_allclose(kept[0].embedded_vector, [-0.25, 0.375])
