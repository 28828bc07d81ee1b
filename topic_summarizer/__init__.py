from .datatypes import Sentence, Document, Edge, Graph, SummaryResult, SummaryStatus, TermVector
from .errors import SummarizerError, VocabularyMismatch, MalformedEmbeddingMatrix, ConfigError
from .preprocessing import PreprocessConfig, preprocess_text, split_sentences, tokenize, term_vector
from .config import SummarizerConfig
from .embedding import EmbeddingMatrix, load_embedding_matrix, save_embedding_matrix, embed_sentences
from .distance import hellinger_distance, pairwise_distances
from .graphing import (similarity_matrix, prune_to_neighbors, symmetrize, build_graph,
                       build_similarity_graph, build_adjacency, to_networkx)
from .scoring import eigenvector_centrality, score_sentences
from .loaders import load_text, extract_text
from .summarize import summarize, summarize_document, summarize_batch, generate_summary
