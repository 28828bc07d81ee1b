from __future__ import annotations
import streamlit as st
import pandas as pd
import numpy as np
import matplotlib.pyplot as plt
import networkx as nx
import io

from topic_summarizer.config import SummarizerConfig
from topic_summarizer.datatypes import SummaryResult
from topic_summarizer.embedding import EmbeddingMatrix, load_embedding_matrix
from topic_summarizer.errors import SummarizerError
from topic_summarizer.graphing import to_networkx
from topic_summarizer.loaders import TEXT_EXTENSIONS, extract_text
from topic_summarizer.summarize import summarize_document

def _preview(text: str, width: int = 80) -> str:
    return text[:width] + "..." if len(text) > width else text

def load_text_from_file(uploaded_file) -> str:
    """Load text content from an uploaded file based on its extension."""
    extension = uploaded_file.name.lower().split('.')[-1]
    return extract_text(uploaded_file.read().decode("utf-8"), extension)

def draw_graph_visualization(result: SummaryResult) -> io.BytesIO:
    """Draw the sentence graph; selected sentences are highlighted and node size follows centrality."""
    G = to_networkx(result.graph)
    selected = {s.idx for s in result.selected}

    fig, ax = plt.subplots(figsize=(10, 8))
    ax.set_title("Sentence Similarity Graph (k-nearest neighbours)", fontsize=14, fontweight='bold')

    if len(G.nodes) > 0:
        pos = nx.spring_layout(G, k=2, iterations=50, seed=42, weight="weight")
        scores = result.scores if result.scores is not None else np.zeros(len(G.nodes))
        sizes = [400 + 1200 * float(scores[i]) for i in G.nodes()]
        colors = ['gold' if G.nodes[i]['idx'] in selected else 'lightblue' for i in G.nodes()]

        nx.draw_networkx_nodes(G, pos, ax=ax, node_color=colors, node_size=sizes, alpha=0.8)

        edges = G.edges(data=True)
        if edges:
            weights = [d['weight'] for _, _, d in edges]
            max_weight = max(weights)
            nx.draw_networkx_edges(G, pos, ax=ax,
                                   width=[3 * (w / max_weight) for w in weights],
                                   alpha=0.6, edge_color='gray')

        labels = {i: f"S{G.nodes[i]['idx']}" for i in G.nodes()}
        nx.draw_networkx_labels(G, pos, labels, ax=ax, font_size=10, font_weight='bold')

        if len(G.nodes) <= 10:
            edge_labels = {(u, v): f"{d['weight']:.1f}" for u, v, d in G.edges(data=True)}
            nx.draw_networkx_edge_labels(G, pos, edge_labels, ax=ax, font_size=8)

    ax.set_aspect('equal')
    ax.axis('off')
    plt.tight_layout()

    buf = io.BytesIO()
    plt.savefig(buf, format='png', dpi=150, bbox_inches='tight')
    buf.seek(0)
    plt.close(fig)
    return buf

def create_sidebar_controls():
    """Create sidebar controls for parameters."""
    st.sidebar.header("Parameters")
    top_k = st.sidebar.slider("Summary sentences", min_value=1, max_value=10, value=3,
                              help="Number of sentences in the summary")
    neighbor_k = st.sidebar.slider("Neighbours per sentence", min_value=1, max_value=10, value=3,
                                   help="Edges each sentence keeps in the similarity graph")
    min_terms = st.sidebar.slider("Minimum terms", min_value=0, max_value=10, value=2,
                                  help="Sentences with this many terms or fewer are dropped")
    metric = st.sidebar.selectbox("Distance metric", ["hellinger", "cosine"],
                                  help="Use cosine when the embedding has negative values")

    st.sidebar.header("Debug Options")
    debug_mode = st.sidebar.checkbox("Enable Debug Mode", value=True, help="Show detailed pipeline steps")

    cfg = SummarizerConfig(top_k=top_k, neighbor_k=neighbor_k, min_terms=min_terms, metric=metric)
    return cfg, debug_mode

def debug_pipeline(result: SummaryResult, matrix: EmbeddingMatrix, cfg: SummarizerConfig):
    """Show every intermediate of a finished summarization."""
    doc = result.document
    kept_idx = {s.idx for s in result.kept}

    # Step 1: Segmentation and bag-of-words
    st.header("Step 1: Segmentation & Bag-of-Words")
    with st.expander("Segmentation Details", expanded=True):
        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Sentences", len(doc.sentences))
        with col2:
            st.metric("Kept", len(result.kept))
        with col3:
            st.metric("Dropped", len(doc.sentences) - len(result.kept))

        sentences_data = []
        for s in doc.sentences:
            known = sum(1 for t in s.term_vector if t in matrix)
            if s.total_terms <= cfg.min_terms:
                reason = f"≤ {cfg.min_terms} terms"
            elif s.idx not in kept_idx:
                reason = "no vocabulary overlap"
            else:
                reason = ""
            sentences_data.append({
                "Sentence #": s.idx,
                "Text": _preview(s.text),
                "Terms": s.total_terms,
                "In Vocabulary": known,
                "Kept": "yes" if s.idx in kept_idx else "no",
                "Reason": reason,
            })
        st.dataframe(pd.DataFrame(sentences_data), use_container_width=True)

    if not result.ok:
        st.warning(f"Nothing to summarize: {result.status.value.replace('_', ' ')}")
        return

    labels = [f"S{s.idx}" for s in result.kept]

    # Step 2: Projection
    st.header("Step 2: Embedding Projection")
    with st.expander("Projected Sentence Vectors", expanded=False):
        st.write(f"**Running:** projection onto {matrix.n_dimensions} embedding dimensions")
        emb_df = pd.DataFrame(np.vstack([s.embedded_vector for s in result.kept]),
                              index=labels,
                              columns=[f"t_{k + 1}" for k in range(matrix.n_dimensions)])
        st.dataframe(emb_df, use_container_width=True)

    # Step 3: Distances
    st.header(f"Step 3: Pairwise {cfg.metric.title()} Distances")
    with st.expander("Distance Matrix", expanded=False):
        n = len(labels)
        if n <= 50:
            st.dataframe(pd.DataFrame(result.distances, index=labels, columns=labels),
                         use_container_width=True)
        else:
            st.info(f"Matrix too large to display ({n}×{n} = {n**2:,} cells)")
        if n > 1:
            flat = result.distances[np.triu_indices(n, k=1)]
            col1, col2, col3 = st.columns(3)
            with col1:
                st.metric("Min Distance", f"{flat.min():.3f}")
            with col2:
                st.metric("Max Distance", f"{flat.max():.3f}")
            with col3:
                st.metric("Mean Distance", f"{flat.mean():.3f}")

    # Step 4: Graph
    st.header("Step 4: Nearest-Neighbour Graph")
    with st.expander("Graph Construction Details", expanded=True):
        graph = result.graph
        st.write(f"**Running:** similarity = (1 − distance) × {cfg.similarity_scale:g}, "
                 f"top {cfg.neighbor_k} neighbours per sentence, symmetrized")
        col1, col2 = st.columns(2)
        with col1:
            st.metric("Nodes", len(graph.nodes))
        with col2:
            st.metric("Edges", len(graph.edges))

        if graph.edges:
            edges_df = pd.DataFrame([
                {"From": labels[e.i], "To": labels[e.j], "Similarity": f"{e.weight:.2f}"}
                for e in sorted(graph.edges, key=lambda e: e.weight, reverse=True)
            ])
            st.dataframe(edges_df, use_container_width=True)

        if len(graph.nodes) <= 50:
            try:
                with st.spinner("Generating graph visualization..."):
                    st.image(draw_graph_visualization(result), caption="Selected sentences in gold")
            except Exception as e:
                st.error(f"Could not generate graph visualization: {str(e)}")
        else:
            st.info(f"Graph too large to visualize ({len(graph.nodes)} nodes).")

    # Step 5: Centrality and selection
    st.header("Step 5: Eigenvector Centrality & Selection")
    with st.expander("Scoring Details", expanded=True):
        selected = {s.idx for s in result.selected}
        scoring_df = pd.DataFrame([
            {
                "Sentence #": s.idx,
                "Centrality": f"{result.scores[i]:.4f}",
                "Selected": "yes" if s.idx in selected else "no",
                "Text": s.text,
            }
            for i, s in enumerate(result.kept)
        ])
        st.dataframe(scoring_df, use_container_width=True)
        col1, col2 = st.columns(2)
        with col1:
            st.metric("Target Sentences", cfg.top_k)
        with col2:
            st.metric("Selected", len(result.selected))

def main():
    st.title("Topic-Embedding Summarizer")
    st.write("Upload a document and a topic-model embedding matrix to extract a summary")

    cfg, debug_mode = create_sidebar_controls()

    uploaded_file = st.file_uploader(
        "Choose a text file",
        type=list(TEXT_EXTENSIONS),
        help="Upload a text file to summarize (supports .txt, .rtf, .md formats)"
    )
    uploaded_matrix = st.file_uploader(
        "Choose an embedding matrix",
        type=['csv', 'tsv', 'npz'],
        help="phi_prime: one row per dimension, one column per vocabulary term"
    )

    if uploaded_file is not None and uploaded_matrix is not None:
        text = load_text_from_file(uploaded_file)
        st.subheader("Original Text")
        st.text_area("Content", text, height=200, disabled=True)

        if st.button("Generate Summary", type="primary"):
            try:
                matrix = load_embedding_matrix(uploaded_matrix)
                with st.spinner("Generating summary..."):
                    result = summarize_document(text, matrix, cfg)
            except SummarizerError as e:
                st.error(f"Error generating summary: {str(e)}")
                return

            if debug_mode:
                st.markdown("---")
                st.title("Pipeline Debug Mode")
                debug_pipeline(result, matrix, cfg)

            st.markdown("---")
            st.header("Final Summary")
            st.text_area("Generated Summary", result.text, height=150, disabled=True)

            col1, col2, col3 = st.columns(3)
            with col1:
                st.metric("Original Length", len(text.split()))
            with col2:
                st.metric("Summary Length", len(result.text.split()))
            with col3:
                compression = len(result.text.split()) / len(text.split()) if text.split() else 0
                st.metric("Actual Compression", f"{compression:.2%}")

if __name__ == "__main__":
    main()
