"""
Embedding Layer (Token ID -> Vector Lookup Table)

Token ids are just labels; they say nothing about meaning. An embedding
layer gives every id a dense vector of floats. During training these vectors
move so that tokens used in similar ways end up pointing in similar
directions, which is what cosine similarity and nearest-neighbour search
measure.

The table is a NumPy float64 matrix of shape (vocab_size, embedding_dim).
Initialization draws from a per-layer numpy.random.Generator, so two layers
built with the same seed, size and strategy hold bit-identical matrices.
Screens that look up the same token id in two different places rely on this.

Reference: "Attention Is All You Need" Section 3.4

Classes:
    EmbeddingInitStrategy: How the table is filled on initialization
    EmbeddingLayer: The lookup table with update, similarity and k-NN
"""

from enum import Enum
from typing import List, Optional, Sequence

import numpy as np

from llm_explainer.stage_logger import StageLogger


class EmbeddingInitStrategy(Enum):
    """Initialization strategies for the embedding table."""

    # Uniform values in [-1, 1)
    RANDOM = "random"
    # Uniform values in [-1, 1) scaled by sqrt(2 / embedding_dim)
    XAVIER = "xavier"
    # All zeros (mostly for testing)
    ZEROS = "zeros"


class EmbeddingLayer:
    """
    Embedding table with lookup, gradient update, similarity and k-NN.

    The layer starts uninitialized; initialize_embeddings() allocates and
    fills the matrix. Calling it again simply reallocates. Every other
    method raises RuntimeError before the first initialization.

    Valid token indices are [0, vocab_size). An index outside that range
    raises IndexError; a vector of the wrong length or an out-of-domain
    parameter raises ValueError.

    Example:
        >>> layer = EmbeddingLayer(seed=42)
        >>> layer.initialize_embeddings(100, 8, EmbeddingInitStrategy.XAVIER)
        >>> vector = layer.get_embedding(5)        # list of 8 floats
        >>> layer.get_similarity(5, 6)             # cosine similarity
        >>> layer.get_nearest_neighbors(5, k=3)    # three closest ids
    """

    def __init__(self, seed: Optional[int] = None, verbose: bool = False):
        """
        Create an uninitialized layer.

        Args:
            seed: Seed for the random generator. None seeds from OS entropy,
                  so the table differs from run to run.
            verbose: Print a line when the table is (re)initialized
        """
        self.seed = seed
        self._rng = np.random.default_rng(seed)
        self.logger = StageLogger(verbose)

        self._embeddings: Optional[np.ndarray] = None
        self._vocab_size = 0
        self._embedding_dim = 0

    def initialize_embeddings(
        self,
        vocab_size: int,
        embedding_dim: int,
        strategy: EmbeddingInitStrategy = EmbeddingInitStrategy.XAVIER,
    ) -> None:
        """
        Allocate and fill the embedding table.

        Args:
            vocab_size: Number of rows (token ids)
            embedding_dim: Length of each embedding vector
            strategy: How to fill the table

        Xavier scaling:
            The full Glorot rule uses 2 / (fan_in + fan_out). An embedding
            table has no meaningful fan_in, so sqrt(2 / embedding_dim) is
            used as the scale for uniform values in [-1, 1).
        """
        if vocab_size <= 0:
            raise ValueError(f"vocab_size must be positive, got {vocab_size}")
        if embedding_dim <= 0:
            raise ValueError(f"embedding_dim must be positive, got {embedding_dim}")

        self._vocab_size = vocab_size
        self._embedding_dim = embedding_dim
        shape = (vocab_size, embedding_dim)

        if strategy is EmbeddingInitStrategy.ZEROS:
            self._embeddings = np.zeros(shape, dtype=np.float64)
        elif strategy is EmbeddingInitStrategy.RANDOM:
            self._embeddings = self._rng.random(shape) * 2.0 - 1.0
        elif strategy is EmbeddingInitStrategy.XAVIER:
            scale = np.sqrt(2.0 / embedding_dim)
            self._embeddings = (self._rng.random(shape) * 2.0 - 1.0) * scale
        else:
            raise ValueError(f"Unknown initialization strategy: {strategy!r}")

        self.logger.log(
            "  Initialized {rows}x{cols} embeddings ({strategy})",
            rows=vocab_size,
            cols=embedding_dim,
            strategy=strategy.value,
        )

    @property
    def is_initialized(self) -> bool:
        return self._embeddings is not None

    @property
    def vocabulary_size(self) -> int:
        return self._vocab_size

    @property
    def embedding_dimension(self) -> int:
        return self._embedding_dim

    def _ensure_initialized(self) -> np.ndarray:
        if self._embeddings is None:
            raise RuntimeError(
                "Embeddings not initialized. Call initialize_embeddings() first."
            )
        return self._embeddings

    def _check_index(self, token_index: int) -> None:
        if token_index < 0 or token_index >= self._vocab_size:
            raise IndexError(
                f"Token index {token_index} out of range [0, {self._vocab_size})"
            )

    def _check_vector(self, vector: Sequence[float], name: str) -> np.ndarray:
        array = np.asarray(vector, dtype=np.float64)
        if array.shape != (self._embedding_dim,):
            raise ValueError(
                f"{name} dimension ({len(vector)}) does not match "
                f"embedding dimension ({self._embedding_dim})"
            )
        return array

    def get_embedding(self, token_index: int) -> List[float]:
        """
        Look up the embedding of one token.

        Args:
            token_index: Id in [0, vocab_size)

        Returns:
            A copy of the embedding vector; changing it never affects the table
        """
        embeddings = self._ensure_initialized()
        self._check_index(token_index)

        return embeddings[token_index].tolist()

    def update_embedding(
        self, token_index: int, gradient: Sequence[float], learning_rate: float
    ) -> None:
        """
        Take one gradient descent step on a single embedding.

            embedding[i] -= gradient[i] * learning_rate

        Args:
            token_index: Id in [0, vocab_size)
            gradient: Gradient of the loss w.r.t. this embedding
            learning_rate: Step size
        """
        embeddings = self._ensure_initialized()
        self._check_index(token_index)
        gradient_array = self._check_vector(gradient, "Gradient")

        embeddings[token_index] -= gradient_array * learning_rate

    def get_similarity(self, token_index_1: int, token_index_2: int) -> float:
        """
        Cosine similarity between two token embeddings.

        Mathematical Formula:
            cos(a, b) = (a . b) / (||a|| * ||b||)

        Returns 1.0 for vectors pointing the same way, 0.0 for orthogonal
        vectors and -1.0 for opposite ones. If either vector is all zeros
        the similarity is defined as 0.0.
        """
        embeddings = self._ensure_initialized()
        self._check_index(token_index_1)
        self._check_index(token_index_2)

        return self._cosine_similarity(embeddings[token_index_1], embeddings[token_index_2])

    @staticmethod
    def _cosine_similarity(vector_a: np.ndarray, vector_b: np.ndarray) -> float:
        dot_product = float(np.dot(vector_a, vector_b))
        squared_norm_a = float(np.dot(vector_a, vector_a))
        squared_norm_b = float(np.dot(vector_b, vector_b))

        if squared_norm_a == 0.0 or squared_norm_b == 0.0:
            return 0.0

        return float(dot_product / (np.sqrt(squared_norm_a) * np.sqrt(squared_norm_b)))

    def get_nearest_neighbors(self, token_index: int, k: int) -> List[int]:
        """
        Find the k tokens whose embeddings are most similar to a token's.

        The token itself is excluded. Candidates are sorted by descending
        cosine similarity with a stable sort, so ties keep ascending id
        order.

        Args:
            token_index: Id in [0, vocab_size)
            k: Number of neighbours, 0 < k < vocab_size

        Returns:
            Ids of the k nearest neighbours, closest first
        """
        embeddings = self._ensure_initialized()
        if k <= 0 or k >= self._vocab_size:
            raise ValueError(
                f"k must be positive and less than vocabulary size "
                f"({self._vocab_size}), got {k}"
            )
        self._check_index(token_index)

        target = embeddings[token_index]
        similarities = [
            (other_index, self._cosine_similarity(target, embeddings[other_index]))
            for other_index in range(self._vocab_size)
            if other_index != token_index
        ]

        similarities.sort(key=lambda pair: pair[1], reverse=True)

        return [other_index for other_index, _ in similarities[:k]]

    def get_embedding_for_visualization(
        self, token_index: int, dimensions: int = 2
    ) -> List[float]:
        """
        Reduced-dimension view of an embedding for plotting.

        This simply keeps the first `dimensions` components. A real tool
        would project with PCA or t-SNE instead.

        Args:
            token_index: Id in [0, vocab_size)
            dimensions: Number of leading components, 0 < dimensions <= embedding_dim
        """
        self._ensure_initialized()
        if dimensions <= 0 or dimensions > self._embedding_dim:
            raise ValueError(
                f"Visualization dimensions must be positive and not greater than "
                f"embedding dimension ({self._embedding_dim}), got {dimensions}"
            )

        return self.get_embedding(token_index)[:dimensions]

    def normalize_embeddings(self) -> None:
        """
        Rescale every embedding to unit L2 norm, in place.

        All-zero rows have no direction and are left unchanged.
        """
        embeddings = self._ensure_initialized()

        norms = np.sqrt(np.sum(embeddings * embeddings, axis=1))
        nonzero_rows = norms > 0
        embeddings[nonzero_rows] /= norms[nonzero_rows, np.newaxis]

    def get_all_embeddings(self) -> np.ndarray:
        """Return a copy of the full (vocab_size, embedding_dim) table."""
        return self._ensure_initialized().copy()

    def set_embedding(self, token_index: int, embedding: Sequence[float]) -> None:
        """
        Overwrite one embedding (useful for tests or pretrained vectors).

        The values are copied; later changes to `embedding` do not leak in.
        """
        embeddings = self._ensure_initialized()
        self._check_index(token_index)

        embeddings[token_index] = self._check_vector(embedding, "Embedding")

    def __repr__(self) -> str:
        return (
            f"EmbeddingLayer(vocab_size={self._vocab_size}, "
            f"embedding_dim={self._embedding_dim}, seed={self.seed})"
        )


# =============================================================================
# EDUCATIONAL DEMO
# Run with: python -m llm_explainer.embeddings
# =============================================================================
if __name__ == "__main__":
    print("=" * 70)
    print("EMBEDDING DEMO - Giving Tokens a Position in Space")
    print("=" * 70)
    print()

    layer = EmbeddingLayer(seed=42)
    layer.initialize_embeddings(4, 2, EmbeddingInitStrategy.ZEROS)
    layer.set_embedding(0, [1.0, 0.0])
    layer.set_embedding(1, [0.9, 0.1])
    layer.set_embedding(2, [0.1, 0.9])
    layer.set_embedding(3, [0.5, 0.5])

    print("Four tokens in 2-D:")
    for token_index in range(4):
        print(f"  token {token_index}: {layer.get_embedding(token_index)}")
    print()
    print(f"similarity(0, 1) = {layer.get_similarity(0, 1):.3f}  (nearly the same direction)")
    print(f"similarity(0, 2) = {layer.get_similarity(0, 2):.3f}  (nearly orthogonal)")
    print(f"nearest neighbours of token 0: {layer.get_nearest_neighbors(0, 2)}")
    print()

    print("Gradient step on token 2 with gradient [0.5, -0.5], learning rate 0.2:")
    layer.update_embedding(2, [0.5, -0.5], 0.2)
    print(f"  token 2: {layer.get_embedding(2)}")
    print()

    first = EmbeddingLayer(seed=7)
    second = EmbeddingLayer(seed=7)
    first.initialize_embeddings(10, 4, EmbeddingInitStrategy.XAVIER)
    second.initialize_embeddings(10, 4, EmbeddingInitStrategy.XAVIER)
    print("Same seed, same table:", first.get_embedding(3) == second.get_embedding(3))
