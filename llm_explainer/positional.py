"""
Sinusoidal Positional Encoding

Embeddings alone say nothing about word order: "the cat chased the mouse"
and "the mouse chased the cat" contain exactly the same token vectors.
Positional encoding adds a fixed, position-dependent pattern to each
embedding so the order becomes visible to attention.

Reference: "Attention Is All You Need" Section 3.5

Classes:
    PositionalEncoding: Precomputed sinusoidal encoding table
"""

from typing import Sequence, Union

import numpy as np


class PositionalEncoding:
    """
    Sinusoidal Positional Encoding.

    Formula:
        PE(pos, 2i) = sin(pos / 10000^(2i/d_model))
        PE(pos, 2i+1) = cos(pos / 10000^(2i/d_model))

    Properties:
        - Each position has a unique encoding
        - Encoding is bounded in [-1, 1]
        - Position 0 encodes as [0, 1, 0, 1, ...]
    """

    def __init__(self, max_sequence_length: int, embedding_dimension: int):
        """
        Initialize and precompute positional encodings.

        Args:
            max_sequence_length: Maximum sequence length to support
            embedding_dimension: Must match the embedding dimension used
        """
        if max_sequence_length <= 0:
            raise ValueError(
                f"max_sequence_length must be positive, got {max_sequence_length}"
            )
        if embedding_dimension <= 0:
            raise ValueError(
                f"embedding_dimension must be positive, got {embedding_dimension}"
            )

        self.max_sequence_length = max_sequence_length
        self.embedding_dimension = embedding_dimension

        self.encoding_table = self._create_encoding_table()

    def _create_encoding_table(self) -> np.ndarray:
        """
        Create the full positional encoding table.

        Returns:
            encoding_table: Array of shape (max_sequence_length, embedding_dimension)
        """
        positions = np.arange(self.max_sequence_length)[:, np.newaxis]
        dimension_indices = np.arange(self.embedding_dimension)[np.newaxis, :]

        # 2*(i//2) gives the [0, 0, 2, 2, 4, 4, ...] pattern so each sin/cos
        # pair shares a frequency
        angle_rates = 1 / np.power(
            10000.0, (2 * (dimension_indices // 2)) / self.embedding_dimension
        )
        angles = positions * angle_rates

        encoding_table = np.zeros_like(angles)
        encoding_table[:, 0::2] = np.sin(angles[:, 0::2])
        encoding_table[:, 1::2] = np.cos(angles[:, 1::2])

        return encoding_table

    def get_encoding(self, sequence_length: int) -> np.ndarray:
        """
        Get positional encoding for a specific sequence length.

        Args:
            sequence_length: Length of the sequence (must be <= max_sequence_length)

        Returns:
            encoding: Array of shape (sequence_length, embedding_dimension)
        """
        if sequence_length < 0 or sequence_length > self.max_sequence_length:
            raise ValueError(
                f"Sequence length {sequence_length} exceeds maximum "
                f"{self.max_sequence_length}"
            )

        return self.encoding_table[:sequence_length].copy()

    def forward(
        self, embeddings: Union[np.ndarray, Sequence[Sequence[float]]]
    ) -> np.ndarray:
        """
        Add positional encoding to a sequence of embeddings.

        Args:
            embeddings: One embedding per position, shape (sequence_length, embedding_dimension)

        Returns:
            Embeddings plus encoding, same shape as input
        """
        embeddings = np.asarray(embeddings, dtype=np.float64)
        if embeddings.ndim != 2 or embeddings.shape[1] != self.embedding_dimension:
            raise ValueError(
                f"Expected embeddings of shape (sequence_length, "
                f"{self.embedding_dimension}), got {embeddings.shape}"
            )

        return embeddings + self.get_encoding(embeddings.shape[0])
