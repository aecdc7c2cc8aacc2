"""
Scaled Dot-Product Self-Attention

Attention lets every token look at every other token and decide how much of
each to mix into its own representation. This module works on a single
sequence (no batch dimension, no learned projections) so the attention
matrix can be shown directly: row i says how strongly token i attends to
each token of the sequence.

Reference: "Attention Is All You Need" (Vaswani et al., 2017) Section 3.2
           https://arxiv.org/abs/1706.03762

Functions:
    scaled_dot_product_attention: Core attention computation
    self_attention: Attention with the embeddings used as Q, K and V
    create_causal_mask: Lower-triangular mask for autoregressive attention
"""

from typing import Optional, Tuple

import numpy as np

from llm_explainer.activations import softmax


def scaled_dot_product_attention(
    query: np.ndarray,
    key: np.ndarray,
    value: np.ndarray,
    mask: Optional[np.ndarray] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Compute Scaled Dot-Product Attention for one sequence.

    Mathematical Formula (from the paper):
        Attention(Q, K, V) = softmax(Q @ K^T / sqrt(d_k)) @ V

    Step-by-step:
        1. Compute attention scores: Q @ K^T (how similar each query is to each key)
        2. Scale by sqrt(d_k) to keep the softmax out of its flat regions
        3. Apply mask (if provided) to prevent attending to certain positions
        4. Apply softmax to get attention weights (each row sums to 1)
        5. Multiply by V to get weighted combination of values

    Args:
        query: Array of shape (seq_len_q, d_k), "What am I looking for?"
        key: Array of shape (seq_len_k, d_k), "What do I contain?"
        value: Array of shape (seq_len_k, d_v), "What information do I provide?"
        mask: Optional boolean array of shape (seq_len_q, seq_len_k);
              True = position can be attended to

    Returns:
        output: Attention output of shape (seq_len_q, d_v)
        attention_weights: Attention weights of shape (seq_len_q, seq_len_k)
    """
    query = np.asarray(query, dtype=np.float64)
    key = np.asarray(key, dtype=np.float64)
    value = np.asarray(value, dtype=np.float64)

    if query.ndim != 2 or key.ndim != 2 or value.ndim != 2:
        raise ValueError("query, key and value must be 2-D (sequence_length, dimension)")
    if query.shape[1] != key.shape[1]:
        raise ValueError(
            f"Query dimension ({query.shape[1]}) does not match key dimension "
            f"({key.shape[1]})"
        )
    if key.shape[0] != value.shape[0]:
        raise ValueError(
            f"Key length ({key.shape[0]}) does not match value length ({value.shape[0]})"
        )

    d_k = query.shape[-1]

    attention_scores = query @ key.T
    scaled_attention_scores = attention_scores / np.sqrt(d_k)

    if mask is not None:
        mask = np.asarray(mask, dtype=bool)
        if mask.shape != scaled_attention_scores.shape:
            raise ValueError(
                f"Mask shape {mask.shape} does not match attention scores shape "
                f"{scaled_attention_scores.shape}"
            )
        # Large negative number becomes ~0 after softmax
        scaled_attention_scores = np.where(mask, scaled_attention_scores, -1e9)

    attention_weights = softmax(scaled_attention_scores, axis=-1)
    attention_output = attention_weights @ value

    return attention_output, attention_weights


def self_attention(
    embeddings: np.ndarray, mask: Optional[np.ndarray] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Self-attention over a sequence with the embeddings as queries, keys and values.

    A real transformer first projects the embeddings with learned Q, K and
    V matrices; skipping that keeps the weights easy to interpret as
    "how similar is token i to token j".

    Args:
        embeddings: Array of shape (sequence_length, embedding_dimension)
        mask: Optional boolean mask of shape (sequence_length, sequence_length)

    Returns:
        (output, attention_weights) as in scaled_dot_product_attention
    """
    return scaled_dot_product_attention(embeddings, embeddings, embeddings, mask)


def create_causal_mask(sequence_length: int) -> np.ndarray:
    """
    Create a causal (autoregressive) attention mask.

    Each position can attend to itself and earlier positions only.

    Returns:
        mask: Boolean mask of shape (sequence_length, sequence_length)

    Example:
        For sequence_length=3:
        [[True, False, False],
         [True, True,  False],
         [True, True,  True ]]
    """
    return np.tril(np.ones((sequence_length, sequence_length), dtype=bool))
