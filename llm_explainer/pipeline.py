"""
Explainer Pipeline: configuration and a shared context for all stages

The walkthrough shows the same text at several stages (tokens, ids,
embeddings, positional encoding, attention). Every stage must see the same
embedding for the same token id, so they share one tokenizer and one
embedding table. ExplainerContext holds both and is passed explicitly to
whoever needs it; two contexts built from equal configs (with a fixed seed)
behave identically.

Data flow:
    text -> tokenizer.encode -> tokens -> tokens_to_ids -> ids
         -> EmbeddingLayer.get_embedding -> vectors
         -> + PositionalEncoding -> self_attention

Classes:
    ExplainerConfig: Hyperparameters for a context
    ProcessedText: Tokens, ids and embeddings for one input
    ExplainerContext: Tokenizer + embedding table shared across stages
"""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from llm_explainer.attention import create_causal_mask, self_attention
from llm_explainer.embeddings import EmbeddingInitStrategy, EmbeddingLayer
from llm_explainer.positional import PositionalEncoding
from llm_explainer.stage_logger import StageLogger
from llm_explainer.tokenizer import BaseTokenizer, TokenizerType, create_tokenizer


@dataclass
class ExplainerConfig:
    """
    Configuration for an ExplainerContext.

    Attributes:
        seed: Seed for the embedding table; None means a different table every run
        vocabulary_size: Rows in the embedding table. Token ids beyond it
                         cannot be embedded, so it should exceed any
                         vocabulary the tokenizer will grow to.
        embedding_dimension: Length of each embedding vector
        init_strategy: How the embedding table is filled
        tokenizer_type: Word or subword tokenization
        max_tokens: Default number of tokens kept by process_text(); at most
                    max_sequence_length so every result can be attended over
        max_sequence_length: Longest sequence the positional encoding covers
        verbose: Print a trace of every stage
    """

    seed: Optional[int] = 42
    vocabulary_size: int = 10000
    embedding_dimension: int = 32
    init_strategy: EmbeddingInitStrategy = EmbeddingInitStrategy.XAVIER
    tokenizer_type: TokenizerType = TokenizerType.WORD
    max_tokens: int = 5
    max_sequence_length: int = 64
    verbose: bool = False

    def __post_init__(self):
        for name in (
            "vocabulary_size",
            "embedding_dimension",
            "max_tokens",
            "max_sequence_length",
        ):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

        if self.max_tokens > self.max_sequence_length:
            raise ValueError(
                f"max_tokens ({self.max_tokens}) must not exceed "
                f"max_sequence_length ({self.max_sequence_length})"
            )


@dataclass
class ProcessedText:
    """
    One input text carried through tokenization and embedding lookup.

    Attributes:
        tokens: Token strings (possibly truncated)
        token_ids: Vocabulary id of each token
        embeddings: Embedding vector of each token id
    """

    tokens: List[str] = field(default_factory=list)
    token_ids: List[int] = field(default_factory=list)
    embeddings: List[List[float]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.tokens

    def embedding_matrix(self, embedding_dimension: int) -> np.ndarray:
        """Stack the embeddings into a (num_tokens, embedding_dimension) array."""
        if not self.embeddings:
            return np.zeros((0, embedding_dimension))
        return np.array(self.embeddings, dtype=np.float64)


class ExplainerContext:
    """
    The tokenizer and embedding table shared by every stage of the walkthrough.

    Example:
        >>> context = ExplainerContext(ExplainerConfig(seed=42))
        >>> processed = context.process_text("The cat sat on the mat.")
        >>> processed.tokens
        ['the', 'cat', 'sat', 'on', 'the']
        >>> weights = context.attention_weights(processed)   # (5, 5), rows sum to 1
    """

    def __init__(self, config: Optional[ExplainerConfig] = None):
        self.config = config if config is not None else ExplainerConfig()

        self.logger = StageLogger(self.config.verbose)
        self.tokenizer: BaseTokenizer = create_tokenizer(
            self.config.tokenizer_type, verbose=self.config.verbose
        )
        # The table must hold the tokenizer's seeded ids plus room to grow
        if self.config.vocabulary_size <= self.tokenizer.vocabulary_size:
            raise ValueError(
                f"vocabulary_size ({self.config.vocabulary_size}) must exceed the "
                f"{self.tokenizer.tokenizer_type.value} tokenizer's starting "
                f"vocabulary ({self.tokenizer.vocabulary_size})"
            )

        self.embedding_layer = EmbeddingLayer(
            seed=self.config.seed, verbose=self.config.verbose
        )
        self.embedding_layer.initialize_embeddings(
            self.config.vocabulary_size,
            self.config.embedding_dimension,
            strategy=self.config.init_strategy,
        )

        self.positional_encoding = PositionalEncoding(
            max_sequence_length=self.config.max_sequence_length,
            embedding_dimension=self.config.embedding_dimension,
        )

    def process_text(self, text: str, max_tokens: Optional[int] = None) -> ProcessedText:
        """
        Tokenize text, map tokens to ids and look up their embeddings.

        Args:
            text: Raw input text
            max_tokens: Keep only the first max_tokens tokens
                        (default: config.max_tokens, at most
                        config.max_sequence_length)

        Returns:
            ProcessedText for the kept tokens
        """
        if max_tokens is None:
            max_tokens = self.config.max_tokens
        if max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {max_tokens}")
        if max_tokens > self.config.max_sequence_length:
            raise ValueError(
                f"max_tokens ({max_tokens}) must not exceed "
                f"max_sequence_length ({self.config.max_sequence_length})"
            )

        self.logger.log_stage("Tokenize", timer_name="tokenize")
        tokens = self.tokenizer.encode(text)
        token_ids = self.tokenizer.tokens_to_ids(tokens)
        self.logger.log_complete("Tokenize", "tokenize")

        if len(tokens) > max_tokens:
            self.logger.log(
                "  Keeping the first {kept} of {total} tokens",
                kept=max_tokens,
                total=len(tokens),
            )
        tokens = tokens[:max_tokens]
        token_ids = token_ids[:max_tokens]

        self.logger.log_stage("Embed", timer_name="embed")
        embeddings = [self.embedding_layer.get_embedding(token_id) for token_id in token_ids]
        self.logger.log_complete("Embed", "embed")

        return ProcessedText(tokens=tokens, token_ids=token_ids, embeddings=embeddings)

    def positional_embeddings(self, processed: ProcessedText) -> np.ndarray:
        """Embeddings of a processed text with the positional encoding added."""
        matrix = processed.embedding_matrix(self.config.embedding_dimension)
        if processed.is_empty:
            return matrix
        return self.positional_encoding.forward(matrix)

    def attention_weights(
        self, processed: ProcessedText, causal: bool = False
    ) -> np.ndarray:
        """
        Self-attention weights between the tokens of a processed text.

        Args:
            processed: Output of process_text()
            causal: Only let each token attend to itself and earlier tokens

        Returns:
            Array of shape (num_tokens, num_tokens); each row sums to 1
        """
        if processed.is_empty:
            return np.zeros((0, 0))

        self.logger.log_stage("Attend", timer_name="attend")
        encoded = self.positional_embeddings(processed)
        mask = create_causal_mask(len(processed.tokens)) if causal else None
        _, weights = self_attention(encoded, mask)
        self.logger.log_complete("Attend", "attend")

        return weights
