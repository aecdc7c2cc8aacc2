"""
LLM Explainer: the numeric core behind a step-by-step language model walkthrough

This package implements the small data-modelling library that an educational
visualizer calls into while it walks a user through the stages of a
transformer-style language model. Every component is plain Python on top of
NumPy so each step can be inspected and printed.

Modules:
    vocabulary: Bidirectional token <-> index map with special tokens
    tokenizer: Word-level and simplified subword tokenizers
    embeddings: Seeded embedding table with similarity and nearest neighbours
    activations: Scalar activation functions, their derivatives, and softmax
    neuron: A single neuron and a parallel layer of neurons
    positional: Sinusoidal positional encoding
    attention: Scaled dot-product self-attention for a single sequence
    pipeline: Configuration and an explicit context tying the stages together
    stage_logger: Verbose-gated printing of what each stage does

Reference:
    "Attention Is All You Need" (Vaswani et al., 2017)
    https://arxiv.org/abs/1706.03762
"""

__version__ = "1.0.0"
__author__ = "Educational LLM Project"
