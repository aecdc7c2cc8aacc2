#!/usr/bin/env python3
"""
LLM Explainer Demo Script

This script walks through the stages a language model applies to a piece of
text, printing what each stage produces:
1. Tokenization (word and subword)
2. Token to ID mapping
3. Embedding lookup and similarity
4. Positional encoding
5. Self-attention
6. A single neuron learning by gradient descent

Usage:
    python run_demo.py [mode] [--text TEXT] [--seed SEED] [--verbose]

    Modes:
        all        - Run every stage in order (default)
        tokenize   - Tokenization and token IDs only
        embed      - Embedding lookup and nearest neighbours
        attention  - Positional encoding and self-attention
        neuron     - Single neuron and layer training

Example:
    python run_demo.py all --text "The cat sat on the mat." --seed 42
"""

import argparse
from typing import List, Optional

import numpy as np

from llm_explainer.activations import ActivationFunction
from llm_explainer.neuron import NeuralLayer, Neuron
from llm_explainer.pipeline import ExplainerConfig, ExplainerContext
from llm_explainer.tokenizer import SubwordTokenizer, TokenizerType, WordTokenizer

DEFAULT_TEXT = "The unhappiness of overthinking is remarkable, isn't it?"

MODES = ["all", "tokenize", "embed", "attention", "neuron"]


def print_header(text: str):
    """Print a formatted header."""
    print()
    print("=" * 60)
    print(text)
    print("=" * 60)
    print()


def print_section(text: str):
    """Print a section divider."""
    print()
    print("-" * 40)
    print(text)
    print("-" * 40)


def demo_tokenization(text: str, verbose: bool = False) -> None:
    """Show word and subword tokenization of the same text."""
    print_section("1. Tokenization")

    for tokenizer in (WordTokenizer(verbose), SubwordTokenizer(verbose)):
        tokenized = tokenizer.tokenize(text)
        print(f"{type(tokenizer).__name__}:")
        print(f"  Preprocessed: '{tokenized.preprocessed_text}'")
        print(f"  Tokens ({tokenized.token_count}): {tokenized.tokens}")
        print(f"  IDs: {tokenized.token_ids}")
        print(f"  Vocabulary size: {tokenizer.vocabulary_size}")
        print(f"  Decoded: '{tokenizer.decode(tokenized.tokens)}'")
        print()

    print_section("2. Token to ID Mapping")
    tokenizer = WordTokenizer()
    tokens = tokenizer.encode(text)
    for token, token_id in zip(tokens, tokenizer.tokens_to_ids(tokens)):
        print(
            f"  {token!r:>16} -> id {token_id:3d}   "
            f"(display id {tokenizer.get_mock_token_id(token):4d})"
        )
    print()
    print(f"Unseen token 'zebra' -> id {tokenizer.get_token_id('zebra')} ([UNK])")


def demo_embeddings(context: ExplainerContext, text: str) -> None:
    """Show embedding lookup, similarity and nearest neighbours."""
    print_section("3. Embedding Lookup")

    processed = context.process_text(text)
    layer = context.embedding_layer

    for token, token_id, embedding in zip(
        processed.tokens, processed.token_ids, processed.embeddings
    ):
        print(f"  {token!r:>12} (id {token_id:3d}): {np.round(embedding[:4], 3)} ...")
    print()

    if len(processed.token_ids) >= 2:
        first, second = processed.token_ids[:2]
        print(
            f"Cosine similarity of {processed.tokens[0]!r} and {processed.tokens[1]!r}: "
            f"{layer.get_similarity(first, second):+.4f}"
        )
    if processed.token_ids:
        neighbours = layer.get_nearest_neighbors(processed.token_ids[0], k=3)
        print(f"Nearest ids to {processed.tokens[0]!r}: {neighbours}")
        print(
            f"2-D view of {processed.tokens[0]!r}: "
            f"{np.round(layer.get_embedding_for_visualization(processed.token_ids[0]), 3)}"
        )


def demo_attention(context: ExplainerContext, text: str) -> None:
    """Show positional encoding and the self-attention matrix."""
    processed = context.process_text(text)
    if processed.is_empty:
        print("No tokens to attend over.")
        return

    print_section("4. Positional Encoding")
    encoding = context.positional_encoding.get_encoding(len(processed.tokens))
    for position, token in enumerate(processed.tokens):
        print(f"  position {position} {token!r:>12}: {np.round(encoding[position, :4], 3)} ...")

    print_section("5. Self-Attention")
    weights = context.attention_weights(processed)
    print(" " * 14 + "".join(f"{token[:8]:>9}" for token in processed.tokens))
    for token, row in zip(processed.tokens, weights):
        print(f"  {token[:10]:>10}  " + "".join(f"{weight:9.3f}" for weight in row))
    print()
    print("Each row sums to 1: it is how one token splits its attention.")


def demo_neuron(seed: Optional[int]) -> None:
    """Train a single neuron and a small layer towards fixed targets."""
    print_section("6. A Neuron Learning")

    neuron = Neuron(
        input_size=3,
        activation=ActivationFunction.SIGMOID,
        initial_weights=[0.5, -0.5, 0.2],
        initial_bias=-0.1,
    )
    inputs = [1.0, 0.0, 0.5]
    target = 1.0

    for step in range(10):
        output = neuron.activate(inputs)
        # Gradient of 0.5 * (output - target)^2
        neuron.update_weights(inputs, learning_rate=0.5, output_gradient=output - target)
        if step % 3 == 0:
            print(
                f"  step {step}: output {output:.4f}, "
                f"weights {np.round(neuron.weights, 3)}, bias {neuron.bias:+.3f}"
            )
    print(f"  final output {neuron.activate(inputs):.4f} (target {target})")

    print()
    layer = NeuralLayer(
        neuron_count=3,
        inputs_per_neuron=3,
        activation=ActivationFunction.TANH,
        seed=seed,
    )
    outputs = layer.forward(inputs)
    print(f"Layer of {layer.size} tanh neurons: {np.round(outputs, 4)}")


def build_config(args: argparse.Namespace) -> ExplainerConfig:
    """Turn parsed command line arguments into an ExplainerConfig."""
    return ExplainerConfig(
        seed=args.seed,
        embedding_dimension=args.embedding_dim,
        tokenizer_type=TokenizerType(args.tokenizer),
        max_tokens=args.max_tokens,
        verbose=args.verbose,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="LLM Explainer Demo")
    parser.add_argument(
        "mode",
        nargs="?",
        default="all",
        choices=MODES,
        help="Demo stage to run",
    )
    parser.add_argument("--text", default=DEFAULT_TEXT, help="Input text")
    parser.add_argument("--seed", type=int, default=42, help="Embedding seed")
    parser.add_argument("--embedding-dim", type=int, default=32)
    parser.add_argument("--max-tokens", type=int, default=5)
    parser.add_argument(
        "--tokenizer",
        default=TokenizerType.WORD.value,
        choices=[tokenizer_type.value for tokenizer_type in TokenizerType],
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Trace every stage as it runs"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)

    print_header("LLM Explainer - From Text to Neurons")
    print(f"Mode: {args.mode}")
    print(f"Text: '{args.text}'")

    try:
        context = ExplainerContext(build_config(args))
    except ValueError as error:
        raise SystemExit(f"Invalid options: {error}") from error

    if args.mode in ("all", "tokenize"):
        demo_tokenization(args.text, args.verbose)
    if args.mode in ("all", "embed"):
        demo_embeddings(context, args.text)
    if args.mode in ("all", "attention"):
        demo_attention(context, args.text)
    if args.mode in ("all", "neuron"):
        demo_neuron(args.seed)

    print("\nDone!")


if __name__ == "__main__":
    main()
