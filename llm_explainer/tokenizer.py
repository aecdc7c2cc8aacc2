"""
Word and Subword Tokenizers

This module turns raw text into a sequence of string tokens and reversible
integer ids. It is the first stage of the walkthrough: before a neural
network can process text, the text must become numbers.

Two strategies are provided:

1. WordTokenizer: lowercases the text, separates punctuation, and splits on
   whitespace. Every word or punctuation mark becomes one token.
2. SubwordTokenizer: a toy approximation of Byte Pair Encoding. Instead of
   learning merges from corpus frequencies, it peels off common English
   prefixes and suffixes and splits long unknown words in half. The rules
   are deliberately simple so the result is easy to follow by hand.

Both tokenizers grow their own vocabulary as they encode text, so the same
instance keeps assigning stable ids for its whole lifetime.

Reference:
    "Neural Machine Translation of Rare Words with Subword Units" (Sennrich et al., 2016)
    https://arxiv.org/abs/1508.07909

Classes:
    BaseTokenizer: Shared preprocessing and id conversion
    WordTokenizer: Word-level tokenizer
    SubwordTokenizer: Prefix/suffix subword tokenizer
    TokenizedText: Record of one tokenization run
    TokenizerType: Enum of available tokenizers

Functions:
    create_tokenizer: Factory returning a tokenizer for a TokenizerType
"""

import re
import zlib
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List

from llm_explainer.stage_logger import StageLogger
from llm_explainer.vocabulary import Vocabulary

_WHITESPACE_PATTERN = re.compile(r"\s+")
_PUNCTUATION_PATTERN = re.compile(r"([.,!?;:])")

MOCK_TOKEN_ID_RANGE = 10000


class TokenizerType(Enum):
    """Available tokenization strategies."""

    WORD = "word"
    SUBWORD = "subword"


@dataclass
class TokenizedText:
    """
    Record of one tokenization run, with the intermediate text kept for display.

    Attributes:
        original_text: Raw input text
        preprocessed_text: Text after lowercasing and punctuation splitting
        tokens: Token strings in order
        token_ids: Vocabulary ids, one per token
        tokenizer_type: Name of the tokenizer that produced the tokens
        timestamp: When the tokenization happened
    """

    original_text: str
    preprocessed_text: str
    tokens: List[str]
    token_ids: List[int]
    tokenizer_type: str
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    @property
    def is_empty(self) -> bool:
        return not self.tokens

    def get_token(self, index: int) -> str:
        """Return the token at a position, raising IndexError when out of range."""
        if index < 0 or index >= len(self.tokens):
            raise IndexError(f"Index {index} out of range [0, {len(self.tokens)})")
        return self.tokens[index]

    def get_token_id(self, index: int) -> int:
        """Return the token id at a position, raising IndexError when out of range."""
        if index < 0 or index >= len(self.token_ids):
            raise IndexError(f"Index {index} out of range [0, {len(self.token_ids)})")
        return self.token_ids[index]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original_text": self.original_text,
            "preprocessed_text": self.preprocessed_text,
            "tokens": list(self.tokens),
            "token_ids": list(self.token_ids),
            "tokenizer_type": self.tokenizer_type,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenizedText":
        return cls(
            original_text=data["original_text"],
            preprocessed_text=data["preprocessed_text"],
            tokens=list(data["tokens"]),
            token_ids=[int(token_id) for token_id in data["token_ids"]],
            tokenizer_type=data["tokenizer_type"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )

    @classmethod
    def empty(cls) -> "TokenizedText":
        return cls(
            original_text="",
            preprocessed_text="",
            tokens=[],
            token_ids=[],
            tokenizer_type="none",
        )


class BaseTokenizer:
    """
    Behaviour shared by the word and subword tokenizers.

    Subclasses implement encode() and decode(); everything else (text
    cleaning, token <-> id conversion, vocabulary access) lives here.
    Each instance owns a private Vocabulary that grows on every encode().
    """

    tokenizer_type: TokenizerType

    def __init__(self, verbose: bool = False):
        self._vocabulary = Vocabulary()
        self.logger = StageLogger(verbose)

    def preprocess(self, text: str) -> str:
        """
        Normalize text before splitting.

        Steps:
            1. Lowercase
            2. Collapse runs of whitespace into single spaces and trim
            3. Put a space on both sides of . , ! ? ; : so punctuation
               becomes its own token
            4. Collapse the double spaces created by step 3 and trim again

        Args:
            text: Raw input text

        Returns:
            Preprocessed text, words separated by single spaces
        """
        if not text:
            return ""

        processed = text.lower()
        processed = _WHITESPACE_PATTERN.sub(" ", processed).strip()
        processed = _PUNCTUATION_PATTERN.sub(r" \1 ", processed)
        processed = _WHITESPACE_PATTERN.sub(" ", processed).strip()

        return processed

    def _split_words(self, text: str) -> List[str]:
        """Preprocess text and split it into non-empty words."""
        return [word for word in self.preprocess(text).split(" ") if word]

    def encode(self, text: str) -> List[str]:
        raise NotImplementedError

    def decode(self, tokens: List[str]) -> str:
        raise NotImplementedError

    def tokens_to_ids(self, tokens: List[str]) -> List[int]:
        """Map tokens to ids, using the [UNK] id for tokens never seen."""
        return [self._vocabulary.get_token_index(token) for token in tokens]

    def ids_to_tokens(self, ids: List[int]) -> List[str]:
        """Map ids to tokens, using the "[UNK]" literal for unknown ids."""
        return [self._vocabulary.get_word_from_index(token_id) for token_id in ids]

    def get_token_id(self, token: str) -> int:
        return self._vocabulary.get_token_index(token)

    def get_mock_token_id(self, token: str) -> int:
        """
        Return a stable display id in [0, 10000) derived from the token text.

        The value depends only on the token's characters (CRC-32 of its UTF-8
        bytes), never on vocabulary state or the interpreter's hash seed, so
        it is the same on every call and every run. It is meant for demo
        display only, not for real lookups.
        """
        return zlib.crc32(token.encode("utf-8")) % MOCK_TOKEN_ID_RANGE

    def tokenize(self, text: str) -> TokenizedText:
        """Encode text and bundle every intermediate result into a TokenizedText."""
        tokens = self.encode(text)

        return TokenizedText(
            original_text=text,
            preprocessed_text=self.preprocess(text),
            tokens=tokens,
            token_ids=self.tokens_to_ids(tokens),
            tokenizer_type=self.tokenizer_type.value,
        )

    @property
    def vocabulary_size(self) -> int:
        return self._vocabulary.get_size()

    @property
    def vocabulary_map(self) -> Dict[str, int]:
        """Return a copy of the token -> id map."""
        return dict(self._vocabulary.get_vocabulary_map())

    @property
    def vocabulary(self) -> Vocabulary:
        """
        Return a standalone Vocabulary holding this tokenizer's tokens.

        The copy is rebuilt in insertion order, so its indices match the
        tokenizer's ids. Changing it does not affect the tokenizer.
        """
        vocabulary = Vocabulary()
        for token in self._vocabulary.get_vocabulary_map():
            vocabulary.add_token(token)
        return vocabulary


class WordTokenizer(BaseTokenizer):
    """
    Word-level tokenizer.

    Each whitespace-separated word and each punctuation mark is one token.

    Example:
        >>> tokenizer = WordTokenizer()
        >>> tokenizer.encode("Hello, World!")
        ['hello', ',', 'world', '!']
        >>> tokenizer.tokens_to_ids(['hello', ',', 'world', '!'])
        [4, 5, 6, 7]
    """

    tokenizer_type = TokenizerType.WORD

    def encode(self, text: str) -> List[str]:
        """
        Split text into word tokens, adding new ones to the vocabulary.

        Args:
            text: Raw input text

        Returns:
            Tokens in left-to-right order, punctuation included
        """
        if not text:
            return []

        tokens = self._split_words(text)
        self.logger.log(f"  {len(tokens)} word tokens: {tokens}")

        for token in tokens:
            self._vocabulary.add_token(token)

        return tokens

    def decode(self, tokens: List[str]) -> str:
        """
        Join tokens with single spaces.

        This is lossy: original casing and spacing around punctuation are
        not restored.
        """
        if not tokens:
            return ""

        return " ".join(tokens)


class SubwordTokenizer(BaseTokenizer):
    """
    Simplified subword tokenizer.

    The vocabulary starts with the special tokens, then every entry of
    COMMON_PREFIXES, then every entry of COMMON_SUFFIXES. Words are split by
    split_into_subwords(), which applies these rules in order:

        1. Words of 4 characters or fewer stay whole
        2. The first matching prefix (in list order) is split off; the
           remainder is split again only if it is longer than 4 characters
        3. Otherwise the first matching suffix is split off, same rule
        4. Otherwise words longer than 6 characters are cut in half
        5. Otherwise the word stays whole

    A real BPE tokenizer learns merges from data; these fixed rules only
    show the idea of breaking words into reusable pieces.

    Example:
        >>> tokenizer = SubwordTokenizer()
        >>> tokenizer.encode("unhappiness")
        ['un', 'happi', 'ness']
    """

    tokenizer_type = TokenizerType.SUBWORD

    COMMON_PREFIXES = (
        "un", "re", "in", "im", "dis", "pre", "post", "non", "anti", "auto",
        "bi", "co", "de", "en", "ex", "inter", "intra", "micro", "mid", "mis",
        "over", "pro", "semi", "sub", "super", "trans", "under",
    )

    COMMON_SUFFIXES = (
        "ing", "ed", "er", "est", "ly", "ity", "ment", "ness", "tion", "sion",
        "ism", "ist", "ful", "able", "ible", "al", "ial", "ical", "ious", "ous",
        "ive", "less", "y",
    )

    def __init__(self, verbose: bool = False):
        super().__init__(verbose)

        for prefix in self.COMMON_PREFIXES:
            self._vocabulary.add_token(prefix)

        for suffix in self.COMMON_SUFFIXES:
            self._vocabulary.add_token(suffix)

    def encode(self, text: str) -> List[str]:
        """
        Split text into words, then each word into subwords.

        Every emitted subword is added to the vocabulary.

        Args:
            text: Raw input text

        Returns:
            Subword tokens of all words, in order
        """
        if not text:
            return []

        tokens: List[str] = []

        for word in self._split_words(text):
            subwords = self.split_into_subwords(word)
            self.logger.log(f"  {word!r} -> {subwords}")
            tokens.extend(subwords)

            for subword in subwords:
                self._vocabulary.add_token(subword)

        return tokens

    def split_into_subwords(self, word: str) -> List[str]:
        """
        Split one word using the prefix/suffix/midpoint rules.

        Args:
            word: A single preprocessed word

        Returns:
            List of subword pieces that concatenate back to the word
        """
        if len(word) <= 4:
            return [word]

        for prefix in self.COMMON_PREFIXES:
            if word.startswith(prefix) and len(word) > len(prefix):
                remainder = word[len(prefix) :]
                self.logger.log(f"    prefix {prefix!r} in {word!r}, remainder {remainder!r}")
                return [prefix] + self._split_remainder(remainder)

        for suffix in self.COMMON_SUFFIXES:
            if word.endswith(suffix) and len(word) > len(suffix):
                remainder = word[: -len(suffix)]
                self.logger.log(f"    suffix {suffix!r} in {word!r}, remainder {remainder!r}")
                return self._split_remainder(remainder) + [suffix]

        if len(word) > 6:
            midpoint = len(word) // 2
            self.logger.log(f"    no affix in {word!r}, split at {midpoint}")
            return [word[:midpoint], word[midpoint:]]

        return [word]

    def _split_remainder(self, remainder: str) -> List[str]:
        # Only remainders longer than 4 characters are split again
        if len(remainder) > 4:
            return self.split_into_subwords(remainder)
        return [remainder]

    def decode(self, tokens: List[str]) -> str:
        """
        Join tokens with spaces and drop any " ##" continuation markers.

        This tokenizer never emits "##" markers itself; stripping them keeps
        decode() compatible with WordPiece-style token lists.
        """
        if not tokens:
            return ""

        return " ".join(tokens).replace(" ##", "")


def create_tokenizer(tokenizer_type: TokenizerType, verbose: bool = False) -> BaseTokenizer:
    """
    Create a fresh tokenizer of the requested type.

    Args:
        tokenizer_type: TokenizerType.WORD or TokenizerType.SUBWORD
        verbose: Print each tokenization step

    Returns:
        New tokenizer instance with its own empty (special-token) vocabulary
    """
    if tokenizer_type is TokenizerType.WORD:
        return WordTokenizer(verbose)
    if tokenizer_type is TokenizerType.SUBWORD:
        return SubwordTokenizer(verbose)

    raise ValueError(f"Unknown tokenizer type: {tokenizer_type!r}")


# =============================================================================
# EDUCATIONAL DEMO
# Run with: python -m llm_explainer.tokenizer
# =============================================================================
if __name__ == "__main__":
    print("=" * 70)
    print("TOKENIZER DEMO - Converting Text to Tokens and IDs")
    print("=" * 70)
    print()

    text = "The unhappiness of overthinking is remarkable!"

    for tokenizer in (WordTokenizer(), SubwordTokenizer()):
        name = type(tokenizer).__name__
        tokens = tokenizer.encode(text)
        ids = tokenizer.tokens_to_ids(tokens)

        print("-" * 70)
        print(name)
        print("-" * 70)
        print(f"Preprocessed: '{tokenizer.preprocess(text)}'")
        print(f"Tokens:       {tokens}")
        print(f"IDs:          {ids}")
        print(f"Decoded:      '{tokenizer.decode(tokens)}'")
        print(f"Vocabulary:   {tokenizer.vocabulary_size} entries")
        print()

    print("Unknown tokens fall back to [UNK]:")
    word_tokenizer = WordTokenizer()
    print(f"  tokens_to_ids(['never-seen']) -> {word_tokenizer.tokens_to_ids(['never-seen'])}")
    print(f"  ids_to_tokens([9999])        -> {word_tokenizer.ids_to_tokens([9999])}")
    print()
    print(f"Mock display id for 'hello': {word_tokenizer.get_mock_token_id('hello')}")
