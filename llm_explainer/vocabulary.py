"""
Vocabulary: the bijective map between tokens and integer indices

Every tokenizer needs a way to turn string tokens into integers and back.
This module provides that mapping with four reserved special tokens that are
always present at indices 0-3:

    [UNK]: Unknown token, returned for anything not in the vocabulary
    [PAD]: Padding token for batch processing
    [CLS]: Sequence-start token
    [SEP]: Sequence-end token

Indices are assigned sequentially in insertion order and never reassigned,
so the vocabulary only ever grows.

Lookups are lenient: an unknown token resolves to the [UNK] index and an
unknown index resolves to the "[UNK]" literal. A tokenizer must always be
able to produce *some* id for arbitrary input text.

Classes:
    Vocabulary: Token <-> index mapping with special tokens
"""

from types import MappingProxyType
from typing import Dict, Mapping

UNK_TOKEN = "[UNK]"
PAD_TOKEN = "[PAD]"
CLS_TOKEN = "[CLS]"
SEP_TOKEN = "[SEP]"

# Fixed order: these occupy indices 0, 1, 2, 3
SPECIAL_TOKENS = (UNK_TOKEN, PAD_TOKEN, CLS_TOKEN, SEP_TOKEN)


class Vocabulary:
    """
    Bidirectional token <-> index map.

    Attributes:
        token_to_index: Read-only view mapping token strings to indices
        index_to_token: Read-only view mapping indices to token strings

    Example:
        >>> vocabulary = Vocabulary()
        >>> vocabulary.add_token("hello")
        4
        >>> vocabulary.get_token_index("hello")
        4
        >>> vocabulary.get_word_from_index(4)
        'hello'
        >>> vocabulary.get_token_index("never-seen")  # -> UNK index
        0
    """

    def __init__(self):
        """Create a vocabulary holding only the special tokens."""
        self._token_to_index: Dict[str, int] = {}
        self._index_to_token: Dict[int, str] = {}

        for token in SPECIAL_TOKENS:
            self.add_token(token)

    def add_token(self, token: str) -> int:
        """
        Add a token and return its index.

        Adding a token that already exists is a no-op that returns the
        existing index.

        Args:
            token: Token string to add

        Returns:
            Index assigned to the token
        """
        if token in self._token_to_index:
            return self._token_to_index[token]

        index = len(self._token_to_index)
        self._token_to_index[token] = index
        self._index_to_token[index] = token

        return index

    def get_token_index(self, token: str) -> int:
        """Return the index of a token, or the [UNK] index if absent."""
        return self._token_to_index.get(token, self._token_to_index[UNK_TOKEN])

    def get_word_from_index(self, index: int) -> str:
        """Return the token at an index, or the "[UNK]" literal if absent."""
        return self._index_to_token.get(index, UNK_TOKEN)

    def get_size(self) -> int:
        """Return the number of tokens, special tokens included."""
        return len(self._token_to_index)

    def contains_token(self, token: str) -> bool:
        return token in self._token_to_index

    def get_vocabulary_map(self) -> Mapping[str, int]:
        """Return a read-only snapshot of the token -> index map."""
        return MappingProxyType(dict(self._token_to_index))

    def get_reverse_vocabulary_map(self) -> Mapping[int, str]:
        """Return a read-only snapshot of the index -> token map."""
        return MappingProxyType(dict(self._index_to_token))

    @property
    def token_to_index(self) -> Mapping[str, int]:
        return MappingProxyType(self._token_to_index)

    @property
    def index_to_token(self) -> Mapping[int, str]:
        return MappingProxyType(self._index_to_token)

    @property
    def unk_index(self) -> int:
        return self._token_to_index[UNK_TOKEN]

    @property
    def pad_index(self) -> int:
        return self._token_to_index[PAD_TOKEN]

    @property
    def cls_index(self) -> int:
        return self._token_to_index[CLS_TOKEN]

    @property
    def sep_index(self) -> int:
        return self._token_to_index[SEP_TOKEN]

    def __len__(self) -> int:
        return self.get_size()

    def __contains__(self, token: object) -> bool:
        return token in self._token_to_index

    def __eq__(self, other: object) -> bool:
        """
        Two vocabularies are equal when both maps hold the same pairs.

        Insertion order is not compared, only contents.
        """
        if self is other:
            return True
        if not isinstance(other, Vocabulary):
            return NotImplemented

        return (
            self._token_to_index == other._token_to_index
            and self._index_to_token == other._index_to_token
        )

    # Mutable and compared by contents, so not hashable
    __hash__ = None

    def __repr__(self) -> str:
        return f"Vocabulary(size={self.get_size()})"
