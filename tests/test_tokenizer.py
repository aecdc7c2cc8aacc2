"""
Tests for the word and subword tokenizers.

Tests cover:
- Preprocessing (lowercasing, whitespace, punctuation)
- Encoding and decoding
- Vocabulary growth and token <-> id conversion
- Subword splitting rules
- Mock display ids
- TokenizedText records and the tokenizer factory
"""

import pytest


class TestPreprocess:
    """Both tokenizers share the same preprocessing."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Hello World", "hello world"),
            ("  lots   of\tspace\n", "lots of space"),
            ("Hello, world!", "hello , world !"),
            ("a.b;c:d?", "a . b ; c : d ?"),
            ("", ""),
            ("   ", ""),
        ],
    )
    def test_preprocess(self, raw, expected):
        from llm_explainer.tokenizer import SubwordTokenizer, WordTokenizer

        assert WordTokenizer().preprocess(raw) == expected
        assert SubwordTokenizer().preprocess(raw) == expected

    def test_preprocess_is_deterministic(self):
        from llm_explainer.tokenizer import WordTokenizer

        tokenizer = WordTokenizer()
        text = "Is it?  Yes; it IS."

        assert tokenizer.preprocess(text) == tokenizer.preprocess(text)


class TestWordTokenizer:
    """One token per word or punctuation mark, ids assigned on first sight."""

    def test_encode_splits_words_and_punctuation(self):
        from llm_explainer.tokenizer import WordTokenizer

        tokenizer = WordTokenizer()
        tokens = tokenizer.encode("Hello, World!")

        assert tokens == ["hello", ",", "world", "!"]

    def test_encode_empty_string(self):
        """Encoding empty string should return empty list."""
        from llm_explainer.tokenizer import WordTokenizer

        assert WordTokenizer().encode("") == []

    def test_encode_whitespace_only(self):
        from llm_explainer.tokenizer import WordTokenizer

        assert WordTokenizer().encode("   ") == []

    def test_encode_grows_vocabulary(self):
        from llm_explainer.tokenizer import WordTokenizer

        tokenizer = WordTokenizer()
        assert tokenizer.vocabulary_size == 4

        tokenizer.encode("the cat the dog")

        assert tokenizer.vocabulary_size == 7, "Repeated words are added once"

    def test_tokens_to_ids_assigns_ids_in_order(self):
        from llm_explainer.tokenizer import WordTokenizer

        tokenizer = WordTokenizer()
        tokens = tokenizer.encode("the cat the dog")

        assert tokenizer.tokens_to_ids(tokens) == [4, 5, 4, 6]

    def test_unknown_tokens_map_to_unk(self):
        from llm_explainer.tokenizer import WordTokenizer

        tokenizer = WordTokenizer()
        tokenizer.encode("hello")

        assert tokenizer.tokens_to_ids(["hello", "unseen"]) == [4, 0]
        assert tokenizer.get_token_id("unseen") == 0

    def test_ids_to_tokens(self):
        from llm_explainer.tokenizer import WordTokenizer

        tokenizer = WordTokenizer()
        tokens = tokenizer.encode("hello world")
        ids = tokenizer.tokens_to_ids(tokens)

        assert tokenizer.ids_to_tokens(ids) == tokens
        assert tokenizer.ids_to_tokens([999, -1]) == ["[UNK]", "[UNK]"]

    def test_decode_joins_with_spaces(self):
        from llm_explainer.tokenizer import WordTokenizer

        tokenizer = WordTokenizer()

        assert tokenizer.decode(["hello", ",", "world"]) == "hello , world"

    def test_decode_empty_list(self):
        """Decoding empty list should return empty string."""
        from llm_explainer.tokenizer import WordTokenizer

        assert WordTokenizer().decode([]) == ""

    def test_decode_is_lossy(self):
        """Decode does not restore original casing or spacing."""
        from llm_explainer.tokenizer import WordTokenizer

        tokenizer = WordTokenizer()
        decoded = tokenizer.decode(tokenizer.encode("Hello, World!"))

        assert decoded == "hello , world !"

    def test_separate_instances_have_separate_vocabularies(self):
        from llm_explainer.tokenizer import WordTokenizer

        first = WordTokenizer()
        second = WordTokenizer()
        first.encode("alpha beta")

        assert second.vocabulary_size == 4
        assert second.tokens_to_ids(["alpha"]) == [0]


class TestSubwordTokenizerVocabulary:
    """The affix vocabulary seeded at construction."""

    def test_vocabulary_seeded_with_affixes(self):
        """Special tokens, then prefixes, then suffixes, in declared order."""
        from llm_explainer.tokenizer import SubwordTokenizer

        tokenizer = SubwordTokenizer()
        vocabulary_map = tokenizer.vocabulary_map

        assert tokenizer.vocabulary_size == 4 + 27 + 23
        assert vocabulary_map["un"] == 4
        assert vocabulary_map["under"] == 30
        assert vocabulary_map["ing"] == 31
        assert vocabulary_map["y"] == 53

    def test_prefix_and_suffix_lists(self):
        from llm_explainer.tokenizer import SubwordTokenizer

        assert len(SubwordTokenizer.COMMON_PREFIXES) == 27
        assert len(SubwordTokenizer.COMMON_SUFFIXES) == 23
        assert SubwordTokenizer.COMMON_PREFIXES[0] == "un"
        assert SubwordTokenizer.COMMON_SUFFIXES[-1] == "y"


class TestSubwordSplitting:
    """The split rules must be reproduced exactly, quirks included."""

    @pytest.mark.parametrize("word", ["a", "cat", "undo", "ring"])
    def test_short_words_unchanged(self, word):
        """Words of length <= 4 are never split."""
        from llm_explainer.tokenizer import SubwordTokenizer

        assert SubwordTokenizer().split_into_subwords(word) == [word]

    @pytest.mark.parametrize(
        "word, expected",
        [
            # Prefix, then remainder split on suffix
            ("unhappiness", ["un", "happi", "ness"]),
            # Prefix with short remainder kept whole
            ("rebus", ["re", "bus"]),
            # Prefix with long remainder that has no affix
            ("rebuild", ["re", "build"]),
            # "in" comes before "inter" in the prefix list
            ("international", ["in", "terna", "tion", "al"]),
            # Suffix only
            ("walking", ["walk", "ing"]),
            # No affix, longer than 6: split at midpoint
            ("keyboard", ["keyb", "oard"]),
            ("tabletop", ["tabl", "etop"]),
            # No affix, 5-6 characters: kept whole
            ("hello", ["hello"]),
            ("planet", ["planet"]),
        ],
    )
    def test_split_into_subwords(self, word, expected):
        from llm_explainer.tokenizer import SubwordTokenizer

        assert SubwordTokenizer().split_into_subwords(word) == expected

    def test_midpoint_split_uses_floor(self):
        """Odd-length words put the shorter half first."""
        from llm_explainer.tokenizer import SubwordTokenizer

        assert SubwordTokenizer().split_into_subwords("jackpot") == ["jac", "kpot"]

    def test_pieces_concatenate_back_to_word(self):
        from llm_explainer.tokenizer import SubwordTokenizer

        tokenizer = SubwordTokenizer()
        for word in ["unhappiness", "transformation", "overthinking", "blackboard"]:
            assert "".join(tokenizer.split_into_subwords(word)) == word

    def test_verbose_traces_split_decisions(self, capsys):
        from llm_explainer.tokenizer import SubwordTokenizer

        SubwordTokenizer(verbose=True).encode("keyboard")

        output = capsys.readouterr().out
        assert "no affix in 'keyboard', split at 4" in output
        assert "'keyboard' -> ['keyb', 'oard']" in output

    def test_quiet_by_default(self, capsys):
        from llm_explainer.tokenizer import SubwordTokenizer

        SubwordTokenizer().encode("unhappiness")

        assert capsys.readouterr().out == ""


class TestSubwordTokenizerEncoding:
    """Encoding whole texts into subword tokens and back."""

    def test_encode_concatenates_word_splits(self):
        from llm_explainer.tokenizer import SubwordTokenizer

        tokenizer = SubwordTokenizer()

        assert tokenizer.encode("Unhappiness, walking!") == [
            "un",
            "happi",
            "ness",
            ",",
            "walk",
            "ing",
            "!",
        ]

    def test_encode_adds_subwords_to_vocabulary(self):
        from llm_explainer.tokenizer import SubwordTokenizer

        tokenizer = SubwordTokenizer()
        size_before = tokenizer.vocabulary_size
        tokens = tokenizer.encode("unhappiness")

        # "un" and "ness" were already present; "happi" is new
        assert tokenizer.vocabulary_size == size_before + 1
        assert 0 not in tokenizer.tokens_to_ids(tokens)

    def test_encode_empty_string(self):
        from llm_explainer.tokenizer import SubwordTokenizer

        assert SubwordTokenizer().encode("") == []

    def test_decode_empty_list(self):
        from llm_explainer.tokenizer import SubwordTokenizer

        assert SubwordTokenizer().decode([]) == ""

    def test_decode_joins_with_spaces(self):
        from llm_explainer.tokenizer import SubwordTokenizer

        assert SubwordTokenizer().decode(["un", "happi", "ness"]) == "un happi ness"

    def test_decode_strips_continuation_markers(self):
        from llm_explainer.tokenizer import SubwordTokenizer

        assert SubwordTokenizer().decode(["play", "##ing"]) == "playing"


class TestMockTokenId:
    """Display ids depend only on the token's characters."""

    def test_mock_id_in_range(self):
        from llm_explainer.tokenizer import WordTokenizer

        tokenizer = WordTokenizer()
        for token in ["hello", "world", "", "!", "ünïcode"]:
            mock_id = tokenizer.get_mock_token_id(token)
            assert 0 <= mock_id < 10000

    def test_mock_id_is_stable(self):
        """Same token gives the same id across calls and instances."""
        from llm_explainer.tokenizer import SubwordTokenizer, WordTokenizer

        first = WordTokenizer().get_mock_token_id("hello")
        second = WordTokenizer().get_mock_token_id("hello")
        third = SubwordTokenizer().get_mock_token_id("hello")

        assert first == second == third

    def test_mock_id_independent_of_vocabulary(self):
        from llm_explainer.tokenizer import WordTokenizer

        tokenizer = WordTokenizer()
        before = tokenizer.get_mock_token_id("hello")
        tokenizer.encode("hello world and more")

        assert tokenizer.get_mock_token_id("hello") == before

    def test_mock_id_known_value(self):
        """CRC-32 of b"hello" is 0x3610A686 = 907060870."""
        from llm_explainer.tokenizer import WordTokenizer

        assert WordTokenizer().get_mock_token_id("hello") == 907060870 % 10000


class TestTokenizerVocabularyAccess:
    """Vocabulary size, map copies and standalone Vocabulary snapshots."""

    def test_vocabulary_property_matches_ids(self):
        from llm_explainer.tokenizer import WordTokenizer

        tokenizer = WordTokenizer()
        tokens = tokenizer.encode("the quick brown fox")
        vocabulary = tokenizer.vocabulary

        assert vocabulary.get_size() == tokenizer.vocabulary_size
        for token, token_id in zip(tokens, tokenizer.tokens_to_ids(tokens)):
            assert vocabulary.get_token_index(token) == token_id

    def test_vocabulary_property_is_a_copy(self):
        from llm_explainer.tokenizer import WordTokenizer

        tokenizer = WordTokenizer()
        vocabulary = tokenizer.vocabulary
        vocabulary.add_token("outside")

        assert tokenizer.get_token_id("outside") == 0

    def test_vocabulary_map_is_a_copy(self):
        from llm_explainer.tokenizer import WordTokenizer

        tokenizer = WordTokenizer()
        vocabulary_map = tokenizer.vocabulary_map
        vocabulary_map["outside"] = 42

        assert "outside" not in tokenizer.vocabulary_map

    def test_equal_histories_give_equal_vocabularies(self):
        from llm_explainer.tokenizer import WordTokenizer

        first = WordTokenizer()
        second = WordTokenizer()
        first.encode("same words here")
        second.encode("same words here")

        assert first.vocabulary == second.vocabulary


class TestTokenizedText:
    """The record produced by tokenize() and its dict round trip."""

    def test_tokenize_builds_record(self):
        from llm_explainer.tokenizer import WordTokenizer

        tokenized = WordTokenizer().tokenize("Hi there!")

        assert tokenized.original_text == "Hi there!"
        assert tokenized.preprocessed_text == "hi there !"
        assert tokenized.tokens == ["hi", "there", "!"]
        assert tokenized.token_ids == [4, 5, 6]
        assert tokenized.tokenizer_type == "word"
        assert tokenized.token_count == 3
        assert not tokenized.is_empty

    def test_get_token_out_of_range(self):
        from llm_explainer.tokenizer import WordTokenizer

        tokenized = WordTokenizer().tokenize("one two")

        assert tokenized.get_token(1) == "two"
        assert tokenized.get_token_id(0) == 4
        with pytest.raises(IndexError):
            tokenized.get_token(2)
        with pytest.raises(IndexError):
            tokenized.get_token_id(-1)

    def test_dict_roundtrip(self):
        from llm_explainer.tokenizer import SubwordTokenizer, TokenizedText

        tokenized = SubwordTokenizer().tokenize("Rebuilding")
        restored = TokenizedText.from_dict(tokenized.to_dict())

        assert restored == tokenized

    def test_empty(self):
        from llm_explainer.tokenizer import TokenizedText

        empty = TokenizedText.empty()

        assert empty.is_empty
        assert empty.token_count == 0
        assert empty.tokenizer_type == "none"


class TestCreateTokenizer:
    """The factory returns a fresh tokenizer per TokenizerType."""

    def test_factory_returns_requested_type(self):
        from llm_explainer.tokenizer import (
            SubwordTokenizer,
            TokenizerType,
            WordTokenizer,
            create_tokenizer,
        )

        assert isinstance(create_tokenizer(TokenizerType.WORD), WordTokenizer)
        assert isinstance(create_tokenizer(TokenizerType.SUBWORD), SubwordTokenizer)

    def test_factory_returns_fresh_instances(self):
        from llm_explainer.tokenizer import TokenizerType, create_tokenizer

        first = create_tokenizer(TokenizerType.WORD)
        first.encode("something")
        second = create_tokenizer(TokenizerType.WORD)

        assert second.vocabulary_size == 4

    def test_factory_rejects_unknown_type(self):
        from llm_explainer.tokenizer import create_tokenizer

        with pytest.raises(ValueError):
            create_tokenizer("word")
