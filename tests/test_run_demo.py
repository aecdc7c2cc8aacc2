"""
Tests for the command line demo.
"""

import pytest


class TestParseArgs:
    """Command line options and their defaults."""

    def test_defaults(self):
        from run_demo import DEFAULT_TEXT, parse_args

        args = parse_args([])

        assert args.mode == "all"
        assert args.text == DEFAULT_TEXT
        assert args.seed == 42
        assert args.embedding_dim == 32
        assert args.max_tokens == 5
        assert args.tokenizer == "word"
        assert args.verbose is False

    def test_options(self):
        from run_demo import parse_args

        args = parse_args(
            ["embed", "--text", "hi there", "--seed", "3", "--tokenizer", "subword"]
        )

        assert args.mode == "embed"
        assert args.text == "hi there"
        assert args.seed == 3
        assert args.tokenizer == "subword"

    def test_unknown_mode_exits(self):
        from run_demo import parse_args

        with pytest.raises(SystemExit):
            parse_args(["train"])


class TestBuildConfig:
    """Parsed options become an ExplainerConfig."""

    def test_build_config(self):
        from run_demo import build_config, parse_args

        from llm_explainer.tokenizer import TokenizerType

        config = build_config(
            parse_args(["--seed", "9", "--embedding-dim", "16", "--tokenizer", "subword"])
        )

        assert config.seed == 9
        assert config.embedding_dimension == 16
        assert config.tokenizer_type is TokenizerType.SUBWORD
        assert config.max_tokens == 5


class TestMain:
    """Every demo mode runs end to end and prints its stages."""

    @pytest.mark.parametrize("mode", ["all", "tokenize", "embed", "attention", "neuron"])
    def test_main_runs_each_mode(self, mode, capsys):
        from run_demo import main

        main([mode, "--text", "The cat sat on the mat.", "--embedding-dim", "8"])

        output = capsys.readouterr().out
        assert "Done!" in output
        assert f"Mode: {mode}" in output

    def test_tokenize_mode_shows_tokens(self, capsys):
        from run_demo import main

        main(["tokenize", "--text", "Unhappiness!"])

        output = capsys.readouterr().out
        assert "'un', 'happi', 'ness'" in output

    def test_empty_text(self, capsys):
        from run_demo import main

        main(["attention", "--text", ""])

        assert "No tokens to attend over." in capsys.readouterr().out

    def test_verbose_traces_subword_splits(self, capsys):
        from run_demo import main

        main(["tokenize", "--text", "Unhappiness!", "--verbose"])

        output = capsys.readouterr().out
        assert "'unhappiness' -> ['un', 'happi', 'ness']" in output
        assert "prefix 'un' in 'unhappiness'" in output

    def test_max_tokens_beyond_sequence_length_exits(self):
        """A too-large --max-tokens is reported instead of crashing mid-demo."""
        from run_demo import main

        long_text = " ".join(f"word{index}" for index in range(80))

        with pytest.raises(SystemExit, match="max_sequence_length"):
            main(["attention", "--text", long_text, "--max-tokens", "80"])
