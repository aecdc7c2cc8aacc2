"""
Tests for activation functions module.

Tests cover:
- ReLU, sigmoid, tanh, linear: values and derivatives
- Dispatch by ActivationFunction
- Softmax: numerical stability, probability distribution properties
"""

import numpy as np
import pytest


class TestSoftmax:
    """
    Test suite for the softmax activation function.

    Softmax converts a vector of real numbers into a probability distribution.
    Formula: softmax(x)_i = exp(x_i) / sum(exp(x_j))

    Reference: "Attention Is All You Need" Section 3.2.1
    """

    def test_softmax_output_sums_to_one(self):
        """Softmax output should be a valid probability distribution (sums to 1)."""
        from llm_explainer.activations import softmax

        input_logits = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        output_probabilities = softmax(input_logits)

        assert np.isclose(np.sum(output_probabilities), 1.0), (
            "Softmax output must sum to 1.0"
        )

    def test_softmax_output_is_positive(self):
        from llm_explainer.activations import softmax

        output_probabilities = softmax(np.array([-10.0, 0.0, 10.0]))

        assert np.all(output_probabilities > 0), "All softmax outputs must be positive"

    def test_softmax_numerical_stability_large_values(self):
        """Softmax should not overflow with large input values."""
        from llm_explainer.activations import softmax

        output_probabilities = softmax(np.array([1000.0, 1001.0, 1002.0]))

        assert not np.any(np.isnan(output_probabilities))
        assert np.isclose(np.sum(output_probabilities), 1.0)

    def test_softmax_rows_of_matrix(self):
        """Softmax over the last axis normalizes each row independently."""
        from llm_explainer.activations import softmax

        scores = np.array([[1.0, 2.0, 3.0], [0.0, 0.0, 0.0]])
        output_probabilities = softmax(scores, axis=-1)

        assert np.allclose(np.sum(output_probabilities, axis=-1), 1.0)
        assert np.allclose(output_probabilities[1], 1.0 / 3.0)


class TestReLU:
    """ReLU(x) = max(0, x); its slope is 1 for x > 0 and 0 otherwise."""

    def test_relu_values(self):
        from llm_explainer.activations import relu

        result = relu(np.array([-2.0, 0.0, 3.5]))

        assert np.array_equal(result, [0.0, 0.0, 3.5])

    def test_relu_scalar(self):
        from llm_explainer.activations import relu

        assert relu(-0.28) == 0.0
        assert relu(1.5) == 1.5

    def test_relu_derivative(self):
        """Derivative is 1 for positive input, 0 otherwise (including exactly 0)."""
        from llm_explainer.activations import relu_derivative

        result = relu_derivative(np.array([-1.0, 0.0, 2.0]))

        assert np.array_equal(result, [0.0, 0.0, 1.0])


class TestSigmoid:
    """Sigmoid squashes into (0, 1); its slope is read from its own output."""

    def test_sigmoid_at_zero(self):
        from llm_explainer.activations import sigmoid

        assert sigmoid(0.0) == 0.5

    def test_sigmoid_range(self):
        from llm_explainer.activations import sigmoid

        result = sigmoid(np.array([-20.0, -1.0, 1.0, 20.0]))

        assert np.all(result > 0.0)
        assert np.all(result < 1.0)

    def test_sigmoid_is_symmetric(self):
        """sigmoid(-x) = 1 - sigmoid(x)."""
        from llm_explainer.activations import sigmoid

        x = np.linspace(-5, 5, 11)

        assert np.allclose(sigmoid(-x), 1.0 - sigmoid(x))

    def test_sigmoid_large_negative_does_not_produce_nan(self):
        from llm_explainer.activations import sigmoid

        result = sigmoid(np.array([-1000.0, 1000.0]))

        assert not np.any(np.isnan(result))
        assert np.allclose(result, [0.0, 1.0])

    def test_sigmoid_derivative_from_output(self):
        from llm_explainer.activations import sigmoid_derivative

        assert sigmoid_derivative(0.5) == 0.25
        assert sigmoid_derivative(0.0) == 0.0


class TestTanh:
    """Tanh squashes into (-1, 1); its slope is 1 - tanh(x)^2."""

    def test_tanh_values(self):
        from llm_explainer.activations import tanh

        x = np.array([-1.0, 0.0, 1.0])

        assert np.allclose(tanh(x), np.tanh(x))
        assert tanh(0.0) == 0.0

    def test_tanh_large_inputs_saturate(self):
        from llm_explainer.activations import tanh

        result = tanh(np.array([-500.0, 500.0]))

        assert np.array_equal(result, [-1.0, 1.0])

    def test_tanh_derivative_from_output(self):
        from llm_explainer.activations import tanh_derivative

        assert tanh_derivative(0.0) == 1.0
        assert np.isclose(tanh_derivative(0.5), 0.75)


class TestLinear:
    """The identity activation and its constant slope of 1."""

    def test_linear_is_identity(self):
        from llm_explainer.activations import linear

        x = np.array([-3.0, 0.0, 2.5])

        assert np.array_equal(linear(x), x)

    def test_linear_derivative_is_one(self):
        from llm_explainer.activations import linear_derivative

        assert np.array_equal(linear_derivative(np.array([-3.0, 0.0, 2.5])), [1.0, 1.0, 1.0])


class TestActivationDispatch:
    """Evaluating activations and their derivatives by ActivationFunction."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("RELU", [0.0, 0.0, 2.0]),
            ("SIGMOID", [1 / (1 + np.exp(2.0)), 0.5, 1 / (1 + np.exp(-2.0))]),
            ("TANH", [np.tanh(-2.0), 0.0, np.tanh(2.0)]),
            ("LINEAR", [-2.0, 0.0, 2.0]),
        ],
    )
    def test_apply_activation(self, name, expected):
        from llm_explainer.activations import ActivationFunction, apply_activation

        result = apply_activation(ActivationFunction[name], np.array([-2.0, 0.0, 2.0]))

        assert np.allclose(result, expected)

    @pytest.mark.parametrize(
        "name, pre_activation, output, expected",
        [
            ("RELU", 0.5, 0.5, 1.0),
            ("RELU", -0.5, 0.0, 0.0),
            ("SIGMOID", 0.0, 0.5, 0.25),
            ("TANH", 0.0, 0.0, 1.0),
            ("LINEAR", 3.0, 3.0, 1.0),
        ],
    )
    def test_activation_derivative(self, name, pre_activation, output, expected):
        from llm_explainer.activations import ActivationFunction, activation_derivative

        derivative = activation_derivative(
            ActivationFunction[name], pre_activation, output
        )

        assert np.isclose(derivative, expected)

    def test_unknown_activation_raises(self):
        from llm_explainer.activations import activation_derivative, apply_activation

        with pytest.raises(ValueError):
            apply_activation("swish", 1.0)
        with pytest.raises(ValueError):
            activation_derivative("swish", 1.0, 1.0)

    def test_enum_values(self):
        from llm_explainer.activations import ActivationFunction

        assert [function.value for function in ActivationFunction] == [
            "relu",
            "sigmoid",
            "tanh",
            "linear",
        ]
