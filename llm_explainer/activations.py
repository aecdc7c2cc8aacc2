"""
Activation Functions for Neurons and Attention

This module implements the activation functions a single neuron can use,
together with the derivatives needed to update its weights, plus softmax for
turning attention scores into weights.

All functions accept a Python float or a NumPy array and work element-wise.

Functions:
    relu: Rectified Linear Unit
    sigmoid: Logistic function, squashes values into (0, 1)
    tanh: Hyperbolic tangent, squashes values into (-1, 1)
    linear: Identity
    softmax: Converts scores to a probability distribution

Derivative Functions:
    relu_derivative, sigmoid_derivative, tanh_derivative, linear_derivative

Dispatch:
    ActivationFunction: Enum naming the four neuron activations
    apply_activation: Evaluate an ActivationFunction
    activation_derivative: Derivative of an ActivationFunction from cached state

Reference:
    - "Attention Is All You Need" (Vaswani et al., 2017) - Softmax in attention
    - "Rectified Linear Units Improve Restricted Boltzmann Machines" (Nair & Hinton, 2010)
"""

from enum import Enum

import numpy as np


class ActivationFunction(Enum):
    """Activation functions available to a Neuron."""

    RELU = "relu"
    SIGMOID = "sigmoid"
    TANH = "tanh"
    LINEAR = "linear"


def relu(x):
    """
    Compute ReLU (Rectified Linear Unit) activation.

    Mathematical Formula:
        ReLU(x) = max(0, x)

    Args:
        x: Float or array of any shape.

    Returns:
        Value of the same shape with ReLU applied element-wise.

    Example:
        >>> relu(np.array([-2.0, 0.0, 2.0]))
        array([0., 0., 2.])
    """
    return np.maximum(0.0, x)


def relu_derivative(pre_activation):
    """
    Derivative of ReLU, evaluated at the pre-activation value.

        d(ReLU)/dx = 1 if x > 0, else 0

    At x=0 the derivative is undefined; 0 is used as the subgradient.
    """
    return np.where(np.asarray(pre_activation) > 0, 1.0, 0.0)


def sigmoid(x):
    """
    Compute the logistic sigmoid.

    Mathematical Formula:
        sigmoid(x) = 1 / (1 + e^-x)

    Properties:
        - Output is always in (0, 1)
        - sigmoid(0) = 0.5
        - Large negative inputs give exp overflow to inf, which still yields 0

    Args:
        x: Float or array of any shape.

    Returns:
        Value of the same shape with sigmoid applied element-wise.
    """
    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-np.asarray(x, dtype=np.float64)))


def sigmoid_derivative(output):
    """
    Derivative of sigmoid, evaluated from its own output s:

        d(sigmoid)/dx = s * (1 - s)
    """
    return output * (1.0 - output)


def tanh(x):
    """
    Compute the hyperbolic tangent.

    Mathematical Formula:
        tanh(x) = (e^x - e^-x) / (e^x + e^-x)

    np.tanh evaluates the same function without overflowing for large |x|.
    """
    return np.tanh(x)


def tanh_derivative(output):
    """
    Derivative of tanh, evaluated from its own output t:

        d(tanh)/dx = 1 - t^2
    """
    return 1.0 - output * output


def linear(x):
    """Identity activation: linear(x) = x."""
    return x


def linear_derivative(x):
    """Derivative of the identity is 1 everywhere."""
    return np.ones_like(np.asarray(x, dtype=np.float64))


def apply_activation(activation: ActivationFunction, x):
    """
    Evaluate an activation function by enum value.

    Args:
        activation: Which function to apply
        x: Pre-activation value(s)

    Returns:
        Activated value(s)
    """
    if activation is ActivationFunction.RELU:
        return relu(x)
    if activation is ActivationFunction.SIGMOID:
        return sigmoid(x)
    if activation is ActivationFunction.TANH:
        return tanh(x)
    if activation is ActivationFunction.LINEAR:
        return linear(x)

    raise ValueError(f"Unknown activation function: {activation!r}")


def activation_derivative(activation: ActivationFunction, pre_activation, output):
    """
    Derivative of an activation function from a forward pass's cached values.

    ReLU needs the pre-activation (its input); sigmoid and tanh are cheaper
    to differentiate from their output; linear needs neither.

    Args:
        activation: Which function was applied
        pre_activation: Input to the activation in the forward pass
        output: Output of the activation in the forward pass

    Returns:
        d(activation)/dx at that point
    """
    if activation is ActivationFunction.RELU:
        return relu_derivative(pre_activation)
    if activation is ActivationFunction.SIGMOID:
        return sigmoid_derivative(output)
    if activation is ActivationFunction.TANH:
        return tanh_derivative(output)
    if activation is ActivationFunction.LINEAR:
        return linear_derivative(pre_activation)

    raise ValueError(f"Unknown activation function: {activation!r}")


def softmax(logits: np.ndarray, axis: int = -1) -> np.ndarray:
    """
    Compute softmax activation function.

    Converts a vector of arbitrary real values (logits) into a probability
    distribution where all values are positive and sum to 1.

    Mathematical Formula:
        softmax(x)_i = exp(x_i) / sum_j(exp(x_j))

    Numerical Stability:
        We subtract max(x) from all values before exponentiation to prevent
        overflow. This doesn't change the result because:
        exp(x_i - max) / sum(exp(x_j - max)) = exp(x_i) / sum(exp(x_j))

    Args:
        logits: Input array of any shape.
        axis: The axis along which to compute softmax. Default is -1 (last axis).

    Returns:
        Array of same shape as input whose values along `axis` sum to 1.

    Example:
        >>> probs = softmax(np.array([1.0, 2.0, 3.0]))
        >>> print(probs)  # [0.09, 0.24, 0.67]
    """
    max_logit = np.max(logits, axis=axis, keepdims=True)
    exponentials = np.exp(logits - max_logit)

    return exponentials / np.sum(exponentials, axis=axis, keepdims=True)


# =============================================================================
# EDUCATIONAL DEMO
# Run with: python -m llm_explainer.activations
# =============================================================================
if __name__ == "__main__":
    print("=" * 70)
    print("ACTIVATION FUNCTIONS DEMO")
    print("=" * 70)
    print()
    print("A neuron adds up its weighted inputs, then bends the result with an")
    print("activation function. Without that bend, stacking neurons would")
    print("only ever produce a straight line.")
    print()

    x = np.array([-2.0, -1.0, 0.0, 1.0, 2.0])
    print(f"x:       {x}")
    for function in ActivationFunction:
        output = apply_activation(function, x)
        derivative = activation_derivative(function, x, output)
        print(f"{function.value:8s} {np.round(output, 3)}  slope {np.round(derivative, 3)}")
    print()

    scores = np.array([2.0, 1.0, 0.1])
    print(f"softmax({scores}) = {np.round(softmax(scores), 3)}")
