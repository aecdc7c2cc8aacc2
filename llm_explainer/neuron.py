"""
A Single Neuron and a Layer of Neurons

The feed-forward part of a transformer is built from very simple units. A
neuron takes a list of inputs, multiplies each by a weight, adds a bias, and
passes the sum through an activation function:

    pre_activation = bias + sum_i(inputs[i] * weights[i])
    output = activation(pre_activation)

Learning nudges the weights against the gradient of the loss. For one
neuron with an upstream gradient g = d_loss/d_output:

    local_gradient = g * activation'(pre_activation)
    weights[i] -= learning_rate * local_gradient * inputs[i]
    bias       -= learning_rate * local_gradient

activate() caches the pre-activation and output of the most recent forward
pass; calculate_gradient() and update_weights() read that cache. The cache is
also exposed as an ActivationRecord so a caller can keep it and pass it back
explicitly.

Classes:
    ActivationRecord: Pre-activation and output of one forward pass
    Neuron: Weighted sum + bias + activation
    NeuralLayer: Several neurons fed the same inputs in parallel
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from llm_explainer.activations import (
    ActivationFunction,
    activation_derivative,
    apply_activation,
)


@dataclass(frozen=True)
class ActivationRecord:
    """
    Values produced by one call to Neuron.activate().

    Attributes:
        pre_activation: Weighted sum plus bias, before the activation function
        output: Value after the activation function
    """

    pre_activation: float = 0.0
    output: float = 0.0


class Neuron:
    """
    A single computational unit: weights, bias and an activation function.

    Weights are either given explicitly or drawn uniformly from [-1, 1) and
    scaled by sqrt(2 / input_size) (He-style scaling), using a generator
    seeded with `seed`.

    Before the first activate() the cached record is all zeros, so
    calculate_gradient() then behaves as if the last pre-activation and
    output were 0.0.

    Example:
        >>> neuron = Neuron(input_size=2, initial_weights=[0.5, 0.5],
        ...                 initial_bias=0.1, activation=ActivationFunction.LINEAR)
        >>> neuron.activate([1.0, 2.0])
        1.6
    """

    def __init__(
        self,
        input_size: int,
        activation: ActivationFunction = ActivationFunction.RELU,
        initial_bias: Optional[float] = None,
        initial_weights: Optional[Sequence[float]] = None,
        seed: Optional[int] = None,
    ):
        """
        Create a neuron.

        Args:
            input_size: Number of inputs the neuron accepts
            activation: Activation function applied to the weighted sum
            initial_bias: Starting bias (default 0.0)
            initial_weights: Starting weights; must have length input_size
            seed: Seed for random weight initialization when no weights are given
        """
        if initial_weights is not None:
            if len(initial_weights) != input_size:
                raise ValueError(
                    f"Initial weights length ({len(initial_weights)}) must match "
                    f"input size ({input_size})"
                )
            self._weights = [float(weight) for weight in initial_weights]
        else:
            rng = np.random.default_rng(seed)
            scale = np.sqrt(2.0 / input_size) if input_size > 0 else 0.0
            self._weights = [
                float((value * 2.0 - 1.0) * scale) for value in rng.random(input_size)
            ]

        self._bias = float(initial_bias) if initial_bias is not None else 0.0
        self._activation = activation
        self._last_activation = ActivationRecord()

    def _check_inputs(self, inputs: Sequence[float]) -> None:
        if len(inputs) != len(self._weights):
            raise ValueError(
                f"Input size ({len(inputs)}) does not match weight size "
                f"({len(self._weights)})"
            )

    def activate(self, inputs: Sequence[float]) -> float:
        """
        Forward pass: weighted sum, bias, activation.

        The sum starts from the bias and adds inputs[i] * weights[i] in index
        order, so results are reproducible to the bit.

        Args:
            inputs: One value per weight

        Returns:
            The neuron's output; pre-activation and output are also cached
        """
        self._check_inputs(inputs)

        pre_activation = self._bias
        for value, weight in zip(inputs, self._weights):
            pre_activation += float(value) * weight

        output = float(apply_activation(self._activation, pre_activation))
        self._last_activation = ActivationRecord(pre_activation, output)

        return output

    def calculate_gradient(
        self, output_gradient: float, record: Optional[ActivationRecord] = None
    ) -> float:
        """
        Local gradient: upstream gradient times the activation's derivative.

        Derivatives:
            relu:    1.0 if pre_activation > 0 else 0.0
            sigmoid: output * (1 - output)
            tanh:    1 - output^2
            linear:  1.0

        Args:
            output_gradient: d_loss / d_output from the next stage
            record: Forward pass to differentiate at; defaults to the most
                    recent activate() call

        Returns:
            d_loss / d_pre_activation
        """
        if record is None:
            record = self._last_activation

        derivative = activation_derivative(
            self._activation, record.pre_activation, record.output
        )

        return output_gradient * float(derivative)

    def update_weights(
        self, inputs: Sequence[float], learning_rate: float, output_gradient: float
    ) -> None:
        """
        One gradient descent step on weights and bias, in place.

        Uses the activation state cached by the last activate() call, so
        call activate(inputs) first.

        Args:
            inputs: Inputs of the forward pass being corrected
            learning_rate: Step size
            output_gradient: d_loss / d_output
        """
        self._check_inputs(inputs)

        gradient = self.calculate_gradient(output_gradient)

        for i, value in enumerate(inputs):
            self._weights[i] -= learning_rate * gradient * float(value)

        self._bias -= learning_rate * gradient

    @property
    def weights(self) -> List[float]:
        """A copy of the current weights."""
        return list(self._weights)

    @property
    def bias(self) -> float:
        return self._bias

    @property
    def activation_function(self) -> ActivationFunction:
        return self._activation

    @property
    def last_activation(self) -> ActivationRecord:
        return self._last_activation

    @property
    def last_output(self) -> float:
        return self._last_activation.output

    @property
    def last_pre_activation(self) -> float:
        return self._last_activation.pre_activation

    @property
    def input_size(self) -> int:
        return len(self._weights)

    def __repr__(self) -> str:
        return (
            f"Neuron(input_size={self.input_size}, "
            f"activation={self._activation.value}, bias={self._bias:.4f})"
        )


class NeuralLayer:
    """
    A layer of neurons that all receive the same inputs.

    Each neuron has its own weights. With a seed, neuron i is seeded with
    seed + i so the layer is reproducible but its neurons differ.

    Attributes:
        neurons: The neurons, in output order
    """

    def __init__(
        self,
        neuron_count: int,
        inputs_per_neuron: int,
        activation: ActivationFunction = ActivationFunction.RELU,
        seed: Optional[int] = None,
    ):
        self.neurons: List[Neuron] = [
            Neuron(
                input_size=inputs_per_neuron,
                activation=activation,
                seed=seed + index if seed is not None else None,
            )
            for index in range(neuron_count)
        ]

    def forward(self, inputs: Sequence[float]) -> List[float]:
        """Activate every neuron on the same inputs; outputs in neuron order."""
        return [neuron.activate(inputs) for neuron in self.neurons]

    def update_weights(
        self,
        inputs: Sequence[float],
        learning_rate: float,
        output_gradients: Sequence[float],
    ) -> None:
        """
        Update every neuron with its own output gradient.

        Args:
            inputs: Inputs of the forward pass being corrected
            learning_rate: Step size
            output_gradients: One gradient per neuron
        """
        if len(output_gradients) != len(self.neurons):
            raise ValueError(
                f"Output gradients length ({len(output_gradients)}) must match "
                f"neuron count ({len(self.neurons)})"
            )

        for neuron, output_gradient in zip(self.neurons, output_gradients):
            neuron.update_weights(inputs, learning_rate, output_gradient)

    @property
    def size(self) -> int:
        return len(self.neurons)

    @property
    def input_size(self) -> int:
        return self.neurons[0].input_size if self.neurons else 0


# =============================================================================
# EDUCATIONAL DEMO
# Run with: python -m llm_explainer.neuron
# =============================================================================
if __name__ == "__main__":
    print("=" * 70)
    print("NEURON DEMO - Learning One Weight at a Time")
    print("=" * 70)
    print()

    neuron = Neuron(
        input_size=2,
        initial_weights=[0.5, -0.3],
        initial_bias=0.1,
        activation=ActivationFunction.RELU,
    )
    inputs = [1.0, 2.0]
    target = 0.0

    print(f"Weights {neuron.weights}, bias {neuron.bias}")
    for step in range(5):
        output = neuron.activate(inputs)
        # d/d_output of 0.5 * (output - target)^2
        output_gradient = output - target
        neuron.update_weights(inputs, learning_rate=0.1, output_gradient=output_gradient)
        print(
            f"  step {step}: pre-activation {neuron.last_pre_activation:+.4f}, "
            f"output {output:.4f}, weights {np.round(neuron.weights, 4)}"
        )
    print()

    layer = NeuralLayer(neuron_count=3, inputs_per_neuron=2, seed=42)
    print(f"A layer of {layer.size} neurons on {inputs}: {np.round(layer.forward(inputs), 4)}")
