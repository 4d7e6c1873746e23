"""
Exceptions
==========

Error types raised by the network and agent code.

    ConfigurationError    - Structurally invalid setup (fatal at construction)
    InputContractError    - Missing or wrongly sized vectors passed to a call
    ActionOutOfRangeError - Action index outside the agent's action count
"""


class ConfigurationError(ValueError):
    """Raised when a network, trainer, buffer or agent is configured wrongly."""


class InputContractError(ValueError):
    """Raised when an input or expected-output vector is None or has the wrong length."""


class ActionOutOfRangeError(IndexError):
    """Raised when an action index does not exist for the environment."""

    def __init__(self, action: int, action_size: int):
        super().__init__(f"Action {action} out of range (0..{action_size - 1}).")
        self.action = action
        self.action_size = action_size
