"""Exception hierarchy for the prompt flow.

::

    FlowError
    ├── ValidationError
    │   ├── RequestValidationError   input rejected, no outbound call made
    │   └── OutputValidationError    provider reply did not match the schema
    └── ProviderError                the provider call itself failed

Messages are written to be shown to the user directly.
"""


class FlowError(Exception):
    """Base class for every failure raised by a prompt flow."""


class ValidationError(FlowError):
    """Data failed schema validation on the way into or out of a flow."""


class RequestValidationError(ValidationError):
    """The flow input was rejected before any provider call was made."""


class OutputValidationError(ValidationError):
    """The provider reply was not a JSON array of well-formed URLs."""


class ProviderError(FlowError):
    """The outbound call to the model provider failed."""
