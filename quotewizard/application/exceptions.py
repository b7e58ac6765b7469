class StorefrontUpstreamError(RuntimeError):
    """Raised when the storefront fails (timeouts, network errors, non-2xx responses)."""
    pass


class StorefrontContractError(RuntimeError):
    """Raised when the storefront answers with a shape we cannot use."""
    pass


class EmptyOrderError(RuntimeError):
    """Raised when no selected product resolves to a variant on the chosen channel."""
    pass


class FormValidationError(ValueError):
    """Raised when required form fields are missing or invalid."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("Form has invalid fields: " + ", ".join(sorted(errors)))
        self.errors = dict(errors)
