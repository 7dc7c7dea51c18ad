"""Formula error types."""


class FormulaSyntaxError(ValueError):
    """Malformed formula text: unexpected token, unbalanced parentheses, empty input."""
