class SVMError(Exception):
    """Base class for errors raised by the scratch kernel SVM pipeline."""


class InvalidInputError(SVMError, ValueError):
    """Bad shapes, lengths, ratios or unparsable values."""


class NumericDegeneracyError(SVMError, ArithmeticError):
    """Raised when standardization would divide by a zero standard deviation."""


class DegenerateTrainingError(SVMError, RuntimeError):
    """Raised when training ends without any support vectors to estimate the bias."""
