"""
Correlation Report Errors
Exception types raised while building datasets, coefficients and figures
"""


class CorrelationReportError(ValueError):
    """Base class for every error raised by the correlation report"""


class InvalidParameterError(CorrelationReportError):
    """Malformed input parameter (covariance, sample size, method, columns...)"""


class InsufficientDataError(CorrelationReportError):
    """Not enough usable observations to compute a coefficient or a fit"""


class SubsampleSizeError(CorrelationReportError):
    """Requested sub-sample is larger than the source dataset"""
