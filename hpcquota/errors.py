# vim: tabstop=4 expandtab shiftwidth=4 softtabstop=4

class QuotaError(Exception):
    """Base class for all hpc-quota errors"""

class ParseError(QuotaError):
    """Backend output does not have the expected shape; the line is dropped"""

class UnsupportedBackend(QuotaError):
    """Unknown backend tag handed to the dispatcher"""

class ExternalToolFailure(QuotaError):
    """A quota tool could not be run, failed or printed nothing"""

class ConfigError(QuotaError):
    """Impossible configuration or forbidden option"""
