"""nginx-insight - Exceptions"""


class AnalyzerError(Exception):
    """Base class for analysis failures surfaced to the user"""


class FormatUndetected(AnalyzerError):
    """No content signature matched; the caller must name the format"""


class UnsupportedFormat(AnalyzerError):
    """An explicitly requested format is not known"""


class UnknownTool(UnsupportedFormat):
    """An explicitly requested benchmark tool is not known"""
