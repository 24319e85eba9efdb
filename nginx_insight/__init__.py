"""nginx-insight package"""

from .patterns import VERSION
from .errors import AnalyzerError, FormatUndetected, UnknownTool, UnsupportedFormat
from .models import (BenchmarkAnalysisResult, BenchmarkMetrics, FormatKind,
                     LogAnalysisResult, LogMetrics, Recommendation, SecurityIssue,
                     Severity)
from .detector import detect_format
from .analyzer import BenchmarkAnalyzer, LogAnalyzer, analyze_benchmark, analyze_log
from .output import format_report, print_report, report_to_dict

__all__ = [
    'VERSION', 'AnalyzerError', 'FormatUndetected', 'UnsupportedFormat', 'UnknownTool',
    'FormatKind', 'Severity', 'LogMetrics', 'BenchmarkMetrics', 'Recommendation',
    'SecurityIssue', 'LogAnalysisResult', 'BenchmarkAnalysisResult',
    'detect_format', 'LogAnalyzer', 'BenchmarkAnalyzer', 'analyze_log',
    'analyze_benchmark', 'format_report', 'print_report', 'report_to_dict',
]
