"""nginx-insight - Command line interface"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from . import VERSION
from .analyzer import BenchmarkAnalyzer, LogAnalyzer
from .detector import detect_format
from .errors import AnalyzerError
from .output import print_report, report_to_dict

log = logging.getLogger(__name__)

LOG_TYPES = ['auto', 'access', 'error']
TOOLS = ['auto', 'wrk', 'ab', 'k6', 'autocannon', 'siege']


def read_text(filepath: str) -> str:
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {filepath}")
    with open(path, 'r', encoding='utf-8', errors='ignore') as f:
        return f.read()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nginx-insight",
        description="nginx-insight - nginx log and load-test analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--version", action="version", version=f"nginx-insight v{VERSION}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-o", "--output", help="Also write the report as JSON to this file")
    common.add_argument("-j", "--json", action="store_true", help="JSON output only")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    logs = sub.add_parser("logs", parents=[common], help="Analyze an nginx access or error log")
    logs.add_argument("logfile", help="Log file to analyze")
    logs.add_argument("-t", "--type", choices=LOG_TYPES, default="auto", help="Log type")
    logs.add_argument("--error", metavar="FILE", help="Error log to analyze alongside")

    bench = sub.add_parser("benchmark", parents=[common], help="Analyze load-test tool output")
    bench.add_argument("results", help="File holding the tool's console output")
    bench.add_argument("-t", "--tool", choices=TOOLS, default="auto", help="Benchmark tool")

    detect = sub.add_parser("detect", parents=[common], help="Print the detected input format")
    detect.add_argument("file", help="File to inspect")

    return parser


def _run(args: argparse.Namespace, console: Console) -> None:
    if args.command == "detect":
        kind = detect_format(read_text(args.file))
        if args.json:
            print(json.dumps({'format': kind.value}))
        else:
            console.print(f"Detected format: [cyan]{kind.value}[/]")
        return

    if args.command == "logs":
        analyzer = LogAnalyzer(console=None if args.json else console)
        results = [analyzer.analyze(read_text(args.logfile), args.type)]
        if args.error:
            results.append(analyzer.analyze(read_text(args.error), 'error'))
    else:
        results = [BenchmarkAnalyzer().analyze(read_text(args.results), args.tool)]

    reports = [report_to_dict(r) for r in results]
    payload = reports[0] if len(reports) == 1 else reports

    if args.json:
        print(json.dumps(payload, indent=2))
    else:
        for result in results:
            print_report(result, console)

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(payload, f, indent=2)
        if not args.json:
            console.print(f"\n[green]Report saved to:[/] {escape(args.output)}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )
    console = Console()

    try:
        _run(args, console)
    except (OSError, AnalyzerError) as e:
        log.debug("Analysis failed", exc_info=True)
        Console(stderr=True).print(f"[red]Error:[/] {escape(str(e))}", highlight=False)
        return 1
    return 0
