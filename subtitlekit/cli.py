import argparse
import json
import os
import sys
from typing import Optional
import requests
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from subtitlekit.config import settings
from subtitlekit.core.errors import PipelineTimeoutError, SubtitleKitError
from subtitlekit.models.caption import Dialect
from subtitlekit.services.corrector import CorrectionEngine, apply_suggestions
from subtitlekit.services.fetcher import TranscriptFetcher
from subtitlekit.services.llm import LanguageModelService, build_client
from subtitlekit.services.serializer import render
from subtitlekit.services.subtitles import SubtitleService
from subtitlekit.utils.deadline import run_with_deadline
from subtitlekit.utils.segmenter import segment

console = Console()


def build_service(use_llm: bool = True) -> SubtitleService:
    """Single place where external clients are constructed."""
    client = build_client(settings) if use_llm else None
    llm = LanguageModelService(client) if client is not None else None
    return SubtitleService(
        fetcher=TranscriptFetcher.default(requests.Session()),
        corrector=CorrectionEngine(),
        llm=llm,
    )


def read_file(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def write_output(content: str, out: Optional[str], default_name: Optional[str] = None):
    if not out and not default_name:
        console.print(content, markup=False, highlight=False)
        return
    path = out or os.path.join(settings.OUTPUT_DIR, default_name)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    console.print(f"\n[blue]Saved output to {path}[/blue]")


def cmd_fetch(args) -> int:
    transcript = None
    if args.transcript_file:
        transcript = read_file(args.transcript_file).decode("utf-8", errors="replace")
    service = build_service(use_llm=args.translate)
    with Progress(SpinnerColumn(), TextColumn("[progress.description]{task.description}"), transient=True) as progress:
        progress.add_task(description="Fetching transcript...", total=None)
        result = run_with_deadline(
            lambda: service.generate_subtitles(args.url, target_lang=args.lang, fmt=args.format, transcript=transcript),
            args.timeout,
        )
    console.print(f"[green]✔[/green] Generated [bold]{result.filename}[/bold]")
    write_output(result.content, args.output, result.filename)
    return 0


def cmd_convert(args) -> int:
    service = build_service(use_llm=False)
    parsed = service.process_upload(os.path.basename(args.file), read_file(args.file))
    if not parsed.cues:
        console.print("[red]No valid cues found.[/red]")
        return 1
    console.print(f"[green]✔[/green] Parsed {len(parsed.cues)} cues")
    write_output(render(parsed.cues, Dialect(args.format)), args.output)
    return 0


def cmd_segment(args) -> int:
    text = read_file(args.file).decode("utf-8", errors="replace")
    cues = segment(text, args.max_chunk)
    write_output(render(cues, Dialect(args.format)), args.output)
    return 0


def cmd_suggest(args) -> int:
    text = read_file(args.file).decode("utf-8", errors="replace")
    service = build_service(use_llm=args.enhance)
    suggestions = service.suggest(text, enhance=args.enhance)

    if args.apply:
        console.print(apply_suggestions(text, suggestions), markup=False, highlight=False, soft_wrap=True)
        return 0
    if args.json:
        print(json.dumps([s.model_dump(exclude_none=True) for s in suggestions], ensure_ascii=False, indent=2))
        return 0

    table = Table(title=f"Suggestions ({len(suggestions)})", show_header=True, header_style="bold magenta")
    table.add_column("Span", style="cyan")
    table.add_column("Original", style="red")
    table.add_column("Replacement", style="green")
    table.add_column("Reason", style="white")
    for s in suggestions:
        table.add_row(f"{s.start}-{s.end}", repr(s.original), repr(s.replacement), s.reason or "")
    console.print(table)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="subtitlekit", description="Caption acquisition and proofreading")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("fetch", help="Build subtitles for a YouTube video")
    p.add_argument("url", help="YouTube URL or video id")
    p.add_argument("--lang", default="en", help="Target caption language")
    p.add_argument("--format", choices=["srt", "vtt"], default="srt")
    p.add_argument("--transcript-file", help="Raw transcript to segment if no captions can be fetched")
    p.add_argument("--translate", action="store_true", help="Translate captions with the language model")
    p.add_argument("--timeout", type=float, default=settings.REQUEST_TIMEOUT, help="Deadline in seconds")
    p.add_argument("-o", "--output", help="Output file (default: outputs/<filename>)")
    p.set_defaults(func=cmd_fetch)

    p = sub.add_parser("convert", help="Parse an .srt/.vtt/.txt file and re-render it")
    p.add_argument("file")
    p.add_argument("--format", choices=["srt", "vtt"], default="srt")
    p.add_argument("-o", "--output")
    p.set_defaults(func=cmd_convert)

    p = sub.add_parser("segment", help="Split plain text into timed cues")
    p.add_argument("file")
    p.add_argument("--max-chunk", type=int, default=settings.MAX_CHUNK_SECONDS)
    p.add_argument("--format", choices=["srt", "vtt"], default="srt")
    p.add_argument("-o", "--output")
    p.set_defaults(func=cmd_segment)

    p = sub.add_parser("suggest", help="Proofread a transcript")
    p.add_argument("file")
    p.add_argument("--enhance", action="store_true", help="Merge language-model suggestions")
    p.add_argument("--apply", action="store_true", help="Print the corrected text")
    p.add_argument("--json", action="store_true", help="Print suggestions as JSON")
    p.set_defaults(func=cmd_suggest)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        code = args.func(args)
    except PipelineTimeoutError as e:
        console.print(f"[bold red]Timeout:[/bold red] {e}")
        code = 124
    except (SubtitleKitError, ValueError, OSError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
