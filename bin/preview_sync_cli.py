#!/usr/bin/env python3
"""소스 마크업 파일과 렌더링된 HTML 사이의 위치 대응을 조회하는 CLI.

Usage:
    preview_sync_cli.py --source post.md --preview post.html --line 12
    preview_sync_cli.py --source post.md --preview post.html --selector "div > p:nth-of-type(3)"
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from bs4 import BeautifulSoup
from soupsieve import SelectorSyntaxError

from preview_sync.config import ConfigError, load_config
from preview_sync.element_resolver import ElementResolver
from preview_sync.selector import unique_css_selector
from text_utils import collapse_ws

# 출력할 노드 텍스트 최대 길이
_TEXT_PREVIEW_LIMIT = 80


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resolve source lines to rendered preview nodes and back"
    )
    parser.add_argument("--source", type=Path, required=True,
                        help="Source markup file (Markdown / BBCode)")
    parser.add_argument("--preview", type=Path, required=True,
                        help="Rendered HTML file, optionally annotated with data-ln")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--line", type=int,
                        help="Zero-based source line to resolve into a preview node")
    target.add_argument("--selector",
                        help="CSS selector of the clicked preview node to resolve into a source line")
    parser.add_argument("--config", type=Path,
                        help="YAML config file (scroll/highlight debounce, match thresholds)")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Set the logging level (default: %(default)s)")
    return parser


def _shorten(text: str) -> str:
    text = collapse_ws(text)
    if len(text) > _TEXT_PREVIEW_LIMIT:
        return text[:_TEXT_PREVIEW_LIMIT - 3] + "..."
    return text


def main() -> int:
    parser = _build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    for label, path in (("source", args.source), ("preview", args.preview)):
        if not path.is_file():
            print(f"Error: {label} file not found: {path}", file=sys.stderr)
            return 2

    try:
        config = load_config(args.config)
    except (ConfigError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    source = args.source.read_text(encoding="utf-8")
    soup = BeautifulSoup(args.preview.read_text(encoding="utf-8"), "html.parser")
    resolver = ElementResolver(source, soup, config)

    if args.line is not None:
        if args.line < 0:
            print(f"Error: line must be >= 0: {args.line}", file=sys.stderr)
            return 2
        node = resolver.resolve_preview_from_line(args.line)
        if node is None:
            print(f"[preview-sync] line={args.line} no match")
            return 1
        print(f"[preview-sync] line={args.line} -> {unique_css_selector(node)}")
        print(f"  text: {_shorten(node.get_text())}")
        return 0

    try:
        node = soup.select_one(args.selector)
    except SelectorSyntaxError as e:
        print(f"Error: invalid selector: {e}", file=sys.stderr)
        return 2
    if node is None:
        print(f"Error: selector matched nothing: {args.selector}", file=sys.stderr)
        return 2
    line = resolver.resolve_line_from_click(node)
    if line is None:
        print(f"[preview-sync] selector={args.selector} no match")
        return 1
    print(f"[preview-sync] selector={args.selector} -> line={line} (line {line + 1} in editor)")
    print(f"  text: {_shorten(resolver.index.text_of_line(line))}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
