#!/usr/bin/env python3
"""
pypack: pack a directory tree into size-bounded text bundles for LLM chats.

This tool walks a directory depth-first, wraps every eligible text file in a
`// File: <path>` header and a fenced block, and greedily packs the entries
into numbered bundle files that each stay below a character budget. The
bundles are meant to be pasted, one after the other, into the prompt box of a
chat-based assistant.
"""

from __future__ import annotations

import argparse
import fnmatch
import logging
import os
import posixpath
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterator

DEFAULT_MAX_FILE_SIZE = 100 * 1024
DEFAULT_CHAR_LIMIT = 30000
DEFAULT_PROGRESS_EVERY = 100
DEFAULT_BUNDLE_NAME = "bundled_codebase_{index}.txt"

FENCE = "```"
GLOB_CHARS = "*?["

# Between INFO and WARNING, rendered green.
SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

YELLOW = "\033[33m"
RESET = "\033[0m"

logger = logging.getLogger(__name__)


class ColorFormatter(logging.Formatter):
    """
    Custom logging formatter that adds ANSI color codes to log messages.

    This formatter applies color coding based on log levels for better
    readability in terminal output. Coloring can be switched off, e.g. when
    the output is redirected to a file.
    """

    COLORS = {
        logging.DEBUG: "\033[36m",  # Cyan
        SUCCESS: "\033[32m",  # Green
        logging.WARNING: "\033[33m",  # Yellow
        logging.ERROR: "\033[31m",  # Red
        logging.CRITICAL: "\033[41m",  # Red background
    }
    RESET = "\033[0m"

    def __init__(self, fmt: str | None = None, use_color: bool = True):
        super().__init__(fmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record with colors.

        Args:
            record (logging.LogRecord):
                The log record to format.

        Returns:
            str:
                The formatted log message with ANSI color codes.

        """
        message = super().format(record)
        color = self.COLORS.get(record.levelno, "") if self.use_color else ""
        if color:
            message = f"{color}{message}{self.RESET}"
        return message


def colored(text: str, color_code: str) -> str:
    """Wrap text in an ANSI color code."""
    return f"{color_code}{text}{RESET}"


def use_color_for(mode: str, stream) -> bool:
    """Resolve a --color mode (always, never, auto) for the given stream."""
    if mode == "always":
        return True
    if mode == "never":
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def parse_size(size_str: str) -> int:
    """
    Parse human-readable size string into bytes.

    Supports formats like '100KB', '1.5MB', '500B', or plain numbers for bytes.

    Args:
        size_str (str):
            Size string to parse (e.g., '100KB', '1.5MB', '1024')

    Returns:
        int:
            Size in bytes as integer

    Raises:
        ValueError: If the size string format is invalid or negative

    Examples:
        >>> parse_size('100KB')
        102400
        >>> parse_size('1024')
        1024

    """
    size_str = size_str.strip().upper()
    if not size_str:
        raise ValueError("Empty size.")

    value: float | None = None
    try:
        value = float(size_str)
    except ValueError:
        # Longest unit first, so that 'KB' is not mistaken for 'B'.
        for unit, multiplier in (
            ("TB", 1024**4),
            ("GB", 1024**3),
            ("MB", 1024**2),
            ("KB", 1024),
            ("B", 1),
        ):
            if size_str.endswith(unit):
                try:
                    value = float(size_str[: -len(unit)].strip()) * multiplier
                except ValueError:
                    continue
                break

    if value is None:
        raise ValueError(
            f"Invalid size format: '{size_str}'. "
            f"Use formats like '100KB', '1.5MB', or plain numbers for bytes."
        )
    if value < 0:
        raise ValueError(f"Size cannot be negative: '{size_str}'.")
    return int(value)


# =============================================================================
# Ignore rules
# =============================================================================


class IgnoreKind(Enum):
    """How an ignore rule is matched against a directory entry."""

    BASENAME = "basename"
    EXACT_PATH = "path"
    PATH_PREFIX = "prefix"
    GLOB = "glob"


@dataclass(frozen=True)
class IgnoreRule:
    """A single entry of the ignore list.

    Attributes:
        kind (IgnoreKind):
            The matching policy.
        pattern (str):
            The normalised pattern, using forward slashes and no trailing
            separator.
    """

    kind: IgnoreKind
    pattern: str

    def matches(self, name: str, *paths: str, is_dir: bool = False) -> bool:
        """Check whether an entry is covered by this rule.

        Args:
            name (str):
                The final path component of the entry.
            *paths (str):
                The spellings of the entry path to test, with forward slashes
                (typically relative to the scan root and as displayed).
            is_dir (bool):
                Whether the entry is a directory.

        Returns:
            bool:
                True if the entry must be skipped.
        """
        if self.kind is IgnoreKind.BASENAME:
            return name == self.pattern
        if self.kind is IgnoreKind.EXACT_PATH:
            return self.pattern in paths
        if self.kind is IgnoreKind.PATH_PREFIX:
            # A single-segment directory item prunes that name at any depth.
            if is_dir and "/" not in self.pattern and name == self.pattern:
                return True
            prefix = self.pattern + "/"
            return any(p == self.pattern or p.startswith(prefix) for p in paths)
        if name == self.pattern or self.pattern in paths:
            return True
        if "/" in self.pattern:
            return any(fnmatch.fnmatchcase(p, self.pattern) for p in paths)
        return fnmatch.fnmatchcase(name, self.pattern)


def parse_ignore_rule(raw: str) -> IgnoreRule:
    """Turn a command-line ignore item into an IgnoreRule.

    A trailing separator denotes a directory whose whole subtree is skipped,
    glob characters select shell-style matching, any other separator denotes
    an exact path, and everything else is matched against basenames.

    Args:
        raw (str):
            The ignore item as given by the user.

    Returns:
        IgnoreRule:
            The parsed rule.

    Raises:
        ValueError: If the item is empty or names the scan root itself.
    """
    text = raw.strip().replace(os.sep, "/")
    if not text:
        raise ValueError("Empty ignore item.")

    is_prefix = text.endswith("/")
    pattern = posixpath.normpath(text)
    if pattern in (".", "/", "//"):
        raise ValueError(f"Ignore item '{raw}' would exclude everything.")

    if is_prefix:
        return IgnoreRule(IgnoreKind.PATH_PREFIX, pattern)
    if any(char in pattern for char in GLOB_CHARS):
        return IgnoreRule(IgnoreKind.GLOB, pattern)
    if "/" in pattern:
        return IgnoreRule(IgnoreKind.EXACT_PATH, pattern)
    return IgnoreRule(IgnoreKind.BASENAME, pattern)


def parse_ignore_rules(items: list[str]) -> list[IgnoreRule]:
    """Parse every ignore item, dropping duplicates while keeping order."""
    rules: list[IgnoreRule] = []
    for item in items:
        rule = parse_ignore_rule(item)
        if rule not in rules:
            rules.append(rule)
    return rules


# =============================================================================
# Data model
# =============================================================================


@dataclass
class RunStatistics:
    """Counters for one packing run.

    Attributes:
        files_processed (int):
            Files accepted by the walker and handed to the packer.
        bundles_written (int):
            Bundles successfully persisted.
        total_characters (int):
            Characters across all persisted bundles.
        files_skipped (int):
            Files left out because they were ignored, too large, or not UTF-8.
        errors (int):
            Recoverable I/O errors (unreadable files or directories, failed
            bundle writes).
    """

    files_processed: int = 0
    bundles_written: int = 0
    total_characters: int = 0
    files_skipped: int = 0
    errors: int = 0


@dataclass
class PackOptions:
    """Tunables for a packing run."""

    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    char_limit: int = DEFAULT_CHAR_LIMIT
    progress_every: int = DEFAULT_PROGRESS_EVERY
    output_dir: Path | None = None
    name_template: str = DEFAULT_BUNDLE_NAME
    sort_entries: bool = False
    assume_yes: bool = False
    use_color: bool = False

    def __post_init__(self):
        if self.max_file_size < 0:
            raise ValueError("The maximum file size cannot be negative.")
        if self.char_limit <= 0:
            raise ValueError("The character limit must be a positive number.")
        if self.progress_every <= 0:
            raise ValueError("The progress interval must be a positive number.")
        if "{index}" not in self.name_template:
            raise ValueError(
                f"The bundle name '{self.name_template}' must contain '{{index}}'."
            )
        try:
            self.name_template.format(index=1)
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(
                f"Invalid bundle name '{self.name_template}': {e}"
            ) from e


@dataclass
class SourceFile:
    """A file accepted by the walker, with its decoded text."""

    path: str
    content: str


def format_entry(path: str, content: str) -> str:
    """Wrap a file in its `// File:` header and a fenced code block."""
    return f"// File: {path}\n{FENCE}\n{content}\n{FENCE}\n"


# =============================================================================
# Tree walker
# =============================================================================


class TreeWalker:
    """Depth-first walk of a directory yielding the files worth bundling.

    Directories are visited in pre-order through an explicit stack of pending
    listings, so a subdirectory is exhausted before the remaining siblings of
    its parent. Ignored directories are pruned without being listed.
    Symlinked directories are not followed.

    Attributes:
        root (str):
            The directory to walk, as given by the user.
        rules (list[IgnoreRule]):
            Entries matching any of these rules are skipped.
        max_file_size (int):
            Files larger than this many bytes are skipped.
        progress_every (int):
            A progress line is logged every this many accepted files.
        sort_entries (bool):
            Sort each listing by name instead of using the listing order.
        stats (RunStatistics):
            Counters shared with the rest of the run.
        file_count (int):
            Files accepted so far.
    """

    def __init__(
        self,
        root: str | os.PathLike,
        rules: list[IgnoreRule] | None = None,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        progress_every: int = DEFAULT_PROGRESS_EVERY,
        sort_entries: bool = False,
        stats: RunStatistics | None = None,
    ):
        self.root = os.fspath(root)
        self.rules = list(rules or [])
        self.max_file_size = max_file_size
        self.progress_every = progress_every
        self.sort_entries = sort_entries
        self.stats = stats if stats is not None else RunStatistics()
        self.file_count = 0

    def _list_directory(self, path: str) -> list[os.DirEntry] | None:
        try:
            with os.scandir(path) as it:
                entries = list(it)
        except OSError as e:
            logger.error("Error reading directory %s: %s", path, e)
            self.stats.errors += 1
            return None
        if self.sort_entries:
            entries.sort(key=lambda entry: entry.name)
        return entries

    def is_ignored(
        self, name: str, rel_path: str, path: str, is_dir: bool = False
    ) -> bool:
        """Check an entry against the ignore rules.

        Args:
            name (str):
                The entry basename.
            rel_path (str):
                The entry path relative to the root, with forward slashes.
            path (str):
                The entry path as it appears in the bundle headers.
            is_dir (bool):
                Whether the entry is a directory.

        Returns:
            bool:
                True if any rule matches.
        """
        if not self.rules:
            return False
        display = os.path.normpath(path).replace(os.sep, "/")
        return any(
            rule.matches(name, rel_path, display, is_dir=is_dir) for rule in self.rules
        )

    def _read_file(self, entry: os.DirEntry) -> SourceFile | None:
        """Apply the size and UTF-8 gates to a file and read it."""
        try:
            size = entry.stat().st_size
        except OSError as e:
            logger.error("Error reading file %s: %s", entry.path, e)
            self.stats.errors += 1
            return None

        if size > self.max_file_size:
            logger.warning(
                "Skipping file %s as it exceeds %g KB. File size: %.2f KB",
                entry.path,
                self.max_file_size / 1024,
                size / 1024,
            )
            self.stats.files_skipped += 1
            return None

        try:
            with open(entry.path, "rb") as f:
                data = f.read()
            content = data.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.warning(
                "Skipping file %s as it is not UTF-8 compatible: %s", entry.path, e
            )
            self.stats.files_skipped += 1
            return None
        except OSError as e:
            logger.error("Error reading file %s: %s", entry.path, e)
            self.stats.errors += 1
            return None

        return SourceFile(entry.path, content)

    def walk(self) -> Iterator[SourceFile]:
        """Yield the accepted files in traversal order.

        Yields:
            SourceFile:
                Path and decoded content of each accepted file.
        """
        entries = self._list_directory(self.root)
        if entries is None:
            return

        # Each frame holds the root-relative directory and its pending entries.
        stack: list[tuple[str, Iterator[os.DirEntry]]] = [("", iter(entries))]
        while stack:
            rel_dir, pending = stack[-1]
            entry = next(pending, None)
            if entry is None:
                stack.pop()
                continue

            rel_path = f"{rel_dir}/{entry.name}" if rel_dir else entry.name

            try:
                is_link = entry.is_symlink()
                is_dir = entry.is_dir()
                is_file = not is_dir and entry.is_file()
            except OSError as e:
                logger.error("Error reading %s: %s", entry.path, e)
                self.stats.errors += 1
                continue

            if self.is_ignored(entry.name, rel_path, entry.path, is_dir):
                if is_dir:
                    logger.info(
                        "Skipping directory %s as it is in the ignore list.",
                        entry.path,
                    )
                else:
                    logger.info(
                        "Skipping file %s as it is in the ignore list.", entry.path
                    )
                    self.stats.files_skipped += 1
                continue

            if is_dir:
                if is_link:
                    logger.info(
                        "Skipping directory %s as it is a symbolic link.",
                        entry.path,
                    )
                    continue
                sub_entries = self._list_directory(entry.path)
                if sub_entries is not None:
                    stack.append((rel_path, iter(sub_entries)))
                continue

            if not is_file:
                logger.info("Skipping %s as it is not a regular file.", entry.path)
                continue

            source = self._read_file(entry)
            if source is None:
                continue

            self.file_count += 1
            self.stats.files_processed += 1
            if self.file_count % self.progress_every == 0:
                logger.log(SUCCESS, "Processed %d files...", self.file_count)
            yield source


# =============================================================================
# Bundle packer
# =============================================================================


@dataclass
class Bundle:
    """The in-flight bundle: formatted entries and their total length."""

    entries: list[str] = field(default_factory=list)
    chars: int = 0

    def append(self, entry: str) -> None:
        """Add an entry to the end of the bundle."""
        self.entries.append(entry)
        self.chars += len(entry)

    def text(self) -> str:
        """Return the bundle contents as written to disk."""
        return "".join(self.entries)


class BundleWriter:
    """Persist bundles as numbered text files.

    Attributes:
        output_dir (Path):
            Directory receiving the bundles. Defaults to the current working
            directory.
        name_template (str):
            File name template, formatted with the 1-based bundle index.
    """

    def __init__(
        self,
        output_dir: str | os.PathLike | None = None,
        name_template: str = DEFAULT_BUNDLE_NAME,
    ):
        self.output_dir = Path(output_dir) if output_dir else Path.cwd()
        self.name_template = name_template

    def path_for(self, index: int) -> Path:
        return self.output_dir / self.name_template.format(index=index)

    def write(self, index: int, text: str) -> Path:
        """Write one bundle and return its path.

        Raises:
            OSError: If the directory cannot be created or the file written.
        """
        path = self.path_for(index)
        path.parent.mkdir(parents=True, exist_ok=True)
        # Undecodable file names surface as lone surrogates; keep one
        # character per character so the counts stay exact.
        with open(path, "w", encoding="utf-8", errors="replace", newline="") as f:
            f.write(text)
        return path


class BundlePacker:
    """Greedy, order-preserving packing of entries into bounded bundles.

    An entry that does not fit in the in-flight bundle closes it and starts
    a new one. Entries are never split or reordered, so an entry longer than
    the limit ends up alone in its own bundle.

    Attributes:
        writer (BundleWriter):
            Where completed bundles go.
        char_limit (int):
            Maximum characters per bundle.
        stats (RunStatistics):
            Counters shared with the rest of the run.
        bundle (Bundle):
            The in-flight bundle.
        next_index (int):
            Number of the next bundle to flush. Numbers of failed flushes are
            not reused.
    """

    def __init__(
        self,
        writer: BundleWriter,
        char_limit: int = DEFAULT_CHAR_LIMIT,
        stats: RunStatistics | None = None,
    ):
        self.writer = writer
        self.char_limit = char_limit
        self.stats = stats if stats is not None else RunStatistics()
        self.bundle = Bundle()
        self.next_index = 1

    def add(self, entry: str) -> None:
        """Append an entry, flushing the in-flight bundle first if it would overflow."""
        size = len(entry)
        if self.bundle.chars + size > self.char_limit:
            self.flush()
        if size > self.char_limit:
            logger.warning(
                "%s is %d characters, above the %d character bundle limit. "
                "It will be written to a bundle of its own.",
                entry.partition("\n")[0],
                size,
                self.char_limit,
            )
        self.bundle.append(entry)

    def flush(self) -> Path | None:
        """Persist the in-flight bundle, if any, and start an empty one.

        Returns:
            Path | None:
                The written file, or None if there was nothing to write or the
                write failed.
        """
        if not self.bundle.entries:
            return None

        index = self.next_index
        self.next_index += 1
        text = self.bundle.text()
        self.bundle = Bundle()

        try:
            path = self.writer.write(index, text)
        except OSError as e:
            logger.error("Error writing bundle %d: %s", index, e)
            self.stats.errors += 1
            return None

        self.stats.bundles_written += 1
        self.stats.total_characters += len(text)
        logger.log(SUCCESS, "Bundle %d written to %s.", index, path)
        return path

    def finish(self) -> Path | None:
        """Write whatever is left in the in-flight bundle."""
        return self.flush()


# =============================================================================
# Run coordinator
# =============================================================================


def confirm_action(message: str, use_color: bool = False) -> bool:
    """
    Ask the user a yes/no question on the terminal.

    Args:
        message (str):
            The question to display.
        use_color (bool):
            Whether to print the prompt in yellow.

    Returns:
        bool:
            True if the answer is 'y' or 'yes' (any case), False otherwise,
            including when the input is closed.

    """
    prompt = colored(message, YELLOW) if use_color else message
    try:
        answer = input(prompt)
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def pack_directory(
    root: str | os.PathLike,
    rules: list[IgnoreRule],
    options: PackOptions,
    stats: RunStatistics | None = None,
) -> RunStatistics:
    """Walk `root` and pack every accepted file into bundles.

    Args:
        root (str | os.PathLike):
            Directory to scan.
        rules (list[IgnoreRule]):
            Ignore rules applied during the walk.
        options (PackOptions):
            Size gate, character limit, output location and traversal order.
        stats (RunStatistics | None):
            Counters to update. A fresh instance is used if None.

    Returns:
        RunStatistics:
            The counters of the run.
    """
    stats = stats if stats is not None else RunStatistics()
    walker = TreeWalker(
        root,
        rules,
        max_file_size=options.max_file_size,
        progress_every=options.progress_every,
        sort_entries=options.sort_entries,
        stats=stats,
    )
    packer = BundlePacker(
        BundleWriter(options.output_dir, options.name_template),
        char_limit=options.char_limit,
        stats=stats,
    )
    for source in walker.walk():
        packer.add(format_entry(source.path, source.content))
    packer.finish()
    return stats


def report_summary(stats: RunStatistics, output_dir: Path) -> None:
    """Log the end-of-run summary."""
    logger.log(SUCCESS, "Total number of files processed: %d", stats.files_processed)
    if stats.files_skipped:
        logger.info("Total number of files skipped: %d", stats.files_skipped)
    if stats.errors:
        logger.warning("Errors encountered during the run: %d", stats.errors)
    logger.info("Bundles written to directory: %s", output_dir)
    logger.log(SUCCESS, "Total number of bundles written: %d", stats.bundles_written)
    # Rough token estimate: ~4 characters per token
    logger.log(
        SUCCESS,
        "Total characters written across all bundles: %d (~%d tokens)",
        stats.total_characters,
        stats.total_characters // 4,
    )
    if stats.bundles_written:
        logger.info(
            "Tell the assistant you are about to paste the entire codebase in %d "
            "part(s) and that it should only respond once you say you are "
            "finished. Then paste the bundles in order.",
            stats.bundles_written,
        )


def run(
    root: str,
    rules: list[IgnoreRule],
    options: PackOptions,
    confirm: Callable[[str, bool], bool] = confirm_action,
) -> int:
    """
    Validate the root, ask for confirmation, pack and report.

    Args:
        root (str):
            Directory to scan.
        rules (list[IgnoreRule]):
            Ignore rules.
        options (PackOptions):
            Run options.
        confirm (Callable[[str, bool], bool]):
            Yes/no prompt, called with the question and the color flag.

    Returns:
        int:
            Exit code: 0 on completion or when the user declines, 1 when the
            root directory cannot be used.

    """
    if not os.path.isdir(root) or not os.access(root, os.R_OK | os.X_OK):
        logger.error(
            "The specified directory %s does not exist or cannot be accessed.", root
        )
        return 1

    if not options.assume_yes and not confirm(
        f"Are you sure you want to scan {root}? (y/n) ", options.use_color
    ):
        logger.warning("Operation cancelled by user.")
        return 0

    output_dir = Path(options.output_dir) if options.output_dir else Path.cwd()
    logger.debug("Ignore rules: %s", rules)
    logger.debug(
        "Max file size: %d bytes, bundle limit: %d characters",
        options.max_file_size,
        options.char_limit,
    )

    stats = pack_directory(root, rules, options)
    report_summary(stats, output_dir)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="pypack",
        description=(
            "Bundle the text files of a directory into size-bounded files "
            "ready to paste into an AI assistant."
        ),
        epilog=(
            "Ignore items ending with '/' skip a whole directory, items with "
            "'*', '?' or '[' are shell patterns, items with '/' match an exact "
            "path, anything else matches file and directory names."
        ),
    )
    parser.add_argument(
        "directory",
        nargs="?",
        help="Directory to scan",
    )
    parser.add_argument(
        "ignore",
        nargs="*",
        default=[],
        help="Files or directories to ignore",
    )
    parser.add_argument(
        "--max-size",
        type=str,
        default="100KB",
        help="Skip files larger than this (e.g., '100KB', '1MB'; default: 100KB)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_CHAR_LIMIT,
        help=f"Maximum characters per bundle (default: {DEFAULT_CHAR_LIMIT})",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory where bundles are written (default: current dir)",
    )
    parser.add_argument(
        "--name",
        type=str,
        default=DEFAULT_BUNDLE_NAME,
        help=f"Bundle file name template (default: {DEFAULT_BUNDLE_NAME})",
    )
    parser.add_argument(
        "--progress-every",
        type=int,
        default=DEFAULT_PROGRESS_EVERY,
        help=f"Log progress every N files (default: {DEFAULT_PROGRESS_EVERY})",
    )
    parser.add_argument(
        "--sort",
        action="store_true",
        help="Visit directory entries in name order instead of listing order",
    )
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Do not ask for confirmation before scanning",
    )
    parser.add_argument(
        "-c",
        "--color",
        choices=["always", "never", "auto"],
        default="auto",
        help="Use colors in output (default: auto)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def setup_logging(verbose: bool = False, color: str = "auto") -> None:
    """Install the colored stream handler on the module logger."""
    handler = logging.StreamHandler()
    handler.setFormatter(
        ColorFormatter(
            "%(levelname)s: %(message)s", use_color=use_color_for(color, handler.stream)
        )
    )
    for old in list(logger.handlers):
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the pypack command-line tool.

    Args:
        argv (list[str] | None):
            Command-line arguments. If None, uses sys.argv.

    Returns:
        int:
            Exit code (0 for success).
    """
    parser = build_parser()
    # Ignore items may follow options, e.g. `pypack src --yes build/`.
    args = parser.parse_intermixed_args(argv)

    setup_logging(args.verbose, args.color)

    if args.directory is None:
        parser.print_usage()
        return 1

    try:
        rules = parse_ignore_rules(args.ignore)
        options = PackOptions(
            max_file_size=parse_size(args.max_size),
            char_limit=args.limit,
            progress_every=args.progress_every,
            output_dir=Path(args.output_dir) if args.output_dir else None,
            name_template=args.name,
            sort_entries=args.sort,
            assume_yes=args.yes,
            use_color=use_color_for(args.color, sys.stdout),
        )
    except ValueError as e:
        logger.error("%s", e)
        return 1

    try:
        return run(args.directory, rules, options)
    except KeyboardInterrupt:
        logger.error("Interrupted by user.")
        return 130
    except Exception as e:
        logger.error(
            "An unexpected error occurred: %s",
            e,
            exc_info=logger.isEnabledFor(logging.DEBUG),
        )
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
