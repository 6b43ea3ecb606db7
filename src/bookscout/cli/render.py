# ABOUTME: Turns find outcomes into display text and links, and prints them with Rich.
# ABOUTME: Long messages are split into chunks so no single block exceeds the display limit.

from rich.console import Console
from rich.text import Text

from bookscout.cli.cache import RenderedReply
from bookscout.core.outcomes import (
    CatalogMatch,
    ExtractionFailed,
    InsufficientInfo,
    NeedMoreDetail,
    NoMatch,
    Outcome,
    SecondaryMatch,
    UnclearPhoto,
)

MAX_CHUNK = 3800
_MAX_CHUNKS = 2


def _byline(title: str, author: str | None) -> str:
    return f"{title}, {author}" if author else title


def _evidence(evidence: tuple[str, ...]) -> str:
    return " | ".join(evidence) if evidence else "-"


def render(outcome: Outcome, *, show_details: bool = False) -> RenderedReply:
    """Render an outcome as reply text and links.

    Args:
        outcome: Result of a find request.
        show_details: Include the model output preview for extraction failures.
    """
    if isinstance(outcome, CatalogMatch):
        text = (
            f"Found in the library:\n\n• {_byline(outcome.title, outcome.author)}\n"
            f"\nConfidence: {outcome.confidence:.2f}\n"
            f"Evidence: {_evidence(outcome.evidence)}"
        )
        if outcome.genres:
            text += f"\nGenres: {', '.join(outcome.genres)}"
        if outcome.description:
            text += f"\n\nDescription:\n{outcome.description}"
        links: list[tuple[str, str]] = []
        if outcome.page_url:
            links.append(("Library page", outcome.page_url))
        for fmt, url in outcome.downloads.items():
            links.append((f"Download {fmt.upper()}", url))
        return RenderedReply(text=text, links=tuple(links))

    if isinstance(outcome, SecondaryMatch):
        text = (
            f"Found this:\n\n• {_byline(outcome.volume.title, outcome.volume.author or None)}\n"
            f"\nConfidence: {outcome.confidence:.2f}\n"
            f"Evidence: {_evidence(outcome.evidence)}\n\n"
            "The library had no confident match, so this is a Google Books result."
        )
        return RenderedReply(text=text, links=(("Google Books", outcome.link),))

    if isinstance(outcome, NoMatch):
        guess = outcome.guess
        return RenderedReply(
            text=(
                f"Looks like: {_byline(guess.title or guess.query, guess.author)}\n"
                "Not found in the library and could not be confirmed in Google Books."
            )
        )

    if isinstance(outcome, NeedMoreDetail):
        return RenderedReply(
            text=(
                f"Not sure which book that is (confidence {outcome.confidence:.2f}). "
                "Add details: plot, characters, setting, or when you read it."
            )
        )

    if isinstance(outcome, InsufficientInfo):
        return RenderedReply(
            text="Not enough information to search. Describe the book in a bit more detail."
        )

    if isinstance(outcome, UnclearPhoto):
        return RenderedReply(
            text="Not sure about the title. Send a shot where the cover is bigger and straighter."
        )

    if isinstance(outcome, ExtractionFailed):
        failure = outcome.failure
        text = f"Could not read the model's answer ({failure.reason.value}). Try again."
        if failure.output_truncated:
            text += " The answer was cut off at the model's length limit."
        if show_details:
            text += (
                f"\n\nfinish_reason={failure.finish_reason or '-'}\n"
                f"Preview:\n{failure.preview}"
            )
        return RenderedReply(text=text)

    raise TypeError(f"Unknown outcome type: {type(outcome).__name__}")


def chunks(text: str, size: int = MAX_CHUNK, max_chunks: int = _MAX_CHUNKS) -> list[str]:
    """Split text into at most max_chunks pieces of at most size characters."""
    if not text:
        return []
    return [text[i : i + size] for i in range(0, len(text), size)][:max_chunks]


def print_notes(console: Console, notes: list[str]) -> None:
    """Print diagnostic notes dimmed, chunked like any other message."""
    for note in notes:
        for piece in chunks(note):
            console.print(Text(piece, style="dim"))
        console.print()


def print_reply(console: Console, reply: RenderedReply) -> None:
    """Print reply text followed by one line per link."""
    for piece in chunks(reply.text):
        console.print(Text(piece))
    if reply.links:
        console.print()
    for label, url in reply.links:
        line = Text(f"{label}: ", style="bold")
        line.append(url, style=f"link {url}")
        console.print(line)
