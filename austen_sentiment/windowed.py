"""Windowed sentiment aggregation.

Scored tokens are grouped into windows of ``window_size`` consecutive lines
per document (``window_index = line_number // window_size``) and each window
is reduced to a net sentiment:

* ``Mode.CATEGORICAL`` - positive label count minus negative label count
  (bing, nrc). Other labels such as NRC emotions are ignored.
* ``Mode.SCORED`` - the sum of the numeric scores (afinn, vader).

Only windows with at least one contributing token are emitted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from numbers import Number
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

import pandas as pd

from austen_sentiment import utils
from austen_sentiment.errors import InvalidConfiguration

POSITIVE = "positive"
NEGATIVE = "negative"

Polarity = Union[str, int, float]


class Mode(Enum):
    CATEGORICAL = "categorical"
    SCORED = "scored"


@dataclass(frozen=True)
class Token:
    """A word at a line of a document."""

    document_id: str
    line_number: int
    word: str


@dataclass(frozen=True)
class SentimentEntry:
    word: str
    polarity: Polarity


@dataclass(frozen=True)
class ScoredToken:
    """A token joined with one lexicon entry for its word."""

    document_id: str
    line_number: int
    word: str
    polarity: Polarity


@dataclass(frozen=True)
class WindowSentiment:
    document_id: str
    window_index: int
    net_sentiment: Union[int, float]
    positive_count: Optional[int] = None  # CATEGORICAL only
    negative_count: Optional[int] = None


class _Window:
    """Running totals for one (document_id, window_index) group."""

    __slots__ = ("positive", "negative", "score", "contributed")

    def __init__(self):
        self.positive = 0
        self.negative = 0
        self.score = 0
        self.contributed = False

    def add(self, polarity, mode: Mode) -> None:
        if mode is Mode.SCORED:
            if isinstance(polarity, bool) or not isinstance(polarity, Number):
                raise InvalidConfiguration(f"SCORED mode needs numeric polarities, got {polarity!r}")
            self.score += polarity
            self.contributed = True
            return
        if not isinstance(polarity, str):
            raise InvalidConfiguration(f"CATEGORICAL mode needs label polarities, got {polarity!r}")
        if polarity == POSITIVE:
            self.positive += 1
            self.contributed = True
        elif polarity == NEGATIVE:
            self.negative += 1
            self.contributed = True

    def finish(self, document_id, window_index, mode: Mode) -> WindowSentiment:
        if mode is Mode.SCORED:
            return WindowSentiment(document_id, window_index, self.score)
        return WindowSentiment(
            document_id,
            window_index,
            self.positive - self.negative,
            positive_count=self.positive,
            negative_count=self.negative,
        )


def _check_mode(mode) -> Mode:
    if isinstance(mode, str):
        try:
            return Mode(mode.lower())
        except ValueError:
            raise InvalidConfiguration(f"unknown aggregation mode {mode!r}") from None
    if not isinstance(mode, Mode):
        raise InvalidConfiguration(f"unknown aggregation mode {mode!r}")
    return mode


def aggregate(
    tokens: Iterable[ScoredToken],
    window_size: int = utils.DEFAULT_WINDOW_SIZE,
    mode: Mode = Mode.CATEGORICAL,
) -> List[WindowSentiment]:
    """Net sentiment per (document, window) over an unordered token sequence.

    Output follows the order in which windows are first seen; use
    :func:`sort_windows` before plotting a narrative arc.
    """
    window_size = utils.check_window_size(window_size)
    mode = _check_mode(mode)
    windows: Dict[Tuple[str, int], _Window] = {}
    for tok in tokens:
        key = (tok.document_id, tok.line_number // window_size)
        acc = windows.get(key)
        if acc is None:
            acc = windows[key] = _Window()
        acc.add(tok.polarity, mode)
    return [
        acc.finish(doc, idx, mode)
        for (doc, idx), acc in windows.items()
        if acc.contributed
    ]


def aggregate_stream(
    tokens: Iterable[ScoredToken],
    window_size: int = utils.DEFAULT_WINDOW_SIZE,
    mode: Mode = Mode.CATEGORICAL,
) -> Iterator[WindowSentiment]:
    """Aggregate a stream sorted by document and line, yielding closed windows.

    A window is yielded once the stream moves past it, so memory stays
    bounded by a single window. Raises ``InvalidConfiguration`` when the
    stream goes back to an earlier window or a document already closed.
    """
    window_size = utils.check_window_size(window_size)
    mode = _check_mode(mode)
    current = None
    acc = None
    closed_docs = set()
    for tok in tokens:
        key = (tok.document_id, tok.line_number // window_size)
        if key != current:
            if current is not None:
                if key[0] == current[0] and key[1] < current[1]:
                    raise InvalidConfiguration(
                        f"stream not sorted: line {tok.line_number} of {key[0]!r} "
                        f"after window {current[1]}"
                    )
                if key[0] != current[0]:
                    closed_docs.add(current[0])
                if acc.contributed:
                    yield acc.finish(current[0], current[1], mode)
            if key[0] in closed_docs:
                raise InvalidConfiguration(f"stream not grouped: document {key[0]!r} seen again")
            current = key
            acc = _Window()
        acc.add(tok.polarity, mode)
    if acc is not None and acc.contributed:
        yield acc.finish(current[0], current[1], mode)


def aggregate_by_document(
    tokens: Iterable[ScoredToken],
    window_size: int = utils.DEFAULT_WINDOW_SIZE,
    mode: Mode = Mode.CATEGORICAL,
) -> Dict[str, List[WindowSentiment]]:
    """Aggregate each document's tokens separately, keyed by document_id."""
    parts: Dict[str, List[ScoredToken]] = {}
    for tok in tokens:
        parts.setdefault(tok.document_id, []).append(tok)
    return {
        doc: sort_windows(aggregate(part, window_size, mode))
        for doc, part in parts.items()
    }


def sort_windows(windows: Iterable[WindowSentiment]) -> List[WindowSentiment]:
    return sorted(windows, key=lambda w: (w.document_id, w.window_index))


def tokens_from_frame(df: pd.DataFrame, polarity_col: str = "sentiment") -> List[ScoredToken]:
    """Build ScoredTokens from a frame with book, linenumber, word and polarity columns."""
    cols = ["book", "linenumber", "word", polarity_col]
    return [
        ScoredToken(book, int(line), word, pol.item() if hasattr(pol, "item") else pol)
        for book, line, word, pol in df[cols].itertuples(index=False)
    ]


def windows_to_frame(windows: Iterable[WindowSentiment]) -> pd.DataFrame:
    rows = [
        {
            "document_id": w.document_id,
            "window_index": w.window_index,
            "positive": w.positive_count,
            "negative": w.negative_count,
            "sentiment": w.net_sentiment,
        }
        for w in windows
    ]
    df = pd.DataFrame(rows, columns=["document_id", "window_index", "positive", "negative", "sentiment"])
    return df.sort_values(["document_id", "window_index"]).reset_index(drop=True)


def main():
    size = utils.window_size_from_env()
    found = False
    for name in utils.LEXICONS:
        in_path = utils.processed_dir() / f"scored_{name}.csv"
        if not in_path.exists():
            print(f"Missing scored_{name}.csv — run lexicon_sentiment first.")
            continue
        found = True
        df = pd.read_csv(in_path, low_memory=False, keep_default_na=False)
        mode = Mode(df["mode"].iloc[0]) if len(df) else Mode.CATEGORICAL
        windows = aggregate(tokens_from_frame(df), size, mode)
        out = utils.processed_dir() / f"window_sentiment_{name}.csv"
        windows_to_frame(windows).to_csv(out, index=False)
        print(f"Saved {len(windows)} windows of {size} lines for {name} at", out)
    if not found:
        print("No scored tokens found.")

if __name__ == "__main__":
    main()
