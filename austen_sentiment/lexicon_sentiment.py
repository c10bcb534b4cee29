# austen_sentiment/lexicon_sentiment.py
import csv
from functools import lru_cache
from pathlib import Path

import pandas as pd

from austen_sentiment import utils
from austen_sentiment.utils import ensure_nltk_resource
from austen_sentiment.errors import LexiconNotFound, MalformedToken
from austen_sentiment.windowed import Mode, ScoredToken, SentimentEntry

AFINN_FILES = ("AFINN-111.txt", "AFINN-165.txt", "afinn.csv")
NRC_FILES = ("NRC-Emotion-Lexicon-Wordlevel-v0.92.txt", "nrc.csv")


class Lexicon:
    """Word -> polarities mapping, built once and reused for every join."""

    def __init__(self, name, mode, entries):
        self.name = name
        self.mode = mode
        self.entries = entries

    @classmethod
    def from_entries(cls, name, mode, entries):
        mapping = {}
        for e in entries:
            word = str(e.word).strip().lower()
            if not word:
                continue
            polarities = mapping.setdefault(word, [])
            if e.polarity not in polarities:
                polarities.append(e.polarity)
        return cls(name, mode, {w: tuple(p) for w, p in mapping.items()})

    def entries_for(self, word):
        return self.entries.get(word, ())

    def labels(self):
        return sorted({p for ps in self.entries.values() for p in ps}, key=str)

    def __contains__(self, word):
        return word in self.entries

    def __len__(self):
        return len(self.entries)

    def __repr__(self):
        return f"Lexicon({self.name!r}, {self.mode.name}, {len(self)} words)"


def _number(value):
    num = pd.to_numeric(value)
    return int(num) if float(num).is_integer() else float(num)


def load_lexicon_file(path, name=None, mode=None) -> Lexicon:
    """Read a lexicon file.

    Tab separated files with two columns (``word  score``, AFINN) are scored;
    three columns (``word  label  flag``, NRC word-level) are categorical and
    keep rows whose flag is 1. CSV files need a ``word`` column plus either
    ``sentiment`` (labels) or ``value`` (scores).
    """
    path = Path(path)
    name = name or path.stem.lower()
    if not path.exists():
        raise LexiconNotFound(f"lexicon file for {name!r} not found at {path}")
    if path.suffix.lower() == ".csv":
        df = pd.read_csv(path, keep_default_na=False)
        if "word" not in df.columns:
            raise LexiconNotFound(f"{path.name} has no 'word' column")
        if "value" in df.columns:
            mode = mode or Mode.SCORED
            entries = [SentimentEntry(w, _number(v)) for w, v in zip(df["word"], df["value"])]
        elif "sentiment" in df.columns:
            mode = mode or Mode.CATEGORICAL
            entries = [SentimentEntry(w, str(s).strip().lower()) for w, s in zip(df["word"], df["sentiment"])]
        else:
            raise LexiconNotFound(f"{path.name} needs a 'sentiment' or 'value' column")
        return Lexicon.from_entries(name, mode, entries)

    df = pd.read_csv(
        path, sep="\t", header=None, dtype=str, quoting=csv.QUOTE_NONE,
        keep_default_na=False, on_bad_lines="skip", encoding="utf-8",
    )
    if df.shape[1] == 2:
        mode = mode or Mode.SCORED
        entries = [SentimentEntry(w, _number(s)) for w, s in zip(df[0], df[1])]
    elif df.shape[1] == 3:
        mode = mode or Mode.CATEGORICAL
        flagged = df[df[2].str.strip() == "1"]
        entries = [SentimentEntry(w, label.strip().lower()) for w, label in zip(flagged[0], flagged[1])]
    else:
        raise LexiconNotFound(f"{path.name}: expected 2 or 3 tab separated columns, got {df.shape[1]}")
    return Lexicon.from_entries(name, mode, entries)


def _bing():
    ensure_nltk_resource("corpora/opinion_lexicon", "opinion_lexicon")
    from nltk.corpus import opinion_lexicon
    entries = [SentimentEntry(w, "positive") for w in opinion_lexicon.positive()]
    entries += [SentimentEntry(w, "negative") for w in opinion_lexicon.negative()]
    return Lexicon.from_entries("bing", Mode.CATEGORICAL, entries)


def _vader():
    ensure_nltk_resource("sentiment/vader_lexicon.zip", "vader_lexicon")
    from nltk.sentiment import SentimentIntensityAnalyzer
    sia = SentimentIntensityAnalyzer()
    entries = [SentimentEntry(w, float(v)) for w, v in sia.lexicon.items()]
    return Lexicon.from_entries("vader", Mode.SCORED, entries)


def _from_lexicon_dir(name, candidates):
    for fname in candidates:
        p = utils.lexicon_dir() / fname
        if p.exists():
            return load_lexicon_file(p, name=name)
    raise LexiconNotFound(
        f"lexicon {name!r} not found; put one of {', '.join(candidates)} in {utils.lexicon_dir()}"
    )


@lru_cache(maxsize=8)
def load_lexicon(name: str) -> Lexicon:
    name = name.lower()
    if name == "bing":
        return _bing()
    if name == "vader":
        return _vader()
    if name == "afinn":
        return _from_lexicon_dir("afinn", AFINN_FILES)
    if name == "nrc":
        return _from_lexicon_dir("nrc", NRC_FILES)
    raise LexiconNotFound(f"unknown lexicon {name!r}; choose from afinn, bing, nrc, vader")


def _check_token(document_id, line_number, word):
    if line_number < 0:
        raise MalformedToken(f"negative line number {line_number} in {document_id!r}")
    if not isinstance(word, str) or not word.strip():
        raise MalformedToken(f"empty word at line {line_number} of {document_id!r}")


def join_lexicon(tokens, lexicon: Lexicon, labels=None):
    """Inner join of tokens with ``lexicon``: unmatched words are dropped.

    A word with several entries (NRC) yields one ScoredToken per entry;
    ``labels`` restricts categorical entries to the given labels.
    """
    labels = set(labels) if labels is not None else None
    out = []
    for tok in tokens:
        _check_token(tok.document_id, tok.line_number, tok.word)
        for polarity in lexicon.entries_for(tok.word):
            if labels is not None and polarity not in labels:
                continue
            out.append(ScoredToken(tok.document_id, tok.line_number, tok.word, polarity))
    return out


def score_frame(tokens: pd.DataFrame, lexicon: Lexicon, labels=None) -> pd.DataFrame:
    """Frame version of :func:`join_lexicon`; adds ``sentiment`` and ``mode`` columns."""
    if tokens.empty:
        return tokens.assign(sentiment=pd.Series(dtype=object), mode=pd.Series(dtype=object))
    bad_line = tokens["linenumber"] < 0
    if bad_line.any():
        row = tokens[bad_line].iloc[0]
        _check_token(row["book"], row["linenumber"], row["word"])
    words = tokens["word"].astype(str).str.strip()
    if (words == "").any() or tokens["word"].isna().any():
        row = tokens[(words == "") | tokens["word"].isna()].iloc[0]
        raise MalformedToken(f"empty word at line {row['linenumber']} of {row['book']!r}")

    df = tokens.copy()
    df["sentiment"] = df["word"].map(lambda w: list(lexicon.entries_for(w)))
    df = df.explode("sentiment").dropna(subset=["sentiment"])
    if labels is not None:
        df = df[df["sentiment"].isin(set(labels))]
    df["mode"] = lexicon.mode.value
    return df.reset_index(drop=True)


def main():
    in_path = utils.processed_dir() / "tidy_tokens.csv"
    if not in_path.exists():
        print("Missing tidy_tokens.csv — run tokenize_corpus first.")
        return
    tokens = pd.read_csv(in_path, low_memory=False, keep_default_na=False)
    for name in utils.LEXICONS:
        try:
            lexicon = load_lexicon(name)
        except LexiconNotFound as e:
            print("[lexicon_sentiment]", e)
            continue
        scored = score_frame(tokens, lexicon)
        out = utils.processed_dir() / f"scored_{name}.csv"
        scored.to_csv(out, index=False)
        print(f"Saved scored_{name}.csv at", out, "matched words:", len(scored))

if __name__ == "__main__":
    main()
