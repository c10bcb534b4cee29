# austen_sentiment/ingest_corpus.py
import re

import pandas as pd

from austen_sentiment import utils

CHAPTER_PATTERN = r"^chapter [\divxlc]"
START_RE = re.compile(r"\*\*\*\s*START OF (THE|THIS) PROJECT GUTENBERG EBOOK[^\n]*\n", re.IGNORECASE)
END_RE = re.compile(r"\*\*\*\s*END OF (THE|THIS) PROJECT GUTENBERG EBOOK", re.IGNORECASE)


def strip_gutenberg(text: str) -> str:
    start = START_RE.search(text)
    if start:
        text = text[start.end():]
    end = END_RE.search(text)
    if end:
        text = text[:end.start()]
    return text


def lines_frame(book: str, text: str) -> pd.DataFrame:
    """One row per line of ``text`` with a 1-based line number and chapter counter."""
    lines = text.splitlines()
    df = pd.DataFrame({"book": book, "text": pd.Series(lines, dtype=object)})
    df["linenumber"] = range(1, len(df) + 1)
    is_heading = df["text"].str.strip().str.match(CHAPTER_PATTERN, case=False)
    df["chapter"] = is_heading.astype(int).cumsum()
    return df[["book", "linenumber", "chapter", "text"]]


def read_raw_books():
    books = {}
    for p in utils.list_raw_texts():
        try:
            text = p.read_text(encoding="utf-8", errors="ignore")
        except OSError as e:
            print(f"Failed to read {p.name}: {e}")
            continue
        title = utils.book_title(p.stem)
        if title in books:
            print(f"[read_raw_books] {p.name} is another copy of {title!r}; replacing the earlier file")
        books[title] = strip_gutenberg(text)
    return books


def read_nltk_books():
    utils.ensure_nltk_resource("corpora/gutenberg", "gutenberg")
    from nltk.corpus import gutenberg
    return {title: gutenberg.raw(fileid) for fileid, title in utils.NLTK_AUSTEN.items()}


def load_corpus(books=None) -> pd.DataFrame:
    """Concatenate line tables for ``books`` (title -> text) in publication order."""
    if books is None:
        books = read_raw_books()
        if not books:
            print("No novels in data/raw; using the Austen texts bundled with NLTK.")
            books = read_nltk_books()
    if not books:
        return pd.DataFrame(columns=["book", "linenumber", "chapter", "text"])
    frames = [lines_frame(title, books[title]) for title in sorted(books, key=utils.book_sort_key)]
    return pd.concat(frames, ignore_index=True)


def main():
    corpus = load_corpus()
    print("Loaded books:", corpus["book"].unique().tolist())
    out = utils.processed_dir() / "corpus_lines.csv"
    out.parent.mkdir(parents=True, exist_ok=True)
    corpus.to_csv(out, index=False)
    print("Saved corpus_lines.csv at", out, "rows:", len(corpus))

if __name__ == "__main__":
    main()
