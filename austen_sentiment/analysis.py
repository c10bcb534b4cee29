# austen_sentiment/analysis.py
import pandas as pd

from austen_sentiment import utils
from austen_sentiment.errors import LexiconNotFound
from austen_sentiment.lexicon_sentiment import load_lexicon, score_frame
from austen_sentiment.windowed import (
    NEGATIVE,
    POSITIVE,
    Mode,
    aggregate,
    tokens_from_frame,
    windows_to_frame,
)


def count_words(tokens: pd.DataFrame, by=None) -> pd.DataFrame:
    """Word frequencies, most common first; ``by`` counts within each group."""
    keys = [by, "word"] if by else ["word"]
    counts = tokens.groupby(keys).size().reset_index(name="n")
    sort_keys = ([by] if by else []) + ["n", "word"]
    ascending = ([True] if by else []) + [False, True]
    return counts.sort_values(sort_keys, ascending=ascending).reset_index(drop=True)


def word_contributions(scored: pd.DataFrame) -> pd.DataFrame:
    """How much each word adds to the sentiment signal.

    Categorical frames give one row per (word, label) with its count; scored
    frames also get ``contribution = n * score`` and sort by its magnitude.
    """
    counts = scored.groupby(["word", "sentiment"]).size().reset_index(name="n")
    if counts.empty:
        return counts
    numeric = pd.to_numeric(counts["sentiment"], errors="coerce")
    if numeric.notna().all():
        counts["contribution"] = counts["n"] * numeric
        order = counts["contribution"].abs().sort_values(ascending=False).index
        return counts.loc[order].reset_index(drop=True)
    counts = counts[counts["sentiment"].isin([POSITIVE, NEGATIVE])]
    return counts.sort_values(["n", "word"], ascending=[False, True]).reset_index(drop=True)


def emotion_words(tokens: pd.DataFrame, lexicon, emotion: str, book=None) -> pd.DataFrame:
    """Most common words of ``book`` carrying the NRC label ``emotion`` (e.g. joy)."""
    if book is not None:
        tokens = tokens[tokens["book"] == book]
    scored = score_frame(tokens, lexicon, labels={emotion})
    return count_words(scored)


def compare_lexicons(tokens: pd.DataFrame, lexicons, window_size=utils.DEFAULT_WINDOW_SIZE, book=None) -> pd.DataFrame:
    """Windowed net sentiment under each lexicon, stacked with a ``method`` column."""
    if book is not None:
        tokens = tokens[tokens["book"] == book]
    frames = []
    for lexicon in lexicons:
        labels = {POSITIVE, NEGATIVE} if lexicon.mode is Mode.CATEGORICAL else None
        scored = score_frame(tokens, lexicon, labels=labels)
        windows = aggregate(tokens_from_frame(scored), window_size, lexicon.mode)
        frame = windows_to_frame(windows)
        frame.insert(0, "method", lexicon.name)
        frames.append(frame)
    if not frames:
        return pd.DataFrame(columns=["method", "document_id", "window_index", "positive", "negative", "sentiment"])
    return pd.concat(frames, ignore_index=True)


def label_totals(lexicon) -> dict:
    """Number of positive and negative entries in a categorical lexicon."""
    totals = {POSITIVE: 0, NEGATIVE: 0}
    for polarities in lexicon.entries.values():
        for p in polarities:
            if p in totals:
                totals[p] += 1
    return totals


def negative_ratio_by_chapter(tokens: pd.DataFrame, lexicon) -> pd.DataFrame:
    """Share of negative words in each chapter; front matter (chapter 0) is skipped."""
    negative = tokens["word"].map(lambda w: NEGATIVE in lexicon.entries_for(w))
    df = (
        tokens.assign(neg=negative.astype(int))
        .groupby(["book", "chapter"])
        .agg(words=("word", "size"), negativewords=("neg", "sum"))
        .reset_index()
    )
    df["ratio"] = df["negativewords"] / df["words"]
    return df[df["chapter"] != 0].reset_index(drop=True)


def most_negative_chapters(tokens: pd.DataFrame, lexicon) -> pd.DataFrame:
    ratios = negative_ratio_by_chapter(tokens, lexicon)
    if ratios.empty:
        return ratios
    idx = ratios.groupby("book")["ratio"].idxmax()
    return ratios.loc[idx].reset_index(drop=True)


def main():
    in_path = utils.processed_dir() / "tidy_tokens.csv"
    if not in_path.exists():
        print("Missing tidy_tokens.csv — run tokenize_corpus first.")
        return
    tokens = pd.read_csv(in_path, low_memory=False, keep_default_na=False)
    print("Most common words:\n", count_words(tokens).head(10).to_string(index=False))

    try:
        bing = load_lexicon("bing")
    except LexiconNotFound as e:
        print("[analysis]", e)
        return
    scored = score_frame(tokens, bing)
    print("Top positive and negative words (bing):\n", word_contributions(scored).head(20).to_string(index=False))
    print("Most negative chapter per book:\n", most_negative_chapters(tokens, bing).to_string(index=False))

    lexicons = [bing]
    for name in ("afinn", "nrc"):
        try:
            lexicons.append(load_lexicon(name))
        except LexiconNotFound as e:
            print("[analysis]", e)
    for lexicon in lexicons:
        if lexicon.mode is Mode.CATEGORICAL:
            print(f"Entries in {lexicon.name}:", label_totals(lexicon))
    nrc = next((lex for lex in lexicons if lex.name == "nrc"), None)
    if nrc is not None:
        print("Top joy words in Emma (nrc):\n", emotion_words(tokens, nrc, "joy", book="Emma").head(10).to_string(index=False))
    out = utils.processed_dir() / "lexicon_comparison.csv"
    compare_lexicons(tokens, lexicons, utils.window_size_from_env(), book="Pride & Prejudice").to_csv(out, index=False)
    print("Saved lexicon_comparison.csv at", out)

if __name__ == "__main__":
    main()
