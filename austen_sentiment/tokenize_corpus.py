# austen_sentiment/tokenize_corpus.py
import pandas as pd
from nltk.tokenize import RegexpTokenizer

from austen_sentiment import utils
from austen_sentiment.windowed import Token

# words with optional internal apostrophes: "don't", "o'clock"
_TOKENIZER = RegexpTokenizer(r"[a-z0-9]+(?:'[a-z]+)*")

TOKEN_COLUMNS = ["book", "linenumber", "chapter", "word"]


def tokenize_lines(lines: pd.DataFrame) -> pd.DataFrame:
    """Split each line into lowercase words, one row per word."""
    if lines.empty:
        return pd.DataFrame(columns=TOKEN_COLUMNS)
    df = lines.copy()
    if "chapter" not in df.columns:
        df["chapter"] = 0
    df["word"] = df["text"].fillna("").map(lambda t: _TOKENIZER.tokenize(utils.clean_text(t)))
    df = df.explode("word").dropna(subset=["word"])
    return df[TOKEN_COLUMNS].reset_index(drop=True)


def load_stop_words(extra=utils.CUSTOM_STOP_WORDS) -> set:
    utils.ensure_nltk_resource("corpora/stopwords", "stopwords")
    from nltk.corpus import stopwords
    return set(stopwords.words("english")) | set(extra)


def remove_stop_words(tokens: pd.DataFrame, stop_words) -> pd.DataFrame:
    stop_words = set(stop_words)
    return tokens[~tokens["word"].isin(stop_words)].reset_index(drop=True)


def to_tokens(tokens: pd.DataFrame):
    return [
        Token(document_id=book, line_number=int(line), word=word)
        for book, line, word in tokens[["book", "linenumber", "word"]].itertuples(index=False)
    ]


def main():
    in_path = utils.processed_dir() / "corpus_lines.csv"
    if not in_path.exists():
        print("Missing corpus_lines.csv — run ingest_corpus first.")
        return
    lines = pd.read_csv(in_path, low_memory=False, keep_default_na=False)
    tokens = tokenize_lines(lines)
    tidy = remove_stop_words(tokens, load_stop_words())
    out = utils.processed_dir() / "tidy_tokens.csv"
    tidy.to_csv(out, index=False)
    print("Saved tidy_tokens.csv with", len(tidy), "of", len(tokens), "words at", out)

if __name__ == "__main__":
    main()
