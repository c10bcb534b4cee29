# austen_sentiment/utils.py
from pathlib import Path
import numbers
import os
import re

from austen_sentiment.errors import InvalidConfiguration

# ROOT = project root
ROOT = Path(__file__).resolve().parents[1]

DEFAULT_WINDOW_SIZE = 80

# lexicons scored by default, in the order they are compared
LEXICONS = ("afinn", "bing", "nrc")

# file stem (data/raw/<stem>.txt) -> book title
BOOK_TITLES = {
    "sense_and_sensibility": "Sense & Sensibility",
    "pride_and_prejudice": "Pride & Prejudice",
    "mansfield_park": "Mansfield Park",
    "emma": "Emma",
    "northanger_abbey": "Northanger Abbey",
    "persuasion": "Persuasion",
    # Project Gutenberg ebook numbers
    "pg161": "Sense & Sensibility",
    "pg1342": "Pride & Prejudice",
    "pg141": "Mansfield Park",
    "pg158": "Emma",
    "pg121": "Northanger Abbey",
    "pg105": "Persuasion",
}

BOOK_ORDER = (
    "Sense & Sensibility",
    "Pride & Prejudice",
    "Mansfield Park",
    "Emma",
    "Northanger Abbey",
    "Persuasion",
)

# NLTK gutenberg fileids used when data/raw holds no novels
NLTK_AUSTEN = {
    "austen-sense.txt": "Sense & Sensibility",
    "austen-emma.txt": "Emma",
    "austen-persuasion.txt": "Persuasion",
}

# "miss" is a form of address in the novels, not a negative word
CUSTOM_STOP_WORDS = ("miss",)


def data_root() -> Path:
    override = os.environ.get("AUSTEN_DATA_DIR")
    if override:
        return Path(override)
    return ROOT / "data"

def raw_dir() -> Path:
    return data_root() / "raw"

def processed_dir() -> Path:
    return data_root() / "processed"

def lexicon_dir() -> Path:
    return data_root() / "lexicons"

def list_raw_texts():
    return sorted(raw_dir().glob("*.txt"))

def book_title(stem: str) -> str:
    return BOOK_TITLES.get(stem.lower(), stem)

def book_sort_key(title: str):
    """Order books as published; unknown titles go last, alphabetically."""
    if title in BOOK_ORDER:
        return (BOOK_ORDER.index(title), title)
    return (len(BOOK_ORDER), title)

def check_window_size(window_size) -> int:
    # bool is an int subclass but never a meaningful size
    if isinstance(window_size, bool) or not isinstance(window_size, numbers.Integral):
        raise InvalidConfiguration(f"window_size must be an integer, got {window_size!r}")
    if window_size <= 0:
        raise InvalidConfiguration(f"window_size must be positive, got {window_size}")
    return int(window_size)

def ensure_nltk_resource(path, package):
    import nltk
    try:
        nltk.data.find(path)
    except LookupError:
        nltk.download(package, quiet=True)

def window_size_from_env(default: int = DEFAULT_WINDOW_SIZE) -> int:
    raw = os.environ.get("AUSTEN_WINDOW_SIZE")
    if raw is None or not raw.strip():
        return check_window_size(default)
    try:
        value = int(raw)
    except ValueError:
        raise InvalidConfiguration(f"AUSTEN_WINDOW_SIZE must be an integer, got {raw!r}") from None
    return check_window_size(value)

def clean_text(s: str) -> str:
    if s is None:
        return ""
    s = str(s)
    s = s.lower()
    # Gutenberg marks italics with underscores: _very_ -> very
    s = s.replace("_", " ")
    s = re.sub(r"[‘’]", "'", s)
    s = re.sub(r"\s+", " ", s).strip()
    return s
