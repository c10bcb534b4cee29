# app.py — Austen sentiment dashboard
# - Narrative arcs: net sentiment per window of lines, one bar chart per novel
# - Top contributing words and word clouds per polarity
# - Guards for missing pipeline outputs and empty selections

import warnings
warnings.filterwarnings("ignore", message=".*I don't know how to infer vegalite type.*")

import sys
from pathlib import Path
import streamlit as st

ROOT = Path(__file__).parent.resolve()
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pandas as pd
from wordcloud import WordCloud

from austen_sentiment import analysis, ingest_corpus, tokenize_corpus, utils
from austen_sentiment.errors import InvalidConfiguration, LexiconNotFound
from austen_sentiment.lexicon_sentiment import load_lexicon, score_frame
from austen_sentiment.windowed import (
    NEGATIVE,
    POSITIVE,
    Mode,
    aggregate,
    tokens_from_frame,
    windows_to_frame,
)

processed_dir = utils.processed_dir()
processed_dir.mkdir(parents=True, exist_ok=True)
TOKENS_CSV = processed_dir / "tidy_tokens.csv"

# ---------------- Helpers ----------------

@st.cache_data(show_spinner=False)
def read_tokens(path_str, mtime):
    """Cached read of the token table; ``mtime`` invalidates the cache on rebuild."""
    try:
        return pd.read_csv(path_str, low_memory=False, keep_default_na=False)
    except Exception as e:
        print("[read_tokens]", e)
        return pd.DataFrame(columns=tokenize_corpus.TOKEN_COLUMNS)

def build_tokens():
    ingest_corpus.main()
    tokenize_corpus.main()

def polarity_frequencies(contrib, positive):
    """word -> weight for one side of the word cloud."""
    if contrib.empty:
        return {}
    if "contribution" in contrib.columns:
        side = contrib[contrib["contribution"] > 0] if positive else contrib[contrib["contribution"] < 0]
        return {w: abs(float(c)) for w, c in zip(side["word"], side["contribution"])}
    label = POSITIVE if positive else NEGATIVE
    side = contrib[contrib["sentiment"] == label]
    return dict(zip(side["word"], side["n"].astype(float)))

# ---------------- UI ----------------

st.set_page_config(page_title="📚 Austen Sentiment", layout="wide")
st.title("📚 Sentiment arcs in Jane Austen's novels")

with st.expander("📘 User Manual", expanded=False):
    st.markdown("""
    Quick guide:
    - Run the pipeline once (`ingest_corpus`, `tokenize_corpus`) or press **Build tokens** below.
    - Put novels as plain text in `data/raw/` (otherwise NLTK's Austen texts are used).
    - AFINN and NRC need their word lists in `data/lexicons/`; Bing and VADER come from NLTK.
    - Each bar is the net sentiment of a window of consecutive lines.
    """)

if not TOKENS_CSV.exists():
    st.warning("tidy_tokens.csv not found in data/processed.")
    if st.button("Build tokens"):
        with st.spinner("Reading and tokenizing the novels..."):
            build_tokens()
        st.rerun()
    st.stop()

tokens = read_tokens(str(TOKENS_CSV), TOKENS_CSV.stat().st_mtime)
if tokens.empty:
    st.error("No tokens loaded. Rebuild the pipeline outputs in data/processed.")
    st.stop()

st.sidebar.header("Controls")
lexicon_name = st.sidebar.selectbox("Lexicon", list(utils.LEXICONS) + ["vader"])
try:
    default_size = utils.window_size_from_env()
except InvalidConfiguration as e:
    st.sidebar.warning(str(e))
    default_size = utils.DEFAULT_WINDOW_SIZE
default_size = min(max(default_size, 10), 400)
window_size = st.sidebar.slider("Lines per window", 10, 400, default_size, step=10)
books = sorted(tokens["book"].unique().tolist(), key=utils.book_sort_key)
sel_books = st.sidebar.multiselect("Books", books, default=books)

try:
    lexicon = load_lexicon(lexicon_name)
except LexiconNotFound as e:
    st.error(str(e))
    st.stop()

view = tokens[tokens["book"].isin(sel_books)]
if view.empty:
    st.warning("No books selected.")
    st.stop()

labels = {POSITIVE, NEGATIVE} if lexicon.mode is Mode.CATEGORICAL else None
scored = score_frame(view, lexicon, labels=labels)
windows = windows_to_frame(aggregate(tokens_from_frame(scored), window_size, lexicon.mode))

# ---------------- Narrative arcs ----------------

st.subheader(f"Net sentiment per {window_size} lines ({lexicon.name})")
st.write(f"Words in view: {len(view)} — matched in lexicon: {len(scored)}")
if windows.empty:
    st.info("No lexicon words in the selected books.")
else:
    cols = st.columns(2)
    for i, book in enumerate(sel_books):
        arc = windows[windows["document_id"] == book]
        with cols[i % 2]:
            st.markdown(f"**{book}**")
            if arc.empty:
                st.info("No scored windows.")
            else:
                st.bar_chart(arc.set_index("window_index")["sentiment"])
    csv_out = windows.to_csv(index=False).encode("utf-8")
    st.download_button("📥 Download window sentiment CSV", csv_out, f"window_sentiment_{lexicon.name}.csv", "text/csv")

# ---------------- Words ----------------

st.subheader("Words contributing to sentiment")
contrib = analysis.word_contributions(scored)
if contrib.empty:
    st.info("No contributing words.")
else:
    st.dataframe(contrib.head(30))

st.subheader("Word clouds")
cloud_cols = st.columns(2)
for col, positive in zip(cloud_cols, (True, False)):
    freqs = polarity_frequencies(contrib, positive)
    name = "positive" if positive else "negative"
    with col:
        if freqs:
            wc = WordCloud(width=600, height=400, background_color="white", max_words=100).generate_from_frequencies(freqs)
            st.image(wc.to_array(), caption=f"WordCloud — {name}")
        else:
            st.info(f"No {name} words.")

st.subheader("Most common words")
st.dataframe(analysis.count_words(view, by="book").groupby("book").head(10))

# End of file
