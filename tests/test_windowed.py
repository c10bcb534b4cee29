import random

import numpy as np
import pandas as pd
import pytest

from austen_sentiment.errors import InvalidConfiguration
from austen_sentiment.windowed import (
    Mode,
    ScoredToken,
    WindowSentiment,
    aggregate,
    aggregate_by_document,
    aggregate_stream,
    sort_windows,
    tokens_from_frame,
    windows_to_frame,
)


def _random_tokens(seed, n=300, docs=("A", "B", "C"), max_line=1000):
    rng = random.Random(seed)
    return [
        ScoredToken(rng.choice(docs), rng.randrange(max_line), f"w{i}", rng.choice(["positive", "negative"]))
        for i in range(n)
    ]


def test_categorical_scenario_counts_both_labels():
    tokens = [
        ScoredToken("A", 0, "great", "positive"),
        ScoredToken("A", 0, "bad", "negative"),
        ScoredToken("A", 81, "good", "positive"),
    ]
    out = sort_windows(aggregate(tokens, 80, Mode.CATEGORICAL))
    assert out == [
        WindowSentiment("A", 0, 0, positive_count=1, negative_count=1),
        WindowSentiment("A", 1, 1, positive_count=1, negative_count=0),
    ]


def test_scored_scenario_sums_scores():
    tokens = [ScoredToken("B", 5, "x", 3), ScoredToken("B", 6, "y", -1)]
    assert aggregate(tokens, 80, Mode.SCORED) == [WindowSentiment("B", 0, 2)]


def test_scored_mode_keeps_float_scores():
    tokens = [ScoredToken("B", 1, "x", 1.5), ScoredToken("B", 2, "y", -0.25)]
    (window,) = aggregate(tokens, 80, "scored")
    assert window.net_sentiment == pytest.approx(1.25)
    assert window.positive_count is None and window.negative_count is None


def test_empty_input_gives_empty_output():
    assert aggregate([], 80) == []
    assert list(aggregate_stream([], 80)) == []


@pytest.mark.parametrize("size", [80, np.int64(80), np.int32(80), np.uint16(80)])
def test_numpy_integer_window_size_is_accepted(size):
    tokens = [ScoredToken("A", 1, "good", "positive"), ScoredToken("A", 170, "bad", "negative")]
    out = sort_windows(aggregate(tokens, size))
    assert out == sort_windows(aggregate(tokens, 80))
    assert all(type(w.window_index) is int for w in out)
    assert list(aggregate_stream(tokens, size)) == out


@pytest.mark.parametrize("size", [0, -1, 2.5, True, np.bool_(True), np.float64(80.0), "80"])
def test_invalid_window_size_raises(size):
    tokens = [ScoredToken("A", 1, "good", "positive")]
    with pytest.raises(InvalidConfiguration):
        aggregate(tokens, size)
    with pytest.raises(ValueError):
        list(aggregate_stream(tokens, size))


def test_unknown_mode_raises():
    with pytest.raises(InvalidConfiguration):
        aggregate([ScoredToken("A", 1, "good", "positive")], 80, "pivot")


def test_mode_must_match_polarity_shape():
    with pytest.raises(InvalidConfiguration):
        aggregate([ScoredToken("A", 1, "good", 3)], 80, Mode.CATEGORICAL)
    with pytest.raises(InvalidConfiguration):
        aggregate([ScoredToken("A", 1, "good", "positive")], 80, Mode.SCORED)


def test_short_document_collapses_to_window_zero():
    tokens = [ScoredToken("A", line, "w", "negative") for line in (1, 20, 79)]
    assert aggregate(tokens, 80) == [WindowSentiment("A", 0, -3, positive_count=0, negative_count=3)]


def test_emotion_labels_alone_do_not_materialize_window():
    tokens = [
        ScoredToken("Emma", 3, "happy", "joy"),
        ScoredToken("Emma", 90, "happy", "joy"),
        ScoredToken("Emma", 91, "happy", "positive"),
    ]
    assert aggregate(tokens, 80) == [WindowSentiment("Emma", 1, 1, positive_count=1, negative_count=0)]


@pytest.mark.parametrize("seed", range(5))
def test_net_equals_positive_minus_negative(seed):
    for w in aggregate(_random_tokens(seed), 80):
        assert w.net_sentiment == w.positive_count - w.negative_count


@pytest.mark.parametrize("seed", range(5))
def test_scored_net_is_exact_sum(seed):
    rng = random.Random(seed)
    tokens = [ScoredToken("A", rng.randrange(500), "w", rng.randint(-5, 5)) for _ in range(200)]
    expected = {}
    for t in tokens:
        key = t.line_number // 50
        expected[key] = expected.get(key, 0) + t.polarity
    got = {w.window_index: w.net_sentiment for w in aggregate(tokens, 50, Mode.SCORED)}
    assert got == expected


@pytest.mark.parametrize("seed", range(5))
def test_one_window_per_distinct_key(seed):
    tokens = _random_tokens(seed)
    keys = {(t.document_id, t.line_number // 80) for t in tokens}
    out = aggregate(tokens, 80)
    assert len(out) == len(keys)
    assert {(w.document_id, w.window_index) for w in out} == keys


def test_reaggregation_is_idempotent():
    tokens = _random_tokens(7)
    first = aggregate(tokens, 80)
    second = aggregate(list(reversed(tokens)), 80)
    assert sort_windows(first) == sort_windows(second)


@pytest.mark.parametrize("size", [1, 3, 10, 80, 333])
def test_doubling_window_size_never_adds_windows(size):
    tokens = [t for t in _random_tokens(11) if t.document_id == "A"]
    assert len(aggregate(tokens, size * 2)) <= len(aggregate(tokens, size))


def test_window_size_one_gives_window_per_scored_line():
    tokens = _random_tokens(3, n=100, docs=("A",), max_line=60)
    out = aggregate(tokens, 1)
    assert len(out) == len({t.line_number for t in tokens})
    assert all(w.window_index in {t.line_number for t in tokens} for w in out)


def test_tie_gives_zero_net():
    tokens = [ScoredToken("A", 10, "good", "positive"), ScoredToken("A", 11, "bad", "negative")]
    (window,) = aggregate(tokens, 80)
    assert window.net_sentiment == 0


@pytest.mark.parametrize("seed", range(3))
def test_stream_matches_batch_on_sorted_input(seed):
    tokens = sorted(_random_tokens(seed), key=lambda t: (t.document_id, t.line_number))
    assert list(aggregate_stream(tokens, 80)) == sort_windows(aggregate(tokens, 80))


def test_stream_flushes_window_when_index_advances():
    seen = []

    def source():
        for tok in [
            ScoredToken("A", 1, "good", "positive"),
            ScoredToken("A", 85, "bad", "negative"),
            ScoredToken("A", 170, "good", "positive"),
        ]:
            seen.append(tok.line_number)
            yield tok

    stream = aggregate_stream(source(), 80)
    first = next(stream)
    assert first == WindowSentiment("A", 0, 1, positive_count=1, negative_count=0)
    assert seen == [1, 85]


def test_stream_rejects_backwards_lines():
    tokens = [ScoredToken("A", 200, "good", "positive"), ScoredToken("A", 1, "bad", "negative")]
    with pytest.raises(InvalidConfiguration):
        list(aggregate_stream(tokens, 80))


def test_stream_rejects_revisited_document():
    tokens = [
        ScoredToken("A", 1, "good", "positive"),
        ScoredToken("B", 1, "good", "positive"),
        ScoredToken("A", 500, "bad", "negative"),
    ]
    with pytest.raises(InvalidConfiguration):
        list(aggregate_stream(tokens, 80))


def test_aggregate_by_document_partitions():
    tokens = _random_tokens(5)
    parts = aggregate_by_document(tokens, 80)
    assert set(parts) == {"A", "B", "C"}
    merged = [w for doc in sorted(parts) for w in parts[doc]]
    assert merged == sort_windows(aggregate(tokens, 80))


def test_frame_round_trip_through_pandas():
    df = pd.DataFrame(
        {
            "book": ["Emma", "Emma", "Persuasion"],
            "linenumber": [161, 5, 2],
            "word": ["good", "bad", "happy"],
            "sentiment": [2, -3, 3],
        }
    )
    tokens = tokens_from_frame(df)
    assert tokens[0] == ScoredToken("Emma", 161, "good", 2)
    assert isinstance(tokens[0].polarity, int)

    frame = windows_to_frame(aggregate(tokens, 80, Mode.SCORED))
    assert list(frame.columns) == ["document_id", "window_index", "positive", "negative", "sentiment"]
    assert frame[["document_id", "window_index"]].values.tolist() == [["Emma", 0], ["Emma", 2], ["Persuasion", 0]]
    assert frame["sentiment"].tolist() == [-3, 2, 3]


def test_windows_to_frame_empty():
    frame = windows_to_frame([])
    assert frame.empty
    assert "sentiment" in frame.columns
