from groundgate.retrieve.span_matcher import (
    STOP_WORDS,
    SpanMatcher,
    extract_numbers,
    jaccard,
    sentence_bounds,
)

__all__ = ["STOP_WORDS", "SpanMatcher", "extract_numbers", "jaccard", "sentence_bounds"]
