from groundgate.claims.classifier import ClaimClassifier
from groundgate.claims.extractor import ClaimExtractor, split_sentences

__all__ = ["ClaimClassifier", "ClaimExtractor", "split_sentences"]
