import re
from typing import List, Optional, Sequence

import numpy as np
from sklearn.feature_extraction.text import CountVectorizer
from sklearn.metrics.pairwise import cosine_similarity

from cineverse.domain.models.movie import MovieRecord
from cineverse.domain.models.recommendation import SimilarityResult

DEFAULT_TOP_K = 10
TOKEN_PATTERN = r"[A-Za-z0-9_]+"

_TOKEN_RE = re.compile(TOKEN_PATTERN)


def tokenize(text: str) -> List[str]:
    return [token.lower() for token in _TOKEN_RE.findall(text or "")]


def term_frequency_matrix(documents: Sequence[str]):
    """Term counts with one row per document; all zeros when no document has a token."""
    vectorizer = CountVectorizer(token_pattern=TOKEN_PATTERN, lowercase=True)
    try:
        return vectorizer.fit_transform(documents)
    except ValueError:
        # empty vocabulary
        return np.zeros((len(documents), 1))


def text_similarity(left: str, right: str) -> float:
    """Cosine of the two texts' term-frequency vectors; 0.0 when either has no tokens."""
    matrix = term_frequency_matrix([left or "", right or ""])
    return float(cosine_similarity(matrix[0:1], matrix[1:2])[0, 0])


def movie_text(movie: MovieRecord) -> str:
    return " ".join([movie.title, movie.overview or "", " ".join(movie.genres)])


def rank_by_similarity(
    target: MovieRecord, candidates: Sequence[MovieRecord], top_k: Optional[int] = None
) -> List[SimilarityResult]:
    if top_k is None or top_k <= 0:
        top_k = DEFAULT_TOP_K

    candidates = [candidate for candidate in candidates if candidate.id != target.id]
    if not candidates:
        return []

    matrix = term_frequency_matrix([movie_text(target)] + [movie_text(candidate) for candidate in candidates])
    scores = cosine_similarity(matrix[0:1], matrix[1:]).ravel()

    results = [
        SimilarityResult(movie=candidate, similarity=int(round(float(score) * 100)))
        for candidate, score in zip(candidates, scores)
    ]
    results.sort(key=lambda result: (-result.similarity, result.movie.title, result.movie.id))
    return results[:top_k]
