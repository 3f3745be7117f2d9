import pytest

from cineverse.domain.models.movie import MovieRecord
from cineverse.domain.services.text_similarity import (
    rank_by_similarity,
    term_frequency_matrix,
    text_similarity,
    tokenize,
)

from .factories import movie_factory


def test_tokenize_lowercases_word_characters():
    assert tokenize("Sci-Fi: The_Matrix 1999!") == ["sci", "fi", "the_matrix", "1999"]


def test_cosine_of_identical_texts_is_one():
    assert text_similarity("dream heist dream", "Dream HEIST dream") == pytest.approx(1.0)


def test_term_counts_follow_word_characters():
    matrix = term_frequency_matrix(["dream heist dream", "Sci-Fi"])

    assert matrix.toarray().sum(axis=1).tolist() == [3, 2]


def test_cosine_with_empty_vector_is_zero():
    empty = MovieRecord(id=1, title="")

    assert text_similarity("dream heist", empty.title) == 0.0
    assert text_similarity("", "!!!") == 0.0


def test_similarity_is_deterministic():
    target = movie_factory.create_movie(1, title="Heat", overview="A heist crew in Los Angeles", genres=["Crime"])
    candidates = [
        movie_factory.create_movie(2, title="Ronin", overview="A heist crew in France", genres=["Crime"]),
        movie_factory.create_movie(3, title="Up", overview="An old man and a balloon house", genres=["Animation"]),
    ]

    first = rank_by_similarity(target, candidates, 2)
    second = rank_by_similarity(target, candidates, 2)

    assert [(r.movie.id, r.similarity) for r in first] == [(r.movie.id, r.similarity) for r in second]
    assert first[0].movie.id == 2


def test_non_positive_top_k_falls_back_to_ten():
    target = movie_factory.create_movie(1, title="Target")
    candidates = [movie_factory.create_movie(i) for i in range(2, 20)]

    assert len(rank_by_similarity(target, candidates, 0)) == 10
    assert len(rank_by_similarity(target, candidates, None)) == 10


def test_zero_vector_candidate_scores_zero():
    target = movie_factory.create_movie(1, title="Arrival", overview="Linguist meets aliens")
    blank = MovieRecord(id=2, title="")

    results = rank_by_similarity(target, [blank], 5)

    assert results[0].similarity == 0
