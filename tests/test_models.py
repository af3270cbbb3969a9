"""
Unit tests for FilterContext decoding and merging.
"""

from movie_assistant.models import (
	ChatResponse,
	FilterContext,
	normalize_genre,
	normalize_language,
	normalize_type,
)


def test_from_mapping_coerces_model_output():
	ctx = FilterContext.from_mapping({
		'type': 'Movie',
		'genre': 'thriller',
		'language': 'Korean',
		'year': 'null',
		'year_after': '2016',
		'year_before': None,
		'min_rating': '8',
		'actor': '  Song Kang-ho ',
		'director': '',
		'is_broad_best': False,
	})
	assert ctx.type == 'movie'
	assert ctx.genre == 'Thriller'
	assert ctx.language == 'ko'
	assert ctx.year is None
	assert ctx.year_after == 2016
	assert ctx.year_before is None
	assert ctx.min_rating == 8.0
	assert ctx.actor == 'Song Kang-ho'
	assert ctx.director is None


def test_from_mapping_rejects_mistyped_values():
	ctx = FilterContext.from_mapping({
		'type': 'documentary',
		'genre': 'cooking',
		'year': True,
		'year_after': 'soon',
		'min_rating': ['8'],
		'actor': 42,
	})
	assert ctx == FilterContext()


def test_from_mapping_non_mapping_is_empty():
	assert FilterContext.from_mapping(None) == FilterContext()
	assert FilterContext.from_mapping(['not', 'a', 'dict']) == FilterContext()
	assert FilterContext.from_mapping('{"genre": "Drama"}') == FilterContext()


def test_normalizers():
	assert normalize_language('korian') == 'ko'
	assert normalize_language('DE') == 'de'
	assert normalize_language(None) is None
	assert normalize_genre('sci fi') == 'Sci-Fi'
	assert normalize_genre('Thrillers') == 'Thriller'
	assert normalize_genre('COMEDY') == 'Comedy'
	assert normalize_type('TV Series') == 'tv'
	assert normalize_type('films') == 'movie'


def test_merge_new_value_wins_prior_fills_gaps():
	prior = FilterContext(genre='Drama', language='ko', min_rating=7.0)
	new = FilterContext(genre='Comedy', year_after=2015)
	merged = new.merge(prior)
	assert merged.genre == 'Comedy'  # new value wins
	assert merged.language == 'ko'  # kept from prior
	assert merged.min_rating == 7.0
	assert merged.year_after == 2015
	assert merged.actor is None  # null in both stays null


def test_merge_without_prior_is_identity():
	ctx = FilterContext(actor='Ma Dong-seok')
	assert ctx.merge(None) is ctx


def test_constraint_helpers():
	assert not FilterContext().has_any_constraint()
	assert not FilterContext(type='movie', min_rating=8).has_any_constraint()
	assert FilterContext(year_before=2000).has_any_constraint()
	assert FilterContext(year_before=2000).has_year_constraint()
	assert FilterContext(director='Bong Joon-ho').has_any_constraint()


def test_chat_response_to_dict():
	resp = ChatResponse(summary='ok', context=FilterContext(genre='War'), results=[{'id': 'tt1'}])
	data = resp.to_dict()
	assert data['context']['genre'] == 'War'
	assert data['results'] == [{'id': 'tt1'}]
	assert data['followup'] is None


def test_from_mapping_non_finite_numbers_become_none():
	ctx = FilterContext.from_mapping({
		'year': float('nan'),
		'year_after': '1e999',
		'year_before': float('inf'),
		'min_rating': 'NaN',
	})
	assert ctx == FilterContext()
	assert FilterContext.from_mapping({'min_rating': float('-inf')}).min_rating is None
	assert FilterContext.from_mapping({'min_rating': 10 ** 400}).min_rating is None  # too large for a float
	assert FilterContext.from_mapping({'year': 2019.0, 'min_rating': '7.5'}) == FilterContext(year=2019, min_rating=7.5)
