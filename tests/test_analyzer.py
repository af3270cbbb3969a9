"""
Unit tests for the analyzers: keyword scanning (years, ratings, genres,
languages, themes) and model-backed extraction with context merging.
"""

from datetime import date

import pytest

from movie_assistant.analyzer import KeywordAnalyzer, LLMAnalyzer
from movie_assistant.models import FilterContext

from conftest import FakeChatClient


@pytest.fixture
def keyword():
	return KeywordAnalyzer()


def test_keyword_full_query(keyword):
	a = keyword.analyze("Korean thrillers after 2015 with rating 8+")
	ctx = a.context
	assert ctx.genre == 'Thriller'
	assert ctx.language == 'ko'
	assert ctx.year_after == 2015
	assert ctx.min_rating == 8.0
	assert ctx.actor is None and ctx.director is None
	assert a.summary is None
	assert a.is_broad is False


@pytest.mark.parametrize("text, year", [
	("movies from 1999", 1999),
	("best of 2021 please", 2021),
	("German drama 2008 7.5+", 2008),
	("something2010ish", 2010),
])
def test_keyword_year_token_becomes_year_after(keyword, text, year):
	assert keyword.analyze(text).context.year_after == year


def test_keyword_defaults(keyword):
	ctx = keyword.analyze("something good tonight").context
	assert ctx.min_rating == 6.8
	assert ctx.genre is None and ctx.language is None and ctx.year_after is None and ctx.theme is None


def test_keyword_decimal_rating(keyword):
	assert keyword.analyze("japanese fantasy 7.5+").context.min_rating == 7.5


def test_keyword_last_match_wins(keyword):
	ctx = keyword.analyze("war drama about revenge").context
	assert ctx.genre == 'War'  # 'war' comes after 'drama' in the genre list
	assert ctx.theme == 'revenge'


def test_keyword_sci_fi_and_theme(keyword):
	ctx = keyword.analyze("a sci-fi heist").context
	assert ctx.genre == 'Sci-Fi'
	assert ctx.theme == 'heist'


def test_keyword_ignores_prior_context(keyword):
	prior = FilterContext(actor='Tom Hanks', language='en')
	ctx = keyword.analyze("comedy", prior).context
	assert ctx.actor is None
	assert ctx.language is None
	assert ctx.genre == 'Comedy'


def test_llm_extracts_and_normalizes():
	client = FakeChatClient(
		'```json\n{"type": "movie", "genre": "thriller", "language": "Korean", "year": null, '
		'"year_after": "2016", "year_before": null, "min_rating": "8", "actor": null, '
		'"director": null, "is_broad_best": false, "summary": "Korean thrillers after 2015, 8+"}\n```'
	)
	a = LLMAnalyzer(client).analyze("Korean thrillers after 2015 with rating 8+")
	assert a.context == FilterContext(type='movie', genre='Thriller', language='ko', year_after=2016, min_rating=8.0)
	assert a.summary == 'Korean thrillers after 2015, 8+'
	assert a.is_broad is False
	assert len(client.calls) == 1
	assert 'Korean thrillers after 2015 with rating 8+' in client.calls[0]['user']
	assert client.calls[0]['max_tokens'] == 400


def test_llm_merges_with_prior_context():
	client = FakeChatClient('{"genre": "Comedy", "summary": "now comedies"}')
	prior = FilterContext(genre='Drama', actor='Song Kang-ho', min_rating=7.0)
	ctx = LLMAnalyzer(client).analyze("make it a comedy", prior).context
	assert ctx.genre == 'Comedy'
	assert ctx.actor == 'Song Kang-ho'
	assert ctx.min_rating == 7.0
	assert ctx.director is None


@pytest.mark.parametrize("reply", ['', 'Sorry, I cannot help {', '{"genre": "Drama"', '[1, 2, 3]', 'null'])
def test_llm_malformed_output_degrades_to_empty(reply):
	a = LLMAnalyzer(FakeChatClient(reply)).analyze("anything")
	assert a.context == FilterContext()
	assert a.summary is None
	assert a.is_broad is False


def test_llm_malformed_output_keeps_prior():
	prior = FilterContext(language='de')
	a = LLMAnalyzer(FakeChatClient('garbage')).analyze("more please", prior)
	assert a.context == prior


def test_llm_broad_flag_accepts_string_true():
	a = LLMAnalyzer(FakeChatClient('{"is_broad_best": "true"}')).analyze("best movies ever")
	assert a.is_broad is True


def test_llm_prompt_states_current_year():
	client = FakeChatClient('{}')
	LLMAnalyzer(client, today=date(2024, 5, 1)).analyze("movies from this year")
	prompt = client.calls[0]['user']
	assert 'year = 2024' in prompt
	assert 'Sci-Fi' in prompt  # canonical genre list is offered


@pytest.mark.parametrize("reply", [
	'{"year": NaN, "genre": "Drama"}',
	'{"year_after": "1e999", "genre": "Drama"}',
	'{"year_before": Infinity, "min_rating": -Infinity, "genre": "Drama"}',
])
def test_llm_non_finite_numbers_are_dropped(reply):
	a = LLMAnalyzer(FakeChatClient(reply)).analyze("dramas")
	assert a.context == FilterContext(genre='Drama')
