"""
Shared fixtures and fakes for the assistant tests.
The fakes stand in for the chat model and the HTTP session so no test touches the network.
"""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))


class FakeChatClient:
	"""Returns queued replies in order (the last one repeats) and records every call."""

	def __init__(self, *replies):
		self.replies = list(replies) or ['']
		self.calls = []

	def complete(self, system, user, max_tokens=400):
		self.calls.append({'system': system, 'user': user, 'max_tokens': max_tokens})
		if len(self.replies) > 1:
			return self.replies.pop(0)
		return self.replies[0]


class FakeResponse:
	def __init__(self, status_code=200, payload=None, text=None):
		self.status_code = status_code
		self._payload = payload
		self._text = text

	@property
	def ok(self):
		return 200 <= self.status_code < 400

	def json(self):
		if self._text is not None:
			raise ValueError("Expecting value: line 1 column 1 (char 0)")
		return self._payload


class FakeSession:
	"""
	Minimal stand-in for requests.Session.
	`routes` maps a URL suffix to a FakeResponse or to a callable(params) -> FakeResponse;
	unknown URLs answer 404.
	"""

	def __init__(self, routes=None):
		self.routes = routes or {}
		self.headers = {}
		self.calls = []

	def get(self, url, params=None, timeout=None):
		self.calls.append((url, dict(params or {})))
		for suffix, route in self.routes.items():
			if url.endswith(suffix):
				return route(params or {}) if callable(route) else route
		return FakeResponse(404, {'message': 'not found'})

	def paths(self):
		return [url.split('.com', 1)[-1] for url, _ in self.calls]


def make_titles(count, prefix='tt', **fields):
	"""Build `count` provider-shaped title records."""
	return [dict({'id': f"{prefix}{i:04d}", 'primaryTitle': f"Title {i}", 'type': 'movie'}, **fields) for i in range(count)]


@pytest.fixture
def fake_session():
	return FakeSession()


@pytest.fixture
def sample_titles():
	return [
		{'id': 'tt6751668', 'primaryTitle': 'Parasite', 'type': 'movie', 'startYear': 2019,
			'genres': ['Drama', 'Thriller'], 'spokenLanguages': ['ko'], 'averageRating': 8.5,
			'description': 'Greed and class discrimination.'},
		{'id': 'tt5700672', 'primaryTitle': 'Train to Busan', 'type': 'movie', 'startYear': 2016,
			'genres': ['Action', 'Horror', 'Thriller'], 'spokenLanguages': ['Korean'], 'averageRating': 7.6,
			'description': 'A zombie outbreak on a train.'},
		{'id': 'tt0364569', 'primaryTitle': 'Oldboy', 'type': 'movie', 'startYear': 2003,
			'genres': ['Action', 'Drama', 'Mystery', 'Thriller'], 'spokenLanguages': ['ko'], 'averageRating': 8.3,
			'description': 'Fifteen years imprisoned, then a story of revenge.'},
		{'id': 'tt0468569', 'primaryTitle': 'The Dark Knight', 'type': 'movie', 'releaseDate': '2008-07-18',
			'genres': ['Action', 'Crime', 'Drama'], 'spokenLanguages': ['en'], 'averageRating': 9.0,
			'description': 'Batman faces the Joker.'},
		{'id': 'tt10919420', 'primaryTitle': 'Squid Game', 'type': 'tvSeries', 'startYear': 2021,
			'genres': ['Action', 'Drama', 'Thriller'], 'spokenLanguages': ['ko'], 'averageRating': 8.0,
			'description': 'Deadly children\'s games for a prize.'},
		{'id': 'tt9999999', 'primaryTitle': 'Undated Comedy', 'type': 'movie',
			'genres': ['Comedy'], 'spokenLanguages': ['en'], 'averageRating': 6.1,
			'description': 'Nobody knows when this was made.'},
	]
