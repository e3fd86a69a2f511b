"""Canned TMDb payloads and a replaying fetcher shared by the tests."""

import json


class FakeFetcher:
    """Async stand-in for the HTTP fetch primitive that replays canned bodies."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.urls = []

    async def __call__(self, url):
        self.urls.append(url)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def page_body(*entries):
    return json.dumps({"page": 1, "results": list(entries)}).encode()


def movie(movie_id, title, release_date="2024-03-10", poster_path="/poster.jpg"):
    return {
        "id": movie_id,
        "title": title,
        "release_date": release_date,
        "poster_path": poster_path,
        "adult": False,
        "popularity": 12.5,
    }


def detail_body(**overrides):
    payload = {
        "id": 42,
        "original_title": "Dune: Part Two",
        "backdrop_path": "/backdrop.jpg",
        "vote_count": 5120,
        "vote_average": 8.2,
        "overview": "Paul Atreides unites with the Fremen.",
        "revenue": 711_844_358,
        "runtime": 167,
        "genres": [{"id": 878, "name": "Science Fiction"}],
    }
    payload.update(overrides)
    return json.dumps(payload).encode()
