"""Tests for :mod:`movies.routes.external_api`."""

import json
import os
import shutil
import tempfile
from typing import Any
from unittest import TestCase, mock

import jsonschema

from .util import bearer, claims, create_test_app, manager, viewer

SCHEMA_PATH = os.path.join(os.path.dirname(__file__), '..', 'schema',
                           'movie.json')


class ExternalAPITestCase(TestCase):
    """Runs the app against a scratch movie file."""

    def setUp(self) -> None:
        """Initialize the Flask application, and get a client for testing."""
        self.workdir = tempfile.mkdtemp()
        self.path = os.path.join(self.workdir, 'movies.json')
        self.app = create_test_app(self.path)
        self.client = self.app.test_client()
        with open(SCHEMA_PATH) as f:
            self.schema = json.load(f)

    def tearDown(self) -> None:
        """Remove the scratch directory."""
        shutil.rmtree(self.workdir)

    def stored(self) -> Any:
        with open(self.path) as f:
            return json.load(f)


class TestScenario(ExternalAPITestCase):
    """A movie goes on the list, gets watched, and comes off again."""

    def test_dune(self) -> None:
        """Create, toggle, delete, list."""
        response = self.client.post('/api/movies',
                                    data=json.dumps({'title': 'Dune'}),
                                    headers=manager(),
                                    content_type='application/json')
        self.assertEqual(response.status_code, 201, "Created")
        self.assertEqual(response.get_json(),
                         {'id': 1, 'title': 'Dune', 'watched': False})
        self.assertTrue(response.headers['Location'].endswith('/api/movies/1'))
        jsonschema.validate(response.get_json(), self.schema)

        response = self.client.put('/api/movies/1', headers=manager())
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(),
                         {'id': 1, 'title': 'Dune', 'watched': True})
        jsonschema.validate(response.get_json(), self.schema)

        response = self.client.delete('/api/movies/1', headers=manager())
        self.assertEqual(response.status_code, 204)
        self.assertEqual(response.data, b'')

        response = self.client.get('/api/movies', headers=viewer())
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), [])


class TestListMovies(ExternalAPITestCase):
    """``GET /api/movies``."""

    def test_empty(self) -> None:
        """With no data yet, the list is empty."""
        response = self.client.get('/api/movies', headers=viewer())
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), [])

    def test_list(self) -> None:
        """Movies are listed in the order they were added."""
        for title in ['Dune', 'Heat']:
            self.client.post('/api/movies', json={'title': title},
                             headers=manager())
        response = self.client.get('/api/movies', headers=viewer())
        data = response.get_json()
        self.assertEqual([m['title'] for m in data], ['Dune', 'Heat'])
        for movie in data:
            jsonschema.validate(movie, self.schema)

    def test_needs_a_caller(self) -> None:
        """By default, reading needs a valid credential."""
        response = self.client.get('/api/movies')
        self.assertEqual(response.status_code, 401)
        self.assertIn('reason', response.get_json())
        self.assertEqual(response.headers['WWW-Authenticate'], 'Bearer')

    def test_public_reads(self) -> None:
        """When reads are public, anyone may list movies."""
        self.app.config['READ_POLICY'] = 'public'
        response = self.client.get('/api/movies')
        self.assertEqual(response.status_code, 200)

    def test_store_is_broken(self) -> None:
        """A broken store is a 500 that doesn't leak the details."""
        with open(self.path, 'w') as f:
            f.write('this is not json')
        response = self.client.get('/api/movies', headers=viewer())
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_json(),
                         {'reason': 'Error reading movie data.'})


class TestCreateMovie(ExternalAPITestCase):
    """``POST /api/movies``."""

    def test_ids_increase(self) -> None:
        """Each new movie gets a new, larger id."""
        ids = []
        for title in ['Dune', 'Heat', 'Alien']:
            response = self.client.post('/api/movies', json={'title': title},
                                        headers=manager())
            ids.append(response.get_json()['id'])
        self.assertEqual(ids, [1, 2, 3])

    def test_missing_title(self) -> None:
        """Without a title there is no movie, and no change."""
        self.client.post('/api/movies', json={'title': 'Dune'},
                         headers=manager())
        for body in [{}, {'title': ''}, {'name': 'Heat'}]:
            response = self.client.post('/api/movies', json=body,
                                        headers=manager())
            self.assertEqual(response.status_code, 400)
        self.assertEqual(len(self.stored()), 1)

    def test_not_json(self) -> None:
        """A body that isn't JSON has no title."""
        response = self.client.post('/api/movies', data='title=Dune',
                                    headers=manager())
        self.assertEqual(response.status_code, 400)
        self.assertFalse(os.path.exists(self.path))

    def test_no_credential(self) -> None:
        """Without a credential the request is unauthorized."""
        response = self.client.post('/api/movies', json={'title': 'Dune'})
        self.assertEqual(response.status_code, 401)
        self.assertFalse(os.path.exists(self.path))

    def test_expired_credential(self) -> None:
        """An expired credential is unauthorized."""
        headers = bearer(claims(['manage:movies'], exp=1))
        response = self.client.post('/api/movies', json={'title': 'Dune'},
                                    headers=headers)
        self.assertEqual(response.status_code, 401)

    def test_wrong_audience(self) -> None:
        """A credential for another API is unauthorized."""
        headers = bearer(claims(['manage:movies'],
                                aud='https://other.example.com'))
        response = self.client.post('/api/movies', json={'title': 'Dune'},
                                    headers=headers)
        self.assertEqual(response.status_code, 401)

    def test_lacks_permission(self) -> None:
        """A valid credential without the permission is forbidden."""
        response = self.client.post('/api/movies', json={'title': 'Dune'},
                                    headers=viewer())
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.get_json(),
                         {'reason': 'Insufficient scope for this resource'})
        self.assertFalse(os.path.exists(self.path))

    def test_permission_only_in_scope(self) -> None:
        """Asking for the permission as an OAuth2 scope doesn't grant it."""
        headers = bearer(claims([], scope='openid manage:movies'))
        response = self.client.post('/api/movies', json={'title': 'Dune'},
                                    headers=headers)
        self.assertEqual(response.status_code, 403)
        self.assertFalse(os.path.exists(self.path))

    def test_public_reads_dont_open_writes(self) -> None:
        """Even with public reads, creating needs the permission."""
        self.app.config['READ_POLICY'] = 'public'
        response = self.client.post('/api/movies', json={'title': 'Dune'})
        self.assertEqual(response.status_code, 401)
        response = self.client.post('/api/movies', json={'title': 'Dune'},
                                    headers=viewer())
        self.assertEqual(response.status_code, 403)


class TestToggleWatched(ExternalAPITestCase):
    """``PUT /api/movies/<id>``."""

    def setUp(self) -> None:
        """Start with one movie."""
        super(TestToggleWatched, self).setUp()
        self.client.post('/api/movies', json={'title': 'Dune'},
                         headers=manager())

    def test_toggle_twice(self) -> None:
        """Toggling twice brings the movie back to where it was."""
        self.client.put('/api/movies/1', headers=manager())
        response = self.client.put('/api/movies/1', headers=manager())
        self.assertEqual(response.get_json()['watched'], False)
        self.assertEqual(self.stored()[0]['watched'], False)

    def test_unknown_id(self) -> None:
        """An unknown id is not found."""
        response = self.client.put('/api/movies/42', headers=manager())
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json(), {'reason': 'Movie not found.'})

    def test_not_an_id(self) -> None:
        """Something that isn't an id is not found."""
        for path in ['/api/movies/dune', '/api/movies/-1']:
            response = self.client.put(path, headers=manager())
            self.assertEqual(response.status_code, 404)

    def test_auth(self) -> None:
        """Toggling needs a credential with the permission."""
        self.assertEqual(self.client.put('/api/movies/1').status_code, 401)
        self.assertEqual(
            self.client.put('/api/movies/1', headers=viewer()).status_code,
            403
        )
        self.assertEqual(self.stored()[0]['watched'], False)

    def test_auth_comes_before_lookup(self) -> None:
        """Without a credential, even a bad id is unauthorized."""
        for path in ['/api/movies/abc', '/api/movies/42']:
            self.assertEqual(self.client.put(path).status_code, 401)
            self.assertEqual(self.client.delete(path).status_code, 401)
            self.assertEqual(
                self.client.put(path, headers=viewer()).status_code, 403
            )


class TestDeleteMovie(ExternalAPITestCase):
    """``DELETE /api/movies/<id>``."""

    def setUp(self) -> None:
        """Start with two movies."""
        super(TestDeleteMovie, self).setUp()
        for title in ['Dune', 'Heat']:
            self.client.post('/api/movies', json={'title': title},
                             headers=manager())

    def test_delete(self) -> None:
        """The movie is gone, and only that one."""
        response = self.client.delete('/api/movies/1', headers=manager())
        self.assertEqual(response.status_code, 204)
        self.assertEqual([m['id'] for m in self.stored()], [2])

    def test_unknown_id(self) -> None:
        """An unknown id is not found, and nothing changes."""
        response = self.client.delete('/api/movies/3', headers=manager())
        self.assertEqual(response.status_code, 404)
        self.assertEqual(len(self.stored()), 2)

    def test_auth(self) -> None:
        """Deleting needs a credential with the permission."""
        self.assertEqual(self.client.delete('/api/movies/1').status_code, 401)
        self.assertEqual(
            self.client.delete('/api/movies/1', headers=viewer()).status_code,
            403
        )
        self.assertEqual(len(self.stored()), 2)

    @mock.patch('movies.services.store.MovieStore.save')
    def test_store_is_broken(self, mock_save: Any) -> None:
        """A failed write is a 500."""
        from movies.services.exceptions import StoreFailure
        mock_save.side_effect = StoreFailure('nope')
        response = self.client.delete('/api/movies/1', headers=manager())
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_json(),
                         {'reason': 'Error deleting movie.'})


class TestPlumbing(ExternalAPITestCase):
    """Health check, CORS and error rendering."""

    def test_status(self) -> None:
        """The health check needs no credential."""
        response = self.client.get('/api/status')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {'status': 'ok'})

    def test_cors(self) -> None:
        """Cross-origin requests are allowed."""
        response = self.client.get('/api/status',
                                   headers={'Origin': 'http://localhost:3000'})
        self.assertIn('Access-Control-Allow-Origin', response.headers)

    def test_method_not_allowed(self) -> None:
        """Errors from routing are rendered as JSON."""
        response = self.client.patch('/api/movies', headers=manager())
        self.assertEqual(response.status_code, 405)
        self.assertIn('reason', response.get_json())

    def test_unknown_route(self) -> None:
        """Unknown paths are not found."""
        response = self.client.get('/api/nope')
        self.assertEqual(response.status_code, 404)
        self.assertIn('reason', response.get_json())
