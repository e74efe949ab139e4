"""
Tests for the /api/games library and stats endpoints.

Run with:
    python -m pytest tests/test_library_api.py
"""
import unittest

from tests.base import ApiTestCase, GAME_CELESTE, GAME_HADES, GAME_PORTAL


class LibraryTestCase(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.token, _ = self.register('alice')
        self.headers = self.auth(self.token)

    def update(self, game_id, body):
        return self.client.put(f'/api/games/library/{game_id}', json=body, headers=self.headers)

    def library(self, **params):
        resp = self.client.get('/api/games/library', query_string=params, headers=self.headers)
        self.assertEqual(resp.status_code, 200, resp.get_json())
        return resp.get_json()['games']

    def profile_stats(self):
        return self.client.get('/api/users/profile', headers=self.headers).get_json()['profile']['stats']


class TestAddGame(LibraryTestCase):

    def test_add_returns_created_entry(self):
        resp = self.add_game(self.token, GAME_PORTAL)
        self.assertEqual(resp.status_code, 201)
        data = resp.get_json()
        self.assertEqual(data['message'], 'Game added to library')
        game = data['game']
        self.assertEqual(game['gameId'], 4200)
        self.assertEqual(game['platforms'], [{'platform': {'id': 4, 'name': 'PC'}}])
        self.assertEqual(game['status'], 'playing')
        self.assertIsNone(game['userRating'])
        self.assertIsNone(game['dateCompleted'])
        self.assertEqual(game['notes'], '')
        self.assertIsNotNone(game['dateAdded'])

    def test_duplicate_game_rejected(self):
        self.add_game(self.token, GAME_PORTAL)
        resp = self.add_game(self.token, GAME_PORTAL, status='completed')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()['error'], 'Game already in library')
        self.assertEqual(len(self.library()), 1)

    def test_same_game_in_two_libraries(self):
        other_token, _ = self.register('bob')
        self.assertEqual(self.add_game(self.token, GAME_PORTAL).status_code, 201)
        self.assertEqual(self.add_game(other_token, GAME_PORTAL).status_code, 201)

    def test_added_as_completed_is_stamped(self):
        game = self.add_game(self.token, GAME_CELESTE).get_json()['game']
        self.assertIsNotNone(game['dateCompleted'])
        self.assertEqual(self.profile_stats()['completedGames'], 1)

    def test_invalid_status_rejected(self):
        resp = self.add_game(self.token, GAME_PORTAL, status='finished')
        self.assertEqual(resp.status_code, 400)
        self.assertTrue(resp.get_json()['error'].startswith('status:'))

    def test_missing_game_id_rejected(self):
        body = {key: value for key, value in GAME_PORTAL.items() if key != 'gameId'}
        resp = self.client.post('/api/games/library', json=body, headers=self.headers)
        self.assertEqual(resp.status_code, 400)
        self.assertTrue(resp.get_json()['error'].startswith('gameId:'))

    def test_unknown_field_rejected(self):
        resp = self.add_game(self.token, GAME_PORTAL, slug='portal-2')
        self.assertEqual(resp.status_code, 400)
        self.assertTrue(resp.get_json()['error'].startswith('slug:'))


class TestUpdateGame(LibraryTestCase):

    def setUp(self):
        super().setUp()
        self.add_game(self.token, GAME_PORTAL)

    def test_completing_sets_date_and_leaving_clears_it(self):
        game = self.update(4200, {'status': 'completed'}).get_json()['game']
        self.assertEqual(game['status'], 'completed')
        self.assertIsNotNone(game['dateCompleted'])

        game = self.update(4200, {'status': 'dropped'}).get_json()['game']
        self.assertEqual(game['status'], 'dropped')
        self.assertIsNone(game['dateCompleted'])

    def test_rating_only_update_keeps_completion(self):
        completed = self.update(4200, {'status': 'completed'}).get_json()['game']
        game = self.update(4200, {'userRating': 9}).get_json()['game']
        self.assertEqual(game['dateCompleted'], completed['dateCompleted'])
        self.assertEqual(game['userRating'], 9)

    def test_merges_only_supplied_fields(self):
        self.update(4200, {'userRating': 7, 'notes': 'Co-op is great'})
        game = self.update(4200, {'notes': ''}).get_json()['game']
        self.assertEqual(game['userRating'], 7)
        self.assertEqual(game['notes'], '')
        self.assertEqual(game['status'], 'playing')
        self.assertEqual(game['name'], 'Portal 2')

    def test_rating_can_be_cleared(self):
        self.update(4200, {'userRating': 7})
        game = self.update(4200, {'userRating': None}).get_json()['game']
        self.assertIsNone(game['userRating'])

    def test_rating_out_of_range(self):
        for rating in (0, 11):
            resp = self.update(4200, {'userRating': rating})
            self.assertEqual(resp.status_code, 400)
            self.assertTrue(resp.get_json()['error'].startswith('userRating:'))

    def test_notes_too_long(self):
        resp = self.update(4200, {'notes': 'x' * 501})
        self.assertEqual(resp.status_code, 400)

    def test_null_status_rejected(self):
        resp = self.update(4200, {'status': None})
        self.assertEqual(resp.status_code, 400)

    def test_unknown_field_rejected(self):
        resp = self.update(4200, {'name': 'Portal 3'})
        self.assertEqual(resp.status_code, 400)

    def test_missing_game(self):
        resp = self.update(1, {'notes': 'hi'})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.get_json()['error'], 'Game not found in library')


class TestStatsInvariant(LibraryTestCase):

    def test_average_tracks_every_mutation(self):
        self.add_game(self.token, GAME_PORTAL)
        self.add_game(self.token, GAME_HADES)
        self.add_game(self.token, GAME_CELESTE)
        self.assertEqual(self.profile_stats(), {'totalGames': 3, 'completedGames': 1, 'averageRating': 0.0})

        self.update(28, {'userRating': 8})
        self.update(4200, {'status': 'completed', 'userRating': 7})
        self.update(274755, {'status': 'completed', 'userRating': 8})
        # (8 + 7 + 8) / 3 = 7.67
        self.assertEqual(self.profile_stats()['averageRating'], 7.7)

        self.update(274755, {'status': 'playing'})
        self.assertEqual(self.profile_stats()['averageRating'], 7.5)

        self.client.delete('/api/games/library/28', headers=self.headers)
        self.assertEqual(self.profile_stats(), {'totalGames': 2, 'completedGames': 1, 'averageRating': 7.0})

        self.client.delete('/api/games/library/4200', headers=self.headers)
        self.assertEqual(self.profile_stats(), {'totalGames': 1, 'completedGames': 0, 'averageRating': 0.0})


class TestGetAndRemove(LibraryTestCase):

    def test_get_single_entry(self):
        self.add_game(self.token, GAME_HADES)
        resp = self.client.get('/api/games/library/274755', headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()['game']['name'], 'Hades')

    def test_get_missing_entry(self):
        resp = self.client.get('/api/games/library/274755', headers=self.headers)
        self.assertEqual(resp.status_code, 404)

    def test_remove(self):
        self.add_game(self.token, GAME_HADES)
        resp = self.client.delete('/api/games/library/274755', headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()['message'], 'Game removed from library')
        self.assertEqual(self.library(), [])

    def test_remove_missing(self):
        resp = self.client.delete('/api/games/library/999', headers=self.headers)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.get_json()['error'], 'Game not found in library')

    def test_libraries_are_per_user(self):
        other_token, _ = self.register('bob')
        self.add_game(other_token, GAME_HADES)
        self.assertEqual(self.library(), [])
        resp = self.client.delete('/api/games/library/274755', headers=self.headers)
        self.assertEqual(resp.status_code, 404)


class TestListing(LibraryTestCase):

    def setUp(self):
        super().setUp()
        self.add_game(self.token, GAME_PORTAL)
        self.add_game(self.token, GAME_HADES)
        self.add_game(self.token, GAME_CELESTE)
        self.update(4200, {'userRating': 6})
        self.update(28, {'userRating': 9})

    def _names(self, **params):
        return [game['name'] for game in self.library(**params)]

    def test_filter_by_status(self):
        self.assertEqual(self._names(status='completed'), ['celeste'])
        self.assertEqual(self._names(status='dropped'), [])

    def test_invalid_status_filter(self):
        resp = self.client.get('/api/games/library', query_string={'status': 'done'}, headers=self.headers)
        self.assertEqual(resp.status_code, 400)

    def test_sort_by_name(self):
        self.assertEqual(self._names(sortBy='name', order='asc'), ['celeste', 'Hades', 'Portal 2'])
        self.assertEqual(self._names(sortBy='name', order='desc'), ['Portal 2', 'Hades', 'celeste'])

    def test_sort_by_rating(self):
        self.assertEqual(self._names(sortBy='rating', order='desc'), ['celeste', 'Portal 2', 'Hades'])
        self.assertEqual(self._names(sortBy='rating', order='asc'), ['Hades', 'Portal 2', 'celeste'])

    def test_sort_by_date_completed(self):
        self.assertEqual(self._names(sortBy='dateCompleted', order='desc')[0], 'celeste')

    def test_rating_ties_keep_library_order(self):
        self.update(274755, {'userRating': 6})
        self.assertEqual(self._names(sortBy='rating', order='asc'), ['Portal 2', 'Hades', 'celeste'])
        self.assertEqual(self._names(sortBy='rating', order='desc'), ['celeste', 'Portal 2', 'Hades'])

    def test_unknown_sort_key_falls_back(self):
        self.assertEqual(self._names(sortBy='popularity', order='asc'), self._names(sortBy='dateAdded', order='asc'))


class TestStatsEndpoint(LibraryTestCase):

    def test_empty_library(self):
        resp = self.client.get('/api/games/stats', headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertEqual(data['totalGames'], 0)
        self.assertEqual(data['topGenres'], {})
        self.assertEqual(data['recentActivity'], [])

    def test_breakdown(self):
        self.add_game(self.token, GAME_PORTAL)
        self.add_game(self.token, GAME_HADES)
        self.add_game(self.token, GAME_CELESTE)
        self.update(28, {'userRating': 10})

        data = self.client.get('/api/games/stats', headers=self.headers).get_json()
        self.assertEqual(data['totalGames'], 3)
        self.assertEqual((data['playing'], data['completed'], data['dropped'], data['planToPlay']), (1, 1, 0, 1))
        self.assertEqual(data['averageRating'], 10.0)
        self.assertEqual(data['topGenres']['Action'], 2)
        self.assertEqual(len(data['topGenres']), 5)
        self.assertEqual(len(data['recentActivity']), 3)
        self.assertEqual(set(data['recentActivity'][0]), {'name', 'status', 'dateAdded'})


if __name__ == '__main__':
    unittest.main()
