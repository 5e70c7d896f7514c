#!/usr/bin/env python3
"""
Unit tests for the page services in app/services.

HTTP is faked at ``stand_client.requests.request`` with a small router so the
real StandAPIClient is exercised end to end.

Run with:
    python -m pytest tests/test_services.py
"""
import json
import os
import sys
import unittest
from unittest.mock import MagicMock, patch

import requests

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from stand_client import StandAPIClient
from app.models import Criterion, Room, Stand
from app.services import (
    DashboardService, EvaluationService, ManageCriteriaService, ManageRoomsService,
    ManageStandsService, MutationResult, RankingService,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

SERVER = 'http://stands.local:5000'

FAKE_STANDS = [
    {'id': 1, 'name': 'Robotics', 'description': 'Line followers', 'room_id': 10,
     'room_name': 'Hall A'},
    {'id': 2, 'name': 'Chemistry', 'description': None, 'room_id': None, 'room_name': None},
]
FAKE_ROOMS = [{'id': 10, 'name': 'Hall A'}, {'id': 11, 'name': 'Hall B'}]
FAKE_SETTINGS = {'bg_gradient_color1': '#FF0000', 'index_title_text': 'Science Fair'}


def _make_response(status=200, body=None, reason='OK', text=None):
    resp = MagicMock()
    resp.status_code = status
    resp.reason = reason
    resp.text = text if text is not None else json.dumps(body if body is not None else {})
    resp.headers = {}
    return resp


def _ok(**payload):
    payload.setdefault('success', True)
    return _make_response(200, payload)


class FakeServer:
    """Routes ``requests.request`` calls by (method, path)."""

    def __init__(self, routes):
        self.routes = dict(routes)
        self.calls = []

    def __call__(self, method, url, **kwargs):
        path = url[len(SERVER):]
        self.calls.append((method, path, kwargs.get('json')))
        result = self.routes[(method, path)]
        if isinstance(result, Exception):
            raise result
        return result

    def methods(self):
        return [c[0] for c in self.calls]


def _default_routes():
    return {
        ('GET', '/api/stands'): _ok(stands=FAKE_STANDS),
        ('GET', '/api/rooms'): _ok(rooms=FAKE_ROOMS),
        ('GET', '/api/admin_settings'): _ok(settings=FAKE_SETTINGS),
        ('GET', '/api/ranking_data'): _ok(rankings=[
            {'rank': 1, 'stand_name': 'Robotics', 'room_name': 'Hall A',
             'total_achieved_score': 95, 'evaluator_count': 4},
            {'rank': 2, 'stand_name': 'Chemistry', 'room_name': None,
             'total_achieved_score': 80.5, 'evaluator_count': 3},
            {'stand_name': 'Biology', 'room_name': 'Hall B',
             'total_achieved_score': 60, 'evaluator_count': 2},
            {'rank': 4, 'stand_name': 'Physics', 'room_name': 'Hall B',
             'total_achieved_score': 10, 'evaluator_count': 1},
        ]),
    }


def _client(role='Administrator'):
    return StandAPIClient(SERVER, session_cookie='session=abc', user_role=role)


class ServiceTestCase(unittest.TestCase):
    """Patches requests.request with a FakeServer for each test."""

    def setUp(self):
        self.server = FakeServer(_default_routes())
        patcher = patch('stand_client.requests.request', side_effect=self.server)
        self.mock_request = patcher.start()
        self.addCleanup(patcher.stop)

    def _stands(self, role='Administrator'):
        service = ManageStandsService(_client(role))
        service.load()
        self.server.calls.clear()
        return service


# ===========================================================================
# Page loading
# ===========================================================================

class TestStandsLoad(ServiceTestCase):

    def test_all_endpoints_succeed(self):
        service = ManageStandsService(_client())
        state = service.load()
        self.assertFalse(state.loading)
        self.assertFalse(state.access_denied)
        self.assertIsNone(state.error_message)
        self.assertEqual([s.name for s in state.stands], ['Robotics', 'Chemistry'])
        self.assertEqual([r.name for r in state.rooms], ['Hall A', 'Hall B'])
        self.assertEqual(state.theme.gradient_color1.hex, '#FF0000')
        self.assertEqual(state.theme.title, 'Science Fair')

    def test_fetches_all_three_endpoints(self):
        ManageStandsService(_client()).load()
        paths = sorted(c[1] for c in self.server.calls)
        self.assertEqual(paths, ['/api/admin_settings', '/api/rooms', '/api/stands'])

    def test_one_failing_endpoint_keeps_the_others(self):
        self.server.routes[('GET', '/api/stands')] = _make_response(
            500, {}, reason='Internal Server Error')
        state = ManageStandsService(_client()).load()
        self.assertEqual(state.stands, [])
        self.assertEqual(len(state.rooms), 2)
        self.assertEqual(state.error_message, 'Error 500: Internal Server Error')

    def test_unsuccessful_body_uses_server_message(self):
        self.server.routes[('GET', '/api/rooms')] = _make_response(
            200, {'success': False, 'message': 'Database locked'})
        state = ManageStandsService(_client()).load()
        self.assertEqual(state.errors, ['Database locked'])
        self.assertEqual(len(state.stands), 2)

    def test_unsuccessful_body_without_message_uses_default(self):
        self.server.routes[('GET', '/api/stands')] = _make_response(200, {'success': False})
        state = ManageStandsService(_client()).load()
        self.assertEqual(state.error_message, 'Failed to load stands.')

    def test_several_failures_are_joined(self):
        self.server.routes[('GET', '/api/stands')] = _make_response(500, {}, reason='Boom')
        self.server.routes[('GET', '/api/admin_settings')] = _make_response(
            403, {}, reason='Forbidden')
        state = ManageStandsService(_client()).load()
        self.assertEqual(len(state.errors), 2)
        self.assertEqual(state.error_message, ' '.join(state.errors))
        self.assertIn('Error 500: Boom', state.errors)
        self.assertIn('Error 403: Forbidden', state.errors)

    def test_failed_settings_keep_default_theme(self):
        self.server.routes[('GET', '/api/admin_settings')] = _make_response(
            404, {}, reason='Not Found')
        state = ManageStandsService(_client()).load()
        self.assertEqual(state.theme.gradient_color1.hex, '#E3F2FD')
        self.assertEqual(len(state.stands), 2)

    def test_transport_failure_is_a_connection_error(self):
        self.server.routes[('GET', '/api/rooms')] = requests.ConnectionError('refused')
        state = ManageStandsService(_client()).load()
        self.assertEqual(len(state.errors), 1)
        self.assertTrue(state.error_message.startswith('Connection error:'))
        self.assertFalse(state.loading)

    def test_undecodable_body_is_a_connection_error(self):
        self.server.routes[('GET', '/api/stands')] = _make_response(200, text='<html>')
        state = ManageStandsService(_client()).load()
        self.assertTrue(state.error_message.startswith('Connection error:'))

    def test_malformed_record_is_a_connection_error(self):
        self.server.routes[('GET', '/api/stands')] = _ok(stands=[{'name': 'no id'}])
        state = ManageStandsService(_client()).load()
        self.assertTrue(state.error_message.startswith('Connection error:'))

    def test_reload_clears_previous_errors(self):
        service = ManageStandsService(_client())
        self.server.routes[('GET', '/api/stands')] = _make_response(500, {}, reason='Boom')
        service.load()
        self.assertIsNotNone(service.state.error_message)
        self.server.routes[('GET', '/api/stands')] = _ok(stands=FAKE_STANDS)
        service.load()
        self.assertIsNone(service.state.error_message)

    def test_malformed_colour_falls_back(self):
        self.server.routes[('GET', '/api/admin_settings')] = _ok(
            settings={'bg_gradient_color1': 'nonsense'})
        with self.assertLogs('standapp.models', level='WARNING'):
            state = ManageStandsService(_client()).load()
        self.assertEqual(state.theme.gradient_color1.hex, '#E3F2FD')
        self.assertIsNone(state.error_message)


class TestAccessControl(ServiceTestCase):

    def test_wrong_role_sends_no_request(self):
        service = ManageStandsService(_client(role='Evaluator'))
        state = service.load()
        self.assertTrue(state.access_denied)
        self.assertFalse(state.loading)
        self.mock_request.assert_not_called()
        self.assertIn('Administrator', service.access_denied_text())

    def test_missing_role_is_denied(self):
        state = ManageRoomsService(_client(role=None)).load()
        self.assertTrue(state.access_denied)
        self.mock_request.assert_not_called()

    def test_ranking_is_open_to_every_role(self):
        state = RankingService(_client(role='Evaluator')).load()
        self.assertFalse(state.access_denied)
        self.assertEqual(len(state.entries), 4)


# ===========================================================================
# Stand mutations
# ===========================================================================

class TestCreateStand(ServiceTestCase):

    def test_empty_name_sends_no_request(self):
        service = self._stands()
        result = service.create_stand('', 'desc', 10)
        self.assertEqual(result, MutationResult(False, 'Error', 'Please enter a stand name.'))
        self.assertEqual(self.server.calls, [])

    def test_whitespace_name_sends_no_request(self):
        service = self._stands()
        self.assertFalse(service.create_stand('   ').ok)
        self.assertEqual(self.server.calls, [])

    def test_success_posts_and_reloads(self):
        self.server.routes[('POST', '/api/stands')] = _make_response(
            201, {'success': True, 'message': 'Stand created'})
        service = self._stands()
        result = service.create_stand('  Physics ', '  Optics  ', 11)
        self.assertTrue(result.ok)
        self.assertEqual(result.title, 'Success')
        self.assertEqual(result.message, 'Stand created')
        post = self.server.calls[0]
        self.assertEqual(post[:2], ('POST', '/api/stands'))
        self.assertEqual(post[2], {'name': 'Physics', 'description': 'Optics', 'room_id': 11})
        self.assertEqual(self.server.methods().count('GET'), 3)

    def test_missing_description_sends_empty_string(self):
        self.server.routes[('POST', '/api/stands')] = _make_response(201, {'success': True})
        service = self._stands()
        service.create_stand('Physics')
        self.assertEqual(self.server.calls[0][2],
                         {'name': 'Physics', 'description': '', 'room_id': None})

    def test_create_requires_201(self):
        self.server.routes[('POST', '/api/stands')] = _make_response(200, {'success': True})
        service = self._stands()
        result = service.create_stand('Physics')
        self.assertFalse(result.ok)
        self.assertEqual(result.message, 'Failed to create the stand.')
        self.assertEqual(self.server.methods(), ['POST'])

    def test_server_rejection_message(self):
        self.server.routes[('POST', '/api/stands')] = _make_response(
            400, {'success': False, 'message': 'Name already exists'})
        result = self._stands().create_stand('Robotics')
        self.assertEqual(result, MutationResult(False, 'Error', 'Name already exists'))

    def test_connection_failure(self):
        self.server.routes[('POST', '/api/stands')] = requests.ConnectionError('down')
        service = self._stands()
        result = service.create_stand('Physics')
        self.assertFalse(result.ok)
        self.assertEqual(result.title, 'Connection error')
        self.assertIn('creating the stand', result.message)
        self.assertFalse(service.state.loading)


class TestEditAndDeleteStand(ServiceTestCase):

    def test_edit_puts_to_stand_url(self):
        self.server.routes[('PUT', '/api/stands/1')] = _make_response(
            200, {'success': True, 'message': 'Updated'})
        service = self._stands()
        result = service.edit_stand(1, 'Robotics 2', 'New', 11)
        self.assertTrue(result.ok)
        self.assertEqual(self.server.calls[0],
                         ('PUT', '/api/stands/1',
                          {'name': 'Robotics 2', 'description': 'New', 'room_id': 11}))

    def test_edit_empty_name_sends_no_request(self):
        service = self._stands()
        self.assertFalse(service.edit_stand(1, ' ').ok)
        self.assertEqual(self.server.calls, [])

    def test_edit_failure_does_not_reload(self):
        self.server.routes[('PUT', '/api/stands/1')] = _make_response(
            404, {'success': False}, reason='Not Found')
        service = self._stands()
        result = service.edit_stand(1, 'X')
        self.assertEqual(result.message, 'Failed to update the stand.')
        self.assertEqual(self.server.methods(), ['PUT'])

    def test_declined_delete_sends_no_request(self):
        service = self._stands()
        confirm = MagicMock(return_value=False)
        self.assertIsNone(service.delete_stand(1, 'Robotics', confirm))
        confirm.assert_called_once()
        title, message = confirm.call_args[0]
        self.assertEqual(title, 'Delete stand')
        self.assertIn('"Robotics"', message)
        self.assertEqual(self.server.calls, [])

    def test_missing_confirmation_counts_as_declined(self):
        service = self._stands()
        self.assertIsNone(service.delete_stand(1, 'Robotics', None))
        self.assertEqual(self.server.calls, [])

    def test_confirmed_delete(self):
        self.server.routes[('DELETE', '/api/stands/2')] = _make_response(
            200, {'success': True, 'message': 'Deleted'})
        service = self._stands()
        result = service.delete_stand(2, 'Chemistry', lambda title, message: True)
        self.assertTrue(result.ok)
        self.assertEqual(self.server.calls[0][:2], ('DELETE', '/api/stands/2'))
        self.assertIn('GET', self.server.methods())


class TestRoomLookup(ServiceTestCase):

    def test_room_for_matching_room(self):
        service = self._stands()
        self.assertEqual(service.room_for(service.find_stand(1)), Room(10, 'Hall A'))

    def test_room_for_stand_without_room(self):
        service = self._stands()
        self.assertIsNone(service.room_for(service.find_stand(2)))

    def test_room_for_unknown_room_falls_back_to_first(self):
        service = self._stands()
        orphan = Stand(9, 'Orphan', room_id=99)
        self.assertEqual(service.room_for(orphan).id, 10)

    def test_find_stand_missing(self):
        self.assertIsNone(self._stands().find_stand(42))


# ===========================================================================
# Rooms
# ===========================================================================

class TestRooms(ServiceTestCase):

    def _rooms(self):
        service = ManageRoomsService(_client())
        service.load()
        self.server.calls.clear()
        return service

    def test_load(self):
        service = ManageRoomsService(_client())
        state = service.load()
        self.assertEqual([r.id for r in state.rooms], [10, 11])
        self.assertIsNone(state.error_message)

    def test_create_accepts_201(self):
        self.server.routes[('POST', '/api/rooms')] = _make_response(201, {'success': True})
        service = self._rooms()
        self.assertTrue(service.save_room('Hall C').ok)
        self.assertEqual(self.server.calls[0], ('POST', '/api/rooms', {'name': 'Hall C'}))

    def test_rename_accepts_200(self):
        self.server.routes[('PUT', '/api/rooms/11')] = _make_response(200, {'success': True})
        service = self._rooms()
        self.assertTrue(service.save_room('Hall Z', room_id=11).ok)
        self.assertEqual(self.server.calls[0][:2], ('PUT', '/api/rooms/11'))

    def test_empty_room_name(self):
        service = self._rooms()
        result = service.save_room('')
        self.assertEqual(result.message, 'Please enter a room name.')
        self.assertEqual(self.server.calls, [])

    def test_declined_room_delete(self):
        service = self._rooms()
        self.assertIsNone(service.delete_room(10, 'Hall A', lambda t, m: False))
        self.assertEqual(self.server.calls, [])


# ===========================================================================
# Ranking
# ===========================================================================

class TestRanking(ServiceTestCase):

    def test_entries_keep_server_order(self):
        state = RankingService(_client()).load()
        self.assertEqual([e.stand_name for e in state.entries],
                         ['Robotics', 'Chemistry', 'Biology', 'Physics'])

    def test_missing_rank_uses_position(self):
        state = RankingService(_client()).load()
        self.assertEqual(state.entries[2].rank, 3)
        self.assertEqual(state.entries[1].total_score, 80.5)
        self.assertEqual(state.entries[0].evaluator_count, 4)

    def test_top_three(self):
        service = RankingService(_client())
        service.load()
        self.assertEqual([e.rank for e in service.top()], [1, 2, 3])
        self.assertEqual(len(service.top(10)), 4)

    def test_non_list_rankings_are_ignored(self):
        self.server.routes[('GET', '/api/ranking_data')] = _ok(rankings=None)
        state = RankingService(_client()).load()
        self.assertEqual(state.entries, [])
        self.assertIsNone(state.error_message)

    def test_ranking_failure(self):
        self.server.routes[('GET', '/api/ranking_data')] = _make_response(
            502, {}, reason='Bad Gateway')
        state = RankingService(_client()).load()
        self.assertEqual(state.error_message, 'Error 502: Bad Gateway')
        self.assertEqual(state.theme.title, 'Science Fair')


# ===========================================================================
# Failures with a non-JSON body
# ===========================================================================

HTML_ERROR = '<html><body>oops</body></html>'


class TestNonJsonFailures(ServiceTestCase):

    def test_create_reports_status_line(self):
        self.server.routes[('POST', '/api/stands')] = _make_response(
            500, reason='Internal Server Error', text=HTML_ERROR)
        result = self._stands().create_stand('Physics')
        self.assertEqual(result, MutationResult(False, 'Error', 'Error 500: Internal Server Error'))
        self.assertEqual(self.server.methods(), ['POST'])

    def test_edit_reports_status_line(self):
        self.server.routes[('PUT', '/api/stands/1')] = _make_response(
            404, reason='Not Found', text=HTML_ERROR)
        result = self._stands().edit_stand(1, 'Robotics 2')
        self.assertEqual(result.title, 'Error')
        self.assertEqual(result.message, 'Error 404: Not Found')
        self.assertEqual(self.server.methods(), ['PUT'])

    def test_delete_reports_status_line(self):
        self.server.routes[('DELETE', '/api/stands/2')] = _make_response(
            500, reason='Internal Server Error', text='<html>oops</html>')
        result = self._stands().delete_stand(2, 'Chemistry', lambda t, m: True)
        self.assertEqual(result.title, 'Error')
        self.assertIn('Error 500: Internal Server Error', result.message)
        self.assertEqual(self.server.methods(), ['DELETE'])

    def test_garbled_success_status_is_a_connection_error(self):
        self.server.routes[('POST', '/api/stands')] = _make_response(201, text='not json')
        result = self._stands().create_stand('Physics')
        self.assertEqual(result.title, 'Connection error')

    def test_edit_without_selection_sends_no_request(self):
        service = self._stands()
        result = service.edit_stand(None, 'Robotics')
        self.assertEqual(result, MutationResult(False, 'Error', 'No stand selected.'))
        self.assertEqual(self.server.calls, [])


# ===========================================================================
# Criteria
# ===========================================================================

FAKE_CRITERIA = [
    {'id': 5, 'name': 'Creativity', 'max_score': 10, 'description': 'Original idea'},
    {'id': 6, 'name': 'Presentation', 'max_score': 5, 'description': None},
]


class TestCriteria(ServiceTestCase):

    def setUp(self):
        super().setUp()
        self.server.routes[('GET', '/api/criteria')] = _ok(criteria=FAKE_CRITERIA)

    def _criteria(self, role='Administrator'):
        service = ManageCriteriaService(_client(role))
        service.load()
        self.server.calls.clear()
        return service

    def test_load(self):
        state = ManageCriteriaService(_client()).load()
        self.assertEqual(state.criteria[0], Criterion(5, 'Creativity', 10, 'Original idea'))
        self.assertEqual(state.criteria[1].max_score, 5)
        self.assertEqual(state.theme.title, 'Science Fair')

    def test_administrators_only(self):
        state = ManageCriteriaService(_client('Bewerter')).load()
        self.assertTrue(state.access_denied)
        self.assertEqual(self.server.calls, [])

    def test_create_posts_parsed_max_score(self):
        self.server.routes[('POST', '/api/criteria')] = _make_response(
            201, {'success': True, 'message': 'Criterion created'})
        service = self._criteria()
        result = service.create_criterion(' Teamwork ', ' 8 ', None)
        self.assertEqual(result, MutationResult(True, 'Success', 'Criterion created'))
        self.assertEqual(self.server.calls[0],
                         ('POST', '/api/criteria',
                          {'name': 'Teamwork', 'max_score': 8, 'description': ''}))
        self.assertIn('GET', self.server.methods())

    def test_create_validation(self):
        service = self._criteria()
        cases = [
            (('', '10'), 'Please enter a criterion name and a maximum score.'),
            (('Teamwork', ''), 'Please enter a criterion name and a maximum score.'),
            (('Teamwork', 'ten'), 'The maximum score must be a valid number.'),
        ]
        for args, message in cases:
            with self.subTest(args=args):
                self.assertEqual(service.create_criterion(*args).message, message)
        self.assertEqual(self.server.calls, [])

    def test_edit_puts_to_criterion_url(self):
        self.server.routes[('PUT', '/api/criteria/6')] = _make_response(200, {'success': True})
        service = self._criteria()
        self.assertTrue(service.edit_criterion(6, 'Presentation', 6, 'Slides').ok)
        self.assertEqual(self.server.calls[0],
                         ('PUT', '/api/criteria/6',
                          {'name': 'Presentation', 'max_score': 6, 'description': 'Slides'}))

    def test_edit_without_selection(self):
        service = self._criteria()
        self.assertEqual(service.edit_criterion(None, 'X', 1).message, 'No criterion selected.')
        self.assertEqual(self.server.calls, [])

    def test_delete_needs_confirmation(self):
        self.server.routes[('DELETE', '/api/criteria/5')] = _make_response(
            200, {'success': True})
        service = self._criteria()
        self.assertIsNone(service.delete_criterion(5, 'Creativity', lambda t, m: False))
        self.assertEqual(self.server.calls, [])
        confirm = MagicMock(return_value=True)
        self.assertTrue(service.delete_criterion(5, 'Creativity', confirm).ok)
        self.assertIn('"Creativity"', confirm.call_args[0][1])
        self.assertEqual(self.server.calls[0][:2], ('DELETE', '/api/criteria/5'))

    def test_find_criterion(self):
        service = self._criteria()
        self.assertEqual(service.find_criterion(6).name, 'Presentation')
        self.assertIsNone(service.find_criterion(99))


# ===========================================================================
# Evaluation
# ===========================================================================

class TestEvaluation(ServiceTestCase):

    def setUp(self):
        super().setUp()
        self.server.routes[('GET', '/api/evaluate_initial_data')] = _ok(
            stands=FAKE_STANDS, criteria=FAKE_CRITERIA)
        self.server.routes[('GET', '/api/evaluations/user_scores/1')] = _ok(
            exists=True, scores={'5': 7, '6': 3}, timestamp='2026-05-01 10:00')
        self.server.routes[('GET', '/api/evaluations/user_scores/2')] = _ok(exists=False)

    def _evaluation(self, role='Bewerter'):
        service = EvaluationService(_client(role))
        service.load()
        self.server.calls.clear()
        return service

    def test_load_for_evaluator(self):
        state = EvaluationService(_client('Bewerter')).load()
        self.assertFalse(state.access_denied)
        self.assertEqual([s.name for s in state.stands], ['Robotics', 'Chemistry'])
        self.assertEqual([c.id for c in state.criteria], [5, 6])
        self.assertIsNone(state.selected_stand_id)

    def test_other_roles_are_denied(self):
        state = EvaluationService(_client('Inspektor')).load()
        self.assertTrue(state.access_denied)
        self.assertEqual(self.server.calls, [])

    def test_select_stand_loads_existing_scores(self):
        service = self._evaluation()
        state = service.select_stand(1)
        self.assertEqual(state.existing_scores, {5: 7, 6: 3})
        self.assertEqual(state.last_evaluation, '2026-05-01 10:00')
        self.assertEqual(service.selected_stand.name, 'Robotics')

    def test_select_unevaluated_stand(self):
        service = self._evaluation()
        service.select_stand(1)
        state = service.select_stand(2)
        self.assertEqual(state.existing_scores, {})
        self.assertIsNone(state.last_evaluation)

    def test_select_unknown_stand_sends_no_request(self):
        service = self._evaluation()
        self.assertIsNone(service.select_stand(42).selected_stand_id)
        self.assertEqual(self.server.calls, [])

    def test_existing_scores_failure_is_reported(self):
        self.server.routes[('GET', '/api/evaluations/user_scores/1')] = _make_response(
            500, {}, reason='Internal Server Error')
        state = self._evaluation().select_stand(1)
        self.assertEqual(state.error_message, 'Error 500: Internal Server Error')
        self.assertEqual(state.existing_scores, {})

    def test_submit_without_stand(self):
        result = self._evaluation().submit({5: 3})
        self.assertEqual(result, MutationResult(False, 'Error', 'Please select a stand first.'))
        self.assertEqual(self.server.calls, [])

    def test_submit_posts_scores_and_refetches_them(self):
        self.server.routes[('POST', '/evaluate')] = _ok()
        service = self._evaluation()
        service.select_stand(2)
        self.server.calls.clear()
        result = service.submit({5: '9', 6: 4})
        self.assertEqual(result, MutationResult(True, 'Success', 'Evaluation saved.'))
        self.assertEqual(self.server.calls[0],
                         ('POST', '/evaluate', {'stand_id': 2, 'scores': {'5': 9, '6': 4}}))
        self.assertEqual([c[:2] for c in self.server.calls[1:]],
                         [('GET', '/api/evaluations/user_scores/2')])

    def test_invalid_scores_are_dropped(self):
        self.server.routes[('POST', '/evaluate')] = _ok()
        service = self._evaluation()
        service.select_stand(1)
        self.server.calls.clear()
        service.submit({5: '11', 6: 'abc'})
        self.assertEqual(self.server.calls[0][2], {'stand_id': 1, 'scores': {}})
        self.assertEqual(service.state.rejected_criteria, ['Creativity', 'Presentation'])

    def test_validate_scores(self):
        service = self._evaluation()
        accepted, rejected = service.validate_scores({5: 0, 6: '-1'})
        self.assertEqual(accepted, {5: 0})
        self.assertEqual(rejected, ['Presentation'])
        self.assertEqual(service.validate_scores({5: '  ', 6: None}), ({}, []))

    def test_submit_failure_uses_server_message(self):
        self.server.routes[('POST', '/evaluate')] = _make_response(
            400, {'success': False, 'message': 'Voting is closed'})
        service = self._evaluation()
        service.select_stand(1)
        self.server.calls.clear()
        result = service.submit({5: 1})
        self.assertEqual(result, MutationResult(False, 'Error', 'Voting is closed'))
        self.assertEqual(self.server.methods(), ['POST'])


# ===========================================================================
# Start page
# ===========================================================================

class TestDashboard(ServiceTestCase):

    def setUp(self):
        super().setUp()
        self.server.routes[('GET', '/api/my_evaluations')] = _ok(evaluations=[{}, {}, {}])
        self.server.routes[('GET', '/api/room_inspections')] = _ok(room_inspections=[
            {'room_id': 10, 'inspection_timestamp': None},
            {'room_id': 11, 'inspection_timestamp': '2026-05-01 09:00'},
        ])

    def test_summary(self):
        state = DashboardService(_client('Bewerter')).load()
        self.assertEqual(state.my_evaluation_count, 3)
        self.assertEqual(state.open_room_count, 1)
        self.assertEqual([e.stand_name for e in state.top_rankings],
                         ['Robotics', 'Chemistry', 'Biology'])
        self.assertEqual(state.theme.title, 'Science Fair')

    def test_failures_are_quiet(self):
        self.server.routes[('GET', '/api/my_evaluations')] = _make_response(
            500, {}, reason='Internal Server Error')
        self.server.routes[('GET', '/api/room_inspections')] = _make_response(
            403, {}, reason='Forbidden')
        state = DashboardService(_client('Bewerter')).load()
        self.assertIsNone(state.error_message)
        self.assertIsNone(state.my_evaluation_count)
        self.assertIsNone(state.open_room_count)
        self.assertEqual(len(state.top_rankings), 3)

    def test_role_flags(self):
        self.assertTrue(DashboardService(_client('Bewerter')).can_evaluate)
        self.assertFalse(DashboardService(_client('Bewerter')).can_inspect)
        self.assertTrue(DashboardService(_client('Inspektor')).can_inspect)
        admin = DashboardService(_client())
        self.assertTrue(admin.can_evaluate and admin.can_inspect)



if __name__ == '__main__':
    unittest.main()
