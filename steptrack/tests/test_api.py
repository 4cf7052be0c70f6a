import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

from steptrack.api import api_state
from steptrack.api.api_run import app
from steptrack.events import web_observers
from steptrack.events.Event_Bus import EventBus
from steptrack.infra.Registry_Repository import RegistryRepository


class ApiTestCase(unittest.TestCase):
    """Each test runs against freshly seeded sample data in a temporary directory."""

    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.data_dir = Path(tmp.name)
        self.repo = RegistryRepository(self.data_dir / "individuals.csv", self.data_dir / "groups.csv")
        api_state.configure(self.repo, seed=True)


class TestIndividualsAPI(ApiTestCase):

    def test_list_and_range(self):
        resp = self.client.get('/api/individuals')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['count'], 20)
        resp = self.client.get('/api/individuals', params={'start': 3, 'end': 5})
        self.assertEqual([ind['id'] for ind in resp.json()['individuals']], [3, 4, 5])

    def test_range_needs_both_bounds(self):
        resp = self.client.get('/api/individuals', params={'start': 3})
        self.assertEqual(resp.status_code, 400)
        resp = self.client.get('/api/individuals', params={'end': 5})
        self.assertEqual(resp.status_code, 400)

    def test_get_individual(self):
        resp = self.client.get('/api/individuals/1')
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data['name'], "User1")
        self.assertEqual(data['current_group_id'], "G1")
        self.assertEqual(self.client.get('/api/individuals/404').status_code, 404)

    def test_add_individual_is_persisted(self):
        body = {'id': 21, 'name': '  Newcomer ', 'age': 28, 'daily_step_goal': 8000, 'weekly_step_count': [9000]}
        resp = self.client.post('/api/individuals', json=body)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()['individual']['name'], "Newcomer")
        self.assertIsNone(resp.json()['individual']['current_group_id'])

        reloaded = RegistryRepository(self.repo.individuals_file, self.repo.groups_file).load(EventBus())
        self.assertEqual(reloaded.lookup_individual(21).daily_step_goal, 8000)

    def test_add_duplicate_individual(self):
        body = {'id': 1, 'name': 'Again', 'age': 28, 'daily_step_goal': 8000}
        resp = self.client.post('/api/individuals', json=body)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()['detail']['status'], 'already_exists')

    def test_add_individual_validation(self):
        body = {'id': 30, 'name': 'Lazy', 'age': 28, 'daily_step_goal': 0}
        self.assertEqual(self.client.post('/api/individuals', json=body).status_code, 422)

    def test_delete_individual_updates_group(self):
        resp = self.client.delete('/api/individuals/2')
        self.assertEqual(resp.status_code, 200)
        group = self.client.get('/api/groups/G1').json()
        self.assertEqual(group['member_ids'], [1, 3, 4, 5])
        self.assertEqual(self.client.delete('/api/individuals/2').status_code, 404)

    def test_record_steps(self):
        resp = self.client.put('/api/individuals/16/steps', json={'steps': 12345})
        self.assertEqual(resp.status_code, 200)
        steps = resp.json()['weekly_step_count']
        self.assertEqual(len(steps), 7)
        self.assertEqual(steps[-1], 12345)

        resp = self.client.put('/api/individuals/16/steps', json={'weekly_step_count': [1, 2, 3]})
        self.assertEqual(resp.json()['weekly_step_count'], [1, 2, 3])

    def test_record_steps_needs_exactly_one_field(self):
        self.assertEqual(self.client.put('/api/individuals/16/steps', json={}).status_code, 400)
        resp = self.client.put('/api/individuals/16/steps', json={'steps': 1, 'weekly_step_count': [1]})
        self.assertEqual(resp.status_code, 400)

    def test_update_goal(self):
        resp = self.client.put('/api/individuals/3/goal', json={'daily_step_goal': 9000})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['daily_step_goal'], 9000)
        self.assertEqual(self.client.put('/api/individuals/404/goal', json={'daily_step_goal': 9000}).status_code, 404)

    def test_rewards_accumulate(self):
        first = self.client.post('/api/individuals/19/rewards').json()
        self.assertTrue(first['awarded'])
        self.assertEqual(first['rank'], 1)
        self.assertEqual(first['points'], 100)
        second = self.client.post('/api/individuals/19/rewards').json()
        self.assertEqual(second['total_points'], 200)

    def test_rewards_outside_top_three(self):
        resp = self.client.post('/api/individuals/1/rewards')
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.json()['awarded'])
        self.assertEqual(resp.json()['total_points'], 0)
        self.assertEqual(self.client.post('/api/individuals/404/rewards').status_code, 404)

    def test_goal_suggestion(self):
        resp = self.client.get('/api/individuals/19/goal-suggestion')
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data['achieved_days'], 5)
        self.assertFalse(data['changed'])
        self.assertEqual(data['suggested_goal'], 6900)

    def test_goal_suggestion_needs_a_week(self):
        self.client.post('/api/individuals', json={'id': 40, 'name': 'Short', 'age': 20, 'daily_step_goal': 5000,
                                                   'weekly_step_count': [5000, 5000]})
        resp = self.client.get('/api/individuals/40/goal-suggestion')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['detail']['status'], 'insufficient_data')


class TestGroupsAPI(ApiTestCase):

    def test_list_groups(self):
        data = self.client.get('/api/groups').json()
        self.assertEqual([g['group_id'] for g in data['groups']], ["G1", "G2", "G3", "G4", "G5"])

    def test_create_group_with_warnings(self):
        body = {'group_id': 'G6', 'group_name': 'Late Joiners', 'member_ids': [16, 17, 1, 404], 'weekly_group_goal': 5000}
        resp = self.client.post('/api/groups', json=body)
        self.assertEqual(resp.status_code, 201)
        data = resp.json()
        self.assertEqual(data['group']['member_ids'], [16, 17])
        self.assertEqual(len(data['warnings']), 2)
        self.assertEqual(self.client.get('/api/individuals/16').json()['current_group_id'], 'G6')

    def test_create_group_errors(self):
        too_many = {'group_id': 'G6', 'group_name': 'Crowd', 'member_ids': [16, 17, 18, 19, 20, 404],
                    'weekly_group_goal': 1}
        resp = self.client.post('/api/groups', json=too_many)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['detail']['status'], 'too_many_members')

        nobody = {'group_id': 'G6', 'group_name': 'Ghosts', 'member_ids': [1, 404], 'weekly_group_goal': 1}
        resp = self.client.post('/api/groups', json=nobody)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['detail']['status'], 'no_valid_members')
        self.assertEqual(len(resp.json()['detail']['warnings']), 2)

        taken = {'group_id': 'G1', 'group_name': 'Copy', 'member_ids': [16], 'weekly_group_goal': 1}
        self.assertEqual(self.client.post('/api/groups', json=taken).status_code, 409)

    def test_merge_groups(self):
        body = {'group_id_1': 'G4', 'group_id_2': 'G5', 'new_group_name': 'Pairs and Solo', 'new_weekly_goal': 25000}
        resp = self.client.post('/api/groups/merge', json=body)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['group']['member_ids'], [13, 14, 15])
        self.assertEqual(self.client.get('/api/groups/G5').status_code, 404)
        self.assertEqual(self.client.get('/api/individuals/15').json()['current_group_id'], 'G4')

    def test_merge_over_capacity(self):
        body = {'group_id_1': 'G1', 'group_id_2': 'G2', 'new_group_name': 'Huge', 'new_weekly_goal': 1}
        resp = self.client.post('/api/groups/merge', json=body)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.client.get('/api/groups/G2').json()['member_ids'], [6, 7, 8, 9])

    def test_group_range(self):
        data = self.client.get('/api/groups/range', params={'start': 'G1', 'end': 'G3'}).json()
        self.assertEqual(data['count'], 3)
        self.assertEqual(sorted(g['group_id'] for g in data['groups']), ["G1", "G2", "G3"])
        self.assertEqual([g['rank'] for g in data['groups']], [1, 2, 3])
        totals = [g['total_weekly_steps'] for g in data['groups']]
        self.assertEqual(totals, sorted(totals, reverse=True))
        g1 = next(g for g in data['groups'] if g['group_id'] == 'G1')
        self.assertEqual(g1['members'][0], {'id': 1, 'name': 'User1'})

    def test_delete_group(self):
        resp = self.client.delete('/api/groups/G3')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['ungrouped'], [10, 11, 12])
        self.assertIsNone(self.client.get('/api/individuals/10').json()['current_group_id'])
        self.assertEqual(self.client.delete('/api/groups/G3').status_code, 404)

    def test_group_achievement(self):
        data = self.client.get('/api/groups/G5/achievement').json()
        self.assertTrue(data['achieved'])
        self.assertEqual(data['remaining'], 0)
        self.assertEqual(self.client.get('/api/groups/G5').json()['total_weekly_steps'], data['total_weekly_steps'])


class TestRankingsAndPagesAPI(ApiTestCase):

    def test_top_achievers(self):
        data = self.client.get('/api/rankings/top').json()
        self.assertEqual([ind['id'] for ind in data['individuals']], [19, 17, 18])
        self.assertEqual(data['individuals'][0]['steps'], 7400)

    def test_leaderboard(self):
        data = self.client.get('/api/rankings/leaderboard').json()
        self.assertEqual(data['count'], 5)
        totals = [g['total_weekly_steps'] for g in data['groups']]
        self.assertEqual(totals, sorted(totals, reverse=True))

    def test_invariants_endpoint(self):
        self.client.delete('/api/individuals/1')
        self.client.delete('/api/groups/G2')
        data = self.client.get('/api/health/invariants').json()
        self.assertTrue(data['consistent'])
        self.assertEqual(data['problems'], [])

    def test_events_feed(self):
        web_observers.start()
        cursor = self.client.get('/api/events').json()['next_cursor']
        self.client.post('/api/groups', json={'group_id': 'G9', 'group_name': 'Feed', 'member_ids': [20],
                                              'weekly_group_goal': 1})
        events = self.client.get('/api/events', params={'since': cursor}).json()['events']
        self.assertEqual([e['type'] for e in events], ['group.created'])
        self.assertEqual(events[0]['group_id'], 'G9')

    def test_leaderboard_page(self):
        resp = self.client.get('/')
        self.assertEqual(resp.status_code, 200)
        self.assertIn('Fitness Fanatics', resp.text)
        self.assertIn('User19', resp.text)

    def test_export_pdf(self):
        resp = self.client.get('/export_pdf')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.headers['content-type'], 'application/pdf')
        self.assertTrue(resp.content.startswith(b'%PDF'))


if __name__ == '__main__':
    unittest.main()
