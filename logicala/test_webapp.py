import pytest

from logicala.config import CheckerConfig
from logicala.webapp import EXAMPLES, create_app

VALID = "p, p → q ⊢ q\n{\n 1. p premise\n 2. p → q premise\n 3. q →e 1 2\n}"


@pytest.fixture
def client():
    app = create_app(CheckerConfig())
    app.config['TESTING'] = True
    return app.test_client()


class TestCheckEndpoint:
    def test_valid_proof(self, client):
        data = client.post('/api/check', json={'code': VALID}).get_json()
        assert data['ok'] is True
        assert data['status'] == 'proved'
        assert len(data['step_results']) == 3

    def test_invalid_proof(self, client):
        data = client.post('/api/check', json={'code': VALID.replace('→e 1 2', '→e 2 1')}).get_json()
        assert data['ok'] is False
        assert data['status'] == 'disproved'
        assert data['step_results'][2]['error'] == 'JustificationMismatch'

    def test_semantic(self, client):
        data = client.post('/api/check', json={'code': VALID, 'semantic': True}).get_json()
        assert data['sequent'] == {'ok': True, 'status': 'valid'}

    def test_parse_error(self, client):
        data = client.post('/api/check', json={'code': 'p ⊢'}).get_json()
        assert data['status'] == 'error'
        assert data['message'].startswith('Parse error')

    def test_kind_error(self, client):
        data = client.post('/api/check', json={'code': VALID, 'strict': True}).get_json()
        assert data['status'] == 'error'
        assert data['message'].startswith('Kind error')

    def test_string_options_are_parsed(self, client):
        data = client.post('/api/check', json={'code': VALID, 'strict': 'false'}).get_json()
        assert data['ok'] is True
        data = client.post('/api/check', json={'code': VALID, 'strict': 'true'}).get_json()
        assert data['message'].startswith('Kind error')

    def test_missing_code(self, client):
        response = client.post('/api/check', json={})
        assert response.status_code == 400

    def test_examples_all_verify(self, client):
        examples = client.get('/api/examples').get_json()
        assert len(examples) == len(EXAMPLES)
        for example in examples:
            data = client.post('/api/check', json={'code': example['code']}).get_json()
            assert data['ok'] is True, example['name']


class TestParseEndpoint:
    def test_parse_claim(self, client):
        data = client.post('/api/parse', json={'claim': 'a ∨ b ∧ c'}).get_json()
        assert data['ok'] is True
        assert data['claim'] == '(a ∨ (b ∧ c))'
        assert data['ast']['type'] == 'or'
        assert data['kind'] == 'Bool'

    def test_parse_error(self, client):
        data = client.post('/api/parse', json={'claim': '(a ∧ b'}).get_json()
        assert data['ok'] is False

    def test_missing_claim(self, client):
        assert client.post('/api/parse', json={}).status_code == 400
