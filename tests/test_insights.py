import json
import random
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from conftest import make_task, make_user
from taskmaster.ai import insights, prompts
from taskmaster.ai.insights_config import InsightConfig
from taskmaster.insight_log import get_insight_calls
from taskmaster.models import Note, TaskStatus

VOCAB = ['RESTOCK AISLE', 'INVENTORY AUDIT', 'CLEAN CHECKOUT LANES', 'FACE PRODUCE DISPLAY']


class FakeReply:
    def __init__(self, content):
        self.content = content


class FakeLLM:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    async def ainvoke(self, messages):
        self.prompts.append(messages[0].content)
        if self.error is not None:
            raise self.error
        return FakeReply(self.reply)


@pytest.fixture
def config():
    return InsightConfig(base_url='http://x', model='fake', temperature=0.0, api_key=None, enabled=True)


@pytest.fixture
def use_llm(monkeypatch):
    def install(fake):
        monkeypatch.setattr(insights, '_llm_for', lambda *a, **k: fake)
        return fake
    return install


def test_parse_suggestions_keeps_known_titles_only():
    reply = '1. Restock aisle\n2. Mop floors\n3. "inventory audit".'
    assert insights.parse_suggestions(reply, VOCAB) == ['RESTOCK AISLE', 'INVENTORY AUDIT']


def test_parse_suggestions_dedupes_and_limits():
    reply = 'restock aisle, RESTOCK AISLE; - Face Produce Display, • clean checkout lanes, inventory audit'
    assert insights.parse_suggestions(reply, VOCAB) == [
        'RESTOCK AISLE',
        'FACE PRODUCE DISPLAY',
        'CLEAN CHECKOUT LANES',
    ]


def test_parse_suggestions_empty_reply():
    assert insights.parse_suggestions('', VOCAB) == []


def test_fallback_suggestions_sample_from_vocabulary():
    picks = insights.fallback_suggestions(VOCAB, random.Random(7))
    assert len(picks) == 3
    assert set(picks) <= set(VOCAB)
    assert sorted(insights.fallback_suggestions(VOCAB[:2])) == sorted(VOCAB[:2])


def test_dashboard_insights_returns_model_text(config, use_llm):
    fake = use_llm(FakeLLM('1. Aisle 4 is behind.'))
    tasks = [make_task('t1', 'e1')]
    users = [make_user('e1', name='John Doe')]
    text = insights.dashboard_insights(tasks, users, config=config, user_id='m1')
    assert text == '1. Aisle 4 is behind.'
    assert 'Task t1 (TODO): Assigned to John Doe, Due: 2024-03-15' in fake.prompts[0]

    calls = get_insight_calls(kind=insights.KIND_INSIGHTS)
    assert len(calls) == 1
    assert calls[0]['success'] is True
    assert calls[0]['user_id'] == 'm1'


def test_dashboard_insights_falls_back_on_error(config, use_llm):
    use_llm(FakeLLM(error=ConnectionError('refused')))
    text = insights.dashboard_insights([], [], config=config)
    assert text == insights.INSIGHTS_FALLBACK

    calls = get_insight_calls()
    assert len(calls) == 1
    assert calls[0]['success'] is False
    assert calls[0]['used_fallback'] is True
    assert calls[0]['error_type'] == 'ConnectionError'


def test_empty_reply_counts_as_failure(config, use_llm):
    use_llm(FakeLLM('   '))
    assert insights.feedback_script('Jane', (), 2, config=config) == insights.FEEDBACK_FALLBACK
    assert get_insight_calls(success=False)


def test_disabled_service_uses_fallback_without_logging(config, use_llm):
    fake = use_llm(FakeLLM('should not be used'))
    off = InsightConfig(base_url='http://x', model='fake', temperature=0.0, api_key=None, enabled=False)
    assert insights.dashboard_insights([], [], config=off) == insights.INSIGHTS_FALLBACK
    assert fake.prompts == []
    assert get_insight_calls() == []


def test_suggest_tasks_uses_model_picks(config, use_llm):
    use_llm(FakeLLM('Inventory Audit, Restock Aisle'))
    picks = insights.suggest_tasks('John', ['Restock Aisle 4'], VOCAB, config=config)
    assert picks == ['INVENTORY AUDIT', 'RESTOCK AISLE']


def test_suggest_tasks_falls_back_when_nothing_matches(config, use_llm):
    use_llm(FakeLLM('Juggle melons, Paint the roof'))
    picks = insights.suggest_tasks('John', [], VOCAB, config=config, rng=random.Random(1))
    assert len(picks) == 3
    assert set(picks) <= set(VOCAB)


def test_suggest_tasks_with_empty_library(config, use_llm):
    fake = use_llm(FakeLLM('RESTOCK AISLE'))
    assert insights.suggest_tasks('John', [], [], config=config) == []
    assert fake.prompts == []


def test_feedback_script_prompt_includes_notes(config, use_llm):
    fake = use_llm(FakeLLM('Opening: ...'))
    notes = (Note(id='n1', text='Great with customers', author='Lamec Zehrs', date='2023-10-28'),)
    assert insights.feedback_script('John Doe', notes, 4, config=config) == 'Opening: ...'
    assert '2023-10-28: Great with customers' in fake.prompts[0]
    assert 'completed 4 missions' in fake.prompts[0]


def test_suggestion_prompt_lists_vocabulary():
    prompt = prompts.build_suggestions_prompt('John', [], VOCAB, 3)
    assert 'RESTOCK AISLE, INVENTORY AUDIT' in prompt
    assert '- (none yet)' in prompt
    assert 'up to 3 titles' in prompt


def test_text_of_handles_content_parts():
    assert insights._text_of(FakeReply([{'text': 'a'}, 'b'])) == 'ab'


def test_insight_config_from_env(monkeypatch):
    for name in ('INSIGHTS_BASE_URL', 'INSIGHTS_MODEL', 'INSIGHTS_TEMPERATURE', 'INSIGHTS_API_KEY', 'INSIGHTS_ENABLED'):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv('OLLAMA_BASE_URL', 'http://ollama:11434')
    monkeypatch.setenv('OLLAMA_MODEL', 'qwen2.5')
    monkeypatch.setenv('INSIGHTS_TEMPERATURE', 'not-a-number')
    monkeypatch.setenv('API_KEY', 'secret')
    monkeypatch.setenv('OLLAMA_ENABLED', 'false')

    cfg = InsightConfig.from_env()
    assert cfg.base_url == 'http://ollama:11434'
    assert cfg.model == 'qwen2.5'
    assert cfg.temperature == InsightConfig.DEFAULT_TEMPERATURE
    assert cfg.api_key == 'secret'
    assert cfg.enabled is False

    monkeypatch.setenv('INSIGHTS_ENABLED', 'yes')
    assert InsightConfig.from_env().enabled is True


class ChatHandler(BaseHTTPRequestHandler):
    """Minimal keep-alive /api/chat endpoint streaming one NDJSON reply."""

    protocol_version = 'HTTP/1.1'

    def do_POST(self):
        self.rfile.read(int(self.headers.get('Content-Length', 0)))
        chunks = [
            {'model': 'fake', 'created_at': '2024-03-15T00:00:00Z',
             'message': {'role': 'assistant', 'content': 'Team is doing great.'}, 'done': False},
            {'model': 'fake', 'created_at': '2024-03-15T00:00:00Z',
             'message': {'role': 'assistant', 'content': ''}, 'done': True, 'done_reason': 'stop'},
        ]
        body = ''.join(json.dumps(c) + '\n' for c in chunks).encode()
        self.send_response(200)
        self.send_header('Content-Type', 'application/x-ndjson')
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, *args):
        pass


@pytest.fixture
def chat_server(monkeypatch):
    monkeypatch.setenv('NO_PROXY', '127.0.0.1,localhost')
    server = ThreadingHTTPServer(('127.0.0.1', 0), ChatHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f'http://127.0.0.1:{server.server_address[1]}'
    server.shutdown()
    server.server_close()


def test_repeated_sync_requests_all_reach_the_model(chat_server):
    cfg = InsightConfig(base_url=chat_server, model='fake', temperature=0.0, api_key=None, enabled=True)
    replies = [insights.dashboard_insights([], [], config=cfg) for _ in range(3)]
    assert replies == ['Team is doing great.'] * 3
    assert get_insight_calls(success=False) == []


def test_each_request_gets_its_own_client():
    first = insights._llm_for('fake', 'http://x', 0.0, None)
    assert insights._llm_for('fake', 'http://x', 0.0, None) is not first


def test_broken_log_never_reaches_caller(config, use_llm, monkeypatch):
    use_llm(FakeLLM('All good.'))

    def broken(*args, **kwargs):
        raise PermissionError('read-only data directory')

    monkeypatch.setattr(insights, 'log_insight_call', broken)
    assert insights.dashboard_insights([], [], config=config) == 'All good.'
    use_llm(FakeLLM(error=ConnectionError('refused')))
    assert insights.dashboard_insights([], [], config=config) == insights.INSIGHTS_FALLBACK
