import pytest

from codewars.common.deps import SessionIdentity
from codewars.common.errors import (
    ExecutionTimeout,
    InvalidInput,
    JudgeAuthFailed,
    JudgeProtocolError,
    JudgeUnavailable,
    Unauthorized,
    UnsupportedLanguage,
)
from codewars.core.config import JudgeConfig
from codewars.features.execution.schemas import ExecuteRequest
from codewars.features.execution.service import ExecutionService
from codewars.features.judge0.schemas import Judge0ExecutionResult

pytestmark = pytest.mark.anyio("asyncio")

TEAM = SessionIdentity(authenticated=True, team_code="4821", email="asha@example.com")


def _status(status_id, description="", **fields):
    return Judge0ExecutionResult(token="tok", status={"id": status_id, "description": description}, **fields)


class FakeJudge:
    """Scripted judge: each fetch pops the next entry (a result or an exception)."""

    def __init__(self, script=(), *, token="tok", submit_error=None):
        self.config = JudgeConfig(base_url="http://judge.test:2358")
        self.script = list(script)
        self.token = token
        self.submit_error = submit_error
        self.events = []

    async def submit(self, source_code, language_id, stdin=None, limits=None):
        self.events.append(("submit", language_id))
        if self.submit_error:
            raise self.submit_error
        return self.token

    async def fetch_status(self, token):
        self.events.append(("fetch", token))
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def fetch_count(self):
        return sum(1 for name, _ in self.events if name == "fetch")


def _service(judge):
    async def fake_sleep(seconds):
        judge.events.append(("sleep", seconds))

    return ExecutionService(judge, sleep=fake_sleep, poll_interval=1.0, max_polls=30)


async def test_terminal_after_three_polls():
    judge = FakeJudge([
        _status(1, "In Queue"),
        _status(2, "Processing"),
        _status(3, "Accepted", stdout="hello\n", time="0.013", memory=3420),
    ])
    result = await _service(judge).execute(ExecuteRequest(code="print('hello')", language="python"), TEAM)

    assert result.status.id == 3
    assert result.status.description == "Accepted"
    assert result.stdout == "hello\n"
    assert result.stderr == ""
    assert result.time == "0.01"
    assert result.memory == 3420
    assert judge.fetch_count == 3


async def test_submit_precedes_polls_and_each_poll_waits_first():
    judge = FakeJudge([_status(2), _status(3, "Accepted")])
    await _service(judge).execute(ExecuteRequest(code="print(1)", language="python"), TEAM)

    assert judge.events == [
        ("submit", 71),
        ("sleep", 1.0),
        ("fetch", "tok"),
        ("sleep", 1.0),
        ("fetch", "tok"),
    ]


async def test_timeout_after_thirty_processing_polls():
    judge = FakeJudge([_status(2, "Processing")])
    with pytest.raises(ExecutionTimeout) as exc_info:
        await _service(judge).execute(ExecuteRequest(code="while True: pass", language="python"), TEAM)

    assert judge.fetch_count == 30
    assert sum(1 for name, _ in judge.events if name == "sleep") == 30
    assert "simplify" in exc_info.value.message.lower()


async def test_terminal_on_last_attempt_is_not_a_timeout():
    judge = FakeJudge([_status(2)] * 29 + [_status(5, "Time Limit Exceeded")])
    result = await _service(judge).execute(ExecuteRequest(code="x", language="python"), TEAM)

    assert result.status.id == 5
    assert judge.fetch_count == 30


async def test_unknown_language_never_reaches_judge():
    judge = FakeJudge([_status(3)])
    with pytest.raises(UnsupportedLanguage) as exc_info:
        await _service(judge).execute(ExecuteRequest(code="puts 1", language="ruby"), TEAM)

    assert judge.events == []
    assert "python" in exc_info.value.message
    assert "java" in exc_info.value.message


@pytest.mark.parametrize(
    "code, language",
    [("", "python"), ("   \n", "python"), ("print(1)", ""), ("print(1)", "  ")],
)
async def test_missing_fields_rejected_before_network(code, language):
    judge = FakeJudge([_status(3)])
    with pytest.raises(InvalidInput):
        await _service(judge).execute(ExecuteRequest(code=code, language=language), TEAM)
    assert judge.events == []


async def test_unauthenticated_caller_rejected_first():
    judge = FakeJudge([_status(3)])
    with pytest.raises(Unauthorized):
        await _service(judge).execute(ExecuteRequest(code="", language="ruby"), SessionIdentity())
    assert judge.events == []


async def test_submit_auth_failure_propagates():
    judge = FakeJudge([_status(3)], submit_error=JudgeAuthFailed())
    with pytest.raises(JudgeAuthFailed):
        await _service(judge).execute(ExecuteRequest(code="print(1)", language="c"), TEAM)
    assert judge.fetch_count == 0


async def test_submit_unavailable_propagates():
    judge = FakeJudge([_status(3)], submit_error=JudgeUnavailable())
    with pytest.raises(JudgeUnavailable):
        await _service(judge).execute(ExecuteRequest(code="print(1)", language="java"), TEAM)


async def test_missing_token_is_protocol_error():
    judge = FakeJudge([_status(3)], token=None)
    with pytest.raises(JudgeProtocolError):
        await _service(judge).execute(ExecuteRequest(code="print(1)", language="python"), TEAM)
    assert judge.fetch_count == 0


async def test_first_fetch_failure_without_result_is_protocol_error():
    judge = FakeJudge([JudgeUnavailable(), _status(3)])
    with pytest.raises(JudgeProtocolError):
        await _service(judge).execute(ExecuteRequest(code="print(1)", language="python"), TEAM)
    assert judge.fetch_count == 1


async def test_fetch_failure_ends_polling_with_last_result():
    judge = FakeJudge([_status(2, "Processing"), JudgeUnavailable(), _status(3, "Accepted")])
    result = await _service(judge).execute(ExecuteRequest(code="print(1)", language="python"), TEAM)

    assert judge.fetch_count == 2
    assert result.status.id == 2
    assert result.status.description == "Processing"


async def test_auth_failure_while_polling_propagates():
    judge = FakeJudge([_status(1), JudgeAuthFailed()])
    with pytest.raises(JudgeAuthFailed):
        await _service(judge).execute(ExecuteRequest(code="print(1)", language="python"), TEAM)


async def test_compile_error_result_defaults_missing_fields():
    judge = FakeJudge([
        _status(6, "Compilation Error", compile_output="Main.java:1: error", time=None, memory=None),
    ])
    result = await _service(judge).execute(ExecuteRequest(code="class", language="java"), TEAM)

    assert result.status.id == 6
    assert result.compile_output == "Main.java:1: error"
    assert result.stdout == ""
    assert result.message == ""
    assert result.time is None
    assert result.memory is None
