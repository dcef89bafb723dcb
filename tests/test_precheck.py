"""Tests for the existence check and session creation."""

import httpx
import pytest

from common.exceptions import PrecheckError, SessionCreateError
from common.types import PartState
from uploader.planner import plan_parts
from uploader.precheck import PrecheckOutcome, ResumePrechecker


@pytest.mark.asyncio
async def test_check_unknown_file(service, storage_client, store):
    prechecker = ResumePrechecker(storage_client, store)

    outcome = await prechecker.check('sample.bin', [0, 1, 2])

    assert outcome == PrecheckOutcome(known=False)


@pytest.mark.asyncio
async def test_check_known_file_reports_stored_parts(service_factory, client_for, store):
    service = service_factory(head_status=200, existing_parts=[0, 2, 7])
    prechecker = ResumePrechecker(client_for(service.handler), store)

    outcome = await prechecker.check('sample.bin', [0, 1, 2])

    assert outcome.known
    assert outcome.existing_parts == (0, 2)


@pytest.mark.asyncio
async def test_check_known_file_without_part_list(service_factory, client_for, store):
    service = service_factory(head_status=200)
    prechecker = ResumePrechecker(client_for(service.handler), store)

    outcome = await prechecker.check('sample.bin', [0, 1])

    assert outcome == PrecheckOutcome(known=True, existing_parts=())


@pytest.mark.asyncio
async def test_not_found_creates_session_and_commits_parts(service, storage_client, store, sample_file):
    """Exactly one create call, then one commit of the planned parts."""
    parts = plan_parts(sample_file, 4)
    commits = []
    store.subscribe(lambda session: commits.append(session))
    prechecker = ResumePrechecker(storage_client, store)

    session = await prechecker.prepare(sample_file, 'sample.bin', parts)

    assert [r.method for r in service.requests] == ['HEAD', 'POST']
    assert service.requests[1].headers['fileName'] == 'sample.bin'
    assert len(commits) == 1
    assert session is store.get_state()
    assert session.parts == parts
    assert session.file_dir == '/data/sample.bin'
    assert all(state == PartState.PENDING for state in session.part_states.values())


@pytest.mark.asyncio
async def test_known_file_resumes_without_create(service_factory, client_for, store, sample_file):
    service = service_factory(head_status=200, existing_parts=[1])
    prechecker = ResumePrechecker(client_for(service.handler), store)

    session = await prechecker.prepare(sample_file, 'sample.bin', plan_parts(sample_file, 4))

    assert service.calls('POST') == []
    assert session.skipped_parts == (1,)
    assert [p.part_number for p in session.pending_parts] == [0, 2]


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 403, 500, 503])
async def test_check_failure_does_not_commit(service_factory, client_for, store, sample_file, status):
    service = service_factory(head_status=status)
    prechecker = ResumePrechecker(client_for(service.handler), store)

    with pytest.raises(PrecheckError) as exc_info:
        await prechecker.prepare(sample_file, 'sample.bin', plan_parts(sample_file, 4))

    assert exc_info.value.status_code == status
    assert service.calls('POST') == []
    assert store.get_state() is None


@pytest.mark.asyncio
async def test_check_network_failure_does_not_commit(client_for, store, sample_file):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    prechecker = ResumePrechecker(client_for(handler), store)

    with pytest.raises(PrecheckError):
        await prechecker.prepare(sample_file, 'sample.bin', plan_parts(sample_file, 4))

    assert store.get_state() is None


@pytest.mark.asyncio
async def test_create_failure_does_not_commit(service_factory, client_for, store, sample_file):
    service = service_factory(create_status=500)
    prechecker = ResumePrechecker(client_for(service.handler), store)

    with pytest.raises(SessionCreateError) as exc_info:
        await prechecker.prepare(sample_file, 'sample.bin', plan_parts(sample_file, 4))

    assert exc_info.value.status_code == 500
    assert len(service.calls('POST')) == 1
    assert store.get_state() is None


@pytest.mark.asyncio
async def test_create_timeout_raises_session_create_error(client_for, store):
    def handler(request):
        if request.method == 'HEAD':
            return httpx.Response(404)
        raise httpx.ReadTimeout("timed out", request=request)

    prechecker = ResumePrechecker(client_for(handler), store)

    with pytest.raises(SessionCreateError):
        await prechecker.create_session('sample.bin')


@pytest.mark.asyncio
async def test_empty_file_still_prepares_session(service, storage_client, store, make_file):
    empty = make_file(b'', 'empty.bin')
    prechecker = ResumePrechecker(storage_client, store)

    session = await prechecker.prepare(empty, 'empty.bin', [])

    assert service.requests[0].headers['partNumbers'] == ''
    assert session.parts == []


@pytest.mark.asyncio
@pytest.mark.parametrize("header", ['[0, 1]', '0,one,2', '1;2'])
async def test_malformed_part_list_raises_precheck_error(client_for, store, sample_file, header):
    def handler(request):
        return httpx.Response(200, headers={'partNumbers': header})

    prechecker = ResumePrechecker(client_for(handler), store)

    with pytest.raises(PrecheckError, match="malformed partNumbers") as exc_info:
        await prechecker.prepare(sample_file, 'sample.bin', plan_parts(sample_file, 4))

    assert isinstance(exc_info.value.__cause__, ValueError)
    assert store.get_state() is None
