"""Tests for single-part transmission."""

import httpx
import pytest

from common.exceptions import TransferError
from common.types import FilePart, PartState
from uploader.planner import plan_parts
from uploader.progress import ProgressAggregator
from uploader.transmitter import PartTransmitter


def make_transmitter(client, store):
    return PartTransmitter(client, store, ProgressAggregator(store))


@pytest.mark.asyncio
async def test_successful_send_completes_part(service, storage_client, store, make_file):
    file = make_file(b'z' * 20000, 'large.bin')
    parts = plan_parts(file, 20000)
    store.add_file(file, parts)
    states = []
    store.subscribe(lambda session: states.append(session.part_states[0]))

    await make_transmitter(storage_client, store).send(parts[0], session_start=0.0)

    session = store.get_state()
    assert session.part_states[0] == PartState.COMPLETED
    assert session.progress_data[0].progress == 100
    assert states[0] == PartState.IN_FLIGHT
    assert states[-1] == PartState.COMPLETED
    assert service.uploaded[0] == b'z' * 20000


@pytest.mark.asyncio
async def test_progress_reports_never_decrease(storage_client, store, make_file):
    file = make_file(b'q' * 50000, 'large.bin')
    parts = plan_parts(file, 50000)
    store.add_file(file, parts)
    seen = []
    store.subscribe(
        lambda session: 0 in session.progress_data and seen.append(session.progress_data[0].progress)
    )

    await make_transmitter(storage_client, store).send(parts[0], session_start=0.0)

    assert seen == sorted(seen)
    assert seen[-1] == 100
    assert all(0 <= p <= 100 for p in seen)


@pytest.mark.asyncio
async def test_server_error_fails_part(service_factory, client_for, store, sample_file):
    service = service_factory(failing_parts=[1])
    parts = plan_parts(sample_file, 4)
    store.add_file(sample_file, parts)

    with pytest.raises(TransferError) as exc_info:
        await make_transmitter(client_for(service.handler), store).send(parts[1], session_start=0.0)

    assert exc_info.value.part_number == 1
    assert exc_info.value.status_code == 500
    assert store.get_state().part_states[1] == PartState.FAILED


@pytest.mark.asyncio
async def test_network_error_fails_part(client_for, store, sample_file):
    def handler(request):
        raise httpx.WriteTimeout("timed out", request=request)

    parts = plan_parts(sample_file, 4)
    store.add_file(sample_file, parts)

    with pytest.raises(TransferError) as exc_info:
        await make_transmitter(client_for(handler), store).send(parts[0], session_start=0.0)

    assert exc_info.value.status_code is None
    assert 'WriteTimeout' in str(exc_info.value)
    assert store.get_state().part_states[0] == PartState.FAILED


@pytest.mark.asyncio
async def test_empty_payload_reports_complete(service, storage_client, store, sample_file):
    part = FilePart(
        file_name='sample.bin',
        part_number=0,
        upload_offset=10,
        upload_length=10,
        source=sample_file.path,
    )
    store.add_file(sample_file, [part])

    await make_transmitter(storage_client, store).send(part, session_start=0.0)

    record = store.get_state().progress_data[0]
    assert record.progress == 100
    assert record.speed == 0
    assert service.uploaded[0] == b''


@pytest.mark.asyncio
async def test_no_retry_after_failure(service_factory, client_for, store, sample_file):
    service = service_factory(failing_parts=[0])
    parts = plan_parts(sample_file, 4)
    store.add_file(sample_file, parts)

    with pytest.raises(TransferError):
        await make_transmitter(client_for(service.handler), store).send(parts[0], session_start=0.0)

    assert len(service.calls('PATCH')) == 1
