from __future__ import annotations

import threading

from booking_import.submitter import submit_candidates


def test_partial_failures_are_reported_per_candidate(run_import, ticketing_export):
    _, result = run_import(ticketing_export)
    created = []
    lock = threading.Lock()

    def create_booking(candidate):
        if candidate.booking_ref_no == 'R-9':
            raise RuntimeError('reservation API unavailable')
        payload = candidate.to_dict()
        with lock:
            created.append(payload)
        return {'id': 'new-1'}

    report = submit_candidates(result.candidates, create_booking, concurrency=2)

    assert [o.candidate.booking_ref_no for o in report.outcomes] == ['R-9', 'R-10']
    assert [o.success for o in report.outcomes] == [False, True]
    assert report.failed[0].error == 'reservation API unavailable'
    assert report.succeeded[0].result == {'id': 'new-1'}
    assert report.summary() == '1 bookings created, 1 failed'

    assert len(created) == 1
    assert created[0]['bookingRefNo'] == 'R-10'
    assert created[0]['transactionId'] == 'T-102'
    assert created[0]['packageQuantities'] == [
        {'packageId': 'oe-alc', 'packageName': 'ADULT ALC', 'quantity': 4, 'rate': 249.0}
    ]


def test_order_is_preserved_regardless_of_completion(run_import):
    text = 'Client Name,Yacht,Adult\n' + '\n'.join(
        f'Guest {i},Ocean Empress - Food Only,1' for i in range(8)
    )
    _, result = run_import(text)
    release = threading.Event()

    def create_booking(candidate):
        # The first candidate waits until a later one has finished
        if candidate.client_name == 'Guest 0':
            release.wait(timeout=5)
        else:
            release.set()
        return candidate.transaction_id

    report = submit_candidates(result.candidates, create_booking, concurrency=4)
    assert [o.candidate.client_name for o in report.outcomes] == [f'Guest {i}' for i in range(8)]
    assert all(o.success for o in report.outcomes)


def test_empty_batch():
    report = submit_candidates([], lambda candidate: None)
    assert report.outcomes == []
    assert report.summary() == '0 bookings created, 0 failed'
