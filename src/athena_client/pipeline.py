from __future__ import annotations
import sys, asyncio
import dataclasses
from typing import AsyncIterator, Dict, Iterable, List, Optional

from .api import AthenaAPI
from .errors import EmptyResultError
from .models import Appointment, BookedAppointment, ListBookedAppointmentsOptions, PaginationOptions

async def iter_booked_appointments(
    api: AthenaAPI,
    opts: Optional[ListBookedAppointmentsOptions] = None,
    page_size: Optional[int] = None,
) -> AsyncIterator[BookedAppointment]:
    """
    Walk /appointments/booked page by page, following `next` offsets.
    Stops when a page has no next offset, or the server hands back an
    offset it already served.
    """
    opts = opts or ListBookedAppointmentsOptions()
    base = opts.pagination or PaginationOptions()
    if page_size is not None:
        base = dataclasses.replace(base, limit=page_size)
    current = dataclasses.replace(opts, pagination=base)

    seen = {base.offset or 0}
    while True:
        page = await api.list_booked_appointments(current)
        for appt in page.items:
            yield appt

        cursor = page.pagination
        if cursor is None or cursor.next_offset is None:
            return
        if cursor.next_offset in seen:
            print(f"[warn] offset {cursor.next_offset} repeated, stopping", file=sys.stderr)
            return
        seen.add(cursor.next_offset)
        current = dataclasses.replace(
            current, pagination=dataclasses.replace(base, offset=cursor.next_offset)
        )

async def fetch_all_booked_appointments(
    api: AthenaAPI,
    opts: Optional[ListBookedAppointmentsOptions] = None,
    page_size: Optional[int] = None,
) -> List[BookedAppointment]:
    return [appt async for appt in iter_booked_appointments(api, opts, page_size)]

async def fetch_appointments_concurrent(
    api: AthenaAPI, ids: Iterable[str], concurrency: int = 8
) -> Dict[str, Appointment]:
    """
    Look up many appointments in parallel, bounded by a semaphore.
    Ids the API reports as empty are skipped with a warning; any other
    error cancels the outstanding lookups and propagates.
    Logs progress every 100 records.
    """
    ids = list(dict.fromkeys(ids))
    sem = asyncio.Semaphore(max(1, min(32, concurrency)))

    async def worker(_id: str):
        async with sem:
            try:
                return _id, await api.get_appointment(_id)
            except EmptyResultError:
                print(f"[warn] get_appointment({_id}) returned no appointment, skipping", file=sys.stderr)
                return _id, None

    tasks = [asyncio.create_task(worker(_id)) for _id in ids]
    results: Dict[str, Appointment] = {}
    done = 0
    try:
        for fut in asyncio.as_completed(tasks):
            _id, appt = await fut
            if appt is not None:
                results[_id] = appt
            done += 1
            if done % 100 == 0 or done == len(ids):
                print(f"Fetched {done}/{len(ids)} appointments…", file=sys.stderr)
    finally:
        for t in tasks:
            if not t.done():
                t.cancel()
        # reap cancelled and failed workers so none outlive this call
        await asyncio.gather(*tasks, return_exceptions=True)
    return results
