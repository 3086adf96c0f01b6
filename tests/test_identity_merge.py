"""Merge semantics of the identity index."""
import asyncio
import random


async def test_creates_record_on_first_merge(identity_index):
    record = await identity_index.merge("C1", "Jane", "http://b/1.jpg")
    assert record.display_name == "Jane"
    assert record.image_urls == ["http://b/1.jpg"]


async def test_appends_to_existing_record(identity_index):
    await identity_index.merge("C1", "Jane", "http://b/1.jpg")
    record = await identity_index.merge("C1", "Jane", "http://b/2.jpg")
    assert record.image_urls == ["http://b/1.jpg", "http://b/2.jpg"]


async def test_display_name_first_write_wins(identity_index):
    await identity_index.merge("C1", "X", "http://b/1.jpg")
    record = await identity_index.merge("C1", "Y", "http://b/2.jpg")
    assert record.display_name == "X"
    assert identity_index.get("C1").display_name == "X"


async def test_same_url_twice_keeps_both_entries(identity_index):
    await identity_index.merge("C1", "Jane", "http://b/1.jpg")
    await identity_index.merge("C1", "Jane", "http://b/1.jpg")
    assert identity_index.get("C1").image_urls == ["http://b/1.jpg", "http://b/1.jpg"]


async def test_two_concurrent_merges_both_land(identity_index):
    await asyncio.gather(
        identity_index.merge("C1", "Jane", "A"),
        identity_index.merge("C1", "Jane", "B"),
    )
    assert sorted(identity_index.get("C1").image_urls) == ["A", "B"]


async def test_many_concurrent_writers_lose_nothing(identity_index):
    urls = [f"http://testbucket.s3-us-east-1.amazonaws.com/{i}.jpg" for i in range(200)]
    shuffled = random.sample(urls, len(urls))

    await asyncio.gather(*(identity_index.merge("C1", "Jane", url) for url in shuffled))

    record = identity_index.get("C1")
    assert sorted(record.image_urls) == sorted(urls)
    assert record.display_name == "Jane"


async def test_concurrent_service_batches_on_same_identity(
    analysis_service, recognition_service, identity_index, s3_event, make_message
):
    keys = [f"img-{i}.jpg" for i in range(25)]
    for key in keys:
        recognition_service.add(key, [("C1", "Jane")])

    await asyncio.gather(*(
        analysis_service.handle_batch([make_message(s3_event("testbucket", key), key)])
        for key in keys
    ))

    expected = {f"http://testbucket.s3-us-east-1.amazonaws.com/{key}" for key in keys}
    record = identity_index.get("C1")
    assert len(record.image_urls) == len(keys)
    assert set(record.image_urls) == expected
